"""
Stripe webhook endpoint.

Credits token wallets for completed checkout sessions.
"""
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from gigzz.core.auth_dependency import get_db
from gigzz.services import billing_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing"])


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    db: Session = Depends(get_db)
):
    payload = await request.body()

    try:
        event = billing_service.verify_webhook(payload, stripe_signature)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "webhook_verification_failed", "message": str(e)}
        )

    try:
        credited = billing_service.handle_event(event, db)
    except ValueError as e:
        # Acknowledge so Stripe does not retry an event we can never process
        logger.error(f"Unprocessable webhook event {event['id']}: {e}")
        return {"status": "ignored", "reason": str(e)}
    except Exception as e:
        db.rollback()
        logger.error(f"Webhook processing failed for event {event['id']}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook processing failed"
        )

    return {"status": "success", "tokens_credited": credited or 0}
