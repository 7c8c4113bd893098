import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from gigzz.core.auth_dependency import get_db, get_current_user_obj
from gigzz.core.errors import GigzzError, to_http_exception
from gigzz.core.rate_limit import rate_limit
from gigzz.core.security import create_access_token
from gigzz.db.models.user import User
from gigzz.schemas.auth import (
    EmailRequest,
    MeResponse,
    MessageResponse,
    PasswordResetConfirm,
    SignupRequest,
    SignupResponse,
    TokenResponse,
    VerifyEmailRequest,
)
from gigzz.services import account_service, wallet_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

# ✅ 5 emails per IP per 10 minutes
email_rate_limit = rate_limit(max_requests=5, window_seconds=600, bucket="email")


# ✅ USER SIGNUP
@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=SignupResponse,
    dependencies=[Depends(email_rate_limit)],
)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    try:
        result = account_service.signup(
            db,
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role,
            country=payload.country,
            state=payload.state,
            city=payload.city,
        )
    except GigzzError as e:
        db.rollback()
        raise to_http_exception(e)

    user = result["user"]
    message = (
        "Account created. Please check your email to verify your account."
        if result["email_sent"]
        else "Account created, but we could not send the verification email. Please request a new link."
    )
    return SignupResponse(message=message, user_id=user.id, role=user.role, email_sent=result["email_sent"])


# ✅ OAUTH2 LOGIN FOR SWAGGER + JWT
@router.post("/login", response_model=TokenResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # Swagger sends "username", but we treat it as email
    user = account_service.authenticate(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": user.email})
    return TokenResponse(access_token=token)


@router.post("/verify-email", response_model=MessageResponse)
def verify_email(payload: VerifyEmailRequest, db: Session = Depends(get_db)):
    try:
        account_service.verify_email(db, payload.token)
    except GigzzError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Email verified. You can now sign in.")


@router.post(
    "/resend-verification",
    response_model=MessageResponse,
    dependencies=[Depends(email_rate_limit)],
)
def resend_verification(payload: EmailRequest, db: Session = Depends(get_db)):
    try:
        account_service.resend_verification(db, payload.email)
    except GigzzError as e:
        raise to_http_exception(e)
    return MessageResponse(message="If the account exists and is unverified, a new link has been sent.")


@router.post(
    "/password-reset",
    response_model=MessageResponse,
    dependencies=[Depends(email_rate_limit)],
)
def request_password_reset(payload: EmailRequest, db: Session = Depends(get_db)):
    try:
        account_service.request_password_reset(db, payload.email)
    except GigzzError as e:
        raise to_http_exception(e)
    return MessageResponse(message="If an account exists for this email, a reset link has been sent.")


@router.post("/password-reset/confirm", response_model=MessageResponse)
def confirm_password_reset(payload: PasswordResetConfirm, db: Session = Depends(get_db)):
    try:
        account_service.reset_password(db, payload.token, payload.new_password)
    except GigzzError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Password updated. You can now sign in.")


@router.get("/me", response_model=MeResponse)
def me(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    return MeResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        email_verified=user.email_verified,
        is_admin=user.is_admin,
        display_name=user.display_name,
        token_balance=wallet_service.get_balance(db, user.id),
    )
