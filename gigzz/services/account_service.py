"""
Account lifecycle: signup, email verification and password reset.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy.orm import Session

from gigzz.core import config
from gigzz.core.errors import ConflictError, EmailDeliveryError, ValidationFailedError
from gigzz.core.security import generate_verification_token, hash_password, verify_password
from gigzz.db.models.email_verification import (
    EmailVerification,
    PURPOSE_PASSWORD_RESET,
    PURPOSE_SIGNUP,
)
from gigzz.db.models.profile import Applicant, Employer
from gigzz.db.models.user import User, ROLE_APPLICANT, ROLE_EMPLOYER
from gigzz.services import email_service, wallet_service

logger = logging.getLogger(__name__)

# Signup form roles map to stored roles
SIGNUP_ROLES = {
    "client": ROLE_EMPLOYER,
    "employer": ROLE_EMPLOYER,
    "creative": ROLE_APPLICANT,
    "applicant": ROLE_APPLICANT,
}


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def _issue_token(db: Session, user: User, purpose: str, ttl: timedelta) -> EmailVerification:
    # Only the newest token per purpose stays valid
    db.query(EmailVerification).filter(
        EmailVerification.user_id == user.id,
        EmailVerification.purpose == purpose,
    ).delete(synchronize_session=False)

    record = EmailVerification(
        user_id=user.id,
        email=user.email,
        token=generate_verification_token(),
        purpose=purpose,
        expires_at=datetime.utcnow() + ttl,
    )
    db.add(record)
    db.flush()
    return record


def signup(
    db: Session,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: str,
    country: Optional[str] = None,
    state: Optional[str] = None,
    city: Optional[str] = None,
) -> Dict:
    """
    Create a user with its role profile and an empty wallet, then mail a
    verification link. A failed email does not undo the signup.

    Returns:
        {"user": User, "email_sent": bool}
    """
    stored_role = SIGNUP_ROLES.get((role or "").strip().lower())
    if stored_role is None:
        raise ValidationFailedError("Role must be 'client' or 'creative'", {"role": role})

    email = email.strip().lower()
    if get_user_by_email(db, email):
        raise ConflictError("An account with this email already exists. Please sign in instead.")

    full_name = f"{first_name.strip()} {last_name.strip()}".strip()
    user = User(email=email, password_hash=hash_password(password), role=stored_role, email_verified=False)
    db.add(user)
    db.flush()

    if stored_role == ROLE_EMPLOYER:
        db.add(Employer(id=user.id, name=full_name, country=country, state=state, city=city))
    else:
        db.add(Applicant(id=user.id, full_name=full_name, country=country, state=state, city=city))

    wallet_service.get_or_create_wallet(db, user.id)
    verification = _issue_token(
        db, user, PURPOSE_SIGNUP, timedelta(hours=config.VERIFICATION_TOKEN_TTL_HOURS)
    )
    db.commit()
    db.refresh(user)

    logger.info(f"User signed up: user_id={user.id}, role={stored_role}")

    email_sent = True
    try:
        email_service.send_verification_email(user.email, first_name.strip(), verification.token)
    except EmailDeliveryError as e:
        email_sent = False
        logger.warning(f"Verification email not sent: user_id={user.id}: {e.message}")

    return {"user": user, "email_sent": email_sent}


def _consume_token(db: Session, token: str, purpose: str) -> EmailVerification:
    record = db.query(EmailVerification).filter(
        EmailVerification.token == token,
        EmailVerification.purpose == purpose,
    ).first()
    if not record:
        raise ValidationFailedError("Invalid or expired verification link")
    if datetime.utcnow() > record.expires_at:
        db.delete(record)
        db.commit()
        raise ValidationFailedError("Verification link has expired. Please request a new one.")
    return record


def verify_email(db: Session, token: str) -> User:
    record = _consume_token(db, token, PURPOSE_SIGNUP)
    user = db.query(User).filter(User.id == record.user_id).first()
    if not user:
        raise ValidationFailedError("Invalid or expired verification link")

    user.email_verified = True
    db.delete(record)
    db.commit()
    db.refresh(user)

    logger.info(f"Email verified: user_id={user.id}")
    return user


def resend_verification(db: Session, email: str) -> bool:
    """Re-issue a signup token. Returns False when no email went out."""
    user = get_user_by_email(db, email)
    if not user or user.email_verified:
        return False

    verification = _issue_token(
        db, user, PURPOSE_SIGNUP, timedelta(hours=config.VERIFICATION_TOKEN_TTL_HOURS)
    )
    db.commit()
    first_name = user.display_name.split(" ")[0]
    try:
        email_service.send_verification_email(user.email, first_name, verification.token)
    except EmailDeliveryError as e:
        logger.warning(f"Verification email not resent: user_id={user.id}: {e.message}")
        return False
    return True


def request_password_reset(db: Session, email: str) -> bool:
    """
    Mail a reset link if the account exists. Callers respond identically either
    way so the endpoint cannot be used to discover accounts.
    """
    user = get_user_by_email(db, email)
    if not user:
        logger.info("Password reset requested for unknown email")
        return False

    reset = _issue_token(db, user, PURPOSE_PASSWORD_RESET, timedelta(minutes=config.RESET_TOKEN_TTL_MINUTES))
    db.commit()
    logger.info(f"Password reset issued: user_id={user.id}")
    try:
        email_service.send_password_reset_email(user.email, reset.token)
    except EmailDeliveryError as e:
        logger.warning(f"Password reset email not sent: user_id={user.id}: {e.message}")
        return False
    return True


def reset_password(db: Session, token: str, new_password: str) -> User:
    record = _consume_token(db, token, PURPOSE_PASSWORD_RESET)
    user = db.query(User).filter(User.id == record.user_id).first()
    if not user:
        raise ValidationFailedError("Invalid or expired verification link")

    user.password_hash = hash_password(new_password)
    db.delete(record)
    db.commit()
    db.refresh(user)

    logger.info(f"Password reset completed: user_id={user.id}")
    return user
