"""
Grant (or revoke) admin access for an existing account.
Run: python -m scripts.make_user_admin user@example.com [--revoke]
"""
import argparse
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gigzz.db.session import SessionLocal
from gigzz.services.account_service import get_user_by_email

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def set_admin(email: str, is_admin: bool = True) -> bool:
    db = SessionLocal()
    try:
        user = get_user_by_email(db, email)
        if not user:
            logger.error(f"User {email} not found")
            return False

        user.is_admin = is_admin
        db.commit()
        logger.info(f"User {email} (ID: {user.id}) is_admin={is_admin}")
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating user: {e}", exc_info=True)
        return False
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("--revoke", action="store_true", help="Remove admin access instead")
    args = parser.parse_args()

    if not set_admin(args.email, not args.revoke):
        sys.exit(1)
