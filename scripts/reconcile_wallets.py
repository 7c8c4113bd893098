"""
Compare every cached wallet balance with the token ledger.
Run: python -m scripts.reconcile_wallets [--repair]
"""
import argparse
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gigzz.db.session import SessionLocal
from gigzz.db.models.token_wallet import TokenWallet
from gigzz.services import wallet_service

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def reconcile_all(repair: bool = False) -> list:
    """Returns the reconcile report of every wallet that drifted."""
    db = SessionLocal()
    try:
        user_ids = [row.user_id for row in db.query(TokenWallet.user_id).all()]
        drifted = []
        for user_id in user_ids:
            report = wallet_service.reconcile(db, user_id, repair=repair)
            if report["drift"]:
                drifted.append(report)
        logger.info(f"Checked {len(user_ids)} wallet(s), {len(drifted)} drifted")
        return drifted
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--repair", action="store_true", help="Overwrite drifted balances with the ledger balance")
    args = parser.parse_args()

    drifted = reconcile_all(args.repair)
    for report in drifted:
        print(
            f"user {report['user_id']}: wallet={report['wallet_balance']} "
            f"ledger={report['ledger_balance']} drift={report['drift']} repaired={report['repaired']}"
        )
    if drifted and not args.repair:
        sys.exit(1)
