"""
Database models module.

Imports every model so they are registered with Base.metadata before table
creation and migrations.
"""
from gigzz.db.models.user import User
from gigzz.db.models.profile import Applicant, Employer
from gigzz.db.models.job import Job
from gigzz.db.models.application import Application
from gigzz.db.models.token_wallet import TokenWallet
from gigzz.db.models.token_transaction import TokenTransaction
from gigzz.db.models.chat import ChatMessage
from gigzz.db.models.project import Project
from gigzz.db.models.email_verification import EmailVerification
from gigzz.db.models.content import News, LearnMore

__all__ = [
    "User",
    "Applicant",
    "Employer",
    "Job",
    "Application",
    "TokenWallet",
    "TokenTransaction",
    "ChatMessage",
    "Project",
    "EmailVerification",
    "News",
    "LearnMore",
]
