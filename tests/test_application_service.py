"""
Tests for applying to jobs.
"""
from datetime import date, datetime

import pytest

from gigzz.core.errors import (
    ConflictError,
    ForbiddenError,
    InsufficientTokensError,
    NotFoundError,
    ValidationFailedError,
)
from gigzz.db.models.application import Application
from gigzz.db.models.job import Job
from gigzz.db.models.token_transaction import TokenTransaction, KIND_APPLICATION
from gigzz.services import application_service, wallet_service

TODAY = datetime(2026, 5, 1, 12, 0)


@pytest.fixture
def job(db_session, employer):
    job = Job(
        employer_id=employer.id,
        title="Video editor",
        category="Remote",
        type="Freelance",
        min_price=30000,
        max_price=60000,
        price_frequency="One-time",
        application_deadline=date(2026, 5, 10),
    )
    db_session.add(job)
    db_session.commit()
    db_session.refresh(job)
    return job


def test_apply_charges_three_tokens(db_session, make_applicant, job):
    user = make_applicant(balance=10)

    application = application_service.apply_to_job(
        db_session, job.id, user, "  I cut trailers for a living.  ", ["/media/attachments/reel.pdf"], today=TODAY
    )

    assert application.cover_letter == "I cut trailers for a living."
    assert application.attachments == ["/media/attachments/reel.pdf"]
    assert wallet_service.get_balance(db_session, user.id) == 7
    spend = db_session.query(TokenTransaction).filter_by(user_id=user.id, kind=KIND_APPLICATION).one()
    assert spend.tokens_out == 3


def test_duplicate_application_rejected_without_charge(db_session, make_applicant, job):
    user = make_applicant(balance=10)
    application_service.apply_to_job(db_session, job.id, user, "First", today=TODAY)

    with pytest.raises(ConflictError):
        application_service.apply_to_job(db_session, job.id, user, "Second", today=TODAY)

    assert wallet_service.get_balance(db_session, user.id) == 7


def test_employers_cannot_apply(db_session, make_employer, job):
    other_client = make_employer(email="client2@example.com", balance=10)

    with pytest.raises(ForbiddenError):
        application_service.apply_to_job(db_session, job.id, other_client, "Hello", today=TODAY)


@pytest.mark.parametrize("letter", ["", "   ", "x" * 1501])
def test_cover_letter_validation(db_session, make_applicant, job, letter):
    user = make_applicant(balance=10)

    with pytest.raises(ValidationFailedError):
        application_service.apply_to_job(db_session, job.id, user, letter, today=TODAY)

    assert wallet_service.get_balance(db_session, user.id) == 10


def test_cover_letter_at_limit_accepted(db_session, make_applicant, job):
    user = make_applicant(balance=10)

    application = application_service.apply_to_job(db_session, job.id, user, "x" * 1500, today=TODAY)

    assert len(application.cover_letter) == 1500


def test_closed_deadline_rejected(db_session, make_applicant, job):
    user = make_applicant(balance=10)

    with pytest.raises(ValidationFailedError):
        application_service.apply_to_job(db_session, job.id, user, "Hi", today=datetime(2026, 5, 11))

    # the deadline day itself is still open
    application_service.apply_to_job(db_session, job.id, user, "Hi", today=datetime(2026, 5, 10, 23, 0))


def test_insufficient_tokens_creates_nothing(db_session, make_applicant, job):
    user = make_applicant(balance=2)

    with pytest.raises(InsufficientTokensError):
        application_service.apply_to_job(db_session, job.id, user, "Hire me", today=TODAY)

    assert db_session.query(Application).count() == 0
    assert wallet_service.get_balance(db_session, user.id) == 2


def test_missing_job(db_session, make_applicant):
    user = make_applicant(balance=10)

    with pytest.raises(NotFoundError):
        application_service.apply_to_job(db_session, 404, user, "Hello", today=TODAY)


def test_employer_sees_applicants_of_own_job_only(db_session, employer, make_employer, make_applicant, job):
    first = make_applicant(email="one@example.com", name="One", balance=5)
    second = make_applicant(email="two@example.com", name="Two", balance=5)
    application_service.apply_to_job(db_session, job.id, first, "A", today=TODAY)
    application_service.apply_to_job(db_session, job.id, second, "B", today=TODAY)

    applications = application_service.list_job_applications(db_session, job.id, employer)
    assert {application.applicant.display_name for application in applications} == {"One", "Two"}

    with pytest.raises(ForbiddenError):
        application_service.list_job_applications(
            db_session, job.id, make_employer(email="nosy@example.com")
        )

    mine = application_service.list_applicant_applications(db_session, first.id)
    assert [application.job.title for application in mine] == ["Video editor"]
