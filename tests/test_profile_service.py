"""
Tests for profiles, the applicant directory and projects.
"""
from datetime import datetime, timedelta

import pytest

from gigzz.core.errors import NotFoundError, ValidationFailedError
from gigzz.db.models.profile import Applicant
from gigzz.services import profile_service

NOW = datetime(2026, 5, 1, 9, 30)


def test_update_profile_only_touches_role_fields(db_session, applicant, employer):
    profile = profile_service.update_profile(db_session, applicant, {
        "specialist": "Motion designer",
        "specialties": ["After Effects", "Blender"],
        "company_name": "ignored for applicants",
    })
    assert profile.specialist == "Motion designer"
    assert profile.specialties == ["After Effects", "Blender"]

    employer_profile = profile_service.update_profile(db_session, employer, {
        "company_name": "Acme Ltd",
        "specialist": "ignored for clients",
    })
    assert employer_profile.company_name == "Acme Ltd"


def test_blank_name_rejected(db_session, applicant):
    with pytest.raises(ValidationFailedError):
        profile_service.update_profile(db_session, applicant, {"full_name": "  "})


def test_public_lookups(db_session, applicant, employer):
    assert profile_service.get_applicant(db_session, applicant.id).full_name == "Ada Obi"
    assert profile_service.get_employer(db_session, employer.id).name == "Acme Studio"
    with pytest.raises(NotFoundError):
        profile_service.get_applicant(db_session, employer.id)


@pytest.fixture
def directory(db_session, make_applicant):
    people = [
        ("zed@example.com", "Zed Musa", "Kano", ["Photography"], NOW - timedelta(days=3)),
        ("amaka@example.com", "Amaka Eze", "Enugu", ["Illustration", "Branding"], NOW - timedelta(days=1)),
        ("bayo@example.com", "Bayo Ade", "Lagos", ["Video editing"], NOW - timedelta(days=2)),
    ]
    users = {}
    for email, name, city, specialties, created in people:
        user = make_applicant(email=email, name=name)
        profile = db_session.query(Applicant).filter_by(id=user.id).one()
        profile.city = city
        profile.specialties = specialties
        profile.created_at = created
        users[name] = profile
    db_session.commit()
    return users


def test_directory_sorts_by_name_and_date(db_session, directory):
    by_name, total = profile_service.list_applicants(db_session)
    assert total == 3
    assert [a.full_name for a in by_name] == ["Amaka Eze", "Bayo Ade", "Zed Musa"]

    newest, _ = profile_service.list_applicants(db_session, sort_field="created_at", sort_direction="desc")
    assert [a.full_name for a in newest] == ["Amaka Eze", "Bayo Ade", "Zed Musa"]

    oldest, _ = profile_service.list_applicants(db_session, sort_field="created_at", sort_direction="asc")
    assert [a.full_name for a in oldest] == ["Zed Musa", "Bayo Ade", "Amaka Eze"]


def test_directory_search_covers_specialties_and_location(db_session, directory):
    branding, _ = profile_service.list_applicants(db_session, search="brand")
    assert [a.full_name for a in branding] == ["Amaka Eze"]

    kano, _ = profile_service.list_applicants(db_session, search="KANO")
    assert [a.full_name for a in kano] == ["Zed Musa"]


def test_directory_promoted_first(db_session, directory):
    directory["Zed Musa"].promoted_until = NOW + timedelta(days=2)
    directory["Bayo Ade"].promoted_until = NOW - timedelta(days=2)
    db_session.commit()

    applicants, _ = profile_service.list_applicants(db_session, promoted_first=True, now=NOW)

    assert [a.full_name for a in applicants] == ["Zed Musa", "Amaka Eze", "Bayo Ade"]


def test_directory_rejects_unknown_sort(db_session):
    with pytest.raises(ValidationFailedError):
        profile_service.list_applicants(db_session, sort_field="email")


def test_projects_promoted_first(db_session, applicant):
    plain = profile_service.create_project(db_session, applicant, {"title": "Poster series"})
    featured = profile_service.create_project(db_session, applicant, {"title": "Music video"})
    featured.promote = "Premium"
    featured.promote_expires_at = NOW + timedelta(days=1)
    db_session.commit()

    projects = profile_service.list_projects(db_session, applicant.id, now=NOW)

    assert [project.id for project in projects] == [featured.id, plain.id]
    with pytest.raises(ValidationFailedError):
        profile_service.create_project(db_session, applicant, {"title": " "})
