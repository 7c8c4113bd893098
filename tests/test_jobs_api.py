"""
Tests for job board, promotion and application endpoints.
"""
from datetime import datetime, timedelta

from gigzz.services import wallet_service

JOB = {
    "title": "Brand identity designer",
    "category": "Remote",
    "type": "Contract",
    "price_range": "₦50,000 - ₦100,000",
    "description": "Logo and brand kit",
    "tags": ["branding"],
}


def post_job(client, headers, **overrides):
    response = client.post("/jobs", json={**JOB, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_fetch_job(client, employer, auth_headers):
    job = post_job(client, auth_headers(employer))

    assert job["min_price"] == 50000
    assert job["price_range"] == "₦50,000 - ₦100,000"
    assert job["promotion_tag"] is None

    fetched = client.get(f"/jobs/{job['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["application_count"] == 0


def test_applicant_cannot_post_job(client, applicant, auth_headers):
    response = client.post("/jobs", json=JOB, headers=auth_headers(applicant))
    assert response.status_code == 403


def test_promote_job_endpoint(client, make_employer, auth_headers, db_session):
    user = make_employer(balance=15)
    job = post_job(client, auth_headers(user))

    response = client.post(f"/jobs/{job['id']}/promote", json={"plan": "silver"}, headers=auth_headers(user))

    assert response.status_code == 200
    body = response.json()
    assert body["promotion_tag"] == "Silver"
    assert body["balance"] == 10
    expires = datetime.fromisoformat(body["promotion_expires_at"])
    assert timedelta(days=2, hours=23) < expires - datetime.utcnow() <= timedelta(days=3)

    again = client.post(f"/jobs/{job['id']}/promote", json={"plan": "Silver"}, headers=auth_headers(user))
    assert again.status_code == 409
    assert again.json()["detail"]["error"] == "already_promoted"


def test_promote_without_tokens_returns_402(client, make_employer, auth_headers, db_session):
    user = make_employer(balance=8)
    job = post_job(client, auth_headers(user))

    response = client.post(f"/jobs/{job['id']}/promote", json={"plan": "Gold"}, headers=auth_headers(user))

    assert response.status_code == 402
    detail = response.json()["detail"]
    assert detail["error"] == "insufficient_tokens"
    assert detail["balance"] == 8
    assert detail["required"] == 10
    assert wallet_service.get_balance(db_session, user.id) == 8


def test_promote_someone_elses_job_returns_403(client, employer, make_employer, auth_headers):
    job = post_job(client, auth_headers(employer))
    other = make_employer(email="other@example.com", balance=50)

    response = client.post(f"/jobs/{job['id']}/promote", json={"plan": "Gold"}, headers=auth_headers(other))

    assert response.status_code == 403


def test_listing_puts_promoted_first(client, make_employer, auth_headers):
    user = make_employer(balance=50)
    headers = auth_headers(user)
    first = post_job(client, headers, title="first")
    post_job(client, headers, title="second")
    client.post(f"/jobs/{first['id']}/promote", json={"plan": "Premium"}, headers=headers)

    response = client.get("/jobs")

    assert response.status_code == 200
    titles = [job["title"] for job in response.json()["jobs"]]
    assert titles[0] == "first"
    assert response.json()["total"] == 2


def test_apply_flow(client, employer, make_applicant, auth_headers, db_session):
    job = post_job(client, auth_headers(employer))
    creative = make_applicant(balance=5)

    response = client.post(
        f"/jobs/{job['id']}/apply",
        data={"cover_letter": "I have built 40 brand kits."},
        files=[("attachments", ("portfolio.pdf", b"%PDF-1.4 portfolio", "application/pdf"))],
        headers=auth_headers(creative),
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["job_title"] == "Brand identity designer"
    assert body["attachments"][0].startswith("/media/attachments/")
    assert wallet_service.get_balance(db_session, creative.id) == 2

    duplicate = client.post(
        f"/jobs/{job['id']}/apply",
        data={"cover_letter": "Again"},
        headers=auth_headers(creative),
    )
    assert duplicate.status_code == 409

    applicants = client.get(f"/jobs/{job['id']}/applicants", headers=auth_headers(employer))
    assert applicants.status_code == 200
    assert applicants.json()[0]["applicant_name"] == "Ada Obi"

    mine = client.get("/applications/mine", headers=auth_headers(creative))
    assert [application["job_id"] for application in mine.json()] == [job["id"]]


def test_apply_rejects_bad_attachment_type(client, employer, make_applicant, auth_headers):
    job = post_job(client, auth_headers(employer))
    creative = make_applicant(balance=5)

    response = client.post(
        f"/jobs/{job['id']}/apply",
        data={"cover_letter": "Hello"},
        files=[("attachments", ("virus.exe", b"MZ", "application/octet-stream"))],
        headers=auth_headers(creative),
    )

    assert response.status_code == 400


def stored_attachments(media_root):
    return sorted(path.name for path in (media_root / "attachments").glob("*"))


def test_rejected_application_keeps_no_files(client, employer, make_applicant, auth_headers, media_root):
    job = post_job(client, auth_headers(employer))
    broke = make_applicant(email="broke@example.com", balance=0)

    response = client.post(
        f"/jobs/{job['id']}/apply",
        data={"cover_letter": "I have built 40 brand kits."},
        files=[("attachments", ("portfolio.pdf", b"%PDF-1.4 portfolio", "application/pdf"))],
        headers=auth_headers(broke),
    )

    assert response.status_code == 402
    assert stored_attachments(media_root) == []


def test_duplicate_application_keeps_only_first_files(client, employer, make_applicant, auth_headers, media_root):
    job = post_job(client, auth_headers(employer))
    creative = make_applicant(balance=10)
    upload = [("attachments", ("portfolio.pdf", b"%PDF-1.4 portfolio", "application/pdf"))]

    first = client.post(
        f"/jobs/{job['id']}/apply", data={"cover_letter": "First"}, files=upload, headers=auth_headers(creative)
    )
    second = client.post(
        f"/jobs/{job['id']}/apply", data={"cover_letter": "Second"}, files=upload, headers=auth_headers(creative)
    )

    assert first.status_code == 201
    assert second.status_code == 409
    assert stored_attachments(media_root) == [first.json()["attachments"][0].rsplit("/", 1)[1]]


def test_one_bad_attachment_discards_the_others(client, employer, make_applicant, auth_headers, media_root):
    job = post_job(client, auth_headers(employer))
    creative = make_applicant(balance=5)

    response = client.post(
        f"/jobs/{job['id']}/apply",
        data={"cover_letter": "Hello"},
        files=[
            ("attachments", ("portfolio.pdf", b"%PDF-1.4 portfolio", "application/pdf")),
            ("attachments", ("virus.exe", b"MZ", "application/octet-stream")),
        ],
        headers=auth_headers(creative),
    )

    assert response.status_code == 400
    assert stored_attachments(media_root) == []
