"""Credential issuing, verification workflow and employer checks."""

import hashlib

import pytest
from bson import ObjectId

from conftest import auth_header
from credhub.services.mongo_service import (
    CredentialService,
    InstitutionService,
    InvalidTransitionError,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"credential-scan" * 10


def issue(client, institution, learner, number="CERT-001", **fields):
    form = {
        "learner_id": learner["user_id"],
        "title": "Python Programming Certificate",
        "description": "Covers Python, SQL and Git fundamentals",
        "type": "certificate",
        "category": "technical",
        "issue_date": "2024-01-15T00:00:00",
        "credential_number": number,
    }
    form.update(fields)
    return client.post(
        "/api/v1/credentials",
        headers=auth_header(institution["access_token"]),
        data=form,
        files={"file": ("certificate.png", PNG_BYTES, "image/png")},
    )


def test_issue_credential(client, institution, learner, storage):
    response = issue(client, institution, learner)
    assert response.status_code == 201, response.text
    credential = response.json()

    assert credential["verification_status"] == "pending"
    assert credential["file"]["hash"] == hashlib.sha256(PNG_BYTES).hexdigest()
    assert storage.owns_url(credential["file"]["url"])
    assert 1 <= credential["nsqf_level"] <= 10
    names = [s["name"] for s in credential["skills"]]
    assert "Python" in names and "SQL" in names
    assert credential["metadata"]["skills_source"] == "fallback"

    institution_id = ObjectId(credential["institution_id"])
    assert InstitutionService().get_by_id(institution_id)["credentials_issued"] == 1


def test_explicit_nsqf_level_is_kept(client, institution, learner):
    response = issue(client, institution, learner, nsqf_level="8")
    assert response.status_code == 201
    assert response.json()["nsqf_level"] == 8
    assert response.json()["metadata"]["nsqf_level_source"] == "provided"


def test_duplicate_credential_number(client, institution, learner):
    assert issue(client, institution, learner).status_code == 201
    response = issue(client, institution, learner)
    assert response.status_code == 400


def test_unsupported_file_type(client, institution, learner):
    response = client.post(
        "/api/v1/credentials",
        headers=auth_header(institution["access_token"]),
        data={
            "learner_id": learner["user_id"],
            "title": "Cert",
            "type": "certificate",
            "issue_date": "2024-01-15T00:00:00",
            "credential_number": "X-1",
        },
        files={"file": ("malware.exe", b"MZ", "application/octet-stream")},
    )
    assert response.status_code == 400


def test_only_institutions_issue(client, learner):
    response = issue(client, learner, learner)
    assert response.status_code == 403


def test_verification_transitions(client, institution, learner):
    credential_id = issue(client, institution, learner).json()["_id"]
    headers = auth_header(institution["access_token"])
    url = f"/api/v1/credentials/{credential_id}/verify"

    response = client.put(url, headers=headers, json={"status": "verified"})
    assert response.status_code == 200
    assert response.json()["verification_status"] == "verified"
    assert response.json()["verified_at"]

    # verified cannot go back to rejected
    response = client.put(url, headers=headers, json={"status": "rejected"})
    assert response.status_code == 400

    response = client.put(url, headers=headers, json={"status": "expired"})
    assert response.status_code == 200
    assert response.json()["verification_status"] == "expired"


def test_set_status_rules():
    service = CredentialService()
    credential = service.create({"credential_number": "S-1", "learner_id": ObjectId()})
    verifier = ObjectId()

    assert service.set_status(credential["_id"], "rejected", verifier)["verification_status"] == "rejected"
    with pytest.raises(InvalidTransitionError):
        service.set_status(credential["_id"], "verified", verifier)
    assert service.set_status(credential["_id"], "expired", verifier)["verification_status"] == "expired"
    assert service.set_status(ObjectId(), "verified", verifier) is None


def test_other_institution_cannot_verify(client, register, institution, learner):
    credential_id = issue(client, institution, learner).json()["_id"]
    other = register(
        "institution",
        email="other@college.example.com",
        institution_name="Other College",
        registration_number="REG-002",
    )
    response = client.put(
        f"/api/v1/credentials/{credential_id}/verify",
        headers=auth_header(other["access_token"]),
        json={"status": "verified"},
    )
    assert response.status_code == 403


def test_get_counts_views_and_checks_owner(client, register, institution, learner):
    credential_id = issue(client, institution, learner).json()["_id"]

    response = client.get(f"/api/v1/credentials/{credential_id}", headers=auth_header(learner["access_token"]))
    assert response.status_code == 200
    assert response.json()["view_count"] == 1
    assert response.json()["institution"]["name"] == "City Polytechnic"

    stranger = register("learner", email="stranger@example.com")
    response = client.get(f"/api/v1/credentials/{credential_id}", headers=auth_header(stranger["access_token"]))
    assert response.status_code == 403


def test_list_is_role_scoped(client, register, institution, learner):
    issue(client, institution, learner)
    other = register("learner", email="second@example.com")

    mine = client.get("/api/v1/credentials", headers=auth_header(learner["access_token"])).json()
    theirs = client.get("/api/v1/credentials", headers=auth_header(other["access_token"])).json()
    assert mine["count"] == 1
    assert theirs["count"] == 0


def test_delete_removes_file(client, institution, learner, storage):
    credential = issue(client, institution, learner).json()
    response = client.delete(
        f"/api/v1/credentials/{credential['_id']}",
        headers=auth_header(institution["access_token"]),
    )
    assert response.status_code == 200
    assert not storage.owns_url(credential["file"]["url"])


def test_employer_verify_by_number(client, institution, learner, employer):
    issue(client, institution, learner)
    headers = auth_header(employer["access_token"])

    response = client.post("/api/v1/employers/verify-credential", headers=headers, json={
        "credential_number": "CERT-001",
        "file_hash": hashlib.sha256(PNG_BYTES).hexdigest(),
    })
    body = response.json()
    assert body["verified"] is True
    assert body["hash_match"] is True

    response = client.post("/api/v1/employers/verify-credential", headers=headers, json={
        "credential_number": "CERT-001",
        "file_hash": "0" * 64,
    })
    assert response.json()["hash_match"] is False

    response = client.post("/api/v1/employers/verify-credential", headers=headers, json={
        "credential_number": "NOPE",
    })
    assert response.status_code == 200
    assert response.json() == {"verified": False, "message": "Credential not found"}

    profile = client.get("/api/v1/employers/profile", headers=headers).json()
    assert profile["profile"]["credentials_verified"] == 2


def test_bulk_verify(client, institution, learner, employer):
    credential_id = issue(client, institution, learner).json()["_id"]
    client.put(
        f"/api/v1/credentials/{credential_id}/verify",
        headers=auth_header(institution["access_token"]),
        json={"status": "verified"},
    )
    issue(client, institution, learner, number="CERT-002")

    response = client.post(
        "/api/v1/employers/bulk-verify",
        headers=auth_header(employer["access_token"]),
        json={"credential_numbers": ["CERT-001", "CERT-002", "MISSING"]},
    )
    body = response.json()
    assert body["total"] == 3
    assert body["verified"] == 1
    assert body["not_found"] == 1
    assert [r["found"] for r in body["data"]] == [True, True, False]


def test_bulk_verify_rejects_empty_list(client, employer):
    response = client.post(
        "/api/v1/employers/bulk-verify",
        headers=auth_header(employer["access_token"]),
        json={"credential_numbers": []},
    )
    assert response.status_code == 400


def test_null_title_update_keeps_title(client, institution, learner):
    credential_id = issue(client, institution, learner).json()["_id"]
    response = client.put(
        f"/api/v1/credentials/{credential_id}",
        headers=auth_header(institution["access_token"]),
        json={"title": None, "is_public": False},
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Python Programming Certificate"
    assert response.json()["is_public"] is False
