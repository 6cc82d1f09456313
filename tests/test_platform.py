"""Institutions, admin, AI endpoints, files and health."""

import inspect

from conftest import auth_header
from credhub.main import app
from credhub.utils import file_upload


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["mongodb"] == "connected"


def test_institution_listing_and_update(client, institution, admin):
    listing = client.get("/api/v1/institutions").json()
    assert listing["total"] == 1
    institution_id = listing["items"][0]["_id"]

    response = client.put(
        f"/api/v1/institutions/{institution_id}",
        headers=auth_header(institution["access_token"]),
        json={"contact_info": {"phone": "12345"}},
    )
    assert response.status_code == 200
    assert response.json()["contact_info"] == {"phone": "12345"}

    stats = client.get(
        f"/api/v1/institutions/{institution_id}/stats",
        headers=auth_header(institution["access_token"]),
    ).json()
    assert stats["total_credentials"] == 0

    response = client.put(
        f"/api/v1/admin/institutions/{institution_id}/verify",
        headers=auth_header(admin["access_token"]),
        json={"is_verified": True},
    )
    assert response.json()["is_verified"] is True

    filtered = client.get("/api/v1/institutions?is_verified=true").json()
    assert filtered["total"] == 1


def test_institution_staff_cannot_edit_other_institution(client, register, institution):
    other = register(
        "institution",
        email="staff@other.example.com",
        institution_name="Other Institute",
        registration_number="REG-999",
    )
    listing = client.get("/api/v1/institutions").json()["items"]
    city = next(i for i in listing if i["name"] == "City Polytechnic")

    response = client.put(
        f"/api/v1/institutions/{city['_id']}",
        headers=auth_header(other["access_token"]),
        json={"name": "Hijacked"},
    )
    assert response.status_code == 403


def test_admin_creates_and_deletes_institution(client, admin):
    headers = auth_header(admin["access_token"])
    response = client.post("/api/v1/institutions", headers=headers, json={
        "name": "Open Skills Academy",
        "registration_number": "OSA-1",
        "type": "online-platform",
    })
    assert response.status_code == 201
    institution_id = response.json()["_id"]

    duplicate = client.post("/api/v1/institutions", headers=headers, json={
        "name": "Open Skills Academy",
        "registration_number": "OSA-2",
        "type": "online-platform",
    })
    assert duplicate.status_code == 400

    assert client.delete(f"/api/v1/institutions/{institution_id}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/institutions/{institution_id}").status_code == 404


def test_admin_user_management(client, admin, learner, employer):
    headers = auth_header(admin["access_token"])

    users = client.get("/api/v1/admin/users?role=learner", headers=headers).json()
    assert users["total"] == 1
    assert "password_hash" not in users["items"][0]

    response = client.delete(f"/api/v1/admin/users/{employer['user_id']}", headers=headers)
    assert response.status_code == 200
    response = client.delete(f"/api/v1/admin/users/{employer['user_id']}", headers=headers)
    assert response.status_code == 404

    assert client.get("/api/v1/admin/users", headers=auth_header(learner["access_token"])).status_code == 403


def test_ai_endpoints_fall_back(client, learner):
    headers = auth_header(learner["access_token"])

    response = client.post("/api/v1/ai/extract-skills", headers=headers,
                           json={"text": "React and TypeScript frontends"})
    body = response.json()
    assert body["source"] == "fallback"
    assert {"React", "TypeScript"} <= {s["name"] for s in body["skills"]}

    response = client.post("/api/v1/ai/predict-nsqf", headers=headers, json={"type": "diploma"})
    assert response.json() == {"nsqf_level": 6, "source": "fallback"}

    response = client.post("/api/v1/ai/skill-gap", headers=headers,
                           json={"target_role": "Astronaut", "current_skills": ["Python"]})
    assert response.json()["role_found"] is False


def test_chat_unavailable_is_503(client, learner):
    response = client.post("/api/v1/ai/chat", headers=auth_header(learner["access_token"]),
                           json={"message": "What is NSQF?"})
    assert response.status_code == 503


def test_pathway_for_new_learner(client, learner):
    headers = auth_header(learner["access_token"])
    body = client.get("/api/v1/ai/pathway/nsqf", headers=headers).json()
    assert body["current_level"] == 0
    assert body["next_level"] == 1
    assert body["recommendations"][0]["level"] == 1

    body = client.post("/api/v1/ai/pathway/recommend", headers=headers).json()
    assert body["current_level"] == 0
    assert body["count"] == len(body["recommendations"]) <= 10


def test_skill_trends_are_public(client, employer):
    client.post("/api/v1/employers/jobs/create", headers=auth_header(employer["access_token"]), json={
        "title": "Data Engineer",
        "description": "Pipelines",
        "required_skills": [{"name": "Python"}, {"name": "SQL"}],
    })
    body = client.get("/api/v1/ai/trends/skills").json()
    assert {"skill": "python", "demand": 1, "trend": "rising"} in body["top_skills"]
    assert body["emerging_skills"]


def test_file_upload_and_download(client, learner, storage):
    headers = auth_header(learner["access_token"])
    response = client.post(
        "/api/v1/files/upload",
        headers=headers,
        data={"folder": "profiles"},
        files={"file": ("avatar.png", b"\x89PNG\r\n\x1a\navatar", "image/png")},
    )
    assert response.status_code == 201
    url = response.json()["url"]
    assert url.startswith("/uploads/profiles/")

    response = client.get("/api/v1/files/download", headers=headers, params={"url": url},
                          follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == url

    response = client.get("/api/v1/files/download", headers=headers,
                          params={"url": "https://evil.example.com/x.pdf"}, follow_redirects=False)
    assert response.status_code == 404


def test_null_job_fields_keep_stored_values(client, learner, employer):
    headers = auth_header(employer["access_token"])
    job = client.post("/api/v1/employers/jobs/create", headers=headers, json={
        "title": "Data Engineer",
        "description": "Pipelines",
        "required_skills": [{"name": "Python"}],
    }).json()

    response = client.put(f"/api/v1/employers/jobs/{job['_id']}", headers=headers, json={
        "required_skills": None,
        "status": None,
        "title": None,
        "location": "Pune",
    })
    assert response.status_code == 200
    updated = response.json()
    assert updated["required_skills"][0]["name"] == "Python"
    assert updated["status"] == "active"
    assert updated["title"] == "Data Engineer"
    assert updated["location"] == "Pune"

    assert client.get("/api/v1/ai/trends/skills").status_code == 200
    response = client.post("/api/v1/ai/job-match", headers=auth_header(learner["access_token"]))
    assert response.status_code == 200


def test_null_company_name_is_ignored(client, employer):
    headers = auth_header(employer["access_token"])
    response = client.put("/api/v1/employers/profile", headers=headers,
                          json={"company_name": None, "website": "https://acme.example.com"})
    assert response.status_code == 200

    me = client.get("/api/v1/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["profile"]["company_name"] == "Acme Labs"
    assert me.json()["profile"]["website"] == "https://acme.example.com"


def test_oversized_upload_is_rejected(client, learner, monkeypatch):
    monkeypatch.setattr(file_upload.settings, "max_file_size_mb", 0)
    response = client.post(
        "/api/v1/files/upload",
        headers=auth_header(learner["access_token"]),
        data={"folder": "profiles"},
        files={"file": ("avatar.png", b"\x89PNG\r\n\x1a\navatar", "image/png")},
    )
    assert response.status_code == 413


def test_model_backed_handlers_run_in_threadpool():
    model_paths = {
        "/api/v1/ai/extract-skills",
        "/api/v1/ai/predict-nsqf",
        "/api/v1/ai/career-recommendations",
        "/api/v1/ai/skill-gap",
        "/api/v1/ai/chat",
        "/api/v1/ai/pathway/nsqf",
        "/api/v1/learners/career-recommendations",
        "/api/v1/learners/skill-gap",
    }
    endpoints = {route.path: route.endpoint for route in app.routes if route.path in model_paths}
    assert set(endpoints) == model_paths
    for path, endpoint in endpoints.items():
        assert not inspect.iscoroutinefunction(endpoint), path
