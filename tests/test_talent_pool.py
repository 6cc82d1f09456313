"""Employer talent pool and invitations."""

from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

from bson import ObjectId

from conftest import auth_header
from credhub.services.mongo_service import JobService, TalentPoolService


def test_adding_twice_keeps_one_entry(client, learner, employer):
    headers = auth_header(employer["access_token"])
    payload = {"learner_id": learner["user_id"], "notes": "Strong React", "tags": ["frontend"], "rating": 4}

    first = client.post("/api/v1/employers/talent-pool/add", headers=headers, json=payload)
    assert first.status_code == 200, first.text
    second = client.post("/api/v1/employers/talent-pool/add", headers=headers, json=payload)
    assert second.status_code == 400
    assert second.json()["detail"] == "Learner already in talent pool"

    pool = client.get("/api/v1/employers/talent-pool", headers=headers).json()
    assert pool["count"] == 1
    entry = pool["data"]["learners"][0]
    assert entry["learner_id"] == learner["user_id"]
    assert entry["learner"]["first_name"] == "Asha"
    assert entry["tags"] == ["frontend"]


def test_service_add_is_conditional():
    service = TalentPoolService()
    employer_id, learner_id = ObjectId(), ObjectId()

    assert service.add(employer_id, learner_id) is True
    assert service.add(employer_id, learner_id) is False
    assert len(service.get_or_create(employer_id)["learners"]) == 1


def test_concurrent_adds_store_one_entry():
    employer_id, learner_id = ObjectId(), ObjectId()
    start = Barrier(2, timeout=5)

    def add():
        start.wait()
        return TalentPoolService().add(employer_id, learner_id, notes="same learner")

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: add(), range(2)))

    assert sorted(results) == [False, True]
    stored = TalentPoolService().get_or_create(employer_id)
    assert [entry["learner_id"] for entry in stored["learners"]] == [learner_id]


def test_add_unknown_learner(client, employer):
    response = client.post(
        "/api/v1/employers/talent-pool/add",
        headers=auth_header(employer["access_token"]),
        json={"learner_id": str(ObjectId())},
    )
    assert response.status_code == 404


def test_remove(client, learner, employer):
    headers = auth_header(employer["access_token"])
    client.post("/api/v1/employers/talent-pool/add", headers=headers, json={"learner_id": learner["user_id"]})

    response = client.post("/api/v1/employers/talent-pool/remove", headers=headers,
                           json={"learner_id": learner["user_id"]})
    assert response.status_code == 200
    assert response.json()["learners"] == []

    response = client.post("/api/v1/employers/talent-pool/remove", headers=headers,
                           json={"learner_id": learner["user_id"]})
    assert response.status_code == 404


def test_invite_is_idempotent(client, learner, employer):
    headers = auth_header(employer["access_token"])
    job = client.post("/api/v1/employers/jobs/create", headers=headers, json={
        "title": "Backend Developer",
        "description": "APIs",
    }).json()

    for _ in range(2):
        response = client.post(
            f"/api/v1/employers/invite/{learner['user_id']}",
            headers=headers,
            json={"job_id": job["_id"], "message": "Join us"},
        )
        assert response.status_code == 200
        assert response.json()["data"]["learner"] == "Asha Rao"

    stored = JobService().get_by_id(ObjectId(job["_id"]))
    assert stored["invited_learners"] == [ObjectId(learner["user_id"])]

    report = client.get("/api/v1/employers/reports/hires", headers=headers).json()
    assert report["total_jobs"] == 1
    assert report["total_invited"] == 1
    assert report["jobs_by_type"] == {"full-time": 1}


def test_employer_cannot_touch_other_employers_job(client, register):
    owner = register("employer", email="owner@example.com")
    other = register("employer", email="other@example.com")
    job = client.post("/api/v1/employers/jobs/create", headers=auth_header(owner["access_token"]), json={
        "title": "QA Engineer",
        "description": "Testing",
    }).json()

    response = client.get(f"/api/v1/employers/jobs/{job['_id']}", headers=auth_header(other["access_token"]))
    assert response.status_code == 404
    response = client.delete(f"/api/v1/employers/jobs/{job['_id']}", headers=auth_header(other["access_token"]))
    assert response.status_code == 404
