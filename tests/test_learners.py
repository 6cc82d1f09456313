"""Learner profile, achievements and account deletion."""

from bson import ObjectId

from conftest import auth_header
from credhub.db.mongodb import COLLECTIONS, get_collection


def test_update_profile_and_add_skills(client, learner):
    headers = auth_header(learner["access_token"])

    response = client.put("/api/v1/learners/profile", headers=headers, json={"bio": "Aspiring developer"})
    assert response.status_code == 200
    assert response.json()["profile"]["bio"] == "Aspiring developer"
    assert response.json()["profile"]["first_name"] == "Asha"

    response = client.post("/api/v1/learners/skills", headers=headers, json={"name": "Python", "level": "advanced"})
    assert response.status_code == 200
    assert response.json()["profile"]["skills"][0]["level"] == "advanced"

    response = client.post("/api/v1/learners/skills", headers=headers, json={"name": "python"})
    assert response.status_code == 400

    response = client.post("/api/v1/learners/education", headers=headers, json={
        "institution": "City Polytechnic",
        "degree": "Diploma",
        "start_date": "2020-06-01T00:00:00",
    })
    assert response.status_code == 200
    assert response.json()["profile"]["education"][0]["degree"] == "Diploma"


def test_skill_gap_uses_profile_skills(client, learner):
    headers = auth_header(learner["access_token"])
    for name in ("Python", "SQL"):
        client.post("/api/v1/learners/skills", headers=headers, json={"name": name})

    response = client.post("/api/v1/learners/skill-gap", headers=headers, json={"target_role": "ds"})
    body = response.json()
    assert body["target_role"] == "Data Scientist"
    assert "Python" in body["matched_skills"]
    assert 0 < body["match_percentage"] < 100


def test_career_recommendations(client, learner):
    headers = auth_header(learner["access_token"])
    for name in ("Docker", "Kubernetes", "AWS"):
        client.post("/api/v1/learners/skills", headers=headers, json={"name": name})

    body = client.get("/api/v1/learners/career-recommendations", headers=headers).json()
    assert body["source"] == "fallback"
    titles = [r["title"] for r in body["recommendations"]]
    assert "DevOps Engineer" in titles


def test_achievements_crud(client, learner):
    headers = auth_header(learner["access_token"])
    created = []
    for i, date in enumerate(["2023-01-10T00:00:00", "2024-05-01T00:00:00"]):
        response = client.post("/api/v1/learners/achievements", headers=headers, json={
            "title": f"Hackathon {i}",
            "type": "competition",
            "date": date,
        })
        assert response.status_code == 201
        created.append(response.json())

    listing = client.get("/api/v1/learners/achievements?limit=1", headers=headers).json()
    assert listing["total"] == 2
    assert listing["pages"] == 2
    assert listing["items"][0]["title"] == "Hackathon 1"

    achievement_id = created[0]["_id"]
    response = client.put(f"/api/v1/learners/achievements/{achievement_id}", headers=headers,
                          json={"title": "Hackathon winner"})
    assert response.json()["title"] == "Hackathon winner"

    assert client.delete(f"/api/v1/learners/achievements/{achievement_id}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/learners/achievements/{achievement_id}", headers=headers).status_code == 404


def test_achievement_of_other_learner_is_hidden(client, register, learner):
    headers = auth_header(learner["access_token"])
    achievement_id = client.post("/api/v1/learners/achievements", headers=headers, json={
        "title": "Award",
        "date": "2024-01-01T00:00:00",
    }).json()["_id"]

    other = register("learner", email="other@example.com")
    response = client.get(f"/api/v1/learners/achievements/{achievement_id}",
                          headers=auth_header(other["access_token"]))
    assert response.status_code == 404


def test_invalid_id_is_not_found(client, learner):
    response = client.get("/api/v1/learners/achievements/not-an-id", headers=auth_header(learner["access_token"]))
    assert response.status_code == 404


def test_delete_account_cascades(client, learner):
    headers = auth_header(learner["access_token"])
    client.post("/api/v1/learners/portfolio/create", headers=headers, json={})
    client.post("/api/v1/learners/achievements", headers=headers, json={
        "title": "Award",
        "date": "2024-01-01T00:00:00",
    })

    response = client.delete("/api/v1/learners/profile", headers=headers)
    assert response.status_code == 200

    learner_id = ObjectId(learner["user_id"])
    assert get_collection(COLLECTIONS["users"]).find_one({"_id": learner_id}) is None
    assert get_collection(COLLECTIONS["portfolios"]).count_documents({"learner_id": learner_id}) == 0
    assert get_collection(COLLECTIONS["achievements"]).count_documents({"learner_id": learner_id}) == 0
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


def test_null_profile_fields_are_ignored(client, learner):
    headers = auth_header(learner["access_token"])

    response = client.put("/api/v1/learners/profile", headers=headers,
                          json={"first_name": None, "bio": "Still here"})
    assert response.status_code == 200
    assert response.json()["profile"]["first_name"] == "Asha"

    me = client.get("/api/v1/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["profile"]["first_name"] == "Asha"
    assert me.json()["profile"]["bio"] == "Still here"
