"""AI service: model answers, heuristic fallbacks and provenance."""

from unittest.mock import MagicMock

import pytest

from credhub.models.ai_result import Provenance
from credhub.services.ai_service import (
    AIService,
    extract_classification_confidence,
    normalize_role,
    parse_level,
)
from credhub.services.hf_client import AIServiceError, HuggingFaceClient, extract_json


def failing_client():
    client = MagicMock(spec=HuggingFaceClient)
    client.query.side_effect = AIServiceError("model unavailable")
    client.inference.side_effect = AIServiceError("model unavailable")
    client.chat.side_effect = AIServiceError("model unavailable")
    return client


def answering_client(query=None, inference=None):
    client = MagicMock(spec=HuggingFaceClient)
    client.query.return_value = query
    client.inference.return_value = inference
    return client


# ---------- NSQF level ----------

def test_diploma_without_text_uses_type_default():
    result = AIService(failing_client()).predict_nsqf_level({"type": "diploma", "description": ""})
    assert result.value == 6
    assert result.source is Provenance.fallback


def test_keyword_fallback_when_model_fails():
    service = AIService(failing_client())
    result = service.predict_nsqf_level({"title": "PhD in Physics", "type": "degree"})
    assert result.value == 10
    assert result.is_fallback
    assert "unavailable" in result.error


def test_level_from_model_answer():
    service = AIService(answering_client(query="Level 7"))
    result = service.predict_nsqf_level({"title": "MSc Data Science", "type": "degree"})
    assert result.value == 7
    assert result.source is Provenance.ai


def test_out_of_range_answer_falls_back():
    service = AIService(answering_client(query="42"))
    result = service.predict_nsqf_level({"title": "Welding certificate", "type": "certificate"})
    assert result.is_fallback
    assert 1 <= result.value <= 10


@pytest.mark.parametrize("text, expected", [
    ("7", 7),
    ("NSQF level: 10", 10),
    ("level 0 or 11", None),
    ("", None),
])
def test_parse_level(text, expected):
    assert parse_level(text) == expected


# ---------- skill extraction ----------

def test_extract_skills_from_model_json():
    service = AIService(answering_client(query='```json\n["Python", "python", "Leadership"]\n```'))
    result = service.extract_skills("Built data pipelines in Python and led a team")
    assert result.source is Provenance.ai
    assert result.value == [
        {"name": "Python", "category": "technical"},
        {"name": "Leadership", "category": "soft-skills"},
    ]


def test_extract_skills_fallback_on_prose():
    service = AIService(answering_client(query="Sure! The skills are Python and Docker."))
    result = service.extract_skills("Python and Docker on AWS")
    assert result.is_fallback
    names = [s["name"] for s in result.value]
    assert "Python" in names and "Docker" in names and "AWS" in names


def test_extract_skills_empty_text():
    result = AIService(failing_client()).extract_skills("   ")
    assert result.value == []


def test_extract_json_strips_fences():
    assert extract_json('```json\n{"a": 1}\n```') == {"a": 1}


# ---------- skill gap ----------

def test_full_skill_list_is_full_match():
    service = AIService(failing_client())
    full = service.analyze_skill_gap(
        ["JavaScript", "React", "Node.js", "Express", "MongoDB", "SQL", "HTML", "CSS", "Git", "REST API"],
        "Full Stack Developer",
    )
    assert full["role_found"] is True
    assert full["match_percentage"] == 100
    assert full["missing_skills"] == []
    assert full["source"] == "fallback"


def test_unknown_role_lists_available_roles():
    result = AIService(failing_client()).analyze_skill_gap(["Python"], "Astronaut")
    assert result["role_found"] is False
    assert "Data Scientist" in result["available_roles"]
    assert result["missing_skills"] == []


@pytest.mark.parametrize("role, expected", [
    ("swe", "Software Engineer"),
    ("fullstack", "Full Stack Developer"),
    ("data scientist", "Data Scientist"),
    ("business analyst", "Business Analyst"),
    ("pastry chef", "Pastry Chef"),
])
def test_normalize_role(role, expected):
    assert normalize_role(role) == expected


def test_classifier_answer_decides_each_skill():
    client = answering_client(inference={"labels": ["yes", "no"], "scores": [0.9, 0.1]})
    result = AIService(client).analyze_skill_gap(["cooking"], "Data Scientist")
    assert result["match_percentage"] == 100
    assert result["source"] == "ai"


def test_malformed_classifier_answer_falls_back_per_skill():
    client = answering_client(inference={"error": "loading"})
    result = AIService(client).analyze_skill_gap(["Python", "SQL"], "Data Scientist")
    decisions = {d["skill"]: d for d in result["skill_decisions"]}
    assert decisions["Python"]["met"] is True
    assert decisions["Python"]["source"] == "fallback"
    assert "Machine Learning" in result["missing_skills"]


def test_classification_confidence_shapes():
    assert extract_classification_confidence([{"label": "yes", "score": 0.7}]) == 0.7
    assert extract_classification_confidence([[{"label": "no", "score": 0.8}]]) == 0.0
    with pytest.raises(ValueError):
        extract_classification_confidence("nonsense")


# ---------- careers & chat ----------

def test_career_recommendations_fallback_scores_paths():
    result = AIService(failing_client()).career_recommendations(["Python", "Machine Learning", "SQL"])
    assert result.is_fallback
    assert result.value
    assert all(r["match_score"] > 20 for r in result.value)
    scores = [r["match_score"] for r in result.value]
    assert scores == sorted(scores, reverse=True)


def test_chat_raises_when_unavailable():
    with pytest.raises(AIServiceError):
        AIService(failing_client()).chat("hello")


def test_client_without_key_is_disabled():
    client = HuggingFaceClient(api_key="")
    assert not client.enabled
    with pytest.raises(AIServiceError):
        client.query("google/flan-t5-large", "hi")


# ---------- unusable classifier answers ----------

@pytest.mark.parametrize("answer", [
    [{"label": "yes", "score": None}],
    {"labels": "yes", "scores": [0.9]},
    [{"label": "yes", "score": "high"}],
])
def test_unusable_classifier_scores_fall_back(answer):
    service = AIService(answering_client(inference=answer))

    decision = service.skill_met(["python"], "Python")
    assert decision.value is True
    assert decision.is_fallback

    result = service.analyze_skill_gap(["python"], "Software Developer")
    assert result["source"] == "fallback"
    assert "Python" in result["matched_skills"]


def test_null_score_raises_value_error():
    with pytest.raises(ValueError):
        extract_classification_confidence([{"label": "yes", "score": None}])


def test_unreachable_classifier_is_asked_once():
    client = failing_client()
    result = AIService(client).analyze_skill_gap(["Python", "SQL"], "Data Scientist")

    assert client.inference.call_count == 1
    assert result["source"] == "fallback"
    assert {d["source"] for d in result["skill_decisions"]} == {"fallback"}
    assert "Python" in result["matched_skills"]


def test_malformed_answer_does_not_stop_later_calls():
    client = answering_client(inference={"error": "loading"})
    result = AIService(client).analyze_skill_gap(["Python"], "Data Scientist")
    assert client.inference.call_count == len(result["required_skills"])
