"""
AI Service - skill extraction, NSQF prediction, career and skill-gap advice.

Every operation tries the Hugging Face model first and falls back to a
deterministic heuristic when the model is unavailable or answers nonsense.
Results carry their provenance (AIResult.source) so callers can tell the two
apart; the API serves both the same way.

The only operation without a fallback is chat(): there is nothing sensible to
answer locally, so AIServiceError propagates and the route returns 503.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from credhub.core.catalog import (
    CAREER_PATHS,
    NSQF_DEFAULT_LEVEL,
    NSQF_KEYWORDS,
    NSQF_TYPE_DEFAULTS,
    ROLE_ALIASES,
    ROLE_SKILLS,
    SKILL_CATEGORIES,
    SKILL_VOCABULARY,
)
from credhub.core.config import get_settings
from credhub.models.ai_result import AIResult, Provenance
from credhub.services.hf_client import (
    AIServiceError,
    HuggingFaceClient,
    extract_json,
    get_hf_client,
)
from credhub.utils.skills import has_skill, round_half_up, skill_names

logger = logging.getLogger(__name__)

settings = get_settings()

MAX_EXTRACTED_SKILLS = 10
MAX_CAREER_RECOMMENDATIONS = 5
CAREER_MIN_SCORE = 20
SKILL_CONFIDENCE_THRESHOLD = 0.5

_LEVEL_PATTERN = re.compile(r"\b([1-9]|10)\b")


# ============================================================
# HEURISTICS (no network)
# ============================================================

def categorize_skill(skill: str) -> str:
    """Map a skill name to technical / soft-skills / management."""
    lower = skill.lower()
    for category, keywords in SKILL_CATEGORIES.items():
        if any(k.lower() in lower for k in keywords):
            return category
    return "technical"


def extract_keywords(text: str) -> List[str]:
    """Vocabulary terms found in the text, in vocabulary order."""
    lower = text.lower()
    return [skill for skill in SKILL_VOCABULARY if skill.lower() in lower]


def predict_level_from_keywords(text: str, credential_type: Optional[str]) -> int:
    """Keyword table from level 10 down to 1, then the type default."""
    lower = text.lower()
    for level in range(10, 0, -1):
        if any(keyword in lower for keyword in NSQF_KEYWORDS[level]):
            return level
    return NSQF_TYPE_DEFAULTS.get(credential_type, NSQF_DEFAULT_LEVEL)


def parse_level(text: str) -> Optional[int]:
    """First standalone integer 1-10 in the model output."""
    match = _LEVEL_PATTERN.search(text or "")
    return int(match.group(1)) if match else None


def normalize_role(role: str) -> str:
    """
    Resolve a free-text role to a catalog name.

    Catalog names match case-insensitively, then aliases (exact, then
    substring either way), else the input is title-cased.
    """
    lower = role.lower().strip()
    for name in ROLE_SKILLS:
        if name.lower() == lower:
            return name
    if lower in ROLE_ALIASES:
        return ROLE_ALIASES[lower]
    for alias, name in ROLE_ALIASES.items():
        if alias in lower or lower in alias:
            return name
    return " ".join(word.capitalize() for word in role.split(" "))


def score_career_paths(skills: List[Any]) -> List[dict]:
    """Career paths whose overlap with the skills is above 20%, best first."""
    names = skill_names(skills)
    scored = []
    for career in CAREER_PATHS:
        matched = sum(1 for req in career["skills"] if has_skill(names, req))
        score = round_half_up(matched / len(career["skills"]) * 100)
        if score > CAREER_MIN_SCORE:
            scored.append({
                "title": career["title"],
                "match_score": score,
                "description": career["description"],
            })
    scored.sort(key=lambda c: c["match_score"], reverse=True)
    return scored


def skill_gap_recommendations(missing: List[str], role: str) -> List[str]:
    if not missing:
        return [
            f"Great! You have all the required skills for {role}",
            "Consider building projects to strengthen your portfolio",
            "Stay updated with latest trends and technologies in your field",
        ]
    recommendations = [
        f"Learn {skill} through online courses, tutorials, or certifications"
        for skill in missing[:5]
    ]
    if len(missing) > 5:
        recommendations.append(f"Also consider learning: {', '.join(missing[5:])}")
    return recommendations


def extract_classification_confidence(result: Any, label: str = "yes") -> float:
    """
    Confidence for `label` from a classification answer.

    Accepts the zero-shot shape {"labels": [...], "scores": [...]} and the
    text-classification shapes [[{label, score}]] / [{label, score}].
    Anything else, including missing or non-numeric scores, raises ValueError.
    """
    try:
        return _classification_confidence(result, label)
    except (TypeError, KeyError) as e:
        raise ValueError(f"Unrecognised classification response: {result!r}") from e


def _classification_confidence(result: Any, label: str) -> float:
    if isinstance(result, dict) and "labels" in result and "scores" in result:
        labels, scores = result["labels"], result["scores"]
        if not isinstance(labels, list) or not isinstance(scores, list):
            raise ValueError(f"Unrecognised classification response: {result!r}")
        for name, score in zip(labels, scores):
            if label in str(name).lower():
                return float(score)
        return 0.0

    if isinstance(result, list) and result:
        scores = result[0] if isinstance(result[0], list) else result
        if all(isinstance(s, dict) and "label" in s for s in scores):
            for s in scores:
                if label in str(s["label"]).lower():
                    return float(s.get("score", 0))
            return 0.0

    raise ValueError(f"Unrecognised classification response: {result!r}")


# ============================================================
# AI SERVICE
# ============================================================

class AIService:
    """
    Model-backed operations with heuristic fallbacks.
    The client is injectable so tests never touch the network.
    """

    def __init__(self, client: HuggingFaceClient = None):
        self.client = client or get_hf_client()

    # ---------- skill extraction ----------

    def extract_skills(self, text: str) -> AIResult[List[dict]]:
        """
        Extract up to 10 {name, category} skills from free text.

        AI path asks the chat model for a JSON array of skill names;
        fallback scans the text for known vocabulary terms.
        """
        if not text or not text.strip():
            return AIResult.from_fallback([])

        try:
            response = self.client.query(
                settings.skill_extraction_model,
                [
                    {
                        "role": "system",
                        "content": (
                            "Extract technical and professional skills from the text. "
                            "Return ONLY a JSON array of skill names, for example "
                            "[\"Python\", \"SQL\"]. No explanation."
                        ),
                    },
                    {"role": "user", "content": text[:4000]},
                ],
                {"temperature": 0.1, "max_tokens": 200},
            )
            skills = self._validate_skill_list(extract_json(response))
            return AIResult.from_ai(skills)
        except (AIServiceError, ValueError) as e:
            logger.info("Skill extraction falling back to keywords: %s", e)
            fallback = [
                {"name": name, "category": "technical"}
                for name in extract_keywords(text)
            ]
            return AIResult.from_fallback(fallback[:MAX_EXTRACTED_SKILLS], error=str(e))

    def _validate_skill_list(self, data: Any) -> List[dict]:
        """Keep unique non-empty names; the model must answer with a list."""
        if not isinstance(data, list):
            raise ValueError("Skill extraction did not return a JSON array")
        seen = set()
        skills = []
        for item in data:
            name = item.get("name") if isinstance(item, dict) else item
            if not isinstance(name, str) or not name.strip():
                continue
            name = name.strip()
            if name.lower() in seen:
                continue
            seen.add(name.lower())
            skills.append({"name": name, "category": categorize_skill(name)})
        return skills[:MAX_EXTRACTED_SKILLS]

    # ---------- NSQF level ----------

    def predict_nsqf_level(self, credential_data: dict) -> AIResult[int]:
        """
        Predict the NSQF level (1-10) of a credential.

        No text at all means the type default, without asking the model.
        """
        title = credential_data.get("title") or ""
        description = credential_data.get("description") or ""
        credential_type = credential_data.get("type")
        credential_text = f"{title} {description}".strip()

        if not credential_text:
            return AIResult.from_fallback(
                NSQF_TYPE_DEFAULTS.get(credential_type, NSQF_DEFAULT_LEVEL)
            )

        prompt = (
            "Based on this credential description, predict the NSQF level (1-10).\n"
            "NSQF Level 1: Basic/Elementary skills\n"
            "NSQF Level 2-3: Foundation/Intermediate skills\n"
            "NSQF Level 4-5: Skilled worker/Diploma level\n"
            "NSQF Level 6: Bachelor degree level\n"
            "NSQF Level 7: Postgraduate/Masters level\n"
            "NSQF Level 8: Advanced Masters/MBA\n"
            "NSQF Level 9: Doctoral/PhD\n"
            "NSQF Level 10: Post-doctoral research\n\n"
            f"Credential: {credential_text}\n"
            f"Type: {credential_type or 'unknown'}\n\n"
            "Predict NSQF level (respond with only a number 1-10):"
        )

        error = None
        try:
            response = self.client.query(
                settings.nsqf_prediction_model,
                prompt,
                {"max_length": 10, "temperature": 0.3, "do_sample": False},
            )
            level = parse_level(response)
            if level is not None:
                return AIResult.from_ai(level)
            error = f"No level 1-10 in model output: {response!r}"
        except AIServiceError as e:
            error = str(e)

        logger.info("NSQF prediction falling back to keywords: %s", error)
        return AIResult.from_fallback(
            predict_level_from_keywords(credential_text, credential_type), error=error
        )

    def analyze_credential(self, credential_data: dict) -> Dict[str, AIResult]:
        """Skills and NSQF level for a credential being created."""
        text = " ".join(
            part for part in (credential_data.get("title"), credential_data.get("description")) if part
        )
        return {
            "skills": self.extract_skills(text),
            "nsqf_level": self.predict_nsqf_level(credential_data),
        }

    # ---------- careers ----------

    def career_recommendations(self, skills: List[Any], education: List[dict] = None) -> AIResult[List[dict]]:
        """
        Up to 5 career paths for a skill set.

        The generated text decides which of the qualifying paths are
        recommended; when it names none of them, the top scored paths are
        returned instead.
        """
        if not skills:
            return AIResult.from_fallback([])

        scored = score_career_paths(skills)
        skills_text = ", ".join(s.get("name", "") if isinstance(s, dict) else str(s) for s in skills)
        if education:
            education_text = ", ".join(
                f"{e.get('degree') or ''} from {e.get('institution') or ''}" for e in education
            )
        else:
            education_text = "No formal education listed"

        prompt = (
            "Based on the following learner profile, recommend suitable career paths:\n\n"
            f"Skills: {skills_text}\n"
            f"Education: {education_text}\n\n"
            "Suggest 3-5 career paths that match these skills. "
            "Format: Career Title - Brief Description"
        )

        error = None
        try:
            text = self.client.query(
                settings.text_generation_model,
                prompt,
                {"max_tokens": 300, "temperature": 0.7, "top_p": 0.9},
            ).lower()
            mentioned = [c for c in scored if c["title"].lower() in text]
            if mentioned:
                return AIResult.from_ai(mentioned[:MAX_CAREER_RECOMMENDATIONS])
            error = "Generated text names no known career path"
        except AIServiceError as e:
            error = str(e)

        logger.info("Career recommendations falling back to skill overlap: %s", error)
        return AIResult.from_fallback(scored[:MAX_CAREER_RECOMMENDATIONS], error=error)

    # ---------- skill gap ----------

    def _ask_classifier(self, current_skills: List[str], required_skill: str) -> bool:
        """Raises AIServiceError when unreachable, ValueError on an unusable answer."""
        prompt = (
            f'Does the learner have the skill "{required_skill}"? '
            f"Current skills: {', '.join(current_skills)}"
        )
        result = self.client.inference(
            settings.classification_model,
            prompt,
            {"candidate_labels": ["yes", "no"]},
        )
        return extract_classification_confidence(result, "yes") >= SKILL_CONFIDENCE_THRESHOLD

    def skill_met(self, current_skills: List[str], required_skill: str) -> AIResult[bool]:
        """
        Ask the classifier whether the learner has `required_skill`.
        A failing call is answered by substring matching for this skill only.
        """
        try:
            return AIResult.from_ai(self._ask_classifier(current_skills, required_skill))
        except (AIServiceError, ValueError) as e:
            return AIResult.from_fallback(has_skill(current_skills, required_skill), error=str(e))

    def _skill_decisions(self, names: List[str], required: List[str]) -> List[AIResult[bool]]:
        """
        One classifier call per required skill.

        Once the model is unreachable the remaining skills go straight to
        substring matching; an unusable answer only affects its own skill.
        """
        decisions = []
        unavailable = None
        for skill in required:
            if unavailable is not None:
                decisions.append(AIResult.from_fallback(has_skill(names, skill), error=unavailable))
                continue
            try:
                decisions.append(AIResult.from_ai(self._ask_classifier(names, skill)))
            except AIServiceError as e:
                unavailable = str(e)
                logger.info("Skill classifier unavailable, using substring matching: %s", e)
                decisions.append(AIResult.from_fallback(has_skill(names, skill), error=unavailable))
            except ValueError as e:
                decisions.append(AIResult.from_fallback(has_skill(names, skill), error=str(e)))
        return decisions

    def analyze_skill_gap(self, current_skills: List[Any], target_role: str) -> dict:
        """
        Compare current skills with the catalog requirements of a role.

        Never raises: an unknown role comes back with role_found=False and
        the list of roles that are known.
        """
        normalized = normalize_role(target_role)
        required = ROLE_SKILLS.get(normalized, [])

        if not current_skills:
            return {
                "target_role": target_role,
                "role_found": bool(required),
                "required_skills": [],
                "current_skills": [],
                "matched_skills": [],
                "missing_skills": [],
                "match_percentage": 0,
                "recommendations": ["Please add your skills to analyze skill gaps"],
                "skill_decisions": [],
            }

        if not required:
            available = list(ROLE_SKILLS)
            return {
                "target_role": normalized,
                "role_found": False,
                "required_skills": [],
                "current_skills": current_skills,
                "matched_skills": [],
                "missing_skills": [],
                "match_percentage": 0,
                "recommendations": [
                    f'Role "{target_role}" not found. Available roles: {", ".join(available)}'
                ],
                "available_roles": available,
                "skill_decisions": [],
            }

        names = skill_names(current_skills)
        decisions = []
        missing = []
        for skill, decision in zip(required, self._skill_decisions(names, required)):
            decisions.append({
                "skill": skill,
                "met": decision.value,
                "source": decision.source.value,
            })
            if not decision.value:
                missing.append(skill)

        matched = [s for s in required if s not in missing]
        return {
            "target_role": normalized,
            "role_found": True,
            "required_skills": required,
            "current_skills": current_skills,
            "matched_skills": matched,
            "missing_skills": missing,
            "match_percentage": round_half_up(len(matched) / len(required) * 100),
            "recommendations": skill_gap_recommendations(missing, normalized),
            "skill_decisions": decisions,
            "source": _overall_source(decisions),
        }

    # ---------- chat ----------

    def chat(self, message: str, context: str = None) -> str:
        """Assistant reply; raises AIServiceError when the model is unavailable."""
        messages = [
            {
                "role": "system",
                "content": (
                    "You are a helpful assistant for a credential management platform. "
                    "Help learners with credentials, NSQF levels, skills and careers. "
                    "Keep answers short and practical."
                ),
            }
        ]
        if context:
            messages.append({"role": "user", "content": f"Context: {context}"})
        messages.append({"role": "user", "content": message})
        return self.client.chat(settings.text_generation_model, messages, max_tokens=500)


def _overall_source(decisions: List[dict]) -> str:
    sources = {d["source"] for d in decisions}
    if sources == {Provenance.ai.value}:
        return Provenance.ai.value
    if sources == {Provenance.fallback.value}:
        return Provenance.fallback.value
    return "mixed"


# Singleton instance
_ai_service: AIService = None


def get_ai_service() -> AIService:
    """Get or create the AI service (singleton pattern)"""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
