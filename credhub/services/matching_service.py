"""
Matching Service

PURPOSE:
Score how well a learner fits a job and rank the results.

HOW IT WORKS:
1. Learner skills = profile skills + skills on verified credentials
2. A required skill is matched when a learner skill contains it or is
   contained in it (case-insensitive)
3. Learner level = highest NSQF level across the learner's credentials (0 if none)
4. score = round(skill% * 0.7 + (30 if level >= job minimum else 0))
5. Scores below 40 are dropped, the rest sorted best first

Also hosts the level-driven learner guidance (NSQF pathway, next credential
suggestions) and market skill trends, which read the same collections.
"""

import logging
from collections import Counter, defaultdict
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional

from bson import ObjectId

from credhub.core.catalog import (
    CREDENTIAL_RECOMMENDATIONS,
    DECLINING_SKILLS,
    EMERGING_SKILLS,
    NSQF_PATHWAY,
)
from credhub.db.mongodb import get_collection, COLLECTIONS
from credhub.services.ai_service import AIService, get_ai_service
from credhub.utils.skills import has_skill, round_half_up, skill_names

logger = logging.getLogger(__name__)

MIN_MATCH_SCORE = 40
MAX_JOB_MATCHES = 20
SKILL_WEIGHT = 0.7
NSQF_BONUS = 30
MAX_CREDENTIAL_RECOMMENDATIONS = 10
MAX_TRENDING_SKILLS = 20
PATHWAY_ROLE = "Software Developer"


# ============================================================
# PURE SCORING
# ============================================================

@dataclass
class MatchResult:
    score: int
    matched_skills: int
    total_required_skills: int
    skill_match_percentage: float
    nsqf_match: bool
    nsqf_level: int
    missing_skills: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def compute_match(
    learner_skills: Iterable[str],
    required_skills: Iterable[str],
    learner_level: int = 0,
    min_nsqf_level: Optional[int] = None,
) -> MatchResult:
    """
    Score one learner against one job.

    A job that requires no skills is a full skill match (100%).
    """
    learner = skill_names(learner_skills)
    required = skill_names(required_skills)

    missing = [skill for skill in required if not has_skill(learner, skill)]
    matched = len(required) - len(missing)
    percentage = matched / len(required) * 100 if required else 100.0

    nsqf_match = learner_level >= (min_nsqf_level or 0)
    score = round_half_up(percentage * SKILL_WEIGHT + (NSQF_BONUS if nsqf_match else 0))

    return MatchResult(
        score=score,
        matched_skills=matched,
        total_required_skills=len(required),
        skill_match_percentage=round(percentage, 2),
        nsqf_match=nsqf_match,
        nsqf_level=learner_level,
        missing_skills=missing,
    )


def max_nsqf_level(credentials: Iterable[dict]) -> int:
    """Highest NSQF level across credentials; 0 when there are none."""
    return max((c.get("nsqf_level") or 0 for c in credentials), default=0)


def learner_skill_set(learner: dict, credentials: Iterable[dict]) -> List[str]:
    """Profile skill names plus skills of verified credentials, de-duplicated."""
    names = skill_names(learner.get("profile", {}).get("skills", []))
    for credential in credentials:
        if credential.get("verification_status") == "verified":
            names.extend(skill_names(credential.get("skills") or []))
    return list(dict.fromkeys(names))


def _job_required_names(job: dict) -> List[str]:
    return [s["name"] for s in job.get("required_skills") or [] if s.get("name")]


# ============================================================
# MATCHING SERVICE
# ============================================================

class MatchingService:
    """
    Ranks learners for a job and jobs for a learner.
    """

    def __init__(self, ai_service: AIService = None):
        self.users = get_collection(COLLECTIONS["users"])
        self.credentials = get_collection(COLLECTIONS["credentials"])
        self.jobs = get_collection(COLLECTIONS["jobs"])
        self._ai_service = ai_service

    @property
    def ai_service(self) -> AIService:
        if self._ai_service is None:
            self._ai_service = get_ai_service()
        return self._ai_service

    def _credentials_by_learner(self, learner_ids: List[ObjectId]) -> Dict[ObjectId, List[dict]]:
        grouped = defaultdict(list)
        cursor = self.credentials.find(
            {"learner_id": {"$in": learner_ids}},
            {"learner_id": 1, "nsqf_level": 1, "skills": 1, "verification_status": 1},
        )
        for credential in cursor:
            grouped[credential["learner_id"]].append(credential)
        return grouped

    def learner_credentials(self, learner_id: ObjectId) -> List[dict]:
        return list(self.credentials.find({"learner_id": learner_id}))

    def match_learners_to_job(self, job: dict) -> List[dict]:
        """
        Top 20 active learners for a job, best first.
        """
        learners = list(self.users.find({"role": "learner", "is_active": True}))
        credentials = self._credentials_by_learner([l["_id"] for l in learners])
        required = _job_required_names(job)

        matches = []
        for learner in learners:
            creds = credentials.get(learner["_id"], [])
            result = compute_match(
                learner_skill_set(learner, creds),
                required,
                max_nsqf_level(creds),
                job.get("min_nsqf_level"),
            )
            if result.score < MIN_MATCH_SCORE:
                continue
            profile = learner.get("profile", {})
            matches.append({
                "learner": {
                    "_id": str(learner["_id"]),
                    "first_name": profile.get("first_name"),
                    "last_name": profile.get("last_name"),
                    "email": learner.get("email"),
                    "skills": profile.get("skills", []),
                    "education": profile.get("education", []),
                },
                "match_score": result.score,
                **{k: v for k, v in result.to_dict().items() if k != "score"},
            })

        matches.sort(key=lambda m: m["match_score"], reverse=True)
        logger.info("Job %s matched %d learners", job.get("_id"), len(matches))
        return matches[:MAX_JOB_MATCHES]

    def match_learner_to_jobs(self, learner: dict) -> List[dict]:
        """
        Every active job the learner scores at least 40 on, best first.
        """
        creds = self.learner_credentials(learner["_id"])
        skills = learner_skill_set(learner, creds)
        level = max_nsqf_level(creds)

        jobs = list(self.jobs.find({"status": "active"}))
        employer_ids = list({j["employer_id"] for j in jobs})
        companies = {
            u["_id"]: u.get("profile", {}).get("company_name")
            for u in self.users.find({"_id": {"$in": employer_ids}}, {"profile.company_name": 1})
        }

        matches = []
        for job in jobs:
            result = compute_match(skills, _job_required_names(job), level, job.get("min_nsqf_level"))
            if result.score < MIN_MATCH_SCORE:
                continue
            matches.append({
                "job": {
                    "_id": str(job["_id"]),
                    "title": job.get("title"),
                    "company": companies.get(job["employer_id"]),
                    "location": job.get("location"),
                    "employment_type": job.get("employment_type"),
                    "required_skills": job.get("required_skills") or [],
                },
                "match_score": result.score,
                **{k: v for k, v in result.to_dict().items() if k != "score"},
            })

        matches.sort(key=lambda m: m["match_score"], reverse=True)
        return matches

    # ============================================================
    # LEARNER GUIDANCE
    # ============================================================

    def nsqf_pathway(self, learner: dict) -> dict:
        """Current level, the next step and generic skill advice."""
        level = max_nsqf_level(self.learner_credentials(learner["_id"]))
        recommendations = []
        if level < 10:
            step = NSQF_PATHWAY[level]
            recommendations.append({"level": level + 1, **step})

        profile_skills = [s["name"] for s in learner.get("profile", {}).get("skills", [])]
        gap = self.ai_service.analyze_skill_gap(profile_skills, PATHWAY_ROLE)

        return {
            "current_level": level,
            "next_level": min(level + 1, 10),
            "recommendations": recommendations,
            "skill_recommendations": gap["recommendations"],
        }

    def recommend_next_credentials(self, learner: dict) -> dict:
        """
        Credentials worth earning next, from skill areas and current level.
        """
        level = max_nsqf_level(self.learner_credentials(learner["_id"]))
        skills = skill_names(learner.get("profile", {}).get("skills", []))

        recommendations = []
        for category, titles in CREDENTIAL_RECOMMENDATIONS.items():
            first_word = category.split(" ")[0]
            if any(skill in category or first_word in skill for skill in skills):
                recommendations.extend(
                    {
                        "title": title,
                        "category": category,
                        "estimated_level": level + 1,
                        "reason": f"Based on your {category} skills",
                    }
                    for title in titles
                )

        if level < 5:
            recommendations.append({
                "title": "Professional Diploma in Your Field",
                "category": "general",
                "estimated_level": 5,
                "reason": "Progress to diploma level",
            })
        elif level < 7:
            recommendations.append({
                "title": "Bachelor Degree Program",
                "category": "general",
                "estimated_level": 7,
                "reason": "Advance to degree level",
            })

        recommendations = recommendations[:MAX_CREDENTIAL_RECOMMENDATIONS]
        return {
            "current_level": level,
            "count": len(recommendations),
            "recommendations": recommendations,
        }

    def skill_trends(self) -> dict:
        """Required-skill demand across active jobs plus static outlook."""
        counts = Counter()
        for job in self.jobs.find({"status": "active"}, {"required_skills": 1}):
            for skill in job.get("required_skills") or []:
                if skill.get("name"):
                    counts[skill["name"].lower()] += 1

        top = [
            {"skill": name, "demand": count, "trend": "rising"}
            for name, count in counts.most_common(MAX_TRENDING_SKILLS)
        ]
        return {
            "top_skills": top,
            "emerging_skills": EMERGING_SKILLS,
            "declining_skills": DECLINING_SKILLS,
        }


def get_matching_service() -> MatchingService:
    return MatchingService()
