"""
Learner Routes

GET /learners/profile - Get own profile with credentials
PUT /learners/profile - Update profile
DELETE /learners/profile - Delete account and all learner data
POST /learners/education - Add education entry
POST /learners/skills - Add skill
GET /learners/credentials - Get my credentials
GET /learners/career-recommendations - Career paths for my skills
POST /learners/skill-gap - Skill gap against a target role
POST /learners/jobs/{job_id}/apply - Apply to an active job
"""

import logging

from fastapi import APIRouter, HTTPException, Depends

from credhub.core.auth import get_current_learner, to_object_id
from credhub.services.ai_service import get_ai_service
from credhub.services.matching_service import (
    compute_match,
    learner_skill_set,
    max_nsqf_level,
)
from credhub.services.mongo_service import (
    AchievementService,
    CredentialService,
    JobService,
    UserService,
    serialize_doc,
    serialize_docs,
    to_mongo,
)
from credhub.services.portfolio_service import PortfolioService
from credhub.services.storage_service import get_storage
from credhub.schemas.schemas import (
    Education, JobApplyRequest, LearnerProfileUpdate, LearnerSkill,
    MessageResponse, SkillGapRequest
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/learners", tags=["Learners"])


@router.get("/profile")
async def get_profile(learner: dict = Depends(get_current_learner)):
    """Get own profile with issued credentials."""
    data = serialize_doc(learner)
    credential_service = CredentialService()
    data["credentials"] = serialize_docs(
        credential_service.attach_references(credential_service.for_learner(learner["_id"]))
    )
    return data


@router.put("/profile")
async def update_profile(data: LearnerProfileUpdate, learner: dict = Depends(get_current_learner)):
    """Update profile fields. Only fields present in the body change."""
    updates = to_mongo(data.model_dump(exclude_none=True))
    user = UserService().update_profile(learner["_id"], updates)
    return serialize_doc(user)


@router.delete("/profile", response_model=MessageResponse)
async def delete_account(learner: dict = Depends(get_current_learner)):
    """
    Delete the learner account with credentials, stored files,
    portfolio and achievements.
    """
    learner_id = learner["_id"]
    credential_service = CredentialService()
    storage = get_storage()

    for credential in credential_service.for_learner(learner_id):
        storage_id = (credential.get("file") or {}).get("storage_id")
        if storage_id:
            storage.delete(storage_id)
        credential_service.delete(credential["_id"])

    PortfolioService().delete(learner_id)
    AchievementService().delete_for_learner(learner_id)
    UserService().delete(learner_id)

    logger.info("Deleted learner account %s", learner_id)
    return MessageResponse(message="Learner account and related data deleted successfully")


@router.post("/education")
async def add_education(entry: Education, learner: dict = Depends(get_current_learner)):
    """Append an education entry."""
    user = UserService().push_profile_item(learner["_id"], "education", to_mongo(entry.model_dump()))
    return serialize_doc(user)


@router.post("/skills")
async def add_skill(skill: LearnerSkill, learner: dict = Depends(get_current_learner)):
    """Add a skill; a skill already on the profile (any case) is rejected."""
    existing = {s.get("name", "").lower() for s in learner.get("profile", {}).get("skills", [])}
    if skill.name.lower() in existing:
        raise HTTPException(status_code=400, detail="Skill already added")
    user = UserService().push_profile_item(learner["_id"], "skills", to_mongo(skill.model_dump()))
    return serialize_doc(user)


@router.get("/credentials")
async def get_credentials(learner: dict = Depends(get_current_learner)):
    """Get my credentials, newest issue date first."""
    credential_service = CredentialService()
    credentials = credential_service.attach_references(credential_service.for_learner(learner["_id"]))
    return {"count": len(credentials), "data": serialize_docs(credentials)}


@router.get("/career-recommendations")
def get_career_recommendations(learner: dict = Depends(get_current_learner)):
    """Career paths matching the skills on my profile."""
    profile = learner.get("profile", {})
    result = get_ai_service().career_recommendations(
        profile.get("skills", []), profile.get("education", [])
    )
    return {"recommendations": result.value, "source": result.source.value}


@router.post("/skill-gap")
def get_skill_gap(request: SkillGapRequest, learner: dict = Depends(get_current_learner)):
    """Compare my skills (or the ones given) with a target role."""
    skills = request.current_skills
    if skills is None:
        skills = [s["name"] for s in learner.get("profile", {}).get("skills", [])]
    return get_ai_service().analyze_skill_gap(skills, request.target_role)


@router.post("/jobs/{job_id}/apply", response_model=MessageResponse)
async def apply_to_job(
    job_id: str,
    request: JobApplyRequest = None,
    learner: dict = Depends(get_current_learner),
):
    """Apply to an active job. The match score is recorded with the application."""
    job_service = JobService()
    job = job_service.get_by_id(to_object_id(job_id, "Job"))
    if not job or job.get("status") != "active":
        raise HTTPException(status_code=404, detail="Job not found")

    credentials = CredentialService().for_learner(learner["_id"])
    match = compute_match(
        learner_skill_set(learner, credentials),
        [s["name"] for s in job.get("required_skills") or []],
        max_nsqf_level(credentials),
        job.get("min_nsqf_level"),
    )

    cover_letter = request.cover_letter if request else None
    if not job_service.apply(job["_id"], learner["_id"], match.score, cover_letter):
        raise HTTPException(status_code=400, detail="Already applied to this job")

    return MessageResponse(message="Application submitted successfully")
