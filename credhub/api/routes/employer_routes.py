"""
Employer Routes (employer only)

GET /employers/profile - Get company profile
PUT /employers/profile - Update company profile
DELETE /employers/profile - Delete account with jobs and talent pool
POST /employers/verify-credential - Check one credential by number (and file hash)
POST /employers/bulk-verify - Check many credential numbers
GET /employers/search-learners - Find learners by skill

POST /employers/jobs/create - Post a job
GET /employers/jobs - List my jobs
GET /employers/jobs/{id} - Get job
PUT /employers/jobs/{id} - Update job
DELETE /employers/jobs/{id} - Delete job
PUT /employers/jobs/{id}/applicants/{learner_id} - Move an applicant along
GET /employers/matches?job_id= - Best learners for a job

GET /employers/talent-pool - Get my talent pool
POST /employers/talent-pool/add - Add learner to pool
POST /employers/talent-pool/remove - Remove learner from pool
POST /employers/invite/{learner_id} - Invite learner to a job
GET /employers/reports/hires - Hiring analytics
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from credhub.core.auth import get_current_employer, to_object_id
from credhub.services.matching_service import get_matching_service
from credhub.services.mongo_service import (
    CredentialService,
    JobService,
    TalentPoolService,
    UserService,
    serialize_doc,
    serialize_docs,
    to_mongo,
    total_pages,
)
from credhub.schemas.schemas import (
    ApplicantStatusUpdate, BulkVerifyRequest, EmployerProfileUpdate,
    InviteRequest, JobCreate, JobStatus, JobUpdate, MessageResponse,
    PaginatedResponse, TalentPoolAdd, TalentPoolRemove, VerifyCredentialByNumber
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employers", tags=["Employers"])


# ============================================================
# PROFILE
# ============================================================

@router.get("/profile")
async def get_profile(employer: dict = Depends(get_current_employer)):
    return serialize_doc(employer)


@router.put("/profile")
async def update_profile(data: EmployerProfileUpdate, employer: dict = Depends(get_current_employer)):
    updates = to_mongo(data.model_dump(exclude_none=True))
    return serialize_doc(UserService().update_profile(employer["_id"], updates))


@router.delete("/profile", response_model=MessageResponse)
async def delete_account(employer: dict = Depends(get_current_employer)):
    employer_id = employer["_id"]
    jobs_deleted = JobService().delete_for_employer(employer_id)
    TalentPoolService().delete_for_employer(employer_id)
    UserService().delete(employer_id)
    logger.info("Deleted employer %s with %d jobs", employer_id, jobs_deleted)
    return MessageResponse(message="Employer account and related data deleted successfully")


# ============================================================
# CREDENTIAL VERIFICATION
# ============================================================

@router.post("/verify-credential")
async def verify_credential(
    request: VerifyCredentialByNumber,
    employer: dict = Depends(get_current_employer),
):
    """
    Look up a credential by number.

    verified is True when the credential exists; hash_match compares the
    given file hash with the stored one (True when either is missing).
    """
    service = CredentialService()
    credential = service.get_by_number(request.credential_number)
    if not credential:
        return {"verified": False, "message": "Credential not found"}

    stored_hash = (credential.get("file") or {}).get("hash")
    hash_match = True
    if request.file_hash and stored_hash:
        hash_match = request.file_hash.lower() == stored_hash

    UserService().increment_profile_counter(employer["_id"], "credentials_verified")

    return {
        "verified": True,
        "hash_match": hash_match,
        "data": {
            "credential": serialize_doc(service.attach_references([credential])[0]),
            "verification_date": datetime.utcnow(),
        },
    }


@router.post("/bulk-verify")
async def bulk_verify(request: BulkVerifyRequest, employer: dict = Depends(get_current_employer)):
    """Report found/verified per credential number; unknown numbers never fail the batch."""
    if not request.credential_numbers:
        raise HTTPException(status_code=400, detail="Please provide an array of credential numbers")

    service = CredentialService()
    results = []
    for number in request.credential_numbers:
        credential = service.get_by_number(number)
        if credential:
            credential = service.attach_references([credential])[0]
        results.append({
            "credential_number": number,
            "found": credential is not None,
            "verified": bool(credential) and credential.get("verification_status") == "verified",
            "credential": serialize_doc(credential),
        })

    return {
        "total": len(results),
        "verified": sum(1 for r in results if r["verified"]),
        "not_found": sum(1 for r in results if not r["found"]),
        "data": results,
    }


@router.get("/search-learners")
async def search_learners(
    skills: Optional[str] = Query(None, description="Comma separated skill names"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    employer: dict = Depends(get_current_employer),
):
    """Learners having any of the skills, with their public verified credentials."""
    skill_list = [s.strip() for s in skills.split(",") if s.strip()] if skills else []
    learners = UserService().search_learners(skill_list, page, limit)

    credential_service = CredentialService()
    data = []
    for learner in learners:
        item = serialize_doc(learner)
        item["credentials"] = [
            {
                "_id": str(c["_id"]),
                "title": c.get("title"),
                "type": c.get("type"),
                "nsqf_level": c.get("nsqf_level"),
                "issue_date": c.get("issue_date"),
            }
            for c in credential_service.public_verified_for_learner(learner["_id"])
        ]
        data.append(item)

    return {"count": len(data), "data": data}


# ============================================================
# JOBS
# ============================================================

@router.post("/jobs/create", status_code=201)
async def create_job(data: JobCreate, employer: dict = Depends(get_current_employer)):
    job = JobService().create(employer["_id"], to_mongo(data.model_dump()))
    logger.info("Employer %s posted job %s", employer["_id"], job["_id"])
    return serialize_doc(job)


@router.get("/jobs", response_model=PaginatedResponse)
async def list_jobs(
    status: Optional[JobStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    employer: dict = Depends(get_current_employer),
):
    items, total = JobService().list_for_employer(
        employer["_id"], status.value if status else None, page, limit
    )
    return PaginatedResponse(
        items=serialize_docs(items), total=total, page=page, pages=total_pages(total, limit)
    )


@router.get("/jobs/{job_id}")
async def get_job(job_id: str, employer: dict = Depends(get_current_employer)):
    job = JobService().get_for_employer(to_object_id(job_id, "Job"), employer["_id"])
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return serialize_doc(job)


@router.put("/jobs/{job_id}")
async def update_job(job_id: str, data: JobUpdate, employer: dict = Depends(get_current_employer)):
    service = JobService()
    oid = to_object_id(job_id, "Job")
    updates = to_mongo(data.model_dump(exclude_none=True))
    job = service.update(oid, employer["_id"], updates) if updates else service.get_for_employer(oid, employer["_id"])
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return serialize_doc(job)


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: str, employer: dict = Depends(get_current_employer)):
    if not JobService().delete(to_object_id(job_id, "Job"), employer["_id"]):
        raise HTTPException(status_code=404, detail="Job not found")
    return MessageResponse(message="Job deleted successfully")


@router.put("/jobs/{job_id}/applicants/{learner_id}")
async def update_applicant_status(
    job_id: str,
    learner_id: str,
    request: ApplicantStatusUpdate,
    employer: dict = Depends(get_current_employer),
):
    job = JobService().set_applicant_status(
        to_object_id(job_id, "Job"),
        employer["_id"],
        to_object_id(learner_id, "Applicant"),
        request.status.value,
    )
    if not job:
        raise HTTPException(status_code=404, detail="Applicant not found")
    return serialize_doc(job)


@router.get("/matches")
async def get_job_matches(job_id: str, employer: dict = Depends(get_current_employer)):
    """Top 20 learners scoring at least 40 for one of my jobs."""
    job = JobService().get_for_employer(to_object_id(job_id, "Job"), employer["_id"])
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    matches = get_matching_service().match_learners_to_job(job)
    return {"count": len(matches), "data": matches}


# ============================================================
# TALENT POOL
# ============================================================

@router.get("/talent-pool")
async def get_talent_pool(employer: dict = Depends(get_current_employer)):
    service = TalentPoolService()
    pool = service.with_learners(service.get_or_create(employer["_id"]))
    return {"count": len(pool.get("learners", [])), "data": serialize_doc(pool)}


@router.post("/talent-pool/add")
async def add_to_talent_pool(request: TalentPoolAdd, employer: dict = Depends(get_current_employer)):
    learner_id = to_object_id(request.learner_id, "Learner")
    if not UserService().get_learner(learner_id):
        raise HTTPException(status_code=404, detail="Learner not found")

    service = TalentPoolService()
    added = service.add(employer["_id"], learner_id, request.notes, request.tags, request.rating)
    if not added:
        raise HTTPException(status_code=400, detail="Learner already in talent pool")

    return serialize_doc(service.get_or_create(employer["_id"]))


@router.post("/talent-pool/remove")
async def remove_from_talent_pool(request: TalentPoolRemove, employer: dict = Depends(get_current_employer)):
    service = TalentPoolService()
    removed = service.remove(employer["_id"], to_object_id(request.learner_id, "Learner"))
    if removed is None:
        raise HTTPException(status_code=404, detail="Talent pool not found")
    if not removed:
        raise HTTPException(status_code=404, detail="Learner not in talent pool")
    return serialize_doc(service.get_or_create(employer["_id"]))


@router.post("/invite/{learner_id}")
async def invite_learner(
    learner_id: str,
    request: InviteRequest,
    employer: dict = Depends(get_current_employer),
):
    """Record an invitation. Inviting the same learner twice keeps one entry."""
    job_service = JobService()
    job = job_service.get_for_employer(to_object_id(request.job_id, "Job"), employer["_id"])
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    learner = UserService().get_learner(to_object_id(learner_id, "Learner"))
    if not learner:
        raise HTTPException(status_code=404, detail="Learner not found")

    job_service.invite(job["_id"], learner["_id"])

    profile = learner.get("profile", {})
    return {
        "message": "Invitation sent successfully",
        "data": {
            "job": job.get("title"),
            "learner": f"{profile.get('first_name', '')} {profile.get('last_name', '')}".strip(),
        },
    }


@router.get("/reports/hires")
async def hiring_report(employer: dict = Depends(get_current_employer)):
    return JobService().hiring_analytics(employer["_id"])
