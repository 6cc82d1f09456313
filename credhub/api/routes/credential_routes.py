"""
Credential Routes

GET /credentials - List credentials visible to the caller
POST /credentials - Issue a credential with its file (institution)
GET /credentials/{id} - Get one credential (counts a view)
PUT /credentials/{id} - Update credential metadata (issuing institution or admin)
DELETE /credentials/{id} - Delete credential and its file (issuing institution or admin)
PUT /credentials/{id}/verify - Change verification status (issuing institution or admin)
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from pymongo.errors import DuplicateKeyError

from credhub.core.auth import (
    get_current_institution,
    get_current_user,
    require_roles,
    to_object_id,
)
from credhub.services.ai_service import get_ai_service
from credhub.services.mongo_service import (
    CredentialService,
    InstitutionService,
    InvalidTransitionError,
    UserService,
    serialize_doc,
    serialize_docs,
    to_mongo,
)
from credhub.services.storage_service import get_storage
from credhub.utils.file_upload import CREDENTIAL_EXTENSIONS, extract_pdf_text, read_upload
from credhub.schemas.schemas import (
    CredentialCategory, CredentialType, CredentialUpdate, MessageResponse,
    VerifyCredentialRequest
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/credentials", tags=["Credentials"])

get_issuer_or_admin = require_roles("institution", "admin")


def _check_issuer(credential: dict, user: dict, action: str) -> None:
    """Only the issuing institution's staff or an admin may change a credential."""
    if user["role"] == "admin":
        return
    if not user.get("tenant_id") or credential.get("institution_id") != user["tenant_id"]:
        raise HTTPException(status_code=403, detail=f"Not authorized to {action} this credential")


def _can_view(credential: dict, user: dict) -> bool:
    role = user["role"]
    if role == "admin":
        return True
    if role == "learner":
        return credential.get("learner_id") == user["_id"]
    if role == "institution":
        return credential.get("institution_id") == user.get("tenant_id")
    return credential.get("is_public", True)


@router.get("")
async def list_credentials(user: dict = Depends(get_current_user)):
    """
    Learners see their own credentials, institution staff the ones their
    institution issued, employers public ones, admins everything.
    """
    role = user["role"]
    if role == "learner":
        query = {"learner_id": user["_id"]}
    elif role == "institution":
        query = {"institution_id": user.get("tenant_id")}
    elif role == "employer":
        query = {"is_public": True}
    else:
        query = {}

    service = CredentialService()
    credentials = service.attach_references(service.list(query))
    return {"count": len(credentials), "data": serialize_docs(credentials)}


@router.post("", status_code=201)
async def create_credential(
    learner_id: str = Form(...),
    title: str = Form(..., min_length=1, max_length=300),
    credential_number: str = Form(..., min_length=1),
    issue_date: datetime = Form(...),
    type: CredentialType = Form(...),
    category: CredentialCategory = Form(CredentialCategory.other),
    description: Optional[str] = Form(None),
    expiry_date: Optional[datetime] = Form(None),
    nsqf_level: Optional[int] = Form(None, ge=1, le=10),
    file: UploadFile = File(...),
    user: dict = Depends(get_current_institution),
):
    """
    Issue a credential to a learner.

    The uploaded file (PDF, JPG, PNG) is stored and its SHA-256 kept as the
    integrity hash. Skills are extracted from title, description and any PDF
    text; the NSQF level is predicted unless one is given.
    """
    institution_id = user.get("tenant_id")
    if not institution_id:
        raise HTTPException(status_code=403, detail="Account is not linked to an institution")

    learner = UserService().get_learner(to_object_id(learner_id, "Learner"))
    if not learner:
        raise HTTPException(status_code=404, detail="Learner not found")

    upload = await read_upload(file, CREDENTIAL_EXTENSIONS)

    analysis_text = description or ""
    if upload.extension == ".pdf":
        pdf_text = await run_in_threadpool(extract_pdf_text, upload.content)
        if pdf_text:
            analysis_text = f"{analysis_text}\n{pdf_text}".strip()

    ai_service = get_ai_service()
    # Model calls block; keep them off the event loop
    analysis = await run_in_threadpool(ai_service.analyze_credential, {
        "title": title,
        "description": analysis_text,
        "type": type.value,
    })
    level_source = "provided"
    if nsqf_level is None:
        nsqf_level = analysis["nsqf_level"].value
        level_source = analysis["nsqf_level"].source.value

    stored = get_storage().save(upload.content, upload.original_name, folder="credentials")

    try:
        credential = CredentialService().create({
            "learner_id": learner["_id"],
            "institution_id": institution_id,
            "title": title,
            "description": description,
            "type": type.value,
            "category": category.value,
            "issue_date": issue_date,
            "expiry_date": expiry_date,
            "credential_number": credential_number,
            "skills": analysis["skills"].value,
            "nsqf_level": nsqf_level,
            "file": {
                "filename": stored.filename,
                "original_name": upload.original_name,
                "url": stored.url,
                "storage_id": stored.storage_id,
                "mimetype": upload.mimetype,
                "size": upload.size,
                "hash": upload.sha256,
            },
            "metadata": {
                "skills_source": analysis["skills"].source.value,
                "nsqf_level_source": level_source,
            },
        })
    except DuplicateKeyError:
        get_storage().delete(stored.storage_id)
        raise HTTPException(status_code=400, detail="Credential number already exists")

    InstitutionService().increment_issued(institution_id)
    logger.info("Issued credential %s to learner %s", credential_number, learner["_id"])
    return serialize_doc(credential)


@router.get("/{credential_id}")
async def get_credential(credential_id: str, user: dict = Depends(get_current_user)):
    service = CredentialService()
    oid = to_object_id(credential_id, "Credential")
    credential = service.get_by_id(oid)
    if not credential:
        raise HTTPException(status_code=404, detail="Credential not found")
    if not _can_view(credential, user):
        raise HTTPException(status_code=403, detail="Not authorized to view this credential")

    credential = service.record_view(oid)
    return serialize_doc(service.attach_references([credential])[0])


@router.put("/{credential_id}")
async def update_credential(
    credential_id: str,
    data: CredentialUpdate,
    user: dict = Depends(get_issuer_or_admin),
):
    service = CredentialService()
    oid = to_object_id(credential_id, "Credential")
    credential = service.get_by_id(oid)
    if not credential:
        raise HTTPException(status_code=404, detail="Credential not found")
    _check_issuer(credential, user, "update")

    updates = to_mongo(data.model_dump(exclude_none=True))
    if not updates:
        return serialize_doc(credential)
    return serialize_doc(service.update(oid, updates))


@router.put("/{credential_id}/verify")
async def verify_credential(
    credential_id: str,
    request: VerifyCredentialRequest,
    user: dict = Depends(get_issuer_or_admin),
):
    """
    Move a credential to verified, rejected or expired.
    Only pending credentials can be verified or rejected; any can expire.
    """
    service = CredentialService()
    oid = to_object_id(credential_id, "Credential")
    credential = service.get_by_id(oid)
    if not credential:
        raise HTTPException(status_code=404, detail="Credential not found")
    _check_issuer(credential, user, "verify")

    try:
        updated = service.set_status(oid, request.status.value, user["_id"])
    except InvalidTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="Credential not found")

    logger.info("Credential %s is now %s", credential_id, request.status.value)
    return serialize_doc(updated)


@router.delete("/{credential_id}", response_model=MessageResponse)
async def delete_credential(credential_id: str, user: dict = Depends(get_issuer_or_admin)):
    service = CredentialService()
    oid = to_object_id(credential_id, "Credential")
    credential = service.get_by_id(oid)
    if not credential:
        raise HTTPException(status_code=404, detail="Credential not found")
    _check_issuer(credential, user, "delete")

    storage_id = (credential.get("file") or {}).get("storage_id")
    if storage_id:
        get_storage().delete(storage_id)
    service.delete(oid)
    return MessageResponse(message="Credential deleted successfully")
