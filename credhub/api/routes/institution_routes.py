"""
Institution Routes

GET /institutions - List institutions (public, filterable, paginated)
GET /institutions/{id} - Get institution (public)
POST /institutions - Create institution (admin)
PUT /institutions/{id} - Update institution (own institution staff or admin)
DELETE /institutions/{id} - Delete institution (admin)
GET /institutions/{id}/stats - Credential statistics (own institution staff or admin)
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from pymongo.errors import DuplicateKeyError

from credhub.core.auth import get_current_admin, require_roles, to_object_id
from credhub.services.mongo_service import (
    CredentialService,
    InstitutionService,
    serialize_doc,
    serialize_docs,
    to_mongo,
    total_pages,
)
from credhub.schemas.schemas import (
    InstitutionCreate, InstitutionType, InstitutionUpdate, MessageResponse,
    PaginatedResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/institutions", tags=["Institutions"])

get_staff_or_admin = require_roles("institution", "admin")


def _check_own_institution(institution_id, user: dict) -> None:
    if user["role"] != "admin" and user.get("tenant_id") != institution_id:
        raise HTTPException(status_code=403, detail="Not authorized for this institution")


@router.get("", response_model=PaginatedResponse)
async def list_institutions(
    type: Optional[InstitutionType] = None,
    is_verified: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    items, total = InstitutionService().list(
        type=type.value if type else None,
        is_verified=is_verified,
        is_active=True,
        page=page,
        limit=limit,
    )
    return PaginatedResponse(
        items=serialize_docs(items), total=total, page=page, pages=total_pages(total, limit)
    )


@router.get("/{institution_id}")
async def get_institution(institution_id: str):
    institution = InstitutionService().get_by_id(to_object_id(institution_id, "Institution"))
    if not institution:
        raise HTTPException(status_code=404, detail="Institution not found")
    return serialize_doc(institution)


@router.post("", status_code=201)
async def create_institution(data: InstitutionCreate, admin: dict = Depends(get_current_admin)):
    service = InstitutionService()
    try:
        institution_id = service.create(to_mongo(data.model_dump()))
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Institution already registered")
    logger.info("Admin %s created institution %s", admin["_id"], institution_id)
    return serialize_doc(service.get_by_id(institution_id))


@router.put("/{institution_id}")
async def update_institution(
    institution_id: str,
    data: InstitutionUpdate,
    user: dict = Depends(get_staff_or_admin),
):
    oid = to_object_id(institution_id, "Institution")
    _check_own_institution(oid, user)

    service = InstitutionService()
    updates = to_mongo(data.model_dump(exclude_none=True))
    try:
        institution = service.update(oid, updates) if updates else service.get_by_id(oid)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Institution name already in use")
    if not institution:
        raise HTTPException(status_code=404, detail="Institution not found")
    return serialize_doc(institution)


@router.delete("/{institution_id}", response_model=MessageResponse)
async def delete_institution(institution_id: str, admin: dict = Depends(get_current_admin)):
    if not InstitutionService().delete(to_object_id(institution_id, "Institution")):
        raise HTTPException(status_code=404, detail="Institution not found")
    logger.info("Admin %s deleted institution %s", admin["_id"], institution_id)
    return MessageResponse(message="Institution deleted successfully")


@router.get("/{institution_id}/stats")
async def get_institution_stats(institution_id: str, user: dict = Depends(get_staff_or_admin)):
    oid = to_object_id(institution_id, "Institution")
    _check_own_institution(oid, user)
    if not InstitutionService().get_by_id(oid):
        raise HTTPException(status_code=404, detail="Institution not found")

    credentials = CredentialService()
    return {
        "total_credentials": credentials.count({"institution_id": oid}),
        "verified_credentials": credentials.count({"institution_id": oid, "verification_status": "verified"}),
        "pending_credentials": credentials.count({"institution_id": oid, "verification_status": "pending"}),
        "credentials_by_type": credentials.count_by_type({"institution_id": oid}),
    }
