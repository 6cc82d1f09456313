"""
Admin Routes (admin only)

GET /admin/stats - Platform statistics
GET /admin/users - List users (filter by role / active)
PUT /admin/users/{id}/status - Activate or deactivate a user
DELETE /admin/users/{id} - Delete a user
PUT /admin/institutions/{id}/verify - Verify or (de)activate an institution
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from credhub.core.auth import get_current_admin, to_object_id
from credhub.services.mongo_service import (
    CredentialService,
    InstitutionService,
    UserService,
    serialize_doc,
    serialize_docs,
    total_pages,
)
from credhub.schemas.schemas import (
    InstitutionVerifyRequest, MessageResponse, PaginatedResponse, UserRole,
    UserStatusUpdate
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/stats")
async def platform_stats(admin: dict = Depends(get_current_admin)):
    users = UserService()
    credentials = CredentialService()
    return {
        "users": {
            "total": users.count(),
            "learners": users.count("learner"),
            "employers": users.count("employer"),
            "institution_staff": users.count("institution"),
        },
        "institutions": InstitutionService().count(),
        "credentials": {
            "total": credentials.count(),
            "verified": credentials.count({"verification_status": "verified"}),
            "pending": credentials.count({"verification_status": "pending"}),
            "by_type": credentials.count_by_type(),
            "by_month": credentials.count_by_month(),
        },
    }


@router.get("/users", response_model=PaginatedResponse)
async def list_users(
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: dict = Depends(get_current_admin),
):
    items, total = UserService().list(role.value if role else None, is_active, page, limit)
    return PaginatedResponse(
        items=serialize_docs(items), total=total, page=page, pages=total_pages(total, limit)
    )


@router.put("/users/{user_id}/status")
async def update_user_status(
    user_id: str,
    request: UserStatusUpdate,
    admin: dict = Depends(get_current_admin),
):
    oid = to_object_id(user_id, "User")
    if oid == admin["_id"] and not request.is_active:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")

    user = UserService().set_active(oid, request.is_active)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("Admin %s set user %s active=%s", admin["_id"], user_id, request.is_active)
    return serialize_doc(user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, admin: dict = Depends(get_current_admin)):
    oid = to_object_id(user_id, "User")
    if oid == admin["_id"]:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    if not UserService().delete(oid):
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("Admin %s deleted user %s", admin["_id"], user_id)
    return MessageResponse(message="User deleted successfully")


@router.put("/institutions/{institution_id}/verify")
async def verify_institution(
    institution_id: str,
    request: InstitutionVerifyRequest,
    admin: dict = Depends(get_current_admin),
):
    service = InstitutionService()
    oid = to_object_id(institution_id, "Institution")
    updates = request.model_dump(exclude_none=True)
    institution = service.update(oid, updates) if updates else service.get_by_id(oid)
    if not institution:
        raise HTTPException(status_code=404, detail="Institution not found")
    return serialize_doc(institution)
