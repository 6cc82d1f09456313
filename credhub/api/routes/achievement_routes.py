"""
Achievement Routes (learner only)

POST /learners/achievements - Add achievement
GET /learners/achievements - List my achievements (paginated, newest first)
GET /learners/achievements/{id} - Get one
PUT /learners/achievements/{id} - Update
DELETE /learners/achievements/{id} - Delete
"""

from fastapi import APIRouter, HTTPException, Depends, Query

from credhub.core.auth import get_current_learner, to_object_id
from credhub.services.mongo_service import (
    AchievementService,
    serialize_doc,
    serialize_docs,
    to_mongo,
    total_pages,
)
from credhub.schemas.schemas import (
    AchievementCreate, AchievementUpdate, MessageResponse, PaginatedResponse
)

router = APIRouter(prefix="/learners/achievements", tags=["Achievements"])


@router.post("", status_code=201)
async def add_achievement(data: AchievementCreate, learner: dict = Depends(get_current_learner)):
    achievement = AchievementService().create(learner["_id"], to_mongo(data.model_dump()))
    return serialize_doc(achievement)


@router.get("", response_model=PaginatedResponse)
async def list_achievements(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    learner: dict = Depends(get_current_learner),
):
    items, total = AchievementService().list(learner["_id"], page, limit)
    return PaginatedResponse(
        items=serialize_docs(items), total=total, page=page, pages=total_pages(total, limit)
    )


@router.get("/{achievement_id}")
async def get_achievement(achievement_id: str, learner: dict = Depends(get_current_learner)):
    achievement = AchievementService().get(to_object_id(achievement_id, "Achievement"), learner["_id"])
    if not achievement:
        raise HTTPException(status_code=404, detail="Achievement not found")
    return serialize_doc(achievement)


@router.put("/{achievement_id}")
async def update_achievement(
    achievement_id: str,
    data: AchievementUpdate,
    learner: dict = Depends(get_current_learner),
):
    achievement = AchievementService().update(
        to_object_id(achievement_id, "Achievement"),
        learner["_id"],
        to_mongo(data.model_dump(exclude_none=True)),
    )
    if not achievement:
        raise HTTPException(status_code=404, detail="Achievement not found")
    return serialize_doc(achievement)


@router.delete("/{achievement_id}", response_model=MessageResponse)
async def delete_achievement(achievement_id: str, learner: dict = Depends(get_current_learner)):
    if not AchievementService().delete(to_object_id(achievement_id, "Achievement"), learner["_id"]):
        raise HTTPException(status_code=404, detail="Achievement not found")
    return MessageResponse(message="Achievement deleted successfully")
