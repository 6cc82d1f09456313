"""
AI Routes

Authenticated:
POST /ai/extract-skills - Skills mentioned in a text
POST /ai/predict-nsqf - NSQF level for a credential description
POST /ai/career-recommendations - Career paths for a skill list
POST /ai/skill-gap - Skill gap against a target role
POST /ai/chat - Free-form career assistant

Learner only:
GET /ai/pathway/nsqf - Current NSQF level and next step
POST /ai/pathway/recommend - Credentials to earn next
POST /ai/job-match - Active jobs ranked for me

Public:
GET /ai/trends/skills - Skill demand across active jobs

Each AI answer says where it came from: "ai" when the model answered,
"fallback" when the rule-based heuristic did.

Handlers that call the model are plain def so FastAPI runs them in its
threadpool; a slow model never holds up the event loop.
"""

import logging

from fastapi import APIRouter, HTTPException, Depends

from credhub.core.auth import get_current_learner, get_current_user
from credhub.services.ai_service import get_ai_service
from credhub.services.hf_client import AIServiceError
from credhub.services.matching_service import get_matching_service
from credhub.schemas.schemas import (
    CareerRecommendationRequest, ChatRequest, ExtractSkillsRequest,
    PredictNSQFRequest, SkillGapRequest
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])


@router.post("/extract-skills")
def extract_skills(request: ExtractSkillsRequest, user: dict = Depends(get_current_user)):
    result = get_ai_service().extract_skills(request.text)
    return {"skills": result.value, "count": len(result.value), "source": result.source.value}


@router.post("/predict-nsqf")
def predict_nsqf(request: PredictNSQFRequest, user: dict = Depends(get_current_user)):
    result = get_ai_service().predict_nsqf_level(request.model_dump())
    return {"nsqf_level": result.value, "source": result.source.value}


@router.post("/career-recommendations")
def career_recommendations(
    request: CareerRecommendationRequest,
    user: dict = Depends(get_current_user),
):
    result = get_ai_service().career_recommendations(request.skills)
    return {"recommendations": result.value, "source": result.source.value}


@router.post("/skill-gap")
def skill_gap(request: SkillGapRequest, user: dict = Depends(get_current_user)):
    """Uses the caller's profile skills when current_skills is omitted."""
    skills = request.current_skills
    if skills is None:
        skills = [s.get("name") for s in user.get("profile", {}).get("skills", [])]
    return get_ai_service().analyze_skill_gap(skills, request.target_role)


@router.post("/chat")
def chat(request: ChatRequest, user: dict = Depends(get_current_user)):
    """Career assistant. There is no offline answer, so an unavailable model is a 503."""
    try:
        reply = get_ai_service().chat(request.message, request.context)
    except AIServiceError as e:
        logger.warning("Chat unavailable: %s", e)
        raise HTTPException(status_code=503, detail="AI assistant is currently unavailable")
    return {"reply": reply}


@router.get("/pathway/nsqf")
def nsqf_pathway(learner: dict = Depends(get_current_learner)):
    return get_matching_service().nsqf_pathway(learner)


@router.post("/pathway/recommend")
async def recommend_credentials(learner: dict = Depends(get_current_learner)):
    return get_matching_service().recommend_next_credentials(learner)


@router.post("/job-match")
async def job_match(learner: dict = Depends(get_current_learner)):
    matches = get_matching_service().match_learner_to_jobs(learner)
    return {"count": len(matches), "data": matches}


@router.get("/trends/skills")
async def skill_trends():
    return get_matching_service().skill_trends()
