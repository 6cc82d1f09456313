"""
Portfolio Routes

Learner (authenticated):
POST /learners/portfolio/create - Create or update portfolio settings
GET /learners/portfolio - Get my portfolio
POST /learners/portfolio/share - Issue a new share link
POST /learners/portfolio/unshare - Revoke the share link
DELETE /learners/portfolio - Delete portfolio
GET /learners/analytics/views - View statistics

Public:
GET /portfolio/{token} - View a shared portfolio
"""

from fastapi import APIRouter, HTTPException, Depends, Request

from credhub.core.auth import get_current_learner
from credhub.services.mongo_service import serialize_doc, to_mongo
from credhub.services.portfolio_service import PortfolioService
from credhub.schemas.schemas import MessageResponse, PortfolioCreate

router = APIRouter(prefix="/learners", tags=["Portfolio"])
public_router = APIRouter(prefix="/portfolio", tags=["Portfolio"])


@router.post("/portfolio/create")
async def create_portfolio(data: PortfolioCreate, learner: dict = Depends(get_current_learner)):
    """Create my portfolio, or merge new settings into the existing one."""
    payload = to_mongo(data.model_dump())
    portfolio = PortfolioService().create_or_update(
        learner["_id"],
        theme=payload["theme"],
        sections=payload["sections"],
        customization=payload["customization"],
    )
    return serialize_doc(portfolio)


@router.get("/portfolio")
async def get_portfolio(learner: dict = Depends(get_current_learner)):
    portfolio = PortfolioService().get(learner["_id"])
    if not portfolio:
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return serialize_doc(portfolio)


@router.post("/portfolio/share")
async def share_portfolio(learner: dict = Depends(get_current_learner)):
    """Issue a new share token; the previous link stops working."""
    service = PortfolioService()
    portfolio = service.share(learner["_id"])
    if not portfolio:
        raise HTTPException(status_code=404, detail="Portfolio not found. Please create one first.")
    token = portfolio["share_token"]
    return {
        "share_token": token,
        "share_url": service.share_url(token),
        "portfolio": serialize_doc(portfolio),
    }


@router.post("/portfolio/unshare")
async def unshare_portfolio(learner: dict = Depends(get_current_learner)):
    portfolio = PortfolioService().unshare(learner["_id"])
    if not portfolio:
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return {"message": "Portfolio unshared successfully", "portfolio": serialize_doc(portfolio)}


@router.delete("/portfolio", response_model=MessageResponse)
async def delete_portfolio(learner: dict = Depends(get_current_learner)):
    if not PortfolioService().delete(learner["_id"]):
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return MessageResponse(message="Portfolio deleted successfully")


@router.get("/analytics/views")
async def portfolio_analytics(learner: dict = Depends(get_current_learner)):
    """Total views, views in the last 30 days and share state."""
    analytics = PortfolioService().analytics(learner["_id"])
    if analytics is None:
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return analytics


@public_router.get("/{token}")
async def view_portfolio(token: str, request: Request):
    """View a shared portfolio. Every successful view is counted."""
    data = PortfolioService().view_by_token(
        token,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    if data is None:
        raise HTTPException(status_code=404, detail="Portfolio not found or not public")
    return serialize_doc(data)
