"""
Portfolio Service - learner portfolios and public share links.

A portfolio is readable by anyone holding its share token, and only while it
is public. Unsharing removes the token field entirely, so the old link stops
resolving and the sparse unique index on share_token stays valid.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from credhub.core.config import get_settings
from credhub.db.mongodb import get_collection, COLLECTIONS
from credhub.services.mongo_service import AchievementService, CredentialService, UserService

logger = logging.getLogger(__name__)

settings = get_settings()

SHARE_TOKEN_BYTES = 32

DEFAULT_SECTIONS = {
    "show_credentials": True,
    "show_achievements": True,
    "show_skills": True,
    "show_education": True,
    "show_contact": False,
}


def generate_share_token() -> str:
    """64 hex chars from 32 random bytes."""
    return secrets.token_hex(SHARE_TOKEN_BYTES)


class PortfolioService:
    """
    Handles portfolio settings, sharing and public views.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["portfolios"])

    def get(self, learner_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"learner_id": learner_id})

    def create_or_update(
        self,
        learner_id: ObjectId,
        theme: str = None,
        sections: dict = None,
        customization: dict = None,
    ) -> dict:
        """
        Create the learner's portfolio, or merge new settings into it.
        """
        now = datetime.utcnow()
        updates = {"updated_at": now}
        if theme:
            updates["theme"] = theme
        for key, value in (sections or {}).items():
            updates[f"sections.{key}"] = value
        for key, value in (customization or {}).items():
            updates[f"customization.{key}"] = value

        on_insert = {
            "learner_id": learner_id,
            "is_public": False,
            "views": 0,
            "view_history": [],
            "last_shared": None,
            "created_at": now,
        }
        if "theme" not in updates:
            on_insert["theme"] = "default"
        if not sections:
            on_insert["sections"] = dict(DEFAULT_SECTIONS)
        if not customization:
            on_insert["customization"] = {}

        return self.collection.find_one_and_update(
            {"learner_id": learner_id},
            {"$set": updates, "$setOnInsert": on_insert},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    def share(self, learner_id: ObjectId) -> Optional[dict]:
        """
        Issue a fresh share token and make the portfolio public.
        Any previous token stops working. Returns None without a portfolio.
        """
        token = generate_share_token()
        portfolio = self.collection.find_one_and_update(
            {"learner_id": learner_id},
            {"$set": {
                "share_token": token,
                "is_public": True,
                "last_shared": datetime.utcnow(),
            }},
            return_document=ReturnDocument.AFTER,
        )
        if portfolio:
            logger.info("Portfolio shared for learner %s", learner_id)
        return portfolio

    def unshare(self, learner_id: ObjectId) -> Optional[dict]:
        """Revoke the share token and make the portfolio private."""
        return self.collection.find_one_and_update(
            {"learner_id": learner_id},
            {"$set": {"is_public": False}, "$unset": {"share_token": ""}},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, learner_id: ObjectId) -> bool:
        return self.collection.delete_one({"learner_id": learner_id}).deleted_count > 0

    def share_url(self, token: str) -> str:
        return f"{settings.frontend_url.rstrip('/')}/portfolio/{token}"

    def view_by_token(self, token: str, ip_address: str = None, user_agent: str = None) -> Optional[dict]:
        """
        Resolve a share token and record the view.

        Matches only a public portfolio holding exactly this token; the
        counter increment and the history append happen in the same update.
        The history keeps the most recent entries only.

        Returns:
            Public payload (portfolio, learner, credentials, achievements),
            or None when the token does not resolve.
        """
        if not token:
            return None

        entry = {
            "timestamp": datetime.utcnow(),
            "ip_address": ip_address,
            "user_agent": user_agent,
        }
        portfolio = self.collection.find_one_and_update(
            {"share_token": token, "is_public": True},
            {
                "$inc": {"views": 1},
                "$push": {"view_history": {
                    "$each": [entry],
                    "$slice": -settings.portfolio_view_history_limit,
                }},
            },
            return_document=ReturnDocument.AFTER,
        )
        if portfolio is None:
            return None

        learner = UserService().get_learner(portfolio["learner_id"])
        if learner is None:
            logger.warning("Portfolio %s has no learner", portfolio["_id"])
            return None

        sections = {**DEFAULT_SECTIONS, **portfolio.get("sections", {})}
        profile = learner.get("profile", {})
        public_learner = {
            "first_name": profile.get("first_name"),
            "last_name": profile.get("last_name"),
            "bio": profile.get("bio"),
            "linkedin_url": profile.get("linkedin_url"),
            "portfolio_url": profile.get("portfolio_url"),
            "profile_picture": profile.get("profile_picture"),
            "skills": profile.get("skills", []) if sections["show_skills"] else [],
            "education": profile.get("education", []) if sections["show_education"] else [],
        }
        if sections["show_contact"]:
            public_learner["email"] = learner.get("email")
            public_learner["phone"] = profile.get("phone")

        credentials = []
        if sections["show_credentials"]:
            credential_service = CredentialService()
            credentials = credential_service.attach_references(
                credential_service.public_verified_for_learner(learner["_id"])
            )
            for credential in credentials:
                credential.pop("learner", None)

        achievements = []
        if sections["show_achievements"]:
            achievements = AchievementService().public_for_learner(learner["_id"])

        public_portfolio = {
            key: portfolio.get(key)
            for key in ("_id", "theme", "sections", "customization", "views", "last_shared")
        }
        return {
            "portfolio": public_portfolio,
            "learner": public_learner,
            "credentials": credentials,
            "achievements": achievements,
        }

    def analytics(self, learner_id: ObjectId) -> Optional[dict]:
        portfolio = self.get(learner_id)
        if portfolio is None:
            return None
        history = portfolio.get("view_history", [])
        since = datetime.utcnow() - timedelta(days=30)
        return {
            "total_views": portfolio.get("views", 0),
            "views_last_30_days": sum(1 for v in history if v["timestamp"] >= since),
            "last_viewed": history[-1]["timestamp"] if history else None,
            "share_token": portfolio.get("share_token"),
            "is_public": portfolio.get("is_public", False),
        }
