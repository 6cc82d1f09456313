"""
MongoDB Service - CRUD operations for every collection.

Collections in this database:
1. users         - identity + role-tagged profile
2. institutions  - credential issuers (tenants)
3. credentials   - issued credentials and their verification state
4. jobs          - employer postings, applicants, invitations
5. talent_pools  - one per employer, curated learner references
6. achievements  - learner achievements

Portfolios live in portfolio_service.py.

Read-modify-write sequences are expressed as single conditional updates so
concurrent requests cannot both pass a membership or state check.
"""

import logging
import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from credhub.db.mongodb import get_collection, COLLECTIONS

logger = logging.getLogger(__name__)

# Never leave the service layer
PRIVATE_FIELDS = ("password_hash", "refresh_token_hash")


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: Any) -> Any:
    """Convert a MongoDB document (recursively) to a JSON-serializable value."""
    if doc is None:
        return None
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, list):
        return [serialize_doc(item) for item in doc]
    if isinstance(doc, dict):
        return {
            key: serialize_doc(value)
            for key, value in doc.items()
            if key not in PRIVATE_FIELDS
        }
    return doc


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_mongo(value: Any) -> Any:
    """Plain BSON-friendly values from model dumps (enum members become their values)."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [to_mongo(item) for item in value]
    if isinstance(value, dict):
        return {key: to_mongo(item) for key, item in value.items()}
    return value


def paginate(cursor, page: int, limit: int):
    return cursor.skip((page - 1) * limit).limit(limit)


def total_pages(count: int, limit: int) -> int:
    return (count + limit - 1) // limit if limit else 0


# ============================================================
# USERS COLLECTION
# Identity fields at top level, role payload under "profile"
# ============================================================

class UserService:
    """
    Handles user accounts of every role.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])

    def create(
        self,
        email: str,
        password_hash: str,
        role: str,
        profile: dict,
        tenant_id: ObjectId = None,
    ) -> ObjectId:
        """
        Insert a user. Raises DuplicateKeyError when the email is taken.
        """
        now = datetime.utcnow()
        doc = {
            "email": email.lower(),
            "password_hash": password_hash,
            "role": role,
            "tenant_id": tenant_id,
            "is_active": True,
            "is_verified": False,
            "last_login": None,
            "profile": profile,
            "created_at": now,
            "updated_at": now,
        }
        result = self.collection.insert_one(doc)
        return result.inserted_id

    def get_by_id(self, user_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": user_id})

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email.lower()})

    def get_learner(self, learner_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": learner_id, "role": "learner"})

    def record_login(self, user_id: ObjectId, refresh_token_hash: str) -> None:
        self.collection.update_one(
            {"_id": user_id},
            {"$set": {"last_login": datetime.utcnow(), "refresh_token_hash": refresh_token_hash}},
        )

    def clear_refresh_token(self, user_id: ObjectId) -> None:
        self.collection.update_one({"_id": user_id}, {"$unset": {"refresh_token_hash": ""}})

    def update_profile(self, user_id: ObjectId, updates: dict) -> Optional[dict]:
        """Set individual profile fields; returns the updated user."""
        if not updates:
            return self.get_by_id(user_id)
        fields = {f"profile.{key}": value for key, value in updates.items()}
        fields["updated_at"] = datetime.utcnow()
        return self.collection.find_one_and_update(
            {"_id": user_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    def push_profile_item(self, user_id: ObjectId, field: str, item: dict) -> Optional[dict]:
        """Append to a profile list (education, skills)."""
        return self.collection.find_one_and_update(
            {"_id": user_id},
            {"$push": {f"profile.{field}": item}, "$set": {"updated_at": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    def increment_profile_counter(self, user_id: ObjectId, field: str) -> None:
        self.collection.update_one({"_id": user_id}, {"$inc": {f"profile.{field}": 1}})

    def set_active(self, user_id: ObjectId, is_active: bool) -> Optional[dict]:
        return self.collection.find_one_and_update(
            {"_id": user_id},
            {"$set": {"is_active": is_active, "updated_at": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, user_id: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": user_id})
        return result.deleted_count > 0

    def list(self, role: str = None, is_active: bool = None, page: int = 1, limit: int = 20) -> Tuple[List[dict], int]:
        query = {}
        if role:
            query["role"] = role
        if is_active is not None:
            query["is_active"] = is_active
        cursor = self.collection.find(query).sort("created_at", -1)
        return list(paginate(cursor, page, limit)), self.collection.count_documents(query)

    def search_learners(self, skills: List[str] = None, page: int = 1, limit: int = 10) -> List[dict]:
        """Learners having any of the given skill names (exact, case-insensitive)."""
        query: Dict[str, Any] = {"role": "learner", "is_active": True}
        if skills:
            query["profile.skills.name"] = {
                "$in": [re.compile(f"^{re.escape(s)}$", re.IGNORECASE) for s in skills]
            }
        cursor = self.collection.find(query, {"email": 1, "profile": 1})
        return list(paginate(cursor, page, limit))

    def count(self, role: str = None) -> int:
        return self.collection.count_documents({"role": role} if role else {})


# ============================================================
# INSTITUTIONS COLLECTION
# ============================================================

class InstitutionService:
    """
    Handles issuing organisations.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["institutions"])

    def create(self, data: dict) -> ObjectId:
        """Raises DuplicateKeyError on a taken name or registration number."""
        now = datetime.utcnow()
        doc = {
            "contact_info": {},
            "address": None,
            "accreditation": None,
            "is_verified": False,
            "is_active": True,
            "credentials_issued": 0,
            "administrators": [],
            **data,
            "created_at": now,
            "updated_at": now,
        }
        return self.collection.insert_one(doc).inserted_id

    def get_by_id(self, institution_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": institution_id})

    def list(
        self,
        type: str = None,
        is_verified: bool = None,
        is_active: bool = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[dict], int]:
        query = {}
        if type:
            query["type"] = type
        if is_verified is not None:
            query["is_verified"] = is_verified
        if is_active is not None:
            query["is_active"] = is_active
        cursor = self.collection.find(query).sort("created_at", -1)
        return list(paginate(cursor, page, limit)), self.collection.count_documents(query)

    def update(self, institution_id: ObjectId, updates: dict) -> Optional[dict]:
        updates = {**updates, "updated_at": datetime.utcnow()}
        return self.collection.find_one_and_update(
            {"_id": institution_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, institution_id: ObjectId) -> bool:
        """Delete and detach credentials issued by this institution."""
        result = self.collection.delete_one({"_id": institution_id})
        if result.deleted_count == 0:
            return False
        get_collection(COLLECTIONS["credentials"]).update_many(
            {"institution_id": institution_id},
            {"$unset": {"institution_id": ""}},
        )
        return True

    def add_administrator(self, institution_id: ObjectId, user_id: ObjectId) -> None:
        self.collection.update_one({"_id": institution_id}, {"$addToSet": {"administrators": user_id}})

    def increment_issued(self, institution_id: ObjectId) -> None:
        self.collection.update_one({"_id": institution_id}, {"$inc": {"credentials_issued": 1}})

    def count(self) -> int:
        return self.collection.count_documents({})


# ============================================================
# CREDENTIALS COLLECTION
# ============================================================

# target status -> statuses it may be reached from
ALLOWED_TRANSITIONS = {
    "verified": ["pending"],
    "rejected": ["pending"],
    "expired": ["pending", "verified", "rejected", "expired"],
}


class InvalidTransitionError(ValueError):
    """Requested verification status is not reachable from the current one."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change verification status from {current} to {requested}")


class CredentialService:
    """
    Handles issued credentials.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["credentials"])

    def create(self, doc: dict) -> dict:
        """Raises DuplicateKeyError on a taken credential number."""
        now = datetime.utcnow()
        doc = {
            "verification_status": "pending",
            "verified_by": None,
            "verified_at": None,
            "is_public": True,
            "view_count": 0,
            "metadata": {},
            **doc,
            "created_at": now,
            "updated_at": now,
        }
        doc["_id"] = self.collection.insert_one(doc).inserted_id
        return doc

    def get_by_id(self, credential_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": credential_id})

    def get_by_number(self, credential_number: str) -> Optional[dict]:
        return self.collection.find_one({"credential_number": credential_number})

    def list(self, query: dict, sort_field: str = "created_at") -> List[dict]:
        return list(self.collection.find(query).sort(sort_field, -1))

    def for_learner(self, learner_id: ObjectId) -> List[dict]:
        return self.list({"learner_id": learner_id}, sort_field="issue_date")

    def public_verified_for_learner(self, learner_id: ObjectId) -> List[dict]:
        return self.list({
            "learner_id": learner_id,
            "verification_status": "verified",
            "is_public": True,
        }, sort_field="issue_date")

    def record_view(self, credential_id: ObjectId) -> Optional[dict]:
        """Increment the view counter and return the credential."""
        return self.collection.find_one_and_update(
            {"_id": credential_id},
            {"$inc": {"view_count": 1}},
            return_document=ReturnDocument.AFTER,
        )

    def update(self, credential_id: ObjectId, updates: dict) -> Optional[dict]:
        updates = {**updates, "updated_at": datetime.utcnow()}
        return self.collection.find_one_and_update(
            {"_id": credential_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )

    def set_status(self, credential_id: ObjectId, status: str, verified_by: ObjectId) -> Optional[dict]:
        """
        Move a credential to a new verification status.

        The allowed source statuses are part of the update filter, so the
        check and the write are one atomic operation.

        Returns:
            Updated credential, or None when it does not exist.

        Raises:
            InvalidTransitionError: the credential exists but its current
            status does not allow the requested one.
        """
        allowed_from = ALLOWED_TRANSITIONS.get(status, [])
        now = datetime.utcnow()
        updated = self.collection.find_one_and_update(
            {"_id": credential_id, "verification_status": {"$in": allowed_from}},
            {"$set": {
                "verification_status": status,
                "verified_by": verified_by,
                "verified_at": now,
                "updated_at": now,
            }},
            return_document=ReturnDocument.AFTER,
        )
        if updated:
            return updated

        current = self.collection.find_one({"_id": credential_id}, {"verification_status": 1})
        if current is None:
            return None
        raise InvalidTransitionError(current.get("verification_status"), status)

    def delete(self, credential_id: ObjectId) -> bool:
        return self.collection.delete_one({"_id": credential_id}).deleted_count > 0

    def count(self, query: dict = None) -> int:
        return self.collection.count_documents(query or {})

    def count_by_type(self, query: dict = None) -> List[dict]:
        pipeline = []
        if query:
            pipeline.append({"$match": query})
        pipeline.append({"$group": {"_id": "$type", "count": {"$sum": 1}}})
        return list(self.collection.aggregate(pipeline))

    def count_by_month(self, months: int = 12) -> List[dict]:
        pipeline = [
            {"$group": {
                "_id": {"year": {"$year": "$created_at"}, "month": {"$month": "$created_at"}},
                "count": {"$sum": 1},
            }},
            {"$sort": {"_id.year": -1, "_id.month": -1}},
            {"$limit": months},
        ]
        return list(self.collection.aggregate(pipeline))

    def attach_references(self, credentials: List[dict]) -> List[dict]:
        """
        Add learner {first_name, last_name, email} and institution {name, type}
        summaries to each credential.
        """
        learner_ids = {c["learner_id"] for c in credentials if c.get("learner_id")}
        institution_ids = {c["institution_id"] for c in credentials if c.get("institution_id")}

        learners = {
            u["_id"]: {
                "_id": u["_id"],
                "first_name": u.get("profile", {}).get("first_name"),
                "last_name": u.get("profile", {}).get("last_name"),
                "email": u.get("email"),
            }
            for u in get_collection(COLLECTIONS["users"]).find({"_id": {"$in": list(learner_ids)}})
        }
        institutions = {
            i["_id"]: {"_id": i["_id"], "name": i.get("name"), "type": i.get("type")}
            for i in get_collection(COLLECTIONS["institutions"]).find({"_id": {"$in": list(institution_ids)}})
        }

        for credential in credentials:
            credential["learner"] = learners.get(credential.get("learner_id"))
            credential["institution"] = institutions.get(credential.get("institution_id"))
        return credentials


# ============================================================
# JOBS COLLECTION
# ============================================================

class JobService:
    """
    Handles job postings, applications and invitations.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["jobs"])

    def create(self, employer_id: ObjectId, data: dict) -> dict:
        now = datetime.utcnow()
        doc = {
            **data,
            "employer_id": employer_id,
            "applicants": [],
            "invited_learners": [],
            "posted_date": now,
            "created_at": now,
            "updated_at": now,
        }
        doc["_id"] = self.collection.insert_one(doc).inserted_id
        return doc

    def get_by_id(self, job_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": job_id})

    def get_for_employer(self, job_id: ObjectId, employer_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": job_id, "employer_id": employer_id})

    def list_for_employer(
        self, employer_id: ObjectId, status: str = None, page: int = 1, limit: int = 20
    ) -> Tuple[List[dict], int]:
        query = {"employer_id": employer_id}
        if status:
            query["status"] = status
        cursor = self.collection.find(query).sort("created_at", -1)
        return list(paginate(cursor, page, limit)), self.collection.count_documents(query)

    def update(self, job_id: ObjectId, employer_id: ObjectId, updates: dict) -> Optional[dict]:
        updates = {**updates, "updated_at": datetime.utcnow()}
        return self.collection.find_one_and_update(
            {"_id": job_id, "employer_id": employer_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, job_id: ObjectId, employer_id: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": job_id, "employer_id": employer_id})
        return result.deleted_count > 0

    def delete_for_employer(self, employer_id: ObjectId) -> int:
        return self.collection.delete_many({"employer_id": employer_id}).deleted_count

    def apply(self, job_id: ObjectId, learner_id: ObjectId, match_score: int, cover_letter: str = None) -> bool:
        """
        Append an application unless the learner already applied.
        Returns False when the learner is already an applicant.
        """
        result = self.collection.update_one(
            {"_id": job_id, "status": "active", "applicants.learner_id": {"$ne": learner_id}},
            {"$push": {"applicants": {
                "learner_id": learner_id,
                "applied_at": datetime.utcnow(),
                "status": "applied",
                "match_score": match_score,
                "cover_letter": cover_letter,
            }}},
        )
        return result.modified_count > 0

    def set_applicant_status(
        self, job_id: ObjectId, employer_id: ObjectId, learner_id: ObjectId, status: str
    ) -> Optional[dict]:
        return self.collection.find_one_and_update(
            {"_id": job_id, "employer_id": employer_id, "applicants.learner_id": learner_id},
            {"$set": {"applicants.$.status": status, "updated_at": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    def invite(self, job_id: ObjectId, learner_id: ObjectId) -> None:
        self.collection.update_one({"_id": job_id}, {"$addToSet": {"invited_learners": learner_id}})

    def hiring_analytics(self, employer_id: ObjectId) -> dict:
        jobs = list(self.collection.find({"employer_id": employer_id}))
        applicants = [a for j in jobs for a in j.get("applicants", [])]
        jobs_by_type: Dict[str, int] = {}
        for job in jobs:
            kind = job.get("employment_type")
            jobs_by_type[kind] = jobs_by_type.get(kind, 0) + 1
        return {
            "total_jobs": len(jobs),
            "active_jobs": sum(1 for j in jobs if j.get("status") == "active"),
            "closed_jobs": sum(1 for j in jobs if j.get("status") == "closed"),
            "total_applicants": len(applicants),
            "total_invited": sum(len(j.get("invited_learners", [])) for j in jobs),
            "hired": sum(1 for a in applicants if a.get("status") == "hired"),
            "shortlisted": sum(1 for a in applicants if a.get("status") == "shortlisted"),
            "jobs_by_type": jobs_by_type,
        }


# ============================================================
# TALENT POOLS COLLECTION
# One document per employer
# ============================================================

class TalentPoolService:
    """
    Handles employer talent pools.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["talent_pools"])

    def get_or_create(self, employer_id: ObjectId) -> dict:
        now = datetime.utcnow()
        try:
            return self.collection.find_one_and_update(
                {"employer_id": employer_id},
                {"$setOnInsert": {"employer_id": employer_id, "learners": [], "created_at": now}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # A concurrent upsert created the pool first
            return self.collection.find_one({"employer_id": employer_id})

    def add(
        self,
        employer_id: ObjectId,
        learner_id: ObjectId,
        notes: str = None,
        tags: List[str] = None,
        rating: int = None,
    ) -> bool:
        """
        Add a learner to the pool.

        The membership check lives in the update filter, so two concurrent
        adds of the same learner produce one entry. Returns False when the
        learner was already in the pool.
        """
        self.get_or_create(employer_id)
        result = self.collection.update_one(
            {"employer_id": employer_id, "learners.learner_id": {"$ne": learner_id}},
            {"$push": {"learners": {
                "learner_id": learner_id,
                "added_at": datetime.utcnow(),
                "notes": notes,
                "tags": tags or [],
                "rating": rating,
            }}},
        )
        return result.modified_count > 0

    def remove(self, employer_id: ObjectId, learner_id: ObjectId) -> Optional[bool]:
        """True when removed, False when not in the pool, None without a pool."""
        result = self.collection.update_one(
            {"employer_id": employer_id},
            {"$pull": {"learners": {"learner_id": learner_id}}},
        )
        if result.matched_count == 0:
            return None
        return result.modified_count > 0

    def with_learners(self, pool: dict) -> dict:
        """Attach learner name/email/skills to each pool entry."""
        ids = [entry["learner_id"] for entry in pool.get("learners", [])]
        users = {
            u["_id"]: u
            for u in get_collection(COLLECTIONS["users"]).find({"_id": {"$in": ids}}, {"email": 1, "profile": 1})
        }
        for entry in pool.get("learners", []):
            user = users.get(entry["learner_id"])
            if user:
                profile = user.get("profile", {})
                entry["learner"] = {
                    "_id": user["_id"],
                    "first_name": profile.get("first_name"),
                    "last_name": profile.get("last_name"),
                    "email": user.get("email"),
                    "skills": profile.get("skills", []),
                }
        return pool

    def delete_for_employer(self, employer_id: ObjectId) -> None:
        self.collection.delete_one({"employer_id": employer_id})


# ============================================================
# ACHIEVEMENTS COLLECTION
# ============================================================

class AchievementService:
    """
    Handles learner achievements.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["achievements"])

    def create(self, learner_id: ObjectId, data: dict) -> dict:
        now = datetime.utcnow()
        doc = {**data, "learner_id": learner_id, "created_at": now, "updated_at": now}
        doc["_id"] = self.collection.insert_one(doc).inserted_id
        return doc

    def list(self, learner_id: ObjectId, page: int = 1, limit: int = 10) -> Tuple[List[dict], int]:
        query = {"learner_id": learner_id}
        cursor = self.collection.find(query).sort("date", -1)
        return list(paginate(cursor, page, limit)), self.collection.count_documents(query)

    def public_for_learner(self, learner_id: ObjectId) -> List[dict]:
        return list(self.collection.find({"learner_id": learner_id, "is_public": True}).sort("date", -1))

    def get(self, achievement_id: ObjectId, learner_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": achievement_id, "learner_id": learner_id})

    def update(self, achievement_id: ObjectId, learner_id: ObjectId, updates: dict) -> Optional[dict]:
        updates = {**updates, "updated_at": datetime.utcnow()}
        return self.collection.find_one_and_update(
            {"_id": achievement_id, "learner_id": learner_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, achievement_id: ObjectId, learner_id: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": achievement_id, "learner_id": learner_id})
        return result.deleted_count > 0

    def delete_for_learner(self, learner_id: ObjectId) -> int:
        return self.collection.delete_many({"learner_id": learner_id}).deleted_count
