"""
MongoDB Connection Utility

Every entity lives in its own collection:
- users:        identity + role-tagged profile (learner/employer/institution/admin)
- institutions: issuing organisations (tenants)
- credentials:  issued credentials with file hash and AI-derived metadata
- jobs:         employer postings with required skills and applicants
- talent_pools: one per employer, curated learner references
- portfolios:   one per learner, share token for public reads
- achievements: learner achievements
"""
import logging

from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from credhub.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the application database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def set_mongo_client(client: MongoClient) -> None:
    """Swap the client (used by tests and scripts); resets the cached database."""
    global _client, _db
    _client = client
    _db = None


def get_collection(name: str) -> Collection:
    """Get a specific collection (use the COLLECTIONS constants for names)."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "institutions": "institutions",
    "credentials": "credentials",
    "jobs": "jobs",
    "talent_pools": "talent_pools",
    "portfolios": "portfolios",
    "achievements": "achievements"
}


def init_mongo_indexes():
    """
    Create indexes for uniqueness and query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)
    db[COLLECTIONS["users"]].create_index("role")

    db[COLLECTIONS["institutions"]].create_index("name", unique=True)
    db[COLLECTIONS["institutions"]].create_index("registration_number", unique=True)

    # Credential lookups: per learner/institution pair, by number, by status
    db[COLLECTIONS["credentials"]].create_index([
        ("learner_id", ASCENDING),
        ("institution_id", ASCENDING)
    ])
    db[COLLECTIONS["credentials"]].create_index("credential_number", unique=True)
    db[COLLECTIONS["credentials"]].create_index("verification_status")

    db[COLLECTIONS["jobs"]].create_index([
        ("employer_id", ASCENDING),
        ("status", ASCENDING)
    ])

    # One pool per employer, one portfolio per learner
    db[COLLECTIONS["talent_pools"]].create_index("employer_id", unique=True)
    db[COLLECTIONS["portfolios"]].create_index("learner_id", unique=True)
    # Token only exists while shared
    db[COLLECTIONS["portfolios"]].create_index("share_token", unique=True, sparse=True)

    db[COLLECTIONS["achievements"]].create_index([
        ("learner_id", ASCENDING),
        ("date", DESCENDING)
    ])

    logger.info("MongoDB indexes created")
