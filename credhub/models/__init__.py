"""
Models module - internal data structures.

- profiles: role-tagged user profile variants (one per role)
- ai_result: provenance-carrying result of an AI call (ai vs fallback)

Difference from schemas: schemas are the API contract, models are what
services pass around and persist.
"""
from credhub.models.profiles import (
    AdminProfile,
    EmployerProfile,
    InstitutionStaffProfile,
    LearnerProfile,
    UserProfile,
    parse_profile,
)
from credhub.models.ai_result import AIResult, Provenance

__all__ = [
    "AdminProfile",
    "EmployerProfile",
    "InstitutionStaffProfile",
    "LearnerProfile",
    "UserProfile",
    "parse_profile",
    "AIResult",
    "Provenance",
]
