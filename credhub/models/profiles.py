"""
Role-tagged user profiles.

A user document stores identity fields (email, password hash, role...) and a
`profile` sub-document. The profile shape is selected by `role`, so each role
carries only its own payload instead of inheriting from a base user.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from credhub.schemas.schemas import (
    Address,
    CompanySize,
    ContactPerson,
    Education,
    LearnerSkill,
)


class LearnerProfile(BaseModel):
    role: Literal["learner"] = "learner"
    first_name: str
    last_name: str
    date_of_birth: Optional[datetime] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
    education: List[Education] = []
    skills: List[LearnerSkill] = []
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None


class EmployerProfile(BaseModel):
    role: Literal["employer"] = "employer"
    company_name: str
    industry: str
    company_size: Optional[CompanySize] = None
    contact_person: Optional[ContactPerson] = None
    address: Optional[Address] = None
    website: Optional[str] = None
    logo: Optional[str] = None
    description: Optional[str] = None
    verification_status: Literal["pending", "verified", "rejected"] = "pending"
    credentials_verified: int = 0


class InstitutionStaffProfile(BaseModel):
    role: Literal["institution"] = "institution"
    institution_name: Optional[str] = None


class AdminProfile(BaseModel):
    role: Literal["admin"] = "admin"
    display_name: Optional[str] = None


UserProfile = Annotated[
    Union[LearnerProfile, EmployerProfile, InstitutionStaffProfile, AdminProfile],
    Field(discriminator="role"),
]

_profile_adapter = TypeAdapter(UserProfile)


def parse_profile(data: dict) -> UserProfile:
    """Validate a stored profile sub-document into its role variant."""
    return _profile_adapter.validate_python(data)
