"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Stored documents are returned as serialized dicts; the models here describe
what clients send and the fixed-shape responses.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Any, Dict
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    learner = "learner"
    institution = "institution"
    employer = "employer"
    admin = "admin"


class InstitutionType(str, Enum):
    university = "university"
    college = "college"
    training_center = "training-center"
    online_platform = "online-platform"
    government = "government"
    other = "other"


class CredentialType(str, Enum):
    certificate = "certificate"
    diploma = "diploma"
    badge = "badge"
    micro_credential = "micro-credential"
    degree = "degree"
    other = "other"


class CredentialCategory(str, Enum):
    technical = "technical"
    soft_skills = "soft-skills"
    management = "management"
    healthcare = "healthcare"
    education = "education"
    finance = "finance"
    other = "other"


class VerificationStatus(str, Enum):
    pending = "pending"
    verified = "verified"
    rejected = "rejected"
    expired = "expired"


class JobStatus(str, Enum):
    active = "active"
    closed = "closed"
    draft = "draft"


class EmploymentType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    contract = "contract"
    internship = "internship"
    freelance = "freelance"


class ApplicationStatus(str, Enum):
    applied = "applied"
    reviewing = "reviewing"
    shortlisted = "shortlisted"
    rejected = "rejected"
    hired = "hired"


class CompanySize(str, Enum):
    tiny = "1-10"
    small = "11-50"
    medium = "51-200"
    large = "201-500"
    xlarge = "501-1000"
    enterprise = "1000+"


class ProficiencyLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    expert = "expert"


class AchievementType(str, Enum):
    award = "award"
    competition = "competition"
    project = "project"
    publication = "publication"
    volunteer = "volunteer"
    other = "other"


class PortfolioTheme(str, Enum):
    default = "default"
    modern = "modern"
    classic = "classic"
    minimal = "minimal"


# ============================================================
# SHARED SUB-DOCUMENTS
# ============================================================

class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    pincode: Optional[str] = None


class ContactPerson(BaseModel):
    name: Optional[str] = None
    designation: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None


class Education(BaseModel):
    institution: str = Field(..., min_length=1)
    degree: Optional[str] = None
    field: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    grade: Optional[str] = None


class LearnerSkill(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    level: ProficiencyLevel = ProficiencyLevel.intermediate
    verified: bool = False


class CredentialSkill(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = "technical"


class JobSkill(BaseModel):
    name: str = Field(..., min_length=1)
    level: Optional[ProficiencyLevel] = None
    mandatory: bool = True


class Salary(BaseModel):
    min: Optional[float] = Field(None, ge=0)
    max: Optional[float] = Field(None, ge=0)
    currency: str = "INR"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole
    # learner
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    # employer
    company_name: Optional[str] = None
    industry: Optional[str] = None
    # institution
    institution_name: Optional[str] = None
    institution_type: Optional[InstitutionType] = None
    registration_number: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user_id: str
    role: str


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


# ============================================================
# LEARNER SCHEMAS
# ============================================================

class LearnerProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    date_of_birth: Optional[datetime] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
    bio: Optional[str] = Field(None, max_length=2000)
    profile_picture: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None


class SkillGapRequest(BaseModel):
    target_role: str = Field(..., min_length=1)
    current_skills: Optional[List[str]] = None


class JobApplyRequest(BaseModel):
    cover_letter: Optional[str] = None


# ============================================================
# CREDENTIAL SCHEMAS
# ============================================================

class CredentialUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = None
    category: Optional[CredentialCategory] = None
    nsqf_level: Optional[int] = Field(None, ge=1, le=10)
    skills: Optional[List[CredentialSkill]] = None
    expiry_date: Optional[datetime] = None
    is_public: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None


class VerifyCredentialRequest(BaseModel):
    status: VerificationStatus


# ============================================================
# INSTITUTION SCHEMAS
# ============================================================

class InstitutionCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=300)
    registration_number: str = Field(..., min_length=1)
    type: InstitutionType
    contact_info: Optional[Dict[str, Any]] = None
    address: Optional[Address] = None
    accreditation: Optional[Dict[str, Any]] = None


class InstitutionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=300)
    type: Optional[InstitutionType] = None
    contact_info: Optional[Dict[str, Any]] = None
    address: Optional[Address] = None
    accreditation: Optional[Dict[str, Any]] = None


# ============================================================
# EMPLOYER SCHEMAS
# ============================================================

class EmployerProfileUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=2, max_length=200)
    industry: Optional[str] = None
    company_size: Optional[CompanySize] = None
    contact_person: Optional[ContactPerson] = None
    address: Optional[Address] = None
    website: Optional[str] = None
    logo: Optional[str] = None
    description: Optional[str] = None


class VerifyCredentialByNumber(BaseModel):
    credential_number: str = Field(..., min_length=1)
    file_hash: Optional[str] = None


class BulkVerifyRequest(BaseModel):
    credential_numbers: List[str]


class JobCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=1)
    required_skills: List[JobSkill] = []
    preferred_skills: List[str] = []
    min_nsqf_level: Optional[int] = Field(None, ge=1, le=10)
    location: Optional[str] = None
    employment_type: EmploymentType = EmploymentType.full_time
    experience_required: Optional[str] = None
    salary: Optional[Salary] = None
    status: JobStatus = JobStatus.active
    closing_date: Optional[datetime] = None


class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None
    required_skills: Optional[List[JobSkill]] = None
    preferred_skills: Optional[List[str]] = None
    min_nsqf_level: Optional[int] = Field(None, ge=1, le=10)
    location: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    experience_required: Optional[str] = None
    salary: Optional[Salary] = None
    status: Optional[JobStatus] = None
    closing_date: Optional[datetime] = None


class ApplicantStatusUpdate(BaseModel):
    status: ApplicationStatus


class TalentPoolAdd(BaseModel):
    learner_id: str
    notes: Optional[str] = None
    tags: List[str] = []
    rating: Optional[int] = Field(None, ge=1, le=5)


class TalentPoolRemove(BaseModel):
    learner_id: str


class InviteRequest(BaseModel):
    job_id: str
    message: Optional[str] = None


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class UserStatusUpdate(BaseModel):
    is_active: bool


class InstitutionVerifyRequest(BaseModel):
    is_verified: Optional[bool] = None
    is_active: Optional[bool] = None


# ============================================================
# PORTFOLIO / ACHIEVEMENT SCHEMAS
# ============================================================

class PortfolioSections(BaseModel):
    show_credentials: bool = True
    show_achievements: bool = True
    show_skills: bool = True
    show_education: bool = True
    show_contact: bool = False


class PortfolioCreate(BaseModel):
    theme: PortfolioTheme = PortfolioTheme.default
    sections: PortfolioSections = PortfolioSections()
    customization: Dict[str, Any] = {}


class AchievementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = None
    type: AchievementType = AchievementType.other
    date: datetime
    organization: Optional[str] = None
    url: Optional[str] = None
    skills: List[str] = []
    is_public: bool = True


class AchievementUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = None
    type: Optional[AchievementType] = None
    date: Optional[datetime] = None
    organization: Optional[str] = None
    url: Optional[str] = None
    skills: Optional[List[str]] = None
    is_public: Optional[bool] = None


# ============================================================
# AI SCHEMAS
# ============================================================

class ExtractSkillsRequest(BaseModel):
    text: str = Field(..., min_length=1)


class PredictNSQFRequest(BaseModel):
    title: Optional[str] = ""
    description: Optional[str] = ""
    type: Optional[str] = None


class CareerRecommendationRequest(BaseModel):
    skills: List[str] = []


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    context: Optional[str] = None


# ============================================================
# COMMON SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class PaginatedResponse(BaseModel):
    items: List[Any]
    total: int
    page: int
    pages: int
