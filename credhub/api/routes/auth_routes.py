"""
Authentication Routes

POST /auth/register - Register learner, employer or institution account
POST /auth/login - Login and get access + refresh tokens
POST /auth/refresh - Exchange a refresh token for a new access token
GET /auth/me - Get current user info
POST /auth/logout - Revoke the stored refresh token
"""

import logging

from bson import ObjectId
from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError

from credhub.core.auth import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    get_current_user,
    hash_password,
    hash_token,
    verify_password,
)
from credhub.models.profiles import (
    EmployerProfile,
    InstitutionStaffProfile,
    LearnerProfile,
    parse_profile,
)
from credhub.services.mongo_service import (
    InstitutionService,
    UserService,
    serialize_doc,
    to_mongo,
)
from credhub.schemas.schemas import (
    AccessTokenResponse, LoginRequest, MessageResponse, RefreshRequest,
    RegisterRequest, TokenResponse, UserRole
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def issue_tokens(user_id, role: str) -> TokenResponse:
    """Create both tokens and remember the refresh token's digest on the user."""
    claims = {"sub": str(user_id), "role": role}
    access_token = create_access_token(claims)
    refresh_token = create_refresh_token(claims)
    UserService().record_login(user_id, hash_token(refresh_token))
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user_id=str(user_id),
        role=role,
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new account and log it in.

    Role-specific fields:
    - learner: first_name, last_name
    - employer: company_name, industry
    - institution: institution_name, institution_type, registration_number
      (creates the institution and makes this user its administrator)

    Admin accounts are created with scripts/create_admin.py.
    """
    users = UserService()
    if users.get_by_email(request.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    tenant_id = None
    institution_id = None

    if request.role == UserRole.learner:
        if not request.first_name or not request.last_name:
            raise HTTPException(status_code=400, detail="First name and last name are required")
        profile = LearnerProfile(first_name=request.first_name, last_name=request.last_name)

    elif request.role == UserRole.employer:
        if not request.company_name or not request.industry:
            raise HTTPException(status_code=400, detail="Company name and industry are required")
        profile = EmployerProfile(company_name=request.company_name, industry=request.industry)

    elif request.role == UserRole.institution:
        if not request.institution_name or not request.institution_type or not request.registration_number:
            raise HTTPException(
                status_code=400,
                detail="Institution name, type, and registration number are required",
            )
        try:
            institution_id = InstitutionService().create({
                "name": request.institution_name,
                "type": request.institution_type.value,
                "registration_number": request.registration_number,
                "contact_info": {"email": request.email},
            })
        except DuplicateKeyError:
            raise HTTPException(status_code=400, detail="Institution already registered")
        tenant_id = institution_id
        profile = InstitutionStaffProfile(institution_name=request.institution_name)

    else:
        raise HTTPException(status_code=403, detail="Admin accounts cannot be self-registered")

    try:
        user_id = users.create(
            email=request.email,
            password_hash=hash_password(request.password),
            role=request.role.value,
            profile=to_mongo(profile.model_dump()),
            tenant_id=tenant_id,
        )
    except DuplicateKeyError:
        if institution_id is not None:
            InstitutionService().delete(institution_id)
        raise HTTPException(status_code=400, detail="Email already registered")

    if institution_id is not None:
        InstitutionService().add_administrator(institution_id, user_id)

    logger.info("Registered %s account %s", request.role.value, user_id)
    return issue_tokens(user_id, request.role.value)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access and refresh tokens.

    Include the access token in requests: Authorization: Bearer <token>
    """
    user = UserService().get_by_email(request.email)

    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not user.get("is_active", True):
        raise HTTPException(status_code=403, detail="Your account has been deactivated")

    return issue_tokens(user["_id"], user["role"])


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(request: RefreshRequest):
    """Exchange a valid, not-revoked refresh token for a new access token."""
    payload = decode_refresh_token(request.refresh_token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user = None
    user_id = payload.get("sub")
    if user_id and ObjectId.is_valid(user_id):
        user = UserService().get_by_id(ObjectId(user_id))

    if not user or user.get("refresh_token_hash") != hash_token(request.refresh_token):
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    if not user.get("is_active", True):
        raise HTTPException(status_code=403, detail="Your account has been deactivated")

    access_token = create_access_token({"sub": str(user["_id"]), "role": user["role"]})
    return AccessTokenResponse(access_token=access_token)


@router.get("/me")
async def get_me(user: dict = Depends(get_current_user)):
    """Get current user info with the role-specific profile."""
    data = serialize_doc(user)
    if user.get("profile"):
        data["profile"] = parse_profile(user["profile"]).model_dump(mode="json")
    return data


@router.post("/logout", response_model=MessageResponse)
async def logout(user: dict = Depends(get_current_user)):
    """Revoke the refresh token; the access token expires on its own."""
    UserService().clear_refresh_token(user["_id"])
    return MessageResponse(message="Logged out successfully")
