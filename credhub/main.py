"""
Credential Hub - Main Application

FastAPI backend with:
- MongoDB for every collection
- Hugging Face models for skill extraction and NSQF prediction
- JWT authentication (access + refresh tokens)
- Local file storage for credential documents, served under /uploads

Run: uvicorn credhub.main:app --reload
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from credhub import __version__
from credhub.api.routes import api_router
from credhub.core.config import get_settings
from credhub.core.logging_config import setup_logging
from credhub.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Credential Hub",
    description="""
    Multi-tenant credential management backend.

    ## Features
    - **Authentication**: JWT access and refresh tokens for learners, institutions, employers and admins
    - **Credentials**: Institutions issue credentials with file integrity hashes and AI-derived skills / NSQF level
    - **Learners**: Profiles, achievements, career guidance and shareable portfolios
    - **Employers**: Credential verification, job postings, learner matching and talent pools
    - **Admin**: Platform statistics, user and institution management
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api/v1")

# Uploaded files
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount(settings.uploads_base_url, StaticFiles(directory=settings.upload_dir), name="uploads")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Configure logging and initialize MongoDB indexes."""
    setup_logging()
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.error("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Credential Hub", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    mongo_ok = test_mongo_connection()
    return {
        "status": "healthy" if mongo_ok else "degraded",
        "mongodb": "connected" if mongo_ok else "disconnected",
    }
