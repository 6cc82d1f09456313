"""
File Routes (authenticated)

POST /files/upload - Store an image or PDF, returns its public URL
GET /files/download?url= - Redirect to a stored file
"""

from fastapi import APIRouter, HTTPException, Depends, File, Form, UploadFile
from fastapi.responses import RedirectResponse

from credhub.core.auth import get_current_user
from credhub.services.storage_service import get_storage
from credhub.utils.file_upload import UPLOAD_EXTENSIONS, read_upload

router = APIRouter(prefix="/files", tags=["Files"])

ALLOWED_FOLDERS = {"uploads", "profiles", "logos", "documents"}


@router.post("/upload", status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    folder: str = Form("uploads"),
    user: dict = Depends(get_current_user),
):
    if folder not in ALLOWED_FOLDERS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown folder '{folder}'. Allowed: {', '.join(sorted(ALLOWED_FOLDERS))}",
        )
    upload = await read_upload(file, UPLOAD_EXTENSIONS)
    stored = get_storage().save(upload.content, upload.original_name, folder=folder)
    return {
        "message": "File uploaded successfully",
        "url": stored.url,
        "storage_id": stored.storage_id,
        "original_filename": upload.original_name,
        "mimetype": upload.mimetype,
        "size": upload.size,
    }


@router.get("/download")
async def download_file(url: str = "", user: dict = Depends(get_current_user)):
    """Redirect only to files this server stored; anything else is a 404."""
    if not url:
        raise HTTPException(status_code=400, detail="No file URL provided")
    if not get_storage().owns_url(url):
        raise HTTPException(status_code=404, detail="File not found")
    return RedirectResponse(url)
