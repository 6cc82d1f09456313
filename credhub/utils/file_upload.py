"""
File Upload Utility - validate uploads, hash them, read PDF text.

Credential files:  PDF, JPG/JPEG, PNG
General uploads:   the above plus GIF and WEBP

Max file size: settings.max_file_size_mb (5MB by default)
"""

import hashlib
import io
import logging
from dataclasses import dataclass

from fastapi import UploadFile, HTTPException
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from credhub.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

CREDENTIAL_EXTENSIONS = {'.pdf', '.jpg', '.jpeg', '.png'}
UPLOAD_EXTENSIONS = CREDENTIAL_EXTENSIONS | {'.gif', '.webp'}

MIME_TYPES = {
    '.pdf': 'application/pdf',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
}


@dataclass
class ValidatedFile:
    content: bytes
    original_name: str
    extension: str
    mimetype: str
    size: int
    sha256: str


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def compute_file_hash(content: bytes) -> str:
    """SHA-256 hex digest of the file content."""
    return hashlib.sha256(content).hexdigest()


async def read_upload(file: UploadFile, allowed_extensions: set = CREDENTIAL_EXTENSIONS) -> ValidatedFile:
    """
    Read and validate an uploaded file.

    Raises:
        HTTPException 400 on a missing name or unsupported type,
        413 when the file is larger than the configured limit.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="Please upload a file")

    ext = get_file_extension(file.filename)
    if ext not in allowed_extensions:
        allowed = ", ".join(sorted(e.lstrip('.').upper() for e in allowed_extensions))
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: {allowed}"
        )

    max_bytes = settings.max_file_size_mb * 1024 * 1024
    # One byte past the limit is enough to reject
    content = await file.read(max_bytes + 1)

    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.max_file_size_mb}MB"
        )
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    return ValidatedFile(
        content=content,
        original_name=file.filename,
        extension=ext,
        mimetype=MIME_TYPES[ext],
        size=len(content),
        sha256=compute_file_hash(content),
    )


def extract_pdf_text(content: bytes) -> str:
    """
    Text of a PDF, or "" when it has none or cannot be parsed.
    Used to enrich skill extraction, so a bad PDF is not an error.
    """
    try:
        reader = PdfReader(io.BytesIO(content))
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        return '\n'.join(text_parts)
    except (PdfReadError, ValueError, KeyError) as e:
        logger.info("Could not read PDF text: %s", e)
        return ""
