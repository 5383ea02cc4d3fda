"""
Project document endpoints.

Students upload files for their group, list the group's files and delete
them. Files are written under UPLOAD_DIR; the database keeps the public
path (``/uploads/documents/<name>``).
"""

import logging
import re
import time
from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from spms.auth.dependencies import get_current_student
from spms.core.config import MAX_UPLOAD_MB, UPLOAD_DIR
from spms.core.database import get_db
from spms.core.errors import AuthorizationError, NotFoundError, ValidationError
from spms.models.principal import Student
from spms.models.project import ProjectDocument
from spms.models.queries import find_membership
from spms.schemas.common import MessageResponse
from spms.schemas.document import (
    DocumentListResponse,
    DocumentUploadResponse,
    document_to_response,
)

logger = logging.getLogger(__name__)

router = APIRouter()

PUBLIC_PREFIX = "/uploads/documents"
MAX_FILE_SIZE = MAX_UPLOAD_MB * 1024 * 1024

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def get_safe_filename(filename: str) -> str:
    """Replace anything outside [A-Za-z0-9.-] and prefix a millisecond timestamp."""
    cleaned = _UNSAFE_CHARS.sub("_", Path(filename).name) or "file"
    return f"{int(time.time() * 1000)}-{cleaned}"


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
):
    """Documents of the caller's group, newest first."""
    membership = await find_membership(db, student.id)
    if membership is None:
        return DocumentListResponse(documents=[])

    result = await db.execute(
        select(ProjectDocument)
        .where(ProjectDocument.group_id == membership.group_id)
        .options(selectinload(ProjectDocument.student))
        .order_by(ProjectDocument.uploaded_at.desc(), ProjectDocument.id.desc())
    )
    return DocumentListResponse(
        documents=[document_to_response(d) for d in result.scalars().all()]
    )


@router.post("", response_model=DocumentUploadResponse)
async def upload_document(
    file: UploadFile | None = File(None),
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
):
    membership = await find_membership(db, student.id)
    if membership is None:
        raise ValidationError("Project group not found")

    if file is None or not file.filename:
        raise ValidationError("No file provided")

    content = await file.read()
    if len(content) > MAX_FILE_SIZE:
        raise ValidationError(f"File too large. Maximum size is {MAX_UPLOAD_MB} MB")

    stored_name = get_safe_filename(file.filename)
    stored_path = UPLOAD_DIR / stored_name
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    with open(stored_path, "wb") as f:
        f.write(content)

    document = ProjectDocument(
        group_id=membership.group_id,
        student_id=student.id,
        filename=file.filename,
        filepath=f"{PUBLIC_PREFIX}/{stored_name}",
    )
    document.student = student
    db.add(document)
    try:
        await db.commit()
    except Exception:
        # No row will point at the file
        stored_path.unlink(missing_ok=True)
        raise

    logger.info("Document %s uploaded to group %s by student %s", document.id, membership.group_id, student.id)
    return DocumentUploadResponse(success=True, document=document_to_response(document))


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: int,
    student: Student = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
):
    membership = await find_membership(db, student.id)
    if membership is None:
        raise ValidationError("Project group not found")

    document = await db.get(ProjectDocument, document_id)
    if document is None:
        raise NotFoundError("Document not found")

    if document.group_id != membership.group_id:
        raise AuthorizationError("Unauthorized to delete this document")

    stored_path = UPLOAD_DIR / Path(document.filepath).name

    await db.delete(document)
    await db.commit()

    # The row is gone either way; a stray file is only worth a log line
    try:
        stored_path.unlink(missing_ok=True)
    except OSError:
        logger.exception("Failed to remove %s", stored_path)

    return MessageResponse(message="Document deleted successfully")
