"""
Project document schemas.
"""

from datetime import datetime
from typing import List, Optional

from spms.models.project import ProjectDocument
from spms.schemas.common import CamelModel


class DocumentResponse(CamelModel):
    id: int
    group_id: int
    student_id: Optional[int] = None
    filename: str
    filepath: str
    uploaded_at: Optional[datetime] = None
    uploaded_by: Optional[str] = None


class DocumentListResponse(CamelModel):
    documents: List[DocumentResponse]


class DocumentUploadResponse(CamelModel):
    success: bool = True
    document: DocumentResponse


def document_to_response(document: ProjectDocument) -> DocumentResponse:
    """Requires ``student`` to be loaded."""
    return DocumentResponse(
        id=document.id,
        group_id=document.group_id,
        student_id=document.student_id,
        filename=document.filename,
        filepath=document.filepath,
        uploaded_at=document.uploaded_at,
        uploaded_by=document.student.name if document.student else None,
    )
