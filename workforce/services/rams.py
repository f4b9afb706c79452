"""
RAMS documents: upload, assignment to employees, read receipts and sign-off.
"""
from pathlib import Path
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.database import utcnow
from workforce.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from workforce.logging_config import get_logger
from workforce.models.rams import (
    AssignmentStatus, RamsAssignment, RamsDocument, RamsFileType, RamsVisitorSignature,
)
from workforce.models.user import Profile
from workforce.services.storage import RAMS_BUCKET, StorageService

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = {".pdf": RamsFileType.PDF, ".docx": RamsFileType.DOCX}

CONTENT_TYPES = {
    RamsFileType.PDF: "application/pdf",
    RamsFileType.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def can_manage(user: Profile) -> bool:
    return user.is_manager_admin or user.is_admin


def file_type_for(file_name: str) -> RamsFileType:
    extension = Path(file_name or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationError("Only PDF and DOCX files are allowed")
    return ALLOWED_EXTENSIONS[extension]


async def load_document(db: AsyncSession, document_id: int) -> RamsDocument:
    result = await db.execute(
        select(RamsDocument)
        .where(RamsDocument.id == document_id)
        .execution_options(populate_existing=True)
    )
    document = result.scalar_one_or_none()
    if document is None:
        raise NotFoundError("Document not found")
    return document


def find_assignment(document: RamsDocument, user: Profile) -> Optional[RamsAssignment]:
    for assignment in document.assignments:
        if assignment.employee_id == user.id:
            return assignment
    return None


def ensure_can_view(document: RamsDocument, user: Profile) -> None:
    if not can_manage(user) and find_assignment(document, user) is None:
        raise PermissionDeniedError("Access denied")


async def upload_document(db: AsyncSession, storage: StorageService, user: Profile, title: str,
                          description: Optional[str], file_name: str, content: bytes) -> RamsDocument:
    if not (title or "").strip():
        raise ValidationError("Title is required")
    file_type = file_type_for(file_name)
    if not content:
        raise ValidationError("File is empty")

    file_path = storage.save(RAMS_BUCKET, file_name, content)
    document = RamsDocument(
        title=title.strip(),
        description=description,
        file_name=file_name,
        file_path=file_path,
        file_size=len(content),
        file_type=file_type,
        uploaded_by=user.id,
    )
    db.add(document)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        storage.delete(RAMS_BUCKET, file_path)
        raise
    logger.info(f"RAMS document {document.id} uploaded by {user.id} ({len(content)} bytes)")
    return await load_document(db, document.id)


async def assign_document(db: AsyncSession, document: RamsDocument, manager: Profile,
                          employee_ids: Iterable[int]) -> RamsDocument:
    """Assign to each listed employee once; existing assignments are left alone."""
    wanted = list(dict.fromkeys(int(i) for i in employee_ids))
    if not wanted:
        raise ValidationError("Select at least one employee")

    result = await db.execute(select(Profile.id).where(Profile.id.in_(wanted)))
    found = set(result.scalars().all())
    missing = [i for i in wanted if i not in found]
    if missing:
        raise ValidationError(f"Unknown employees: {', '.join(str(i) for i in missing)}")

    already = {assignment.employee_id for assignment in document.assignments}
    for employee_id in wanted:
        if employee_id in already:
            continue
        document.assignments.append(RamsAssignment(employee_id=employee_id, assigned_by=manager.id))
    await db.commit()
    logger.info(f"RAMS document {document.id} assigned to {len(set(wanted) - already)} new employee(s)")
    return await load_document(db, document.id)


def _own_assignment(document: RamsDocument, user: Profile) -> RamsAssignment:
    assignment = find_assignment(document, user)
    if assignment is None:
        raise NotFoundError("Document is not assigned to you")
    return assignment


async def mark_read(db: AsyncSession, document: RamsDocument, user: Profile,
                    action_taken: str = "opened") -> RamsAssignment:
    """Record that the employee opened the document. Signed assignments stay signed."""
    assignment = _own_assignment(document, user)
    if assignment.read_at is None:
        assignment.read_at = utcnow()
    assignment.action_taken = action_taken
    if assignment.status == AssignmentStatus.PENDING:
        assignment.status = AssignmentStatus.READ
    await db.commit()
    return assignment


async def sign_document(db: AsyncSession, document: RamsDocument, user: Profile,
                        signature_data: str, comments: Optional[str] = None) -> RamsAssignment:
    assignment = _own_assignment(document, user)
    if assignment.status == AssignmentStatus.SIGNED:
        raise ValidationError("Document already signed")
    if not (signature_data or "").strip():
        raise ValidationError("Signature is required")

    now = utcnow()
    if assignment.read_at is None:
        assignment.read_at = now
    assignment.signed_at = now
    assignment.signature_data = signature_data
    assignment.comments = comments
    assignment.status = AssignmentStatus.SIGNED
    await db.commit()
    logger.info(f"RAMS document {document.id} signed by {user.id}")
    return assignment


async def add_visitor_signature(db: AsyncSession, document: RamsDocument, recorder: Profile,
                                visitor_name: str, signature_data: str,
                                visitor_company: Optional[str] = None,
                                visitor_role: Optional[str] = None) -> RamsVisitorSignature:
    if not (visitor_name or "").strip():
        raise ValidationError("Visitor name is required")
    if not (signature_data or "").strip():
        raise ValidationError("Signature is required")

    signature = RamsVisitorSignature(
        rams_document_id=document.id,
        visitor_name=visitor_name.strip(),
        visitor_company=visitor_company,
        visitor_role=visitor_role,
        signature_data=signature_data,
        recorded_by=recorder.id,
    )
    db.add(signature)
    await db.commit()
    await db.refresh(signature)
    return signature
