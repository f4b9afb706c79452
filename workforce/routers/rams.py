"""
RAMS document routes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.auth import get_current_active_user, require_manager_admin
from workforce.database import get_db
from workforce.exceptions import EmailDeliveryError, EmailNotConfiguredError
from workforce.logging_config import get_logger
from workforce.models.rams import AssignmentStatus, RamsAssignment, RamsDocument
from workforce.models.user import Profile
from workforce.reports.signature_pdf import render_rams_pdf
from workforce.schemas.rams import (
    RamsAssign, RamsAssignment as RamsAssignmentSchema, RamsDocument as RamsDocumentSchema,
    RamsRead, RamsSign, RamsVisitorSignature, RamsVisitorSignatureCreate,
)
from workforce.services import rams as service
from workforce.services.email import EMAIL_NOT_CONFIGURED, email_configured, send_rams_document_email
from workforce.services.storage import RAMS_BUCKET, StorageService, get_storage

router = APIRouter(prefix="/rams", tags=["rams"])
logger = get_logger(__name__)


@router.get("/", response_model=List[RamsDocumentSchema])
async def get_documents(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Managers see every active document; employees see those assigned to them.
    """
    query = select(RamsDocument).where(RamsDocument.is_active.is_(True)).order_by(RamsDocument.created_at.desc())
    if not service.can_manage(current_user):
        query = query.join(RamsAssignment).where(RamsAssignment.employee_id == current_user.id)
    result = await db.execute(query)
    return result.scalars().unique().all()


@router.post("/", response_model=RamsDocumentSchema, status_code=status.HTTP_201_CREATED)
async def upload_document(
    title: str = Form(...),
    description: Optional[str] = Form(None),
    file: UploadFile = File(..., description="PDF or DOCX document"),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Upload a RAMS document.
    """
    content = await file.read()
    return await service.upload_document(
        db, storage, current_user, title, description, file.filename or "", content
    )


@router.get("/{document_id}", response_model=RamsDocumentSchema)
async def get_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    document = await service.load_document(db, document_id)
    service.ensure_can_view(document, current_user)
    return document


@router.post("/{document_id}/assign", response_model=RamsDocumentSchema)
async def assign_document(
    document_id: int,
    payload: RamsAssign,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    document = await service.load_document(db, document_id)
    return await service.assign_document(db, document, current_user, payload.employee_ids)


@router.post("/{document_id}/read", response_model=RamsAssignmentSchema)
async def mark_document_read(
    document_id: int,
    payload: Optional[RamsRead] = None,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    document = await service.load_document(db, document_id)
    action_taken = payload.action_taken if payload else "opened"
    return await service.mark_read(db, document, current_user, action_taken)


@router.post("/{document_id}/sign", response_model=RamsAssignmentSchema)
async def sign_document(
    document_id: int,
    payload: RamsSign,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    document = await service.load_document(db, document_id)
    return await service.sign_document(db, document, current_user, payload.signature_data, payload.comments)


@router.post(
    "/{document_id}/visitor-signatures",
    response_model=RamsVisitorSignature,
    status_code=status.HTTP_201_CREATED,
)
async def record_visitor_signature(
    document_id: int,
    payload: RamsVisitorSignatureCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Record a signature for a site visitor without an account.
    """
    document = await service.load_document(db, document_id)
    service.ensure_can_view(document, current_user)
    return await service.add_visitor_signature(
        db, document, current_user,
        visitor_name=payload.visitor_name,
        signature_data=payload.signature_data,
        visitor_company=payload.visitor_company,
        visitor_role=payload.visitor_role,
    )


@router.get("/{document_id}/download")
async def download_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage),
    current_user: Profile = Depends(get_current_active_user),
):
    document = await service.load_document(db, document_id)
    service.ensure_can_view(document, current_user)
    return Response(
        content=storage.read(RAMS_BUCKET, document.file_path),
        media_type=service.CONTENT_TYPES[document.file_type],
        headers={"Content-Disposition": f'attachment; filename="{document.file_name}"'},
    )


@router.post("/{document_id}/email")
async def email_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Email the document to the current user as an attachment.
    """
    if not email_configured():
        raise EmailNotConfiguredError(EMAIL_NOT_CONFIGURED)

    document = await service.load_document(db, document_id)
    service.ensure_can_view(document, current_user)
    content = storage.read(RAMS_BUCKET, document.file_path)

    result = await send_rams_document_email(
        to=current_user.email,
        title=document.title,
        description=document.description,
        file_name=document.file_name,
        file_bytes=content,
    )
    if not result.success:
        raise EmailDeliveryError(result.error or "Failed to send email")
    logger.info(f"RAMS document {document.id} emailed to user {current_user.id}")

    assignment = service.find_assignment(document, current_user)
    if assignment is not None and assignment.status != AssignmentStatus.SIGNED:
        await service.mark_read(db, document, current_user, "emailed")

    return {"success": True, "message": "Document sent via email successfully"}


@router.get("/{document_id}/export")
async def export_signatures(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Download the employee and visitor signature record as a PDF.
    """
    document = await service.load_document(db, document_id)
    content = await run_in_threadpool(
        render_rams_pdf, document, document.assignments, document.visitor_signatures
    )
    safe_title = "".join(ch if ch.isalnum() else "_" for ch in document.title)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="RAMS_{safe_title}_signatures.pdf"'},
    )
