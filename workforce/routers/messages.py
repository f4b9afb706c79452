"""
Message routes: toolbox talks and reminders.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.auth import get_current_active_user, require_manager_admin
from workforce.database import get_db, utcnow
from workforce.models.message import Message, MessagePriority, MessageRecipient, MessageType
from workforce.models.user import Profile
from workforce.reports.signature_pdf import render_toolbox_talk_pdf
from workforce.schemas.message import (
    InboxItem, Message as MessageSchema, MessageCreate, MessageRecipient as MessageRecipientSchema,
    MessageSign,
)
from workforce.services import notifications as service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("/", response_model=MessageSchema, status_code=status.HTTP_201_CREATED)
async def create_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Send a toolbox talk or reminder to the selected users.
    """
    message = await service.create_message(
        db,
        sender_id=current_user.id,
        type=payload.type,
        subject=payload.subject,
        body=payload.body,
        recipient_ids=payload.recipient_ids,
        priority=payload.priority,
    )
    await db.commit()
    return await service.load_message(db, message.id)


@router.get("/", response_model=List[MessageSchema])
async def get_sent_messages(
    type_filter: Optional[MessageType] = Query(None, alias="type"),
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Get sent messages with their recipients, newest first.
    """
    query = select(Message).where(Message.deleted_at.is_(None)).order_by(Message.created_at.desc(), Message.id.desc())
    if type_filter is not None:
        query = query.where(Message.type == type_filter)
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/inbox", response_model=List[InboxItem])
async def get_inbox(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Messages still waiting for the current user, high priority first.
    """
    result = await db.execute(
        select(MessageRecipient, Message)
        .join(Message, MessageRecipient.message_id == Message.id)
        .where(
            MessageRecipient.user_id == current_user.id,
            MessageRecipient.cleared_from_inbox_at.is_(None),
            Message.deleted_at.is_(None),
        )
        .order_by(
            case((Message.priority == MessagePriority.HIGH, 0), else_=1),
            Message.created_at.desc(),
            Message.id.desc(),
        )
    )
    return [
        InboxItem(
            recipient_id=recipient.id,
            message_id=message.id,
            type=message.type,
            subject=message.subject,
            body=message.body,
            priority=message.priority,
            sender_name=message.sender.full_name if message.sender else None,
            status=recipient.status,
            created_at=message.created_at,
        )
        for recipient, message in result.all()
    ]


@router.post("/{message_id}/shown", response_model=MessageRecipientSchema)
async def mark_message_shown(
    message_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    recipient = await service.get_recipient(db, message_id, current_user)
    return await service.mark_shown(db, recipient)


@router.post("/{message_id}/sign", response_model=MessageRecipientSchema)
async def sign_message(
    message_id: int,
    payload: MessageSign,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Sign a toolbox talk.
    """
    recipient = await service.get_recipient(db, message_id, current_user)
    return await service.sign_message(db, recipient, payload.signature_data)


@router.post("/{message_id}/dismiss", response_model=MessageRecipientSchema)
async def dismiss_message(
    message_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Dismiss a reminder from the inbox.
    """
    recipient = await service.get_recipient(db, message_id, current_user)
    return await service.dismiss_message(db, recipient)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Hide a message from every inbox. The signatures are kept.
    """
    message = await service.load_message(db, message_id)
    message.deleted_at = utcnow()
    await db.commit()
    return None


@router.get("/{message_id}/export")
async def export_message(
    message_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Download the signature record for a toolbox talk.
    """
    message = await service.load_message(db, message_id)
    if message.type != MessageType.TOOLBOX_TALK:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only toolbox talks have a signature record",
        )
    sender_name = message.sender.full_name if message.sender else ""
    content = await run_in_threadpool(render_toolbox_talk_pdf, message, message.recipients, sender_name)
    safe_subject = "".join(ch if ch.isalnum() else "_" for ch in message.subject)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="Toolbox_Talk_{safe_subject}.pdf"'},
    )
