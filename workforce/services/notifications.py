"""
Messages (toolbox talks and reminders) and what each recipient does with them.
"""
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.database import utcnow
from workforce.exceptions import NotFoundError, ValidationError
from workforce.logging_config import get_logger
from workforce.models.message import Message, MessageRecipient, MessagePriority, MessageType, RecipientStatus
from workforce.models.user import Profile

logger = get_logger(__name__)


async def create_message(
    db: AsyncSession,
    sender_id: Optional[int],
    type: MessageType,
    subject: str,
    body: str,
    recipient_ids: Iterable[int],
    priority: MessagePriority = MessagePriority.LOW,
    created_via: str = "web",
    require_active: bool = True,
) -> Message:
    """
    Add a message with one PENDING recipient row per distinct user.

    System notifications pass ``require_active=False`` so that a
    deactivated profile still gets its copy. The caller commits.
    """
    if not (subject or "").strip():
        raise ValidationError("Subject is required")
    if not (body or "").strip():
        raise ValidationError("Body is required")

    wanted = list(dict.fromkeys(int(i) for i in recipient_ids))
    if not wanted:
        raise ValidationError("At least one recipient is required")

    query = select(Profile.id).where(Profile.id.in_(wanted))
    if require_active:
        query = query.where(Profile.is_active.is_(True))
    result = await db.execute(query)
    found = set(result.scalars().all())
    missing = [i for i in wanted if i not in found]
    if missing:
        raise ValidationError(f"Unknown recipients: {', '.join(str(i) for i in missing)}")

    message = Message(
        type=type,
        subject=subject.strip(),
        body=body,
        priority=priority,
        sender_id=sender_id,
        created_via=created_via,
    )
    message.recipients = [MessageRecipient(user_id=user_id) for user_id in wanted]
    db.add(message)
    await db.flush()

    logger.info(f"Message {message.id} ({type.value}) queued for {len(wanted)} recipient(s)")
    return message


async def load_message(db: AsyncSession, message_id: int) -> Message:
    result = await db.execute(
        select(Message)
        .where(Message.id == message_id, Message.deleted_at.is_(None))
        .execution_options(populate_existing=True)
    )
    message = result.scalar_one_or_none()
    if message is None:
        raise NotFoundError("Message not found")
    return message


async def get_recipient(db: AsyncSession, message_id: int, user: Profile) -> MessageRecipient:
    """The current user's delivery of a live message."""
    result = await db.execute(
        select(MessageRecipient)
        .join(Message, MessageRecipient.message_id == Message.id)
        .where(
            MessageRecipient.message_id == message_id,
            MessageRecipient.user_id == user.id,
            Message.deleted_at.is_(None),
        )
    )
    recipient = result.scalar_one_or_none()
    if recipient is None:
        raise NotFoundError("Message not found")
    return recipient


async def mark_shown(db: AsyncSession, recipient: MessageRecipient) -> MessageRecipient:
    if recipient.first_shown_at is None:
        recipient.first_shown_at = utcnow()
    if recipient.status == RecipientStatus.PENDING:
        recipient.status = RecipientStatus.SHOWN
    await db.commit()
    return recipient


async def sign_message(db: AsyncSession, recipient: MessageRecipient, signature_data: str) -> MessageRecipient:
    """Sign a toolbox talk, which also clears it from the inbox."""
    message = await load_message(db, recipient.message_id)
    if message.type != MessageType.TOOLBOX_TALK:
        raise ValidationError("Only toolbox talks can be signed")
    if recipient.status == RecipientStatus.SIGNED:
        raise ValidationError("Message already signed")
    if not (signature_data or "").strip():
        raise ValidationError("Signature is required")

    now = utcnow()
    recipient.first_shown_at = recipient.first_shown_at or now
    recipient.signed_at = now
    recipient.signature_data = signature_data
    recipient.cleared_from_inbox_at = now
    recipient.status = RecipientStatus.SIGNED
    await db.commit()
    logger.info(f"Toolbox talk {message.id} signed by user {recipient.user_id}")
    return recipient


async def dismiss_message(db: AsyncSession, recipient: MessageRecipient) -> MessageRecipient:
    message = await load_message(db, recipient.message_id)
    if message.type != MessageType.REMINDER:
        raise ValidationError("Toolbox talks must be signed, not dismissed")

    now = utcnow()
    recipient.first_shown_at = recipient.first_shown_at or now
    recipient.cleared_from_inbox_at = now
    recipient.status = RecipientStatus.DISMISSED
    await db.commit()
    return recipient
