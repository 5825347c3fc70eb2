from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from clinic.models import Message, Notification


def for_user(user_id, unread_only: bool = False):
    qs = Notification.objects.filter(user_id=user_id)
    if unread_only:
        qs = qs.filter(is_read=False)
    return qs.order_by('-created_at')


def notify(user, type: str, title: str, message: str, related_id=None) -> Notification:
    return Notification.objects.create(
        user=user, type=type, title=title, message=message,
        related_id=str(related_id) if related_id is not None else None,
    )


def mark_read(notification_id, user_id) -> Notification:
    """Mark one of the caller's notifications read.

    Someone else's notification is reported as missing.
    """
    notification = Notification.objects.filter(pk=notification_id, user_id=user_id).first()
    if notification is None:
        raise NotFound('Notification not found')
    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=['is_read'])
    return notification


def mark_all_read(user_id) -> int:
    return Notification.objects.filter(user_id=user_id, is_read=False).update(is_read=True)


@transaction.atomic
def mark_message_read(message_id, user_id) -> Message:
    # only the receiver may acknowledge a message
    message = Message.objects.select_for_update().filter(pk=message_id, receiver_id=user_id).first()
    if message is None:
        raise NotFound('Message not found')
    if message.status != Message.Status.READ:
        message.status = Message.Status.READ
        message.read_at = timezone.now()
        message.save(update_fields=['status', 'read_at'])
    return message
