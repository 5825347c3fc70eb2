"""
Direct messages and in-app notifications, available to every role.

The sender of a message is always the caller; only the receiver can mark
it read.  Notifications are scoped to their owner in the same way.
"""
from __future__ import annotations

from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from clinic.models import Message
from clinic.serializers.messaging import MessageSerializer, NotificationSerializer
from clinic.services import notifications


def _messages():
    return Message.objects.select_related('sender', 'receiver')


@api_view(['GET', 'POST'])
def message_list(request):
    user_id = request.user.user_id
    if request.method == 'GET':
        qs = _messages().filter(Q(sender_id=user_id) | Q(receiver_id=user_id)).order_by('-sent_at')
        return Response(MessageSerializer(qs, many=True).data)

    s = MessageSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    message = s.save(sender_id=user_id)
    message = _messages().get(pk=message.pk)
    return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def message_conversation(request, other_user_id):
    user_id = request.user.user_id
    qs = _messages().filter(
        Q(sender_id=user_id, receiver_id=other_user_id) | Q(sender_id=other_user_id, receiver_id=user_id)
    ).order_by('-sent_at')
    return Response(MessageSerializer(qs, many=True).data)


@api_view(['PATCH'])
def message_read(request, message_id):
    message = notifications.mark_message_read(message_id, request.user.user_id)
    message = _messages().get(pk=message.pk)
    return Response(MessageSerializer(message).data)


@api_view(['GET', 'POST'])
def notification_list(request):
    if request.method == 'GET':
        qs = notifications.for_user(request.user.user_id)
        return Response(NotificationSerializer(qs, many=True).data)

    s = NotificationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    notification = notifications.notify(
        vd['user'], vd['type'], vd['title'], vd['message'], related_id=vd.get('related_id'),
    )
    return Response(NotificationSerializer(notification).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def notification_unread(request):
    qs = notifications.for_user(request.user.user_id, unread_only=True)
    return Response(NotificationSerializer(qs, many=True).data)


@api_view(['PATCH'])
def notification_read(request, notification_id):
    notification = notifications.mark_read(notification_id, request.user.user_id)
    return Response(NotificationSerializer(notification).data)


@api_view(['PATCH'])
def notification_read_all(request):
    user_id = request.user.user_id
    notifications.mark_all_read(user_id)
    return Response({
        'message': 'All notifications marked as read',
        'notifications': NotificationSerializer(notifications.for_user(user_id), many=True).data,
    })
