from rest_framework import serializers

from clinic.models import Message, Notification
from clinic.serializers.base import CamelModelSerializer


class MessageSerializer(CamelModelSerializer):
    sender_name = serializers.CharField(source='sender.name', read_only=True)
    receiver_name = serializers.CharField(source='receiver.name', read_only=True)

    class Meta:
        model = Message
        fields = (
            'id', 'sender', 'sender_name', 'receiver', 'receiver_name', 'subject', 'content', 'status',
            'is_patient_portal', 'patient', 'sent_at', 'read_at',
        )
        read_only_fields = ('id', 'sender', 'status', 'sent_at', 'read_at')

    def validate_content(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Message cannot be empty')
        return v


class NotificationSerializer(CamelModelSerializer):
    class Meta:
        model = Notification
        fields = ('id', 'user', 'type', 'title', 'message', 'related_id', 'is_read', 'created_at')
        read_only_fields = ('id', 'is_read', 'created_at')
