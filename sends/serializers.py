from rest_framework import serializers

from .models import Send, Sendable


class SendableSerializer(serializers.ModelSerializer):
    model = serializers.SerializerMethodField()
    id = serializers.IntegerField(source='object_id', read_only=True)

    class Meta:
        model = Sendable
        fields = ["model", "id"]

    def get_model(self, obj):
        return f"{obj.content_type.app_label}.{obj.content_type.model}"


class SendSerializer(serializers.ModelSerializer):
    sendables = SendableSerializer(many=True, read_only=True)

    class Meta:
        model = Send
        fields = [
            "id", "uuid", "mail_class", "subject", "content",
            "from_address", "reply_to", "to", "cc", "bcc",
            "sent_at", "sendables",
        ]
        read_only_fields = fields
