from rest_framework import serializers

from .models import ChatMessage, ChatSession


class MessageSerializer(serializers.ModelSerializer):
    session_id = serializers.IntegerField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = ChatMessage
        fields = ["id", "content", "role", "session_id", "user_id", "created_at"]


class SessionSerializer(serializers.ModelSerializer):
    messages = MessageSerializer(many=True, read_only=True)

    class Meta:
        model = ChatSession
        fields = ["id", "name", "created_at", "messages"]


class SessionNameSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)


class MessageCreateSerializer(serializers.Serializer):
    content = serializers.CharField(trim_whitespace=False)
    role = serializers.ChoiceField(choices=["user", "assistant"], default="user")


class TurnSerializer(serializers.Serializer):
    content = serializers.CharField(trim_whitespace=False)
    session_id = serializers.IntegerField(required=False, allow_null=True)
