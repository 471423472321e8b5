from rest_framework import serializers

from .models import Group, GroupMember, GroupMessage, GroupSession


class AuthorSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()


class MemberSerializer(serializers.ModelSerializer):
    """Flattened user plus the role held in this group."""

    id = serializers.IntegerField(source="user.id")
    name = serializers.CharField(source="user.name")
    email = serializers.EmailField(source="user.email")

    class Meta:
        model = GroupMember
        fields = ["id", "name", "email", "role"]


class GroupMessageSerializer(serializers.ModelSerializer):
    user = AuthorSerializer(allow_null=True, read_only=True)
    group_session_id = serializers.IntegerField(source="session_id", read_only=True)

    class Meta:
        model = GroupMessage
        fields = ["id", "content", "role", "group_session_id", "user", "created_at"]


class GroupSessionSerializer(serializers.ModelSerializer):
    messages = GroupMessageSerializer(many=True, read_only=True)
    group_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = GroupSession
        fields = ["id", "name", "group_id", "created_at", "messages"]


class LastSessionSerializer(serializers.ModelSerializer):
    class Meta:
        model = GroupSession
        fields = ["id", "name", "created_at"]


class GroupSerializer(serializers.ModelSerializer):
    members = MemberSerializer(many=True, read_only=True)

    class Meta:
        model = Group
        fields = ["id", "name", "created_by_id", "created_at", "members"]


class GroupRosterSerializer(serializers.ModelSerializer):
    """One entry of GET /groups: annotated by groups.service.list_groups_for_user."""

    role = serializers.CharField(source="my_role")
    members = MemberSerializer(many=True, read_only=True)
    last_session = LastSessionSerializer(allow_null=True, read_only=True)

    class Meta:
        model = Group
        fields = ["id", "name", "role", "members", "last_session"]


class GroupCreateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, default="")
    selected_users = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)


class GroupTurnSerializer(serializers.Serializer):
    content = serializers.CharField(trim_whitespace=False)
    ask_bot = serializers.BooleanField(required=False, default=False)
