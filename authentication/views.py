import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from authentication import service
from authentication.helpers import build_login_response, build_user_payload
from authentication.models import User
from authentication.permissions import IsGlobalAdmin
from authentication.serializers import LoginSerializer, RegisterSerializer, RoleSerializer, UserSerializer

logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([AllowAny])
def login(request):
    """POST {email, password} -> {token, user}. 401 on bad credentials."""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    token, user = service.login(
        serializer.validated_data["email"],
        serializer.validated_data["password"],
    )
    return Response(build_login_response(user, token), status=status.HTTP_200_OK)


def _create_user(request):
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = service.register(request.user, **serializer.validated_data)
    return Response(build_user_payload(user), status=status.HTTP_201_CREATED)


@api_view(["POST"])
@permission_classes([IsGlobalAdmin])
def register(request):
    """Admin-only user creation."""
    return _create_user(request)


@api_view(["GET"])
def me(request):
    return Response(build_user_payload(request.user), status=status.HTTP_200_OK)


# ---------------- admin ----------------

@api_view(["GET", "POST"])
@permission_classes([IsGlobalAdmin])
def admin_users(request):
    """GET: every user (for the group member picker)
       POST: create a user, same as /auth/register/
    """
    if request.method == "GET":
        users = User.objects.order_by("email")
        return Response(UserSerializer(users, many=True).data, status=status.HTTP_200_OK)
    return _create_user(request)


@api_view(["PATCH"])
@permission_classes([IsGlobalAdmin])
def admin_user_detail(request, user_id):
    serializer = RoleSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = service.change_role(request.user, user_id, serializer.validated_data["role"])
    return Response(build_user_payload(user), status=status.HTTP_200_OK)


@api_view(["GET"])
def is_admin(request):
    return Response({"is_admin": request.user.is_admin}, status=status.HTTP_200_OK)
