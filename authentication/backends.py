from rest_framework.authentication import BaseAuthentication, get_authorization_header

from authentication.models import User
from authentication.tokens import verify_token
from utils.errors import Unauthorized

KEYWORD = "Bearer"


class JWTAuthentication(BaseAuthentication):
    """
    `Authorization: Bearer <token>` authentication.

    No header at all returns None so DRF falls through to IsAuthenticated,
    which answers 401 as well. Every other failure raises Unauthorized.
    """

    def authenticate(self, request):
        header = get_authorization_header(request).split()
        if not header:
            return None

        if len(header) != 2 or header[0].decode("latin-1").lower() != KEYWORD.lower():
            raise Unauthorized()

        try:
            token = header[1].decode("utf-8")
        except UnicodeDecodeError:
            raise Unauthorized()

        claims = verify_token(token)
        user = User.objects.filter(pk=claims["id"]).first()
        if user is None:
            raise Unauthorized()
        return user, claims

    def authenticate_header(self, request):
        return KEYWORD
