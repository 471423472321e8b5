from django.contrib.auth.hashers import make_password

from authentication.models import User
from authentication.tokens import create_access_token

DEFAULT_PASSWORD = "GmtBot2025!"


def make_user(email, role=User.ROLE_USER, password=DEFAULT_PASSWORD, name=""):
    return User.objects.create(
        email=email,
        password=make_password(password),
        name=name or email.split("@")[0],
        role=role,
    )


def authenticate(client, user):
    """Attach a fresh bearer token for `user` to an APIClient."""
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {create_access_token(user)}")
    return client
