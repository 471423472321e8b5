"""
Authenticator operations. Token signing and verification live in tokens.py.
"""
import logging

from django.contrib.auth.hashers import make_password
from django.db import IntegrityError, transaction

from authentication.helpers import get_user_or_none, normalize_email
from authentication.models import User
from authentication.tokens import create_access_token
from utils.errors import BadRequest, Conflict, Forbidden, InvalidCredentials, NotFound

logger = logging.getLogger(__name__)


def login(email, password):
    """Return (token, user) or raise InvalidCredentials."""
    user = get_user_or_none(email)
    if user is None:
        # hash anyway so unknown emails cost the same as wrong passwords
        make_password(password or "")
        logger.info("Login failed for unknown email %s", normalize_email(email))
        raise InvalidCredentials()

    if not user.check_password(password or ""):
        logger.info("Login failed for %s", user.email)
        raise InvalidCredentials()

    logger.info("User %s logged in", user.email)
    return create_access_token(user), user


def register(requestor, email, password, name="", role=User.ROLE_USER):
    """Create a user on behalf of a global admin."""
    if requestor is None or not requestor.is_admin:
        raise Forbidden()

    email = normalize_email(email)
    if not email or not password:
        raise BadRequest("Email and password are required")
    if role not in dict(User.ROLE_CHOICES):
        raise BadRequest("role must be 'user' or 'admin'")

    if User.objects.filter(email__iexact=email).exists():
        raise Conflict()

    try:
        with transaction.atomic():
            user = User.objects.create(
                email=email,
                password=make_password(password),
                name=name or "",
                role=role,
                created_by=requestor,
            )
    except IntegrityError:
        # lost a race against another registration of the same email
        raise Conflict()

    logger.info("User %s registered by %s", user.email, requestor.email)
    return user


def change_role(requestor, user_id, role):
    if requestor is None or not requestor.is_admin:
        raise Forbidden()
    if role not in dict(User.ROLE_CHOICES):
        raise BadRequest("role must be 'user' or 'admin'")

    user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise NotFound("User not found")

    user.role = role
    user.save(update_fields=["role"])
    logger.info("User %s role set to %s by %s", user.email, role, requestor.email)
    return user
