from authentication.models import User


def get_user_or_none(email):
    try:
        return User.objects.get(email__iexact=(email or "").strip())
    except User.DoesNotExist:
        return None


def normalize_email(email):
    return (email or "").strip().lower()


def build_user_payload(user):
    return {
        "id": user.pk,
        "email": user.email,
        "name": user.name,
        "role": user.role,
    }


def build_login_response(user, token):
    return {
        "token": token,
        "user": build_user_payload(user),
    }
