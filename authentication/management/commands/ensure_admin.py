# authentication/management/commands/ensure_admin.py
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand, CommandError

from authentication.helpers import get_user_or_none, normalize_email
from authentication.models import User


class Command(BaseCommand):
    help = "Create an admin user, or promote an existing user to admin."

    def add_arguments(self, parser):
        parser.add_argument("--email", required=True)
        parser.add_argument("--password", help="Required when the user does not exist yet.")
        parser.add_argument("--name", default="")

    def handle(self, *args, **opts):
        email = normalize_email(opts["email"])
        user = get_user_or_none(email)

        if user is None:
            if not opts.get("password"):
                raise CommandError(f"User {email} not found; pass --password to create it.")
            User.objects.create(
                email=email,
                password=make_password(opts["password"]),
                name=opts.get("name") or "",
                role=User.ROLE_ADMIN,
            )
            self.stdout.write(self.style.SUCCESS(f"Created admin {email}"))
            return

        if user.is_admin:
            self.stdout.write(f"{email} is already an admin")
            return

        user.role = User.ROLE_ADMIN
        user.save(update_fields=["role"])
        self.stdout.write(self.style.SUCCESS(f"Promoted {email} to admin"))
