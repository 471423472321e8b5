from django.contrib.auth.hashers import check_password, make_password
from django.db import models


class User(models.Model):
    ROLE_USER = "user"
    ROLE_ADMIN = "admin"
    ROLE_CHOICES = [(ROLE_USER, "user"), (ROLE_ADMIN, "admin")]

    email = models.EmailField(
        unique=True
    )
    # salted hash produced by django.contrib.auth.hashers, never plaintext
    password = models.CharField(
        max_length=255
    )
    name = models.CharField(
        max_length=150,
        blank=True,
        default=""
    )
    role = models.CharField(
        max_length=10,
        choices=ROLE_CHOICES,
        default=ROLE_USER
    )
    created_by = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="created_users"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.email

    @property
    def is_authenticated(self):
        """
        DRF's IsAuthenticated permission reads this attribute. A User instance
        only ever reaches request.user through a verified token.
        """
        return True

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)
