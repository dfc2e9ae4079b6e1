"""
Accounts app models - Users and their role.
"""
from django.contrib.auth.models import AbstractUser
from django.db import models

from fieldops.utils.base_model import BaseModel
from fieldops.utils.enum import choices
from accounts.types import UserRole


class User(AbstractUser, BaseModel):
    """
    User model that extends Django's AbstractUser.

    The role decides what the user may manage. It does not decide which
    tasks show up in a search: workers are always scoped to their own
    assignments, admins only when they ask for it.
    """

    role = models.CharField(
        max_length=20,
        choices=choices(UserRole),
        default=UserRole.WORKER,
    )

    def __str__(self):
        return self.email or self.username

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
