"""
Type definitions for the accounts app.
"""
from enum import StrEnum


class UserRole(StrEnum):
    ADMIN = "admin"
    WORKER = "worker"
