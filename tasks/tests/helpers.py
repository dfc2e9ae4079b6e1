"""
Shared fixtures for tasks tests.
"""
from accounts.models import User
from accounts.types import UserRole
from tasks.search.filters import Principal
from tasks.services import TaskService


def make_user(username: str, role: UserRole = UserRole.WORKER) -> User:
    return User.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='testpass123',
        role=role,
    )


def make_task(title=None, assignees=(), **kwargs):
    """Create a task through the service; `assignees` may be users or raw ids."""
    assignee_ids = [str(getattr(assignee, 'pk', assignee)) for assignee in assignees]
    return TaskService.create_task(title=title, assignee_ids=assignee_ids, **kwargs)


def principal_for(user) -> Principal:
    return Principal.from_user(user)
