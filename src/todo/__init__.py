"""Task list backed by the local record store."""

from .models import Task, TaskStatus
from .store import TaskStore

__all__ = ["Task", "TaskStatus", "TaskStore"]
