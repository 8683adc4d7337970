"""Leisure idea generator."""

from .models import LeisureIdea
from .store import IdeaStore

__all__ = ["IdeaStore", "LeisureIdea"]
