"""Vocabulary journal."""

from .models import Word
from .store import VocabularyStore

__all__ = ["VocabularyStore", "Word"]
