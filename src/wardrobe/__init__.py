"""Wardrobe items with in-use / stored / to-buy status."""

from .models import Season, WardrobeItem, WardrobeStatus
from .store import WardrobeStore

__all__ = ["Season", "WardrobeItem", "WardrobeStatus", "WardrobeStore"]
