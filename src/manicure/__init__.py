"""Manicure history log."""

from .models import ManicureEntry, NailShape
from .store import ManicureStore

__all__ = ["ManicureEntry", "ManicureStore", "NailShape"]
