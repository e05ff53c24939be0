from .base import Storage
from .database import DatabaseStorage
from .memory import InMemoryStorage

__all__ = [
    "Storage",
    "DatabaseStorage",
    "InMemoryStorage"
]
