"""
Database infrastructure package.

Экспортирует основные функции и классы для работы с базой данных.
"""

from .repositories import (
    AutoRepository,
    AutoFileRepository,
)
from .session import Database
from .models import (
    Base,
    Auto,
    AutoModel,
    Image,
    AutoFile,
)

__all__ = [
    # Репозитории
    "AutoRepository",
    "AutoFileRepository",
    # Database
    "Database",
    # Модели
    "Base",
    "Auto",
    "AutoModel",
    "Image",
    "AutoFile",
]
