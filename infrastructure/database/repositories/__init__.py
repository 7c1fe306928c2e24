"""
Репозитории для работы с моделями базы данных.

Построение поисковых запросов живёт отдельно: core/auto/query_builder.py
"""

from .auto_repository import AutoRepository, AutoFileRepository
from .base import BaseRepository

__all__ = [
    "AutoRepository",
    "AutoFileRepository",
    "BaseRepository",
]
