"""
Схемы API для Auto Catalog.

Организованы по доменам для удобства навигации и поддержки.

Структура:
- autos: Схемы для эндпоинтов /rest
- token: Схемы для эндпоинтов /auth
"""

# Autos
from api.schemas.autos import (
    AutoDTO,
    AutoUpdateDTO,
    ModelDTO,
    ImageDTO,
    AutoOut,
    AutoDetailOut,
    ModelOut,
    ImageOut,
    AutosPage,
    PageMeta,
)

# Token
from api.schemas.token import (
    TokenRequest,
    RefreshRequest,
    TokenResponse,
)

__all__ = [
    # Autos
    "AutoDTO",
    "AutoUpdateDTO",
    "ModelDTO",
    "ImageDTO",
    "AutoOut",
    "AutoDetailOut",
    "ModelOut",
    "ImageOut",
    "AutosPage",
    "PageMeta",
    # Token
    "TokenRequest",
    "RefreshRequest",
    "TokenResponse",
]
