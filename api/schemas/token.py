# Auto Catalog - REST/GraphQL backend for a vehicle catalogue
# Copyright (C) 2025-2026 Olga Kalinina

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.

"""
Схемы для эндпоинтов /auth.

Токены выдаёт Keycloak, сервис лишь проксирует запросы к нему.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenRequest(BaseModel):
    """Логин по имени пользователя и паролю."""
    username: str = Field(..., min_length=1, description="Имя пользователя в Keycloak")
    password: str = Field(..., min_length=1, description="Пароль")


class RefreshRequest(BaseModel):
    """Обновление access token по refresh token."""
    refresh_token: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """
    Ответ Keycloak на запрос токена.

    Attributes:
        access_token: JWT для заголовка Authorization: Bearer
        expires_in: Время жизни access token в секундах
        refresh_token: Токен для /auth/refresh
        refresh_expires_in: Время жизни refresh token в секундах
    """
    model_config = ConfigDict(extra="ignore")

    access_token: str
    expires_in: int
    refresh_token: Optional[str] = None
    refresh_expires_in: Optional[int] = None
    token_type: str = "Bearer"
