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

"""Аутентификация по Bearer-токену Keycloak и проверка ролей."""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies.runtime import get_keycloak
from infrastructure.keycloak import InvalidTokenError, KeycloakClient

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Пользователь из проверенного токена."""
    username: str
    roles: FrozenSet[str] = field(default_factory=frozenset)

    def has_any_role(self, *roles: str) -> bool:
        return any(role in self.roles for role in roles)


def user_from_token(token: Optional[str], keycloak: KeycloakClient) -> Optional[CurrentUser]:
    """
    Проверяет токен и собирает CurrentUser.

    Returns:
        None если токена нет

    Raises:
        InvalidTokenError: если токен есть, но невалиден
    """
    if not token:
        return None
    claims = keycloak.decode(token)
    username = claims.get("preferred_username") or claims.get("sub") or "unknown"
    return CurrentUser(username=username, roles=frozenset(keycloak.roles(claims)))


def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    keycloak: KeycloakClient = Depends(get_keycloak),
) -> Optional[CurrentUser]:
    token = credentials.credentials if credentials else None
    try:
        return user_from_token(token, keycloak)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user(user: Optional[CurrentUser] = Depends(get_current_user_optional)) -> CurrentUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_roles(*roles: str):
    """Зависимость: пользователь должен иметь хотя бы одну из ролей."""
    def _require_roles(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not user.has_any_role(*roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"One of the roles {', '.join(roles)} required",
            )
        return user

    return _require_roles
