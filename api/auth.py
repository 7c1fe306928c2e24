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

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies.runtime import get_keycloak, get_logger
from api.schemas.token import RefreshRequest, TokenRequest, TokenResponse
from infrastructure.keycloak import KeycloakClient, KeycloakError

router = APIRouter(prefix="/auth", tags=["auth"])


def _unauthorized(e: KeycloakError) -> HTTPException:
    # Keycloak недоступен -> 503, всё остальное -> 401
    if e.status_code is None:
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)


@router.post("/token", response_model=TokenResponse)
def token(
    req: TokenRequest,
    keycloak: KeycloakClient = Depends(get_keycloak),
    logger=Depends(get_logger),
):
    """
    Логин: запрашивает токены у Keycloak по имени пользователя и паролю.

    Raises:
        HTTPException 401: неверные имя пользователя или пароль
        HTTPException 503: Keycloak недоступен
    """
    try:
        result = keycloak.token(req.username, req.password)
    except KeycloakError as e:
        logger.info(f"[AUTH] token failed username={req.username}: {e.message}")
        raise _unauthorized(e)

    logger.info(f"[AUTH] token ok username={req.username}")
    return TokenResponse.model_validate(result)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    req: RefreshRequest,
    keycloak: KeycloakClient = Depends(get_keycloak),
    logger=Depends(get_logger),
):
    """Обновляет access token по refresh token."""
    try:
        result = keycloak.refresh(req.refresh_token)
    except KeycloakError as e:
        logger.info(f"[AUTH] refresh failed: {e.message}")
        raise _unauthorized(e)

    logger.info("[AUTH] refresh ok")
    return TokenResponse.model_validate(result)
