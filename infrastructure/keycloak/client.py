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

"""Клиент Keycloak: получение токенов и их проверка."""

from typing import Any, Dict, Optional, Set

import jwt
import requests

from infrastructure.logging.logger import setup_logger
from settings import Settings, settings as default_settings

logger = setup_logger("keycloak")


class KeycloakError(Exception):
    """Keycloak отклонил запрос или недоступен."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class InvalidTokenError(Exception):
    """Токен не прошёл проверку подписи, срока действия или аудитории."""

    def __init__(self, message: str = "Invalid token"):
        self.message = message
        super().__init__(self.message)


class KeycloakClient:
    """
    Обёртка над token endpoint и JWKS реалма.

    Если задан KEYCLOAK_JWT_SECRET, токены проверяются по HS256,
    иначе по RS256 с ключами из JWKS.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self._jwks_client: Optional[jwt.PyJWKClient] = None

    def token(self, username: str, password: str) -> Dict[str, Any]:
        """Логин: grant_type=password."""
        return self._request_token({
            "grant_type": "password",
            "username": username,
            "password": password,
        })

    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        """Новый access token по refresh token."""
        return self._request_token({
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        })

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Проверяет токен и возвращает его claims.

        Raises:
            InvalidTokenError: если токен невалиден
        """
        options = {"verify_aud": self.config.KEYCLOAK_AUDIENCE is not None}
        try:
            if self.config.KEYCLOAK_JWT_SECRET:
                return jwt.decode(
                    token,
                    self.config.KEYCLOAK_JWT_SECRET,
                    algorithms=["HS256"],
                    audience=self.config.KEYCLOAK_AUDIENCE,
                    options=options,
                )

            signing_key = self._get_jwks_client().get_signing_key_from_jwt(token)
            return jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.config.KEYCLOAK_AUDIENCE,
                options=options,
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token expired")
        except jwt.PyJWKClientError as e:
            logger.warning(f"[keycloak] JWKS недоступен: {e}")
            raise InvalidTokenError("Signing key unavailable")
        except jwt.InvalidTokenError as e:
            logger.debug(f"[keycloak] Невалидный токен: {e}")
            raise InvalidTokenError()

    def roles(self, claims: Dict[str, Any]) -> Set[str]:
        """Роли реалма и роли клиента из claims."""
        roles = set(claims.get("realm_access", {}).get("roles", []))
        client_access = claims.get("resource_access", {}).get(self.config.KEYCLOAK_CLIENT_ID, {})
        roles.update(client_access.get("roles", []))
        return roles

    def _get_jwks_client(self) -> jwt.PyJWKClient:
        if self._jwks_client is None:
            self._jwks_client = jwt.PyJWKClient(self.config.keycloak_jwks_url)
        return self._jwks_client

    def _request_token(self, data: Dict[str, str]) -> Dict[str, Any]:
        data = dict(data, client_id=self.config.KEYCLOAK_CLIENT_ID)
        if self.config.KEYCLOAK_CLIENT_SECRET:
            data["client_secret"] = self.config.KEYCLOAK_CLIENT_SECRET

        try:
            response = requests.post(
                self.config.keycloak_token_url,
                data=data,
                timeout=self.config.KEYCLOAK_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"[keycloak] Ошибка запроса токена: {e}")
            raise KeycloakError("Keycloak is unavailable")

        if response.status_code != 200:
            logger.info(f"[keycloak] Токен не выдан: status={response.status_code}")
            raise KeycloakError("Invalid credentials", status_code=response.status_code)

        return response.json()
