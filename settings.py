import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # Загружаем .env, если он есть

# Используем переменную окружения или текущую рабочую директорию
BASE_DIR = Path(os.getenv("AUTO_CATALOG_ROOT", os.getcwd())).resolve()


class Settings(BaseSettings):
    BASE_DIR: Path = BASE_DIR

    # База данных
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'auto.db'}"
    DB_POPULATE: bool = False  # создать схему и загрузить тестовые данные при старте
    DB_ECHO: bool = False

    # Логирование
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Path = BASE_DIR / "logs"

    # GraphQL
    GRAPHIQL: bool = True

    # Keycloak
    KEYCLOAK_URL: str = "http://localhost:8880"
    KEYCLOAK_REALM: str = "nest"
    KEYCLOAK_CLIENT_ID: str = "nest-client"
    KEYCLOAK_CLIENT_SECRET: Optional[str] = None
    # Если задан, токены проверяются по HS256 с этим секретом, иначе RS256 через JWKS
    KEYCLOAK_JWT_SECRET: Optional[str] = None
    KEYCLOAK_AUDIENCE: Optional[str] = None
    KEYCLOAK_TIMEOUT: float = 5.0

    # Почта
    MAIL_ACTIVATED: bool = False
    MAIL_HOST: str = "localhost"
    MAIL_PORT: int = 25
    MAIL_FROM: str = "auto-catalog@acme.com"
    MAIL_TO: str = "admin@acme.com"
    MAIL_TIMEOUT: float = 5.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def keycloak_realm_url(self) -> str:
        return f"{self.KEYCLOAK_URL.rstrip('/')}/realms/{self.KEYCLOAK_REALM}"

    @property
    def keycloak_token_url(self) -> str:
        return f"{self.keycloak_realm_url}/protocol/openid-connect/token"

    @property
    def keycloak_jwks_url(self) -> str:
        return f"{self.keycloak_realm_url}/protocol/openid-connect/certs"


settings = Settings()
