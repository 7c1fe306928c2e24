from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from infrastructure.database.models import Base
from settings import settings


class Database:
    def __init__(self, db_url: Optional[str] = None):
        self.db_url = db_url or settings.DATABASE_URL

        engine_kwargs = {"future": True, "echo": settings.DB_ECHO}
        url = make_url(self.db_url)
        if url.get_backend_name() == "sqlite":
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory SQLite живёт ровно одно соединение
            if url.database in (None, "", ":memory:"):
                engine_kwargs["poolclass"] = StaticPool

        # Синхронный движок и сессия
        self.engine = create_engine(self.db_url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

    @property
    def redacted_url(self) -> str:
        """Строка подключения без пароля (для логов)."""
        return make_url(self.db_url).render_as_string(hide_password=True)

    def get_session(self) -> Session:
        return self.SessionLocal()

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        Base.metadata.drop_all(self.engine)

    def ping(self) -> bool:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.engine.dispose()
