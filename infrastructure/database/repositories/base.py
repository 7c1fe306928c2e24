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
Базовый репозиторий с общими CRUD операциями.

Каждая пишущая операция завершается commit, т.е. выполняется
в своей транзакции.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

T = TypeVar('T')


class BaseRepository(Generic[T]):
    """Базовый репозиторий с типовыми CRUD операциями."""

    def __init__(self, session: Session, model: Type[T]):
        self.session = session
        self.model = model

    def get_by_id(self, id: int) -> Optional[T]:
        """Получает запись по ID."""
        return self.session.get(self.model, id)

    def create(self, entity: T) -> T:
        """Создаёт новую запись."""
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def save(self, entity: T) -> T:
        """Сохраняет изменения уже загруженной записи."""
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        """Удаляет запись."""
        self.session.delete(entity)
        self.session.commit()

    def exists(self, **filters) -> bool:
        """Проверяет существование записи по фильтрам."""
        stmt = select(exists().where(
            *(getattr(self.model, key) == value for key, value in filters.items())
        ))
        return bool(self.session.scalar(stmt))
