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

"""Репозитории для автомобилей и прикреплённых к ним файлов."""

from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from infrastructure.database.models import Auto, AutoFile
from infrastructure.database.repositories.base import BaseRepository
from infrastructure.logging.logger import setup_logger

logger = setup_logger("auto_repository")


class AutoRepository(BaseRepository[Auto]):
    """Репозиторий для записей Auto вместе с моделью и изображениями."""

    def __init__(self, session: Session):
        super().__init__(session, Auto)

    def exists_by_vin(self, vin: str) -> bool:
        return self.exists(vin=vin)

    def count_all(self) -> int:
        return self.session.scalar(select(func.count(Auto.id))) or 0

    def delete_by_id(self, auto_id: int) -> bool:
        """
        Удаляет автомобиль со всеми зависимыми записями в одной транзакции.

        Returns:
            True если строка auto была удалена
        """
        auto = self.get_by_id(auto_id)
        if auto is None:
            return False

        # cascade="all, delete-orphan" удаляет модель, изображения и файл
        self.delete(auto)
        logger.debug(f"delete_by_id: id={auto_id} удалён")
        return True


class AutoFileRepository(BaseRepository[AutoFile]):
    """Репозиторий для бинарных файлов (один файл на автомобиль)."""

    def __init__(self, session: Session):
        super().__init__(session, AutoFile)

    def get_by_auto_id(self, auto_id: int) -> Optional[AutoFile]:
        return self.session.scalars(
            select(AutoFile).where(AutoFile.auto_id == auto_id)
        ).first()

    def replace(self, auto: Auto, data: bytes, filename: str, mimetype: Optional[str]) -> AutoFile:
        """
        Сохраняет файл к автомобилю, удаляя ранее сохранённый.

        Удаление и вставка выполняются в одной транзакции.
        """
        self.session.execute(delete(AutoFile).where(AutoFile.auto_id == auto.id))
        self.session.expire(auto, ["file"])

        auto_file = AutoFile(filename=filename, mimetype=mimetype, data=data, auto_id=auto.id)
        self.session.add(auto_file)
        self.session.commit()
        self.session.refresh(auto_file)

        logger.info(f"Сохранён файл {filename} ({len(data)} байт) для auto_id={auto.id}")
        return auto_file
