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

"""Запись автомобилей: создание, файл, изменение с проверкой версии, удаление."""

import re
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from core.auto.exceptions import (
    AutoNotFoundException,
    VersionInvalidException,
    VersionOutdatedException,
    VinExistsException,
)
from core.auto.read_service import AutoReadService
from infrastructure.database.models import Auto, AutoFile, utcnow
from infrastructure.database.repositories import AutoFileRepository, AutoRepository
from infrastructure.logging.logger import setup_logger
from infrastructure.mail import MailService

logger = setup_logger("auto_write_service")

# Поля, которые меняет update; модель, изображения и файл не трогаем
UPDATABLE_FIELDS = (
    "vin",
    "horsepower",
    "kind",
    "price",
    "discount",
    "available",
    "release_date",
    "homepage",
    "keywords",
)


class AutoWriteService:
    """
    Прикладное ядро для изменения автомобилей.

    Оптимистическая блокировка: номер версии приходит как ETag ("3"),
    версия в БД увеличивается SQLAlchemy при каждом UPDATE.
    """

    VERSION_PATTERN = re.compile(r'^"\d{1,3}"$')

    def __init__(self, session: Session, mail_service: Optional[MailService] = None):
        self.session = session
        self.repo = AutoRepository(session)
        self.file_repo = AutoFileRepository(session)
        self.read_service = AutoReadService(session)
        self.mail_service = mail_service or MailService()

    def create(self, auto: Auto) -> int:
        """
        Сохраняет новый автомобиль вместе с моделью и изображениями.

        Returns:
            ID нового автомобиля

        Raises:
            VinExistsException: если VIN уже существует
        """
        logger.debug(f"create: auto={auto}")
        self._validate_create(auto)

        if auto.keywords is None:
            auto.keywords = []

        try:
            auto_db = self.repo.create(auto)
        except IntegrityError:
            # VIN мог появиться между проверкой и INSERT
            self.session.rollback()
            raise VinExistsException(auto.vin)

        self._sendmail(auto_db)
        logger.info(f"Создан автомобиль id={auto_db.id}, vin={auto_db.vin}")
        return auto_db.id

    def add_file(self, auto_id: int, data: bytes, filename: str, mimetype: Optional[str]) -> AutoFile:
        """
        Сохраняет бинарный файл (например, фото) к существующему автомобилю.

        Ранее сохранённый файл заменяется.

        Raises:
            AutoNotFoundException: если автомобиля нет
        """
        logger.debug(f"add_file: auto_id={auto_id}, filename={filename}, mimetype={mimetype}")
        auto = self.read_service.find_by_id(auto_id)
        return self.file_repo.replace(auto, data, filename, mimetype)

    def update(self, auto_id: Optional[int], auto: Auto, version: Optional[str]) -> int:
        """
        Изменяет существующий автомобиль.

        Args:
            auto_id: ID изменяемого автомобиля
            auto: Новые значения (не привязан к сессии)
            version: Версия в формате ETag, например '"0"'

        Returns:
            Новый номер версии

        Raises:
            AutoNotFoundException: если автомобиля нет
            VersionInvalidException: если версия не в формате ETag
            VersionOutdatedException: если версия устарела
        """
        logger.debug(f"update: id={auto_id}, auto={auto}, version={version}")
        if auto_id is None:
            logger.debug("update: нет корректного ID")
            raise AutoNotFoundException(auto_id)

        auto_db = self._validate_update(auto_id, version)

        for field in UPDATABLE_FIELDS:
            setattr(auto_db, field, getattr(auto, field))
        if auto_db.keywords is None:
            auto_db.keywords = []
        auto_db.updated = utcnow()

        try:
            updated = self.repo.save(auto_db)
        except IntegrityError:
            self.session.rollback()
            raise VinExistsException(auto.vin)
        except StaleDataError:
            # строку успели изменить в другой транзакции
            self.session.rollback()
            raise VersionOutdatedException(int(version[1:-1]))

        logger.debug(f"update: updated={updated}")
        return updated.version

    def delete(self, auto_id: int) -> bool:
        """
        Удаляет автомобиль вместе с моделью, изображениями и файлом.

        Returns:
            True если автомобиль был удалён

        Raises:
            AutoNotFoundException: если автомобиля нет
        """
        logger.debug(f"delete: id={auto_id}")
        self.read_service.find_by_id(auto_id, with_images=True)

        deleted = self.repo.delete_by_id(auto_id)
        logger.info(f"Удалён автомобиль id={auto_id}: {deleted}")
        return deleted

    def _validate_create(self, auto: Auto) -> None:
        logger.debug(f"validate_create: vin={auto.vin}")
        if self.repo.exists_by_vin(auto.vin):
            raise VinExistsException(auto.vin)

    def _validate_update(self, auto_id: int, version_str: Optional[str]) -> Auto:
        logger.debug(f"validate_update: id={auto_id}, version={version_str}")
        if version_str is None or not self.VERSION_PATTERN.match(version_str):
            raise VersionInvalidException(version_str)

        version = int(version_str[1:-1])

        auto_db = self.read_service.find_by_id(auto_id)
        if version < auto_db.version:
            logger.debug(f"validate_update: version={version} < version_db={auto_db.version}")
            raise VersionOutdatedException(version)

        return auto_db

    def _sendmail(self, auto: Auto) -> None:
        subject = f"New auto {auto.id}"
        model_name = auto.model.name if auto.model is not None else "N/A"
        body = f"The auto with model <strong>{model_name}</strong> has been created"
        self.mail_service.sendmail(subject=subject, body=body)
