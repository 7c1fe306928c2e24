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

"""Чтение автомобилей: по ID, поиск по критериям, бинарный файл."""

import re
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from core.auto import search_criteria as sc
from core.auto.exceptions import AutoNotFoundException, InvalidSearchCriteriaException
from core.auto.pageable import Pageable, Slice
from core.auto.query_builder import AutoQueryBuilder
from infrastructure.database.models import Auto, AutoFile
from infrastructure.database.repositories import AutoFileRepository
from infrastructure.logging.logger import setup_logger

logger = setup_logger("auto_read_service")


class AutoReadService:
    """
    Чтение автомобилей из БД.

    Чтение не требует явной транзакции: сессия закрывается вызывающей стороной.
    """

    ID_PATTERN = re.compile(r"^[1-9]\d{0,10}$")

    @classmethod
    def is_valid_id(cls, id_str: str) -> bool:
        """Строка похожа на ID и помещается в INTEGER-колонку."""
        return bool(cls.ID_PATTERN.match(id_str)) and int(id_str) <= sc.INT_MAX

    def __init__(self, session: Session):
        self.session = session
        self.query_builder = AutoQueryBuilder(session)
        self.file_repo = AutoFileRepository(session)

    def find_by_id(self, auto_id: int, with_images: bool = False) -> Auto:
        """
        Находит автомобиль по ID.

        Args:
            auto_id: ID автомобиля
            with_images: Подгружать ли изображения

        Returns:
            Найденный Auto

        Raises:
            AutoNotFoundException: если автомобиля с таким ID нет
        """
        logger.debug(f"find_by_id: id={auto_id}, with_images={with_images}")

        stmt = self.query_builder.build_id(auto_id, with_images=with_images)
        auto = self.session.scalars(stmt).unique().first()
        if auto is None:
            raise AutoNotFoundException(auto_id)

        if auto.keywords is None:
            auto.keywords = []

        logger.debug(f"find_by_id: auto={auto}, model={auto.model}")
        return auto

    def find_file_by_auto_id(self, auto_id: int) -> Optional[AutoFile]:
        """Бинарный файл автомобиля или None."""
        logger.debug(f"find_file_by_auto_id: auto_id={auto_id}")
        auto_file = self.file_repo.get_by_auto_id(auto_id)
        if auto_file is None:
            logger.debug("find_file_by_auto_id: файл не найден")
            return None

        logger.debug(f"find_file_by_auto_id: filename={auto_file.filename}")
        return auto_file

    def find(self, criteria: Optional[Dict[str, Any]], pageable: Pageable) -> Slice[Auto]:
        """
        Ищет автомобили по критериям.

        Args:
            criteria: Критерии поиска (см. core/auto/search_criteria.py)
            pageable: Номер и размер страницы

        Returns:
            Slice с найденными автомобилями и общим количеством

        Raises:
            InvalidSearchCriteriaException: неизвестный ключ или недопустимый kind
            AutoNotFoundException: ничего не найдено
        """
        logger.debug(f"find: criteria={criteria}, pageable={pageable}")

        criteria = sc.normalize(criteria)
        if criteria:
            self._check_keys(list(criteria))
            self._check_enums(criteria)

        autos = list(self.session.scalars(self.query_builder.build(criteria, pageable)).unique())
        if not autos:
            logger.debug("find: автомобили не найдены")
            if criteria:
                raise AutoNotFoundException(
                    message=f"No autos found: {criteria}, page {pageable.number}"
                )
            raise AutoNotFoundException(message=f"Invalid page {pageable.number}")

        total_elements = self.session.scalar(self.query_builder.count(criteria)) or 0
        return self._create_slice(autos, total_elements)

    @staticmethod
    def _create_slice(autos: List[Auto], total_elements: int) -> Slice[Auto]:
        for auto in autos:
            if auto.keywords is None:
                auto.keywords = []
        auto_slice = Slice(content=autos, total_elements=total_elements)
        logger.debug(f"create_slice: {len(autos)} из {total_elements}")
        return auto_slice

    @staticmethod
    def _check_keys(keys: List[str]) -> None:
        invalid = sc.invalid_keys(keys)
        if invalid:
            logger.debug(f"check_keys: недопустимые критерии {invalid}")
            raise InvalidSearchCriteriaException(invalid[0])

    @staticmethod
    def _check_enums(criteria: Dict[str, Any]) -> None:
        kind = criteria.get(sc.KIND_KEY)
        if not sc.is_valid_kind(kind):
            logger.debug(f"check_enums: недопустимый kind={kind}")
            raise InvalidSearchCriteriaException(sc.KIND_KEY, kind)
