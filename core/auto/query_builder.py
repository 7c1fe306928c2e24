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

"""Построение SELECT-запросов для поиска автомобилей."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import String, Text, cast, func, literal, select
from sqlalchemy.orm import Session, contains_eager, selectinload
from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement

from core.auto import search_criteria as sc
from core.auto.exceptions import InvalidSearchCriteriaException
from core.auto.pageable import Pageable
from infrastructure.database.models import Auto, AutoModel
from infrastructure.logging.logger import setup_logger
from models.auto_enums import KeywordFlag

logger = setup_logger("auto_query_builder")


class AutoQueryBuilder:
    """
    Собирает запросы к таблице auto.

    Каждый критерий превращается в отдельное условие, все условия
    объединяются через AND.
    """

    def __init__(self, session: Session):
        self.session = session

    def build_id(self, auto_id: int, with_images: bool = False) -> Select:
        """
        Автомобиль по ID вместе с моделью.

        Args:
            auto_id: ID автомобиля
            with_images: Подгружать ли изображения

        Returns:
            Select для выполнения через session.scalars(...)
        """
        stmt = (
            select(Auto)
            .join(Auto.model)
            .options(contains_eager(Auto.model))
        )
        if with_images:
            stmt = stmt.options(selectinload(Auto.images))

        return stmt.where(Auto.id == auto_id)

    def build(self, criteria: Optional[Dict[str, Any]], pageable: Optional[Pageable]) -> Select:
        """
        Поиск автомобилей по критериям с пагинацией.

        Args:
            criteria: Критерии поиска, например
                {"model": "a", "horsepower": 100, "price": "30000", "sport": "true"}
            pageable: Номер и размер страницы. size == 0 -> без ограничения

        Returns:
            Select, упорядоченный по ID

        Raises:
            InvalidSearchCriteriaException: если значение нельзя привести к типу поля
        """
        conditions = self.conditions(criteria)
        logger.debug(f"build: criteria={criteria}, pageable={pageable}")

        stmt = (
            select(Auto)
            .join(Auto.model)
            .options(contains_eager(Auto.model))
            .where(*conditions)
            .order_by(Auto.id)
        )

        if pageable is not None and pageable.size > 0:
            logger.debug(f"build: limit={pageable.size}, offset={pageable.offset}")
            stmt = stmt.limit(pageable.size).offset(pageable.offset)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"build: sql={self._render(stmt)}")
        return stmt

    def count(self, criteria: Optional[Dict[str, Any]]) -> Select:
        """Количество автомобилей, подходящих под критерии, без пагинации."""
        return (
            select(func.count(Auto.id))
            .join(Auto.model)
            .where(*self.conditions(criteria))
        )

    def conditions(self, criteria: Optional[Dict[str, Any]]) -> List[ColumnElement]:
        criteria = dict(sc.normalize(criteria))
        conditions: List[ColumnElement] = []

        # Модель: подстрока без учёта регистра
        model = criteria.pop(sc.MODEL_KEY, None)
        if isinstance(model, str):
            conditions.append(
                func.lower(AutoModel.name).contains(model.lower(), autoescape=True)
            )

        # Мощность: минимальное значение, нечисловые и слишком большие значения игнорируются
        horsepower = sc.parse_int(criteria.pop(sc.HORSEPOWER_KEY, None))
        if horsepower is not None:
            conditions.append(Auto.horsepower >= horsepower)

        # Цена: верхняя граница
        price = sc.parse_number(criteria.pop(sc.PRICE_KEY, None))
        if price is not None:
            conditions.append(Auto.price <= price)

        # Ключевые слова: ищем слово целиком, SPORT не совпадает с SPORTLINE
        for flag in KeywordFlag:
            if sc.is_flag_set(criteria.pop(flag.value, None)):
                conditions.append(self._keyword_condition(flag.keyword))

        # Остальные критерии: сравнение на равенство
        for key, value in criteria.items():
            if key not in sc.AUTO_COLUMNS:
                raise InvalidSearchCriteriaException(key, value)
            try:
                coerced = sc.coerce_value(key, value)
            except (TypeError, ValueError):
                logger.debug(f"conditions: значение не подходит к полю {key}: {value!r}")
                raise InvalidSearchCriteriaException(key, value)
            conditions.append(getattr(Auto, key) == coerced)

        return conditions

    @staticmethod
    def _keyword_condition(keyword: str) -> ColumnElement:
        keywords = func.upper(cast(Auto.keywords, Text))
        wrapped = literal(",", String).concat(keywords).concat(",")
        return wrapped.like(f"%,{keyword},%")

    def _render(self, stmt: Select) -> str:
        bind = self.session.get_bind()
        return str(stmt.compile(dialect=bind.dialect))
