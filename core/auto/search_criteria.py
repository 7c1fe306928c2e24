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
Критерии поиска автомобилей.

Критерии задаются словарём «ключ -> значение»:
- model: подстрока в названии модели (без учёта регистра)
- horsepower: минимальная мощность
- price: максимальная цена
- comfort / sport / electric / hybrid: флаги ключевых слов
- любое другое поле Auto: сравнение на равенство
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from infrastructure.database.models import Auto
from models.auto_enums import AutoKind, KeywordFlag

MODEL_KEY = "model"
HORSEPOWER_KEY = "horsepower"
PRICE_KEY = "price"
KIND_KEY = "kind"
KEYWORDS_KEY = "keywords"

FLAG_KEYS = frozenset(flag.value for flag in KeywordFlag)

# Колонки таблицы auto, по которым допускается сравнение на равенство
AUTO_COLUMNS = {column.key: column for column in Auto.__table__.columns}

VALID_KEYS = frozenset(AUTO_COLUMNS) | {MODEL_KEY} | FLAG_KEYS

# Диапазон колонок Integer (32 бит со знаком)
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


def invalid_keys(keys: Iterable[str]) -> list:
    """Возвращает ключи, которые не являются допустимыми критериями."""
    return [key for key in keys if key not in VALID_KEYS]


def is_valid_kind(value: Any) -> bool:
    if value is None or isinstance(value, AutoKind):
        return True
    return value in AutoKind.values()


def is_flag_set(value: Any) -> bool:
    """Флаг считается установленным только для True или строки 'true'."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


def parse_number(value: Any) -> Optional[Decimal]:
    """Число из критерия; None, если значение не число."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def parse_int(value: Any) -> Optional[int]:
    """Целое число из критерия в диапазоне колонки Integer; иначе None."""
    number = parse_number(value)
    if number is None or not INT_MIN <= number <= INT_MAX:
        return None
    return int(number)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value}")


def coerce_value(key: str, value: Any) -> Any:
    """
    Приводит значение критерия к типу колонки.

    Raises:
        ValueError: если значение нельзя привести к типу колонки.
    """
    if value is None:
        return None

    if key == KEYWORDS_KEY:
        if isinstance(value, (list, tuple)):
            return list(value)
        return [part for part in str(value).split(",") if part]

    python_type = AUTO_COLUMNS[key].type.python_type

    if python_type is bool:
        return _parse_bool(value)
    if python_type is int:
        number = int(value)
        if not INT_MIN <= number <= INT_MAX:
            raise ValueError(f"out of range: {value}")
        return number
    if isinstance(value, python_type):
        return value
    if isinstance(python_type, type) and issubclass(python_type, Enum):
        return python_type(value)
    if python_type is datetime:
        return datetime.fromisoformat(str(value))
    if python_type is date:
        return date.fromisoformat(str(value))
    if python_type is Decimal:
        try:
            return Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f"not a decimal: {value}")
    return python_type(value)


def normalize(criteria: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Отбрасывает пустые значения (None), чтобы они не попадали в запрос."""
    if not criteria:
        return {}
    return {key: value for key, value in criteria.items() if value is not None}
