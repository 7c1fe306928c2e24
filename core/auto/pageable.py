"""Пагинация: номер страницы и размер страницы, а также срез результата."""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar, Union

DEFAULT_PAGE_SIZE = 5
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_NUMBER = 0
# offset = number * size должен помещаться в 32-битный INTEGER
MAX_PAGE_NUMBER = (2 ** 31 - 1) // MAX_PAGE_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class Pageable:
    """
    Параметры страницы.

    number начинается с 0. size == 0 означает «без ограничения».
    """
    number: int = DEFAULT_PAGE_NUMBER
    size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return self.number * self.size


@dataclass
class Slice(Generic[T]):
    """Одна страница результата и общее количество найденных записей."""
    content: List[T] = field(default_factory=list)
    total_elements: int = 0

    def total_pages(self, pageable: Pageable) -> int:
        if pageable.size == 0:
            return 1 if self.total_elements else 0
        return math.ceil(self.total_elements / pageable.size)


def _parse_int(value: Union[str, int, None]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def create_pageable(number: Any = None, size: Any = None) -> Pageable:
    """
    Собирает Pageable из (возможно строковых) параметров запроса.

    Невалидный или отрицательный номер страницы -> 0, слишком большой -> MAX_PAGE_NUMBER,
    невалидный размер -> DEFAULT_PAGE_SIZE, слишком большой -> MAX_PAGE_SIZE.
    """
    number_int = _parse_int(number)
    if number_int is None or number_int < 0:
        number_int = DEFAULT_PAGE_NUMBER
    elif number_int > MAX_PAGE_NUMBER:
        number_int = MAX_PAGE_NUMBER

    size_int = _parse_int(size)
    if size_int is None or size_int < 0:
        size_int = DEFAULT_PAGE_SIZE
    elif size_int > MAX_PAGE_SIZE:
        size_int = MAX_PAGE_SIZE

    return Pageable(number=number_int, size=size_int)
