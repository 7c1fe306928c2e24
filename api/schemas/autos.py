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
Схемы для эндпоинтов /rest.

Входные DTO валидируются pydantic, выходные модели строятся
из ORM-объектов через from_attributes.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.auto_enums import AutoKind

VIN_PATTERN = r"^[A-HJ-NPR-Z0-9]{17}$"
HOMEPAGE_PATTERN = r"^https?://[^\s/$.?#][^\s]*$"


class ModelDTO(BaseModel):
    """Модель автомобиля (название и подзаголовок)."""
    name: str = Field(..., pattern=r"^\w.*", max_length=40, examples=["Alpha"])
    subtitle: Optional[str] = Field(None, max_length=40, examples=["alpha"])


class ImageDTO(BaseModel):
    """Описание изображения автомобиля."""
    caption: str = Field(..., max_length=32, examples=["Abb. 1"])
    content_type: Optional[str] = Field(None, max_length=16, examples=["img/png"])


class AutoUpdateDTO(BaseModel):
    """
    Данные автомобиля без модели и изображений.

    Используется для PUT: модель и изображения при изменении не трогаются.
    """
    vin: str = Field(..., pattern=VIN_PATTERN, examples=["WVWZZZ1JZXW000001"])
    horsepower: int = Field(..., ge=0, examples=[150])
    kind: Optional[AutoKind] = Field(None, examples=["SUV"])
    price: Decimal = Field(..., ge=0, max_digits=8, decimal_places=2, examples=["19999.99"])
    discount: Optional[Decimal] = Field(None, ge=0, le=1, max_digits=4, decimal_places=3, examples=["0.05"])
    available: bool = False
    release_date: Optional[date] = Field(None, examples=["2022-02-28"])
    homepage: Optional[str] = Field(None, pattern=HOMEPAGE_PATTERN, max_length=200, examples=["https://acme.at"])
    keywords: Optional[List[str]] = Field(None, examples=[["COMFORT", "SPORT"]])


class AutoDTO(AutoUpdateDTO):
    """Новый автомобиль вместе с моделью и изображениями."""
    model: ModelDTO
    images: Optional[List[ImageDTO]] = None


class ModelOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    subtitle: Optional[str] = None


class ImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    caption: str
    content_type: Optional[str] = None


class AutoOut(BaseModel):
    """Автомобиль в ответе REST."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    version: int
    vin: str
    horsepower: int
    kind: Optional[AutoKind] = None
    price: Decimal
    discount: Optional[Decimal] = None
    available: bool
    release_date: Optional[date] = None
    homepage: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    model: Optional[ModelOut] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None


class AutoDetailOut(AutoOut):
    """Автомобиль по ID вместе с изображениями."""
    images: List[ImageOut] = Field(default_factory=list)


class PageMeta(BaseModel):
    """Метаданные страницы."""
    size: int
    number: int
    total_elements: int = Field(..., serialization_alias="totalElements")
    total_pages: int = Field(..., serialization_alias="totalPages")


class AutosPage(BaseModel):
    """Страница результатов поиска."""
    content: List[AutoOut]
    page: PageMeta
