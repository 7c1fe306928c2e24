"""Типы GraphQL-схемы: выходные типы и input-типы."""

from datetime import date
from decimal import Decimal
from typing import List, Optional

import strawberry

from infrastructure.database.models import Auto
from models.auto_enums import AutoKind

AutoKindType = strawberry.enum(AutoKind, name="AutoKind")


@strawberry.type(name="Model")
class ModelType:
    name: str
    subtitle: Optional[str]


@strawberry.type(name="Auto")
class AutoType:
    id: strawberry.ID
    version: int
    vin: str
    horsepower: int
    kind: Optional[AutoKindType]
    price: Decimal
    available: bool
    release_date: Optional[date]
    homepage: Optional[str]
    keywords: List[str]
    model: Optional[ModelType]
    discount_value: strawberry.Private[Optional[Decimal]]

    @strawberry.field
    def discount(self, short: Optional[bool] = True) -> str:
        """Скидка как строка: '0.011 %' или '0.011 percent'."""
        discount = self.discount_value if self.discount_value is not None else Decimal(0)
        suffix = "%" if short is None or short else "percent"
        return f"{discount} {suffix}"

    @classmethod
    def from_entity(cls, auto: Auto) -> "AutoType":
        model = None
        if auto.model is not None:
            model = ModelType(name=auto.model.name, subtitle=auto.model.subtitle)
        return cls(
            id=strawberry.ID(str(auto.id)),
            version=auto.version,
            vin=auto.vin,
            horsepower=auto.horsepower,
            kind=auto.kind,
            price=auto.price,
            available=auto.available,
            release_date=auto.release_date,
            homepage=auto.homepage,
            keywords=list(auto.keywords or []),
            model=model,
            discount_value=auto.discount,
        )


@strawberry.type
class CreatePayload:
    id: int


@strawberry.type
class UpdatePayload:
    version: int


@strawberry.input
class ModelInput:
    name: str
    subtitle: Optional[str] = None


@strawberry.input
class ImageInput:
    caption: str
    content_type: Optional[str] = None


@strawberry.input
class AutoInput:
    vin: str
    horsepower: int
    price: Decimal
    model: ModelInput
    kind: Optional[AutoKindType] = None
    discount: Optional[Decimal] = None
    available: bool = False
    release_date: Optional[date] = None
    homepage: Optional[str] = None
    keywords: Optional[List[str]] = None
    images: Optional[List[ImageInput]] = None


@strawberry.input
class AutoUpdateInput:
    id: strawberry.ID
    version: int
    vin: str
    horsepower: int
    price: Decimal
    kind: Optional[AutoKindType] = None
    discount: Optional[Decimal] = None
    available: bool = False
    release_date: Optional[date] = None
    homepage: Optional[str] = None
    keywords: Optional[List[str]] = None


@strawberry.input
class SearchCriteriaInput:
    model: Optional[str] = None
    horsepower: Optional[int] = None
    price: Optional[Decimal] = None
    kind: Optional[AutoKindType] = None
    vin: Optional[str] = None
    available: Optional[bool] = None
    comfort: Optional[bool] = None
    sport: Optional[bool] = None
    electric: Optional[bool] = None
    hybrid: Optional[bool] = None
