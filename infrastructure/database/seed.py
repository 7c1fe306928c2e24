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

"""Тестовые данные для dev-окружения (DB_POPULATE=true)."""

from datetime import date
from decimal import Decimal

from infrastructure.database.models import Auto, AutoModel, Image
from infrastructure.database.repositories import AutoRepository
from infrastructure.database.session import Database
from infrastructure.logging.logger import setup_logger
from models.auto_enums import AutoKind

logger = setup_logger("db_seed")

SAMPLE_AUTOS = [
    {
        "vin": "WVWZZZ1JZXW000001",
        "horsepower": 150,
        "kind": AutoKind.LIMOUSINE,
        "price": Decimal("11.10"),
        "discount": Decimal("0.011"),
        "available": True,
        "release_date": date(2022, 2, 1),
        "homepage": "https://acme.at",
        "keywords": ["COMFORT"],
        "model": ("Alpha", "alpha"),
        "images": [("Abb. 1", "img/png")],
    },
    {
        "vin": "WBA3A5C50CF256651",
        "horsepower": 190,
        "kind": AutoKind.SUV,
        "price": Decimal("22.20"),
        "discount": Decimal("0.022"),
        "available": False,
        "release_date": date(2022, 2, 2),
        "homepage": "https://acme.biz",
        "keywords": ["SPORT"],
        "model": ("Beta", None),
        "images": [],
    },
    {
        "vin": "1HGCM82633A004352",
        "horsepower": 320,
        "kind": AutoKind.CABRIO,
        "price": Decimal("33.30"),
        "discount": Decimal("0.033"),
        "available": True,
        "release_date": date(2022, 2, 3),
        "homepage": "https://acme.com",
        "keywords": ["COMFORT", "SPORT"],
        "model": ("Gamma", "gamma"),
        "images": [],
    },
    {
        "vin": "5YJSA1E26HF000337",
        "horsepower": 420,
        "kind": AutoKind.LIMOUSINE,
        "price": Decimal("44.40"),
        "discount": Decimal("0.044"),
        "available": True,
        "release_date": date(2022, 2, 4),
        "homepage": "https://acme.de",
        "keywords": ["ELECTRIC"],
        "model": ("Delta", "delta"),
        "images": [],
    },
    {
        "vin": "JTDKB20U093123456",
        "horsepower": 120,
        "kind": AutoKind.SUV,
        "price": Decimal("55.50"),
        "discount": Decimal("0.055"),
        "available": False,
        "release_date": date(2022, 2, 5),
        "homepage": "https://acme.es",
        "keywords": ["HYBRID", "SPORTLINE"],
        "model": ("Epsilon", "epsilon"),
        "images": [],
    },
    {
        "vin": "WAUZZZ8K9BA123456",
        "horsepower": 250,
        "kind": AutoKind.CABRIO,
        "price": Decimal("66.60"),
        "discount": Decimal("0.066"),
        "available": True,
        "release_date": date(2022, 2, 6),
        "homepage": "https://acme.it",
        "keywords": [],
        "model": ("Phi", "phi"),
        "images": [],
    },
]


def build_auto(data: dict) -> Auto:
    name, subtitle = data["model"]
    fields = {key: value for key, value in data.items() if key not in ("model", "images")}
    auto = Auto(**fields)
    auto.model = AutoModel(name=name, subtitle=subtitle)
    auto.images = [Image(caption=caption, content_type=content_type)
                   for caption, content_type in data["images"]]
    return auto


def populate(db: Database) -> int:
    """
    Создаёт схему и загружает тестовые данные, если таблица auto пуста.

    Returns:
        Количество добавленных автомобилей
    """
    db.create_schema()

    with db.get_session() as session:
        repo = AutoRepository(session)
        if repo.count_all() > 0:
            logger.info("[seed] Таблица auto уже заполнена, пропускаем")
            return 0

        session.add_all(build_auto(data) for data in SAMPLE_AUTOS)
        session.commit()

    logger.info(f"[seed] Загружено {len(SAMPLE_AUTOS)} автомобилей")
    return len(SAMPLE_AUTOS)
