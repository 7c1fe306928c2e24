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

"""Исключения прикладного ядра для работы с автомобилями."""

from typing import Any, Optional


class AutoNotFoundException(Exception):
    """Автомобиль (или результат поиска) не найден."""

    def __init__(self, auto_id: Optional[int] = None, message: Optional[str] = None):
        self.auto_id = auto_id
        self.message = message or f"Auto with id={auto_id} not found"
        super().__init__(self.message)


class InvalidSearchCriteriaException(Exception):
    """Недопустимые критерии поиска."""

    def __init__(self, key: str, value: Any = None):
        self.key = key
        self.value = value
        self.message = f"Invalid search criteria: {key}"
        super().__init__(self.message)


class VinExistsException(Exception):
    """Автомобиль с таким VIN уже существует."""

    def __init__(self, vin: str):
        self.vin = vin
        self.message = f"VIN {vin} already exists"
        super().__init__(self.message)


class VersionMissingException(Exception):
    """Запрос на изменение пришёл без номера версии (If-Match)."""

    def __init__(self, message: str = "Header If-Match is missing"):
        self.message = message
        super().__init__(self.message)


class VersionInvalidException(Exception):
    """Номер версии имеет неверный формат."""

    def __init__(self, version: Optional[str]):
        self.version = version
        self.message = f"Version {version} is invalid"
        super().__init__(self.message)


class VersionOutdatedException(Exception):
    """Номер версии устарел: запись уже была изменена."""

    def __init__(self, version: int):
        self.version = version
        self.message = f"Version {version} is outdated"
        super().__init__(self.message)
