from typing import Optional

from api.schemas.autos import AutoDTO, AutoUpdateDTO
from core.auto.exceptions import AutoNotFoundException
from core.auto.read_service import AutoReadService
from infrastructure.database.models import Auto, AutoModel, Image
from infrastructure.logging.logger import setup_logger

# Настройка логгера для текущего модуля
logger = setup_logger("api_helpers")


def auto_dto_to_entity(dto: AutoDTO) -> Auto:
    """Новый Auto из DTO: вместе с моделью и изображениями."""
    auto = auto_update_dto_to_entity(dto)
    auto.model = AutoModel(name=dto.model.name, subtitle=dto.model.subtitle)
    auto.images = [
        Image(caption=image.caption, content_type=image.content_type)
        for image in dto.images or []
    ]
    return auto


def auto_update_dto_to_entity(dto: AutoUpdateDTO) -> Auto:
    """Auto только со скалярными полями (для update модель и изображения не нужны)."""
    return Auto(
        vin=dto.vin,
        horsepower=dto.horsepower,
        kind=dto.kind,
        price=dto.price,
        discount=dto.discount,
        available=dto.available,
        release_date=dto.release_date,
        homepage=dto.homepage,
        keywords=list(dto.keywords or []),
    )


def parse_id(id_str: str) -> int:
    """
    ID из пути URL.

    Raises:
        AutoNotFoundException: если строка не похожа на ID
    """
    if not AutoReadService.is_valid_id(id_str):
        logger.debug(f"parse_id: невалидный ID {id_str}")
        raise AutoNotFoundException(message=f"Auto with id={id_str} not found")
    return int(id_str)


def etag(version: Optional[int]) -> str:
    return f'"{version}"'
