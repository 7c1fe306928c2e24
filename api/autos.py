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

from typing import Optional

from fastapi import APIRouter, Depends, File, Header, Request, Response, UploadFile, status

from api.dependencies.runtime import get_db, get_mail_service
from api.dependencies.security import CurrentUser, require_roles
from api.helpers import auto_dto_to_entity, auto_update_dto_to_entity, etag, parse_id
from api.schemas.autos import AutoDetailOut, AutoDTO, AutoOut, AutosPage, AutoUpdateDTO, PageMeta
from core.auto.exceptions import AutoNotFoundException, VersionMissingException
from core.auto.pageable import create_pageable
from core.auto.read_service import AutoReadService
from core.auto.write_service import AutoWriteService
from infrastructure.database.session import Database
from infrastructure.logging.logger import setup_logger
from infrastructure.mail import MailService

logger = setup_logger("autos")

router = APIRouter(prefix="/rest", tags=["Autos"])

# Параметры пагинации, которые не являются критериями поиска
PAGE_PARAMS = ("page", "size")


def _location(request: Request, path: str) -> str:
    return f"{str(request.base_url).rstrip('/')}{path}"


@router.get("/file/{auto_id}")
def get_file(auto_id: str, db: Database = Depends(get_db)) -> Response:
    """
    Отдаёт бинарный файл автомобиля.

    Raises:
        404: если автомобиля или файла нет
    """
    auto_id_int = parse_id(auto_id)
    with db.get_session() as session:
        auto_file = AutoReadService(session).find_file_by_auto_id(auto_id_int)
        if auto_file is None:
            raise AutoNotFoundException(message=f"No file for auto id={auto_id}")

        logger.info(f"[autos] Отдаём файл {auto_file.filename} для auto_id={auto_id}")
        return Response(
            content=auto_file.data,
            media_type=auto_file.mimetype or "application/octet-stream",
            headers={"Content-Disposition": f'inline; filename="{auto_file.filename}"'},
        )


@router.get("/{auto_id}", response_model=AutoDetailOut)
def get_by_id(
    auto_id: str,
    response: Response,
    db: Database = Depends(get_db),
    if_none_match: Optional[str] = Header(None),
):
    """
    Автомобиль по ID.

    В заголовке ETag возвращается версия. Если клиент прислал
    If-None-Match с актуальной версией, ответ 304 без тела.
    """
    auto_id_int = parse_id(auto_id)
    with db.get_session() as session:
        auto = AutoReadService(session).find_by_id(auto_id_int, with_images=True)

        current_etag = etag(auto.version)
        if if_none_match is not None and if_none_match == current_etag:
            logger.debug(f"[autos] get_by_id: 304 для id={auto_id}")
            return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": current_etag})

        response.headers["ETag"] = current_etag
        return AutoDetailOut.model_validate(auto)


@router.get("", response_model=AutosPage)
def find(request: Request, db: Database = Depends(get_db)) -> AutosPage:
    """
    Поиск автомобилей.

    Все query-параметры, кроме page и size, считаются критериями поиска:
    model (подстрока), horsepower (минимум), price (максимум),
    comfort/sport/electric/hybrid (флаги) и любые поля Auto (равенство).
    """
    params = dict(request.query_params)
    pageable = create_pageable(params.get("page"), params.get("size"))
    criteria = {key: value for key, value in params.items() if key not in PAGE_PARAMS}
    logger.debug(f"[autos] find: criteria={criteria}, pageable={pageable}")

    with db.get_session() as session:
        auto_slice = AutoReadService(session).find(criteria, pageable)
        return AutosPage(
            content=[AutoOut.model_validate(auto) for auto in auto_slice.content],
            page=PageMeta(
                size=pageable.size,
                number=pageable.number,
                total_elements=auto_slice.total_elements,
                total_pages=auto_slice.total_pages(pageable),
            ),
        )


@router.post("", status_code=status.HTTP_201_CREATED)
def create(
    payload: AutoDTO,
    request: Request,
    db: Database = Depends(get_db),
    mail_service: MailService = Depends(get_mail_service),
    user: CurrentUser = Depends(require_roles("admin", "user")),
) -> Response:
    """Создаёт автомобиль. В заголовке Location URI нового ресурса."""
    logger.debug(f"[autos] create: user={user.username}, payload={payload}")
    with db.get_session() as session:
        auto_id = AutoWriteService(session, mail_service).create(auto_dto_to_entity(payload))

    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": _location(request, f"/rest/{auto_id}")},
    )


@router.put("/{auto_id}", status_code=status.HTTP_204_NO_CONTENT)
def update(
    auto_id: str,
    payload: AutoUpdateDTO,
    db: Database = Depends(get_db),
    mail_service: MailService = Depends(get_mail_service),
    if_match: Optional[str] = Header(None),
    user: CurrentUser = Depends(require_roles("admin", "user")),
) -> Response:
    """
    Изменяет автомобиль (без модели и изображений).

    Требует заголовок If-Match с текущей версией, например "0".
    Новая версия возвращается в заголовке ETag.
    """
    logger.debug(f"[autos] update: id={auto_id}, user={user.username}, if_match={if_match}")
    if if_match is None:
        raise VersionMissingException()

    auto_id_int = parse_id(auto_id)
    with db.get_session() as session:
        new_version = AutoWriteService(session, mail_service).update(
            auto_id_int, auto_update_dto_to_entity(payload), if_match
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT, headers={"ETag": etag(new_version)})


@router.delete("/{auto_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(
    auto_id: str,
    db: Database = Depends(get_db),
    mail_service: MailService = Depends(get_mail_service),
    user: CurrentUser = Depends(require_roles("admin")),
) -> Response:
    """Удаляет автомобиль вместе с моделью, изображениями и файлом."""
    logger.debug(f"[autos] delete: id={auto_id}, user={user.username}")
    auto_id_int = parse_id(auto_id)
    with db.get_session() as session:
        AutoWriteService(session, mail_service).delete(auto_id_int)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{auto_id}/file", status_code=status.HTTP_201_CREATED)
async def upload_file(
    auto_id: str,
    request: Request,
    file: UploadFile = File(...),
    db: Database = Depends(get_db),
    mail_service: MailService = Depends(get_mail_service),
    user: CurrentUser = Depends(require_roles("admin", "user")),
) -> Response:
    """Сохраняет бинарный файл (например, фото) к автомобилю."""
    auto_id_int = parse_id(auto_id)
    data = await file.read()
    logger.debug(f"[autos] upload_file: id={auto_id}, filename={file.filename}, size={len(data)}")

    with db.get_session() as session:
        AutoWriteService(session, mail_service).add_file(
            auto_id_int, data, file.filename or "file", file.content_type
        )

    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": _location(request, f"/rest/file/{auto_id_int}")},
    )
