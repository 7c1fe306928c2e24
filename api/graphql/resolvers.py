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
Query и Mutation для GraphQL.

Ошибки прикладного ядра превращаются в GraphQLError с
extensions.code = BAD_USER_INPUT, поле в ответе при этом null.
"""

import dataclasses
from typing import Any, Dict, List, Optional

import strawberry
from graphql import GraphQLError
from pydantic import ValidationError
from strawberry.types import Info

from api.graphql.context import GraphQLContext
from api.graphql.types import (
    AutoInput,
    AutoType,
    AutoUpdateInput,
    CreatePayload,
    SearchCriteriaInput,
    UpdatePayload,
)
from api.helpers import auto_dto_to_entity, auto_update_dto_to_entity, etag
from api.schemas.autos import AutoDTO, AutoUpdateDTO
from core.auto.exceptions import (
    AutoNotFoundException,
    InvalidSearchCriteriaException,
    VersionInvalidException,
    VersionOutdatedException,
    VinExistsException,
)
from core.auto.pageable import create_pageable
from core.auto.read_service import AutoReadService
from core.auto.write_service import AutoWriteService
from infrastructure.logging.logger import setup_logger

logger = setup_logger("graphql")

BAD_USER_INPUT_ERRORS = (
    AutoNotFoundException,
    InvalidSearchCriteriaException,
    VinExistsException,
    VersionInvalidException,
    VersionOutdatedException,
)


def bad_user_input(message: str) -> GraphQLError:
    return GraphQLError(message, extensions={"code": "BAD_USER_INPUT"})


def _validation_message(e: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])} {error['msg']}"
        for error in e.errors()
    )


def _input_to_dict(value: Any) -> Dict[str, Any]:
    return dataclasses.asdict(value)


def _parse_id(id_str: str) -> int:
    if not AutoReadService.is_valid_id(str(id_str)):
        raise bad_user_input(f"Auto with id={id_str} not found")
    return int(id_str)


@strawberry.type
class Query:
    @strawberry.field
    def auto(self, info: Info, id: strawberry.ID) -> Optional[AutoType]:
        """Автомобиль по ID (доступно без токена)."""
        context: GraphQLContext = info.context
        logger.debug(f"[graphql] auto: id={id}")
        auto_id = _parse_id(id)

        with context.db.get_session() as session:
            try:
                auto = AutoReadService(session).find_by_id(auto_id)
            except AutoNotFoundException as e:
                raise bad_user_input(e.message)
            return AutoType.from_entity(auto)

    @strawberry.field
    def autos(
        self,
        info: Info,
        criteria: Optional[SearchCriteriaInput] = None,
        page: Optional[int] = None,
        size: Optional[int] = None,
    ) -> Optional[List[AutoType]]:
        """Поиск автомобилей по критериям (доступно без токена)."""
        context: GraphQLContext = info.context
        criteria_dict = _input_to_dict(criteria) if criteria is not None else {}
        pageable = create_pageable(page, size)
        logger.debug(f"[graphql] autos: criteria={criteria_dict}, pageable={pageable}")

        with context.db.get_session() as session:
            try:
                auto_slice = AutoReadService(session).find(criteria_dict, pageable)
            except (AutoNotFoundException, InvalidSearchCriteriaException) as e:
                raise bad_user_input(e.message)
            return [AutoType.from_entity(auto) for auto in auto_slice.content]


@strawberry.type
class Mutation:
    @strawberry.mutation
    def create(self, info: Info, input: AutoInput) -> Optional[CreatePayload]:
        """Создаёт автомобиль. Роли: admin, user."""
        context: GraphQLContext = info.context
        user = context.require_roles("admin", "user")
        logger.debug(f"[graphql] create: user={user.username}")

        try:
            dto = AutoDTO.model_validate(_input_to_dict(input))
        except ValidationError as e:
            raise bad_user_input(_validation_message(e))

        with context.db.get_session() as session:
            try:
                auto_id = AutoWriteService(session, context.mail_service).create(auto_dto_to_entity(dto))
            except BAD_USER_INPUT_ERRORS as e:
                raise bad_user_input(e.message)

        logger.debug(f"[graphql] create: id={auto_id}")
        return CreatePayload(id=auto_id)

    @strawberry.mutation
    def update(self, info: Info, input: AutoUpdateInput) -> Optional[UpdatePayload]:
        """Изменяет автомобиль с проверкой версии. Роли: admin, user."""
        context: GraphQLContext = info.context
        user = context.require_roles("admin", "user")
        logger.debug(f"[graphql] update: user={user.username}, id={input.id}, version={input.version}")

        auto_id = _parse_id(input.id)
        values = _input_to_dict(input)
        values.pop("id")
        version = values.pop("version")
        try:
            dto = AutoUpdateDTO.model_validate(values)
        except ValidationError as e:
            raise bad_user_input(_validation_message(e))

        with context.db.get_session() as session:
            try:
                new_version = AutoWriteService(session, context.mail_service).update(
                    auto_id, auto_update_dto_to_entity(dto), etag(version)
                )
            except BAD_USER_INPUT_ERRORS as e:
                raise bad_user_input(e.message)

        logger.debug(f"[graphql] update: new version={new_version}")
        return UpdatePayload(version=new_version)

    @strawberry.mutation
    def delete(self, info: Info, id: strawberry.ID) -> Optional[bool]:
        """Удаляет автомобиль. Роль: admin."""
        context: GraphQLContext = info.context
        user = context.require_roles("admin")
        logger.debug(f"[graphql] delete: user={user.username}, id={id}")

        auto_id = _parse_id(id)
        with context.db.get_session() as session:
            try:
                deleted = AutoWriteService(session, context.mail_service).delete(auto_id)
            except AutoNotFoundException as e:
                raise bad_user_input(e.message)

        logger.debug(f"[graphql] delete: deleted={deleted}")
        return deleted
