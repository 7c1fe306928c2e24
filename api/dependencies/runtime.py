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


"""Зависимости, которые приложение кладёт в app.state при старте"""

from fastapi import Request

from infrastructure.database.session import Database
from infrastructure.keycloak import KeycloakClient
from infrastructure.mail import MailService


def get_logger(request: Request):
    return request.app.state.logger

def get_db(request: Request) -> Database:
    return request.app.state.db

def get_mail_service(request: Request) -> MailService:
    return request.app.state.mail_service

def get_keycloak(request: Request) -> KeycloakClient:
    return request.app.state.keycloak
