"""
Контекст GraphQL-запроса.

Хранит зависимости приложения и Bearer-токен. Пользователь
определяется лениво, при первой проверке ролей.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from graphql import GraphQLError
from strawberry.fastapi import BaseContext

from api.dependencies.runtime import get_db, get_keycloak, get_mail_service
from api.dependencies.security import CurrentUser, bearer_scheme, user_from_token
from infrastructure.database.session import Database
from infrastructure.keycloak import InvalidTokenError, KeycloakClient
from infrastructure.mail import MailService


class GraphQLContext(BaseContext):
    def __init__(
        self,
        db: Database,
        mail_service: MailService,
        keycloak: KeycloakClient,
        token: Optional[str] = None,
    ):
        super().__init__()
        self.db = db
        self.mail_service = mail_service
        self.keycloak = keycloak
        self.token = token

    def require_roles(self, *roles: str) -> CurrentUser:
        """
        Пользователь с одной из ролей.

        Raises:
            GraphQLError: UNAUTHENTICATED без/с невалидным токеном, FORBIDDEN без роли
        """
        try:
            user = user_from_token(self.token, self.keycloak)
        except InvalidTokenError as e:
            raise GraphQLError(e.message, extensions={"code": "UNAUTHENTICATED"})

        if user is None:
            raise GraphQLError("Authentication required", extensions={"code": "UNAUTHENTICATED"})
        if not user.has_any_role(*roles):
            raise GraphQLError(
                f"One of the roles {', '.join(roles)} required",
                extensions={"code": "FORBIDDEN"},
            )
        return user


def get_context(
    db: Database = Depends(get_db),
    mail_service: MailService = Depends(get_mail_service),
    keycloak: KeycloakClient = Depends(get_keycloak),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> GraphQLContext:
    return GraphQLContext(
        db=db,
        mail_service=mail_service,
        keycloak=keycloak,
        token=credentials.credentials if credentials else None,
    )
