"""
GraphQL-интерфейс (strawberry) поверх того же прикладного ядра, что и REST.

Монтируется в main.py: app.include_router(create_graphql_router(), prefix="/graphql")
"""

import strawberry
from strawberry.fastapi import GraphQLRouter

from api.graphql.context import GraphQLContext, get_context
from api.graphql.resolvers import Mutation, Query
from settings import settings

schema = strawberry.Schema(query=Query, mutation=Mutation)


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if settings.GRAPHIQL else None,
    )


__all__ = ["GraphQLContext", "create_graphql_router", "schema"]
