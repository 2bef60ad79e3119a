"""
GraphQL endpoint.

POST /graphql with {"query": ..., "variables": ..., "operationName": ...}.
Resolver failures are reported inside the GraphQL response (HTTP 200);
only requests that cannot be executed at all get a 400.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, HTTPException, Request

from jukebox.web.graphql_api import GraphQLRequestError

if TYPE_CHECKING:
    from jukebox.web.graphql_api import GraphQLHandler

logger = logging.getLogger(__name__)


def register_graphql_routes(app: FastAPI, handler: GraphQLHandler) -> None:
    """
    Register the GraphQL endpoint with the FastAPI app.

    Args:
        app: FastAPI application instance
        handler: GraphQLHandler executing the requests
    """

    @app.post("/graphql", tags=["graphql"])
    async def graphql_endpoint(request: Request) -> dict[str, Any]:
        """Single GraphQL endpoint for queries and mutations."""
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise HTTPException(status_code=400, detail="Request body must be JSON") from e

        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")

        try:
            return await handler.handle_request(body)
        except GraphQLRequestError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
