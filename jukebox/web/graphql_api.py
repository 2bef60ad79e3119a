"""
GraphQL facade for Jukebox.

The schema is built from SDL and executed with graphql-core against a root
value whose entries are resolver functions. Each resolver maps one-to-one onto
a `LibraryService` operation; there is no logic here beyond argument
extraction.

Field and argument names (getSongById, SongId, ...) are part of the public
API and are kept as clients already send them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from graphql import GraphQLResolveInfo, GraphQLSchema, build_schema, graphql

if TYPE_CHECKING:
    from jukebox.core.db.models import Playlist, Song
    from jukebox.core.library import LibraryService

logger = logging.getLogger(__name__)

# Status code returned by deletePlayList (deletes always report success)
DELETE_OK = 200

SCHEMA_SDL = """
type Song {
    album: String
    duration: Int
    title: String
    id: Int
    artist: String
}

type Playlist {
    id: Int!
    name: String!
    songs: [Int!]!
}

type CreateResult {
    id: Int
}

type Query {
    getSongs: [Song]
    getSongById(SongId: Int): Song
    getFilterSong(SearchParam: String, SearchValue: String): [Song]
    getPlayLists: [Playlist]
    getPlayList(PlayListId: Int): Playlist
}

type Mutation {
    createPlayList(name: String!, songs: [Int!]!): CreateResult
    deletePlayList(id: Int!): Int
}
"""


class GraphQLRequestError(ValueError):
    """Raised for requests that cannot be executed at all (missing query, bad variables)."""


def build_root(library: LibraryService) -> dict[str, Callable[..., Any]]:
    """
    Build the root value: one resolver per Query/Mutation field.

    graphql-core's default resolver calls these as `resolver(info, **args)`.
    """

    def get_songs(_info: GraphQLResolveInfo) -> tuple[Song, ...]:
        return library.get_catalog()

    def get_song_by_id(_info: GraphQLResolveInfo, **args: Any) -> Song:
        return library.get_song(args.get("SongId"))

    def get_filter_song(_info: GraphQLResolveInfo, **args: Any) -> tuple[Song, ...]:
        return library.filter_songs(args.get("SearchParam"), args.get("SearchValue"))

    async def get_playlists(_info: GraphQLResolveInfo) -> tuple[Playlist, ...]:
        return await library.get_playlists()

    def get_playlist(_info: GraphQLResolveInfo, **args: Any) -> Playlist:
        return library.get_playlist(args.get("PlayListId"))

    async def create_playlist(_info: GraphQLResolveInfo, **args: Any) -> dict[str, int]:
        new_id = await library.create_or_update_playlist(None, args["name"], args["songs"])
        return {"id": new_id}

    async def delete_playlist(_info: GraphQLResolveInfo, **args: Any) -> int:
        await library.delete_playlist(args["id"])
        return DELETE_OK

    return {
        "getSongs": get_songs,
        "getSongById": get_song_by_id,
        "getFilterSong": get_filter_song,
        "getPlayLists": get_playlists,
        "getPlayList": get_playlist,
        "createPlayList": create_playlist,
        "deletePlayList": delete_playlist,
    }


class GraphQLHandler:
    """
    GraphQL request handler.

    Owns the executable schema and the resolver root for one LibraryService.
    """

    def __init__(self, library: LibraryService) -> None:
        self.library = library
        self.schema: GraphQLSchema = build_schema(SCHEMA_SDL)
        self.root = build_root(library)

    async def handle_request(self, request: dict[str, Any]) -> dict[str, Any]:
        """
        Execute a GraphQL request.

        Args:
            request: Body with `query` and optional `variables` / `operationName`.

        Returns:
            `{"data": ...}`, plus `"errors"` when any field failed.
        """
        query = request.get("query")
        if not isinstance(query, str) or not query.strip():
            raise GraphQLRequestError("Request must contain a 'query' string")

        variables = request.get("variables")
        if variables is not None and not isinstance(variables, dict):
            raise GraphQLRequestError("'variables' must be a JSON object")

        operation_name = request.get("operationName")
        if operation_name is not None and not isinstance(operation_name, str):
            raise GraphQLRequestError("'operationName' must be a string")

        result = await graphql(
            self.schema,
            query,
            root_value=self.root,
            variable_values=variables,
            operation_name=operation_name,
        )

        for error in result.errors or ():
            if error.original_error is not None:
                logger.warning(
                    "GraphQL resolver error at %s: %s",
                    ".".join(str(p) for p in error.path or ()),
                    error.message,
                )
            else:
                logger.debug("GraphQL request error: %s", error.message)

        return result.formatted
