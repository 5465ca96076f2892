"""Async client resolving lines, patterns, routes and shapes from the Carris Metropolitana API."""

import asyncio
import logging
from types import TracebackType
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import settings
from .exceptions import (
    CarrisRouteError,
    InvalidResponseError,
    NetworkError,
    NotFoundError,
    PatternLoadError,
    ValidationError,
)
from .models import LineDetails, Pattern, RouteRecord, Shape

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class RouteResolver:
    """Resolves line → pattern → route → shape data from the transit API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the resolver.

        Args:
            base_url: API root, defaults to the configured ``api_base_url``
            timeout: Request timeout in seconds, defaults to ``request_timeout``
            client: Pre-built client to use instead of creating one; the
                resolver does not close a client it was given
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RouteResolver":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _get_json(self, resource: str, identifier: str) -> Any:
        """GET ``/{resource}/{identifier}`` and decode the JSON body.

        Raises:
            NotFoundError: If the API answers with a non-success status
            NetworkError: If the request cannot be completed
            InvalidResponseError: If the body is not JSON
        """
        path = f"/{resource}/{quote(identifier, safe='')}"
        logger.debug(f"GET {path}")
        try:
            response = await self._client.get(path)
        except httpx.RequestError as e:
            raise NetworkError(f"Failed to fetch {resource} '{identifier}': {e}") from e

        if not response.is_success:
            raise NotFoundError(resource.rstrip("s"), identifier, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseError(
                f"Invalid JSON in {resource} '{identifier}' response"
            ) from e

    async def _get_model(
        self, resource: str, identifier: str, model: type[ModelT]
    ) -> ModelT:
        data = await self._get_json(resource, identifier)
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise InvalidResponseError(
                f"Unexpected {resource} '{identifier}' payload: {e.error_count()} invalid field(s)"
            ) from e

    async def resolve_line(self, line_id: str) -> LineDetails:
        """Fetch the line record for a line identifier.

        Args:
            line_id: Public line number, surrounding whitespace is ignored

        Returns:
            The parsed line record

        Raises:
            ValidationError: If the identifier is empty
            NotFoundError: If the line does not exist
        """
        if not line_id or not line_id.strip():
            raise ValidationError("Line identifier cannot be empty")

        line = await self._get_model("lines", line_id.strip(), LineDetails)
        logger.info(f"Resolved line {line.short_name} with {len(line.patterns)} patterns")
        return line

    async def resolve_route(self, route_id: str) -> RouteRecord:
        """Fetch the parent route record of a pattern."""
        return await self._get_model("routes", route_id, RouteRecord)

    async def resolve_shape(self, shape_id: str) -> Shape:
        """Fetch the GeoJSON shape of a pattern.

        Raises:
            NotFoundError: If the shape does not exist
        """
        return await self._get_model("shapes", shape_id, Shape)

    async def _resolve_pattern(self, pattern_id: str) -> Pattern:
        try:
            pattern = await self._get_model("patterns", pattern_id, Pattern)
        except CarrisRouteError as e:
            raise PatternLoadError(pattern_id) from e

        try:
            route = await self.resolve_route(pattern.route_id)
        except CarrisRouteError as e:
            raise PatternLoadError(pattern_id, route_id=pattern.route_id) from e

        return pattern.with_route(route)

    async def resolve_patterns(
        self, line_id: str, pattern_ids: list[str]
    ) -> list[Pattern]:
        """Resolve every pattern of a line together with its route long name.

        All pattern lookups are issued at once. The result keeps the order of
        ``pattern_ids``; duplicated identifiers are resolved once.

        Args:
            line_id: Line the patterns belong to (used for logging)
            pattern_ids: Ordered pattern identifiers from the line record

        Returns:
            Enriched patterns in input order

        Raises:
            PatternLoadError: If any pattern or route lookup fails; no partial
                list is returned
        """
        unique_ids = list(dict.fromkeys(pattern_ids))
        if len(unique_ids) != len(pattern_ids):
            logger.debug(f"Line {line_id}: ignoring duplicated pattern identifiers")

        tasks = [
            asyncio.ensure_future(self._resolve_pattern(pattern_id))
            for pattern_id in unique_ids
        ]
        try:
            patterns = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        logger.info(f"Line {line_id}: resolved {len(patterns)} patterns")
        return list(patterns)
