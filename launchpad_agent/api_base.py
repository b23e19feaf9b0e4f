"""Shared API infrastructure for the model client.

This module provides:
- APIClientMixin: HTTP error handling and resource cleanup
- APIProtocol: the interface the agent loop needs from a model client
"""

from __future__ import annotations

from collections.abc import Sequence
from types import TracebackType
from typing import TYPE_CHECKING, Any, Protocol, Self

import httpx

from .data_structures import Message, Response
from .errors import APIError, ParseError

if TYPE_CHECKING:
    from .tools.base import Tool

__all__ = ["APIError", "APIClientMixin", "APIProtocol"]


class APIProtocol(Protocol):
    """Protocol defining the interface for model clients.

    Example:
        >>> async def ask(api: APIProtocol, messages: list[Message]) -> str:
        ...     return (await api.send(messages)).get_text()
    """

    async def send(
        self,
        messages: Sequence[Message],
        tools: Sequence[Tool] | None = None,
        system: str | None = None,
    ) -> Response:
        """Send one request to the model.

        Args:
            messages: The transcript, oldest first
            tools: Tool definitions to offer (omitted when None or empty)
            system: System instruction

        Returns:
            Parsed Response
        """
        ...


class APIClientMixin:
    """Mixin providing shared API client functionality.

    Provides:
    - Consistent HTTP error checking
    - Async context manager support for proper resource cleanup
    - close() method for explicit cleanup
    """

    _client: httpx.AsyncClient

    def _check_response(
        self,
        response: httpx.Response,
        provider: str = "API",
    ) -> dict[str, Any]:
        """Check HTTP response and raise unified errors.

        Args:
            response: The httpx Response object
            provider: Name of the API provider for error messages

        Returns:
            Parsed JSON response if successful

        Raises:
            APIError: Non-success status code or error payload
            ParseError: Body is not a JSON object
        """
        try:
            response_json: object = response.json()
        except ValueError:
            response_json = None

        if not response.is_success:
            error_type = "unknown"
            error_msg = response.text
            if isinstance(response_json, dict):
                error_data = response_json.get("error", {})
                if isinstance(error_data, dict):
                    error_type = str(error_data.get("type", "unknown"))
                    error_msg = str(error_data.get("message", response_json))
                elif error_data:
                    error_msg = str(error_data)
            raise APIError(
                message=f"HTTP {response.status_code}: {error_msg}",
                status_code=response.status_code,
                error_type=error_type,
                provider=provider,
            )

        if not isinstance(response_json, dict):
            raise ParseError(
                "Failed to parse response: expected a JSON object",
                status_code=response.status_code,
                provider=provider,
            )

        error = response_json.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise APIError(
                    message=str(error.get("message", error)),
                    status_code=response.status_code,
                    error_type=error.get("type"),
                    provider=provider,
                )
            raise APIError(message=str(error), provider=provider)

        return response_json

    async def close(self) -> None:
        """Close the HTTP client and release resources.

        Example:
            >>> api = ClaudeAPI()
            >>> try:
            ...     response = await api.send(messages)
            ... finally:
            ...     await api.close()
        """
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        """Async context manager entry.

        Example:
            >>> async with ClaudeAPI() as api:
            ...     response = await api.send(messages)
        """
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
