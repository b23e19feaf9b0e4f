"""Claude API client."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from typing import Any

import httpx

from .api_base import APIClientMixin
from .data_structures import Message, Response
from .errors import ParseError, TransportError
from .tools.base import Tool

__all__ = ["ClaudeAPI", "DEFAULT_MODEL", "DEFAULT_BASE_URL"]

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_BASE_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class ClaudeAPI(APIClientMixin):
    """Claude API client - simple, curl-like interface to the Messages API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4096,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 120.0,
    ):
        """
        Initialize Claude API client.

        Args:
            api_key: API key. If not provided, reads from ANTHROPIC_API_KEY env var.
            model: Claude model to use.
            max_tokens: Maximum tokens in response.
            base_url: Messages endpoint URL.
            timeout: Seconds before a request is abandoned (raised as TransportError).
        """
        resolved_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not resolved_key:
            raise ValueError("API key required: pass api_key or set ANTHROPIC_API_KEY")
        self.api_key: str = resolved_key

        self.model = model
        self.max_tokens = max_tokens
        self.base_url = base_url
        self.timeout = timeout

        # Reusable HTTP client for connection pooling
        self._client = httpx.AsyncClient(timeout=timeout)

    def __repr__(self) -> str:
        token_preview = (
            self.api_key[:15] + "..." if len(self.api_key) > 15 else self.api_key
        )
        return (
            f"ClaudeAPI(model={self.model!r}, max_tokens={self.max_tokens}, "
            f"token={token_preview!r})"
        )

    def build_body(
        self,
        messages: Sequence[Message],
        tools: Sequence[Tool] | None = None,
        system: str | None = None,
    ) -> dict[str, Any]:
        """Build the JSON request body. `tools` is omitted entirely when empty."""
        body: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [msg.to_dict() for msg in messages],
        }
        if system:
            body["system"] = system
        if tools:
            body["tools"] = [tool.to_dict() for tool in tools]
        return body

    async def send(
        self,
        messages: Sequence[Message],
        tools: Sequence[Tool] | None = None,
        system: str | None = None,
    ) -> Response:
        """Send a request to the Claude API.

        Args:
            messages: The transcript, oldest first
            tools: Tool definitions to offer
            system: System instruction

        Returns:
            Response object

        Raises:
            TransportError: Network failure or timeout
            APIError: Non-success HTTP status
            ParseError: Body is not a usable Messages response
        """
        headers = {
            "content-type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        body = self.build_body(messages, tools=tools, system=system)

        logger.debug(
            "Sending request: model=%s messages=%d tools=%d",
            self.model,
            len(body["messages"]),
            len(body.get("tools", [])),
        )
        try:
            http_response = await self._client.post(
                self.base_url, headers=headers, json=body
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request timed out after {self.timeout:.1f}s", provider="Claude"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed: {e}", provider="Claude") from e

        data = self._check_response(http_response, provider="Claude")
        if not isinstance(data.get("content"), list):
            raise ParseError(
                "No content in response",
                status_code=http_response.status_code,
                provider="Claude",
            )
        return Response.from_dict(data)
