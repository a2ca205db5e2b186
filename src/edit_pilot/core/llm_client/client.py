"""
HTTP client for OpenAI-style chat-completion endpoints.

One request per call, no retries: the caller decides whether a failed
instruction is worth sending again.
"""

import json
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import httpx

from .exceptions import DecodeError, ProtocolError, TransportError
from ...config.models import CompletionConfig
from ...utils.logging import get_logger


class CompletionClient:
    """
    Sends a system prompt and a user instruction to a chat-completion
    endpoint and returns the text of the first choice.
    """

    def __init__(
        self,
        config: Optional[CompletionConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            config: Model, sampling and timeout settings
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.config = config or CompletionConfig()
        self._transport = transport
        self.logger = get_logger(__name__)

    def build_payload(self, system_prompt: str, user_text: str) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_text},
        ]
        return {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

    def completion_url(self, endpoint_url: str) -> str:
        """Full chat-completion URL; the scheme picks plain HTTP or TLS."""
        scheme = urlsplit(endpoint_url).scheme.lower()
        if scheme not in ("http", "https"):
            raise TransportError(
                f"Unsupported endpoint URL {endpoint_url!r}: expected http:// or https://",
                details={"endpoint_url": endpoint_url},
            )
        return endpoint_url.rstrip("/") + self.config.chat_path

    async def request(self, endpoint_url: str, system_prompt: str, user_text: str) -> str:
        """
        Send one chat-completion request.

        Returns:
            Content of choices[0].message

        Raises:
            TransportError: If the endpoint cannot be reached
            ProtocolError: On an error status or an unexpected response shape
            DecodeError: If the response body is not JSON
        """
        url = self.completion_url(endpoint_url)
        payload = self.build_payload(system_prompt, user_text)

        self.logger.debug(f"Sending completion request to {url}: {user_text[:100]}")

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=httpx.Timeout(self.config.request_timeout),
                headers={"Accept": "application/json"},
            ) as client:
                response = await client.post(url, json=payload)
        except (httpx.TransportError, httpx.InvalidURL) as e:
            raise TransportError(
                f"Unable to reach completion service at {endpoint_url}: {e}",
                details={"endpoint_url": endpoint_url, "original_error": str(e)},
            ) from e

        if response.is_error:
            raise ProtocolError(
                f"Completion service returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(
                f"Completion service returned a body that is not JSON: {e}",
                details={"body": response.text[:200]},
            ) from e

        content = self._extract_content(body, response.status_code)
        self.logger.debug(f"Received completion: {len(content)} characters")
        return content

    def _extract_content(self, body: Any, status_code: int) -> str:
        try:
            message = body["choices"][0]["message"]
            content = message["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProtocolError(
                f"Completion response lacks choices[0].message.content: {e!r}",
                status_code=status_code,
            ) from e

        if not isinstance(content, str):
            raise ProtocolError(
                f"Completion message content is {type(content).__name__}, expected text",
                status_code=status_code,
            )
        return content
