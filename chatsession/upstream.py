from typing import Any, Dict, List, Optional, Protocol

import httpx

from .logging_config import logger
from .sessions.exceptions import BackendError


class ModelBackend(Protocol):
    """
    Anything able to complete an OpenAI-style message list.
    """

    async def complete(self, messages: List[Dict[str, str]], temperature: float) -> str:
        ...


def extract_reply(payload: Any) -> str:
    """
    Pull ``choices[0].message.content`` out of a chat completions response.
    """
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise BackendError("Upstream response has no message content") from exc
    if not isinstance(content, str):
        raise BackendError("Upstream message content is not text")
    return content


class OpenAIChatBackend:
    """
    Non-streaming client for an OpenAI-compatible ``/chat/completions`` API.

    Every failure (HTTP status >= 400, transport error, timeout or a body
    without reply text) is raised as BackendError; nothing is retried.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        base_url: str,
        model: str,
        api_key: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> None:
        self.client = client
        self.url = base_url.rstrip("/") + "/chat/completions"
        self.model = model
        self.api_key = api_key
        self.max_tokens = max_tokens

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def complete(self, messages: List[Dict[str, str]], temperature: float) -> str:
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if self.max_tokens:
            body["max_tokens"] = self.max_tokens

        try:
            resp = await self.client.post(self.url, headers=self._headers(), json=body)
        except httpx.HTTPError as exc:
            logger.warning("Upstream transport error for %s: %s", self.url, exc)
            raise BackendError("Upstream transport error", text=str(exc)) from exc

        if resp.status_code >= 400:
            logger.warning(
                "Upstream HTTP error %s for %s; response=%s",
                resp.status_code,
                self.url,
                resp.text,
            )
            raise BackendError(
                f"Upstream HTTP error {resp.status_code}",
                status_code=resp.status_code,
                text=resp.text,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise BackendError(
                "Upstream returned invalid JSON",
                status_code=resp.status_code,
                text=resp.text,
            ) from exc
        return extract_reply(payload)


__all__ = ["ModelBackend", "OpenAIChatBackend", "extract_reply"]
