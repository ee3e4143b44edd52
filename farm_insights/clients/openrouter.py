"""Client wrapper for the OpenRouter chat-completion API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from farm_insights.core.config import OpenRouterSettings
from farm_insights.schemas import AnalysisOptions

logger = logging.getLogger(__name__)

_COMPLETIONS_PATH = "/chat/completions"
_BODY_PREVIEW_CHARS = 500


class UpstreamError(RuntimeError):
    """Raised when the completion endpoint cannot be reached or rejects a call."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code or 500
        self.body = body


class OpenRouterClient:
    """Issue one chat-completion request per call and return the decoded body."""

    def __init__(
        self,
        settings: OpenRouterSettings,
        *,
        app_name: Optional[str] = None,
        app_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._app_name = app_name
        self._app_url = app_url
        # Injected in tests; None means the default network transport.
        self._transport = transport

    @property
    def default_model(self) -> str:
        return self._settings.default_model

    @property
    def endpoint(self) -> str:
        return f"{self._settings.base_url}{_COMPLETIONS_PATH}"

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Content-Type": "application/json",
        }
        if self._app_url:
            headers["HTTP-Referer"] = self._app_url
        if self._app_name:
            headers["X-Title"] = self._app_name
        return headers

    def build_payload(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        options: Optional[AnalysisOptions] = None,
    ) -> Dict[str, Any]:
        """Merge per-call options over the configured defaults."""
        opts = options or AnalysisOptions()
        settings = self._settings

        def pick(value: Any, default: Any) -> Any:
            return default if value is None else value

        return {
            "model": pick(opts.model, settings.default_model),
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": pick(opts.max_tokens, settings.max_tokens),
            "temperature": pick(opts.temperature, settings.temperature),
            "top_p": pick(opts.top_p, settings.top_p),
            "frequency_penalty": pick(opts.frequency_penalty, settings.frequency_penalty),
            "presence_penalty": pick(opts.presence_penalty, settings.presence_penalty),
        }

    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        options: Optional[AnalysisOptions] = None,
    ) -> Dict[str, Any]:
        """Send both prompts to the completion endpoint.

        Raises:
            UpstreamError: on transport failure, no full response within the
                configured timeout, a non-2xx status, or a body that is not a
                JSON object.
        """
        payload = self.build_payload(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            options=options,
        )

        timeout = self._settings.timeout
        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                transport=self._transport,
            ) as client:
                # httpx limits each connect/read/write step; this bounds the call.
                response = await asyncio.wait_for(
                    client.post(
                        self.endpoint,
                        headers=self.build_headers(),
                        json=payload,
                    ),
                    timeout,
                )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Completion request exceeded its time limit",
                extra={"model": payload["model"], "timeout": timeout},
            )
            raise UpstreamError(
                f"API request failed: no complete response within {timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "Completion request did not complete",
                extra={"model": payload["model"], "error": str(exc)},
            )
            raise UpstreamError(f"API request failed: {exc}") from exc

        if not response.is_success:
            body = response.text
            raise UpstreamError(
                f"API request failed: {body[:_BODY_PREVIEW_CHARS]}",
                status_code=response.status_code,
                body=body,
            )

        try:
            decoded = response.json()
        except ValueError as exc:
            raise UpstreamError(
                "API response was not valid JSON",
                body=response.text,
            ) from exc
        if not isinstance(decoded, dict):
            raise UpstreamError(
                "API response was not a JSON object",
                body=response.text,
            )
        return decoded


__all__ = ["OpenRouterClient", "UpstreamError"]
