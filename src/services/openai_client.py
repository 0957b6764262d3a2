from __future__ import annotations

import json
import logging
from typing import Any, Sequence

import httpx

from src.services.errors import LanguageModelError, NetworkTimeoutError, ServiceError, UpstreamParseError

logger = logging.getLogger(__name__)


class OpenAIConfigurationError(ServiceError):
    pass


class OpenAIChatClient:
    """
    Minimal chat-completions client for function-calling requests.
    Each call is attempted once; the caller decides what a failure means.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gpt-3.5-turbo",
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise OpenAIConfigurationError("Missing OpenAI API key.")
        self.api_key = api_key
        self.model_name = model_name
        self.endpoint = f"{base_url.rstrip('/')}/chat/completions"
        self.timeout_seconds = timeout_seconds
        self._http = http_client or httpx.Client(timeout=timeout_seconds)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(
        self,
        messages: Sequence[dict[str, str]],
        functions: Sequence[dict[str, Any]],
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        return {
            "model": self.model_name,
            "messages": list(messages),
            "temperature": temperature,
            "max_tokens": max_tokens,
            "top_p": 1,
            "frequency_penalty": 0,
            "presence_penalty": 0,
            "functions": list(functions),
        }

    def complete_function_call(
        self,
        messages: Sequence[dict[str, str]],
        functions: Sequence[dict[str, Any]],
        temperature: float = 0.4,
        max_tokens: int = 750,
    ) -> dict[str, Any]:
        """
        Sends a chat completion and returns the parsed function-call arguments.

        Raises:
            NetworkTimeoutError: the provider did not answer in time
            LanguageModelError: transport failure or non-2xx answer
            UpstreamParseError: the answer has no usable function call
        """
        payload = self.build_payload(messages, functions, temperature, max_tokens)

        try:
            response = self._http.post(
                self.endpoint,
                headers=self._headers(),
                json=payload,
                timeout=self.timeout_seconds,
            )
        except httpx.TimeoutException as timeout_error:
            raise NetworkTimeoutError(self.endpoint, self.timeout_seconds) from timeout_error
        except httpx.HTTPError as http_error:
            raise LanguageModelError(f"Connection error to language model: {http_error}") from http_error

        if response.status_code != 200:
            logger.error(
                "Language model returned status=%d body=%s",
                response.status_code,
                response.text[:500],
            )
            raise LanguageModelError(
                f"Language model error {response.status_code}",
                status_code=response.status_code,
            )

        return self._parse_function_arguments(response)

    def _parse_function_arguments(self, response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
            raw_arguments = body["choices"][0]["message"]["function_call"]["arguments"]
        except (ValueError, KeyError, IndexError, TypeError) as shape_error:
            raise UpstreamParseError(f"Invalid chat completion structure: {shape_error}") from shape_error

        try:
            arguments = json.loads(raw_arguments)
        except (TypeError, json.JSONDecodeError) as json_error:
            raise UpstreamParseError(f"Function call arguments are not valid JSON: {json_error}") from json_error

        if not isinstance(arguments, dict):
            raise UpstreamParseError("Function call arguments must be a JSON object")

        return arguments

    def close(self) -> None:
        self._http.close()
