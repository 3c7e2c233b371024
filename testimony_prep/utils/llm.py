"""Client for the hosted chat completion endpoint"""

import asyncio
import logging
from typing import Optional

import aiohttp

from testimony_prep.errors import LLMError
from testimony_prep.utils.config import Settings

logger = logging.getLogger(__name__)

COMPLETIONS_PATH = "/llm/v1/chat/completions"


def extract_content(response: dict) -> str:
    """Text of the first choice, or empty string"""
    try:
        return response["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError):
        return ""


class CompletionClient:
    """Posts chat messages to ``{base}/llm/v1/chat/completions``.

    No timeout is configured beyond aiohttp's defaults. Non-2xx responses,
    timeouts and bodies that are not JSON raise LLMError so callers can fall
    back to local content.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def url(self) -> str:
        return self.settings.case_api_base.rstrip("/") + COMPLETIONS_PATH

    def _headers(self) -> dict:
        if not self.settings.case_api_key:
            raise LLMError("CASE_API_KEY not set. Add it to your .env file.")
        return {
            "Authorization": f"Bearer {self.settings.case_api_key}",
            "Content-Type": "application/json",
        }

    async def chat_completion(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> dict:
        """Non-streaming chat completion; returns the decoded response body"""
        payload = {
            "model": model or self.settings.llm_model,
            "messages": messages,
            "temperature": self.settings.llm_temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.settings.llm_max_tokens,
            "stream": False,
        }
        headers = self._headers()

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self.url, json=payload, headers=headers) as response:
                    if response.status < 200 or response.status >= 300:
                        body = await response.text()
                        raise LLMError(f"LLM API error ({response.status}): {body[:500]}")
                    return await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise LLMError(f"LLM API request failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise LLMError("LLM API request timed out") from e
        except ValueError as e:
            raise LLMError(f"LLM API returned a non-JSON body: {e}") from e
