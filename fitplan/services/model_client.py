# fitplan/services/model_client.py
import os
import logging
from typing import Optional

import openai
from dotenv import load_dotenv
from openai import OpenAI

from fitplan.errors import ProviderFailure, RateLimited

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://ai.gateway.lovable.dev/v1"


class ModelClient:
    """
    Chat-completion client for an OpenAI-compatible gateway.

    complete() returns the generated text or raises RateLimited / ProviderFailure.
    Retries are disabled: a failed call is reported to the caller as-is.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[OpenAI] = None,
    ):
        self.api_key = api_key or os.getenv("AI_GATEWAY_API_KEY") or os.getenv("OPENAI_API_KEY")
        self.base_url = base_url or os.getenv("AI_GATEWAY_BASE_URL", DEFAULT_BASE_URL)
        self.timeout = timeout or float(os.getenv("AI_TIMEOUT_SECONDS", 60))
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise ProviderFailure("AI gateway API key is not configured")
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def complete(self, system_prompt: str, user_prompt: str, model: str) -> str:
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt}
                ]
            )
        except openai.RateLimitError as e:
            logger.warning("Model provider rate limited the request: %s", e.message)
            raise RateLimited("Rate limit exceeded. Please try again later.") from e
        except openai.APIStatusError as e:
            logger.error("Model provider error: %s %s", e.status_code, e.message)
            raise ProviderFailure(f"Model provider returned status {e.status_code}") from e
        except openai.OpenAIError as e:
            logger.error("Model provider call failed: %s", e)
            raise ProviderFailure("Model provider call failed") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.error("Model provider returned an empty completion for model %s", model)
            raise ProviderFailure("Model provider returned no content")

        return content
