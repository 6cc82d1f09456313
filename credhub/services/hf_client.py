"""
Hugging Face API Client

The HF router speaks the OpenAI chat protocol, so chat-style models go through
the openai library. Everything else (text2text, zero-shot classification)
goes to the classic inference endpoint with {"inputs", "parameters"}.

Every failure (missing key, network, timeout, HTTP error) surfaces as
AIServiceError so callers have exactly one thing to catch.
"""
import json
import logging
from typing import Any, List, Optional, Union

import httpx
from openai import OpenAI

from credhub.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Model families served by the OpenAI-compatible chat router
CHAT_MODEL_PREFIXES = (
    "HuggingFaceH4/zephyr",
    "mistralai/Mixtral",
    "mistralai/Mistral",
)


class AIServiceError(Exception):
    """The external model could not produce an answer."""


def is_chat_model(model: str) -> bool:
    return model.startswith(CHAT_MODEL_PREFIXES)


class HuggingFaceClient:
    """
    Wrapper for the Hugging Face router / inference API.
    """

    def __init__(self, api_key: str = None, timeout: float = None):
        self.api_key = settings.hf_api_key if api_key is None else api_key
        self.timeout = timeout or settings.ai_timeout_seconds
        self._chat_client: Optional[OpenAI] = None

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _chat(self) -> OpenAI:
        if self._chat_client is None:
            self._chat_client = OpenAI(
                api_key=self.api_key,
                base_url=settings.hf_chat_base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._chat_client

    def chat(
        self,
        model: str,
        messages: List[dict],
        temperature: float = 0.7,
        max_tokens: int = 300,
        top_p: float = 0.9,
    ) -> str:
        """Call a chat model and return the assistant text."""
        if not self.enabled:
            raise AIServiceError("Hugging Face API key is not configured")
        try:
            response = self._chat().chat.completions.create(
                model=model,
                messages=[{"role": m["role"], "content": m["content"]} for m in messages],
                temperature=temperature,
                max_tokens=max_tokens,
                top_p=top_p,
            )
        except Exception as e:
            logger.warning("Hugging Face chat call failed (%s): %s", model, e)
            raise AIServiceError(str(e)) from e
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def inference(self, model: str, inputs: Any, parameters: dict = None) -> Any:
        """Call the inference endpoint and return the decoded JSON body."""
        if not self.enabled:
            raise AIServiceError("Hugging Face API key is not configured")
        url = f"{settings.hf_inference_url}/{model}"
        try:
            response = httpx.post(
                url,
                json={"inputs": inputs, "parameters": parameters or {}},
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Hugging Face inference call failed (%s): %s", model, e)
            raise AIServiceError(str(e)) from e

    def query(self, model: str, inputs: Union[str, List[dict]], parameters: dict = None) -> str:
        """
        Route a request by model family and normalise the answer to text.

        Chat models get a messages array (a plain string becomes one user
        message); other models get the raw inputs and their generated_text
        is returned.
        """
        parameters = parameters or {}
        if is_chat_model(model):
            messages = inputs if isinstance(inputs, list) else [{"role": "user", "content": str(inputs)}]
            return self.chat(
                model,
                messages,
                temperature=parameters.get("temperature", 0.7),
                max_tokens=parameters.get("max_tokens", 300),
                top_p=parameters.get("top_p", 0.9),
            )

        data = self.inference(model, inputs, parameters)
        return extract_generated_text(data)

    def test_connection(self) -> bool:
        """Test if the chat router is reachable"""
        try:
            reply = self.chat(
                settings.text_generation_model,
                [{"role": "user", "content": "Reply with exactly: OK"}],
                max_tokens=10,
            )
            return "OK" in reply.upper()
        except AIServiceError as e:
            logger.warning("Hugging Face connection failed: %s", e)
            return False


def extract_generated_text(data: Any) -> str:
    """Inference answers are either {"generated_text"} or [{"generated_text"}]."""
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0].get("generated_text") or ""
    if isinstance(data, dict):
        return data.get("generated_text") or ""
    if isinstance(data, str):
        return data
    return ""


def extract_json(text: str) -> Any:
    """
    Extract JSON from a model response.
    Handles cases where model wraps JSON in markdown code blocks.
    """
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]

    return json.loads(text.strip())


# Singleton instance
_hf_client: HuggingFaceClient = None


def get_hf_client() -> HuggingFaceClient:
    """Get or create Hugging Face client (singleton pattern)"""
    global _hf_client
    if _hf_client is None:
        _hf_client = HuggingFaceClient()
    return _hf_client
