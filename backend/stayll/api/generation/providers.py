"""
Text-generation providers

Each provider wraps one external endpoint. ``generate`` returns non-empty
text or raises ``UpstreamProviderFailure``; the failure says whether the
next provider may be tried in its place.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

import httpx

from stayll.core.config import Settings, settings as default_settings
from stayll.core.exceptions import ConfigurationException, UpstreamProviderFailure
from stayll.core.logging import get_logger
from stayll.api.generation.responses import extract_gemini_text, extract_text, parse_response

logger = get_logger(__name__)


class TextProvider(ABC):
    """Base class for text-generation providers"""

    def __init__(
        self,
        name: str,
        api_key: str = "",
        timeout_seconds: float = 10.0,
        substitute_on_status: Iterable[int] = (404, 500),
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.name = name
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.substitute_on_status = set(substitute_on_status)
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        key = (self.api_key or "").strip()
        return bool(key) and key != "undefined"

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Generate text for ``prompt``"""
        pass

    def _is_substitutable(self, status_code: int) -> bool:
        """Every 5xx moves on to the next provider; ``substitute_on_status`` adds 4xx codes to that."""
        return status_code in self.substitute_on_status or status_code >= 500

    async def _post_json(
        self,
        url: str,
        body: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        """POST ``body`` and return the decoded JSON reply, classifying failures."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = await client.post(url, json=body, headers=headers, params=params)
        except httpx.TimeoutException as e:
            raise UpstreamProviderFailure(self.name, f"{self.name} timed out") from e
        except httpx.HTTPError as e:
            raise UpstreamProviderFailure(self.name, f"{self.name} transport error: {type(e).__name__}") from e

        logger.info("Provider responded", provider=self.name, status_code=response.status_code)

        if not response.is_success:
            raise UpstreamProviderFailure(
                self.name,
                f"Model {self.name} failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                substitutable=self._is_substitutable(response.status_code),
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamProviderFailure(self.name, f"{self.name} returned malformed JSON") from e


class HuggingFaceProvider(TextProvider):
    """Hugging Face Inference API, one instance per model"""

    def __init__(
        self,
        model: str,
        api_key: str = "",
        base_url: str = "https://api-inference.huggingface.co/models",
        max_length: int = 150,
        temperature: float = 0.8,
        **kwargs,
    ):
        super().__init__(name=f"huggingface:{model}", api_key=api_key, **kwargs)
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_length = max_length
        self.temperature = temperature

    async def generate(self, prompt: str) -> str:
        payload = await self._post_json(
            f"{self.base_url}/{self.model}",
            body={
                "inputs": f"Create a professional rental listing: {prompt}",
                "parameters": {
                    "max_length": self.max_length,
                    "temperature": self.temperature,
                    "do_sample": True,
                    "return_full_text": False,
                },
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        text = extract_text(parse_response(payload))
        if not text.strip():
            raise UpstreamProviderFailure(self.name, f"{self.name} returned no usable text")
        return text


class GeminiProvider(TextProvider):
    """Google Gemini ``generateContent`` REST endpoint"""

    def __init__(
        self,
        model: str,
        api_key: str = "",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta/models",
        **kwargs,
    ):
        super().__init__(name=f"gemini:{model}", api_key=api_key, **kwargs)
        self.model = model
        self.base_url = base_url.rstrip("/")

    async def generate(self, prompt: str) -> str:
        payload = await self._post_json(
            f"{self.base_url}/{self.model}:generateContent",
            body={"contents": [{"role": "user", "parts": [{"text": prompt}]}]},
            params={"key": self.api_key},
        )
        # Markdown bold markers render literally in plain-text listings
        text = extract_gemini_text(payload).replace("**", "")
        if not text.strip():
            raise UpstreamProviderFailure(self.name, f"{self.name} returned no usable text")
        return text


def build_providers(
    config: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[TextProvider]:
    """Instantiate providers in ``PROVIDER_ORDER``."""
    config = config or default_settings
    common = {
        "timeout_seconds": config.PROVIDER_TIMEOUT_SECONDS,
        "substitute_on_status": config.SUBSTITUTE_ON_STATUS,
        "transport": transport,
    }

    providers: List[TextProvider] = []
    for family in config.get_provider_order():
        if family == "huggingface":
            for model in config.get_huggingface_models():
                providers.append(HuggingFaceProvider(
                    model=model,
                    api_key=config.HUGGINGFACE_API_KEY,
                    base_url=config.HUGGINGFACE_API_URL,
                    max_length=config.GENERATION_MAX_LENGTH,
                    temperature=config.GENERATION_TEMPERATURE,
                    **common,
                ))
        elif family == "gemini":
            providers.append(GeminiProvider(
                model=config.GEMINI_MODEL,
                api_key=config.GEMINI_API_KEY,
                base_url=config.GEMINI_API_URL,
                **common,
            ))
        else:
            raise ConfigurationException(
                f"Unknown provider family '{family}'",
                error_code="UNKNOWN_PROVIDER",
                details={"provider_order": config.PROVIDER_ORDER},
            )
    return providers
