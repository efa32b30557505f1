"""
Provider Orchestrator - ordered fallback across text-generation providers
"""

from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from stayll.core.exceptions import UpstreamProviderFailure
from stayll.core.logging import get_logger
from stayll.api.generation.providers import TextProvider, build_providers

logger = get_logger(__name__)

FALLBACK_HEADLINE = "🏠 Beautiful Property Available!"
FALLBACK_BODY = (
    "Experience modern living in this spacious property with great amenities. "
    "Perfect location with easy access to transportation. Available now for "
    "immediate move-in. Contact us today to schedule a viewing!"
)


class GenerationAttempt(BaseModel):
    """One provider call"""
    provider: str
    succeeded: bool
    error: Optional[str] = None
    http_status_code: Optional[int] = None


class GenerationOutcome(BaseModel):
    """Text chosen by the orchestrator and how it got there"""
    text: str
    provider: Optional[str] = None  # None when the template was used
    used_fallback: bool = False
    attempts: List[GenerationAttempt] = Field(default_factory=list)
    last_error: Optional[str] = None


def fallback_listing(prompt: str) -> str:
    """Deterministic listing used when no provider produced text."""
    return f"{FALLBACK_HEADLINE}\n\n{FALLBACK_BODY}\n\n{prompt}"


async def select_first_success(providers: Sequence[TextProvider], prompt: str) -> GenerationOutcome:
    """
    Try ``providers`` in order and return the first usable text.

    Unconfigured providers are skipped without counting as an attempt.
    A failure that does not allow substitution ends the search; so does an
    unexpected error. Every path ends in non-empty text.
    """
    attempts: List[GenerationAttempt] = []
    last_error: Optional[str] = None

    for provider in providers:
        if not provider.is_configured:
            logger.debug("Skipping unconfigured provider", provider=provider.name)
            continue

        try:
            text = await provider.generate(prompt)
        except UpstreamProviderFailure as e:
            last_error = e.message
            attempts.append(GenerationAttempt(
                provider=provider.name,
                succeeded=False,
                error=e.message,
                http_status_code=e.http_status,
            ))
            logger.warning("Provider failed",
                          provider=provider.name,
                          status_code=e.http_status,
                          error=e.message,
                          substitutable=e.substitutable)
            if not e.substitutable:
                break
            continue
        except Exception as e:
            last_error = f"{type(e).__name__}: {e}"
            attempts.append(GenerationAttempt(provider=provider.name, succeeded=False, error=last_error))
            logger.exception("Provider raised unexpectedly", provider=provider.name)
            break

        if text and text.strip():
            attempts.append(GenerationAttempt(provider=provider.name, succeeded=True))
            return GenerationOutcome(text=text, provider=provider.name, attempts=attempts)

        last_error = f"{provider.name} returned no usable text"
        attempts.append(GenerationAttempt(provider=provider.name, succeeded=False, error=last_error))

    logger.warning("Using fallback listing template",
                  attempts=len(attempts),
                  last_error=last_error)
    return GenerationOutcome(
        text=fallback_listing(prompt),
        used_fallback=True,
        attempts=attempts,
        last_error=last_error,
    )


class ProviderOrchestrator:
    """Stateless wrapper binding an ordered provider list"""

    def __init__(self, providers: Sequence[TextProvider]):
        self.providers = list(providers)

    async def generate_outcome(self, prompt: str) -> GenerationOutcome:
        return await select_first_success(self.providers, prompt)

    async def generate(self, prompt: str) -> str:
        outcome = await self.generate_outcome(prompt)
        return outcome.text

    def configured_providers(self) -> List[str]:
        return [p.name for p in self.providers if p.is_configured]


def get_orchestrator() -> ProviderOrchestrator:
    """FastAPI dependency building the orchestrator from settings"""
    return ProviderOrchestrator(build_providers())
