"""
Listing generation package

Prompt construction, provider fallback and listing persistence.
"""

from .prompt_builder import build_listing_prompt
from .responses import (
    ArrayResponse,
    StringResponse,
    ObjectResponse,
    EmptyResponse,
    parse_response,
    extract_text,
)
from .providers import TextProvider, HuggingFaceProvider, GeminiProvider, build_providers
from .orchestrator import (
    ProviderOrchestrator,
    GenerationOutcome,
    GenerationAttempt,
    select_first_success,
    fallback_listing,
    get_orchestrator,
)
from .service import ListingGenerationService

__all__ = [
    "build_listing_prompt",
    "ArrayResponse",
    "StringResponse",
    "ObjectResponse",
    "EmptyResponse",
    "parse_response",
    "extract_text",
    "TextProvider",
    "HuggingFaceProvider",
    "GeminiProvider",
    "build_providers",
    "ProviderOrchestrator",
    "GenerationOutcome",
    "GenerationAttempt",
    "select_first_success",
    "fallback_listing",
    "get_orchestrator",
    "ListingGenerationService",
]
