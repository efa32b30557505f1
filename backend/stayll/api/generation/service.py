"""
Listing Generation Service - property lookup, prompt, generation, persistence
"""

from sqlalchemy.orm import Session

from stayll.core.exceptions import NotFoundException
from stayll.core.logging import get_logger
from stayll.db import listing_store, property_store
from stayll.db.models import Listing
from stayll.api.generation.orchestrator import ProviderOrchestrator
from stayll.api.generation.prompt_builder import build_listing_prompt

logger = get_logger(__name__)


class ListingGenerationService:
    """Creates a new listing for a property on every call"""

    def __init__(self, db: Session, orchestrator: ProviderOrchestrator):
        self.db = db
        self.orchestrator = orchestrator

    async def generate_listing(self, property_id: str, user_id: str) -> Listing:
        """
        Generate and persist a listing.

        Raises:
            NotFoundException: the property does not exist or is not owned by ``user_id``
            PersistenceException: the listing could not be stored
        """
        property_record = property_store.get_property_by_id(self.db, property_id)
        # Listings are owned by the property's owner; other users see no property.
        if property_record is None or property_record.user_id != user_id:
            logger.warning("Property not found for user", property_id=property_id, user_id=user_id)
            raise NotFoundException("Property not found.", details={"property_id": property_id})

        prompt = build_listing_prompt(property_record)
        outcome = await self.orchestrator.generate_outcome(prompt)

        logger.info("Listing text generated",
                   property_id=property_id,
                   provider=outcome.provider,
                   used_fallback=outcome.used_fallback,
                   attempts=len(outcome.attempts))

        return listing_store.create_listing(
            self.db,
            listing_text=outcome.text,
            property_id=property_id,
            user_id=user_id,
        )
