"""
Listing Endpoints - generation and management of generated listings
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from stayll.core.exceptions import NotFoundException, ValidationException
from stayll.core.logging import get_logger
from stayll.db import listing_store
from stayll.db.base import get_db
from stayll.db.models import Listing
from stayll.api.generation import ListingGenerationService, ProviderOrchestrator, get_orchestrator

logger = get_logger(__name__)
router = APIRouter()


class GenerateListingRequest(BaseModel):
    propertyId: Optional[str] = None
    userId: Optional[str] = None


class UpdateListingRequest(BaseModel):
    listingText: Optional[str] = None


class ListingResponse(BaseModel):
    id: str
    listingText: str
    propertyId: str
    userId: str
    createdAt: Optional[datetime] = None


def _to_response(listing: Listing) -> ListingResponse:
    return ListingResponse(
        id=listing.id,
        listingText=listing.listing_text,
        propertyId=listing.property_id,
        userId=listing.user_id,
        createdAt=listing.created_at,
    )


def path_listing_id(listing_id: str) -> str:
    """Reject identifiers that are blank after trimming."""
    if not listing_id or not listing_id.strip():
        raise ValidationException("Listing ID is required")
    return listing_id


@router.post("/generate", status_code=status.HTTP_201_CREATED)
async def generate_listing(
    payload: GenerateListingRequest,
    db: Session = Depends(get_db),
    orchestrator: ProviderOrchestrator = Depends(get_orchestrator),
):
    """Generate marketing copy for a property and store it as a new listing."""
    property_id = (payload.propertyId or "").strip()
    user_id = (payload.userId or "").strip()
    if not property_id or not user_id:
        raise ValidationException("propertyId and userId are required.")

    logger.info("Listing generation requested", property_id=property_id, user_id=user_id)

    service = ListingGenerationService(db, orchestrator)
    listing = await service.generate_listing(property_id, user_id)
    return {"success": True, "listing": _to_response(listing)}


@router.get("")
def list_listings(
    userId: str = Query(..., min_length=1, description="Owner whose listings to return"),
    db: Session = Depends(get_db),
):
    """All listings for a user, newest first."""
    listings = [_to_response(item) for item in listing_store.get_all_for_user(db, userId)]
    return {"success": True, "listings": listings, "count": len(listings)}


@router.get("/{listing_id}")
def get_listing(listing_id: str = Depends(path_listing_id), db: Session = Depends(get_db)):
    listing = listing_store.get_by_id(db, listing_id)
    if listing is None:
        raise NotFoundException("Listing not found")
    return {"success": True, "listing": _to_response(listing)}


@router.patch("/{listing_id}")
def update_listing(
    payload: UpdateListingRequest,
    listing_id: str = Depends(path_listing_id),
    db: Session = Depends(get_db),
):
    """Replace the listing text; nothing else about a listing is editable."""
    if payload.listingText is None or not payload.listingText.strip():
        raise ValidationException("listingText is required")
    listing = listing_store.update_text(db, listing_id, payload.listingText)
    if listing is None:
        raise NotFoundException("Listing not found")
    return {"success": True, "listing": _to_response(listing)}


@router.delete("/{listing_id}")
def delete_listing(listing_id: str = Depends(path_listing_id), db: Session = Depends(get_db)):
    if not listing_store.delete(db, listing_id):
        raise NotFoundException("Listing not found")
    return {"success": True, "message": "Listing deleted successfully"}
