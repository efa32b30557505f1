"""CRUD operations for `Listing` entities.

Listings are immutable apart from explicit text edits. Deleting a listing
removes its analytics row with it.
"""
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stayll.core.exceptions import PersistenceException
from stayll.core.logging import get_logger
from stayll.db.models import Listing, Property

logger = get_logger(__name__)


def create_listing(db: Session, listing_text: str, property_id: str, user_id: str) -> Listing:
    listing = Listing(listing_text=listing_text, property_id=property_id, user_id=user_id)
    try:
        db.add(listing)
        db.commit()
        db.refresh(listing)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to persist listing", property_id=property_id, user_id=user_id, error=str(e))
        raise PersistenceException("Failed to save listing") from e
    logger.info("Listing persisted", listing_id=listing.id, property_id=property_id)
    return listing


def get_by_id(db: Session, listing_id: str) -> Optional[Listing]:
    try:
        return db.query(Listing).filter(Listing.id == listing_id).first()
    except SQLAlchemyError as e:
        logger.error("Listing lookup failed", listing_id=listing_id, error=str(e))
        raise PersistenceException("Failed to load listing") from e


def get_all_for_user(db: Session, user_id: str) -> List[Listing]:
    """Listings the user created or that belong to one of their properties, newest first."""
    try:
        return (
            db.query(Listing)
            .outerjoin(Property, Listing.property_id == Property.id)
            .filter(or_(Listing.user_id == user_id, Property.user_id == user_id))
            .order_by(Listing.created_at.desc(), Listing.id)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("Listing query failed", user_id=user_id, error=str(e))
        raise PersistenceException("Failed to load listings") from e


def update_text(db: Session, listing_id: str, listing_text: str) -> Optional[Listing]:
    listing = get_by_id(db, listing_id)
    if listing is None:
        return None
    try:
        listing.listing_text = listing_text
        db.commit()
        db.refresh(listing)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to update listing", listing_id=listing_id, error=str(e))
        raise PersistenceException("Failed to update listing") from e
    return listing


def delete(db: Session, listing_id: str) -> bool:
    listing = get_by_id(db, listing_id)
    if listing is None:
        return False
    try:
        db.delete(listing)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to delete listing", listing_id=listing_id, error=str(e))
        raise PersistenceException("Failed to delete listing") from e
    logger.info("Listing deleted", listing_id=listing_id)
    return True
