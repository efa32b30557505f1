"""
Read-only access to property records.

Property CRUD lives elsewhere in the product; this module only exposes the
lookups listing generation and the dashboard need.
"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stayll.core.exceptions import PersistenceException
from stayll.core.logging import get_logger
from stayll.db.models import Property

logger = get_logger(__name__)


def get_property_by_id(db: Session, property_id: str) -> Optional[Property]:
    try:
        return db.query(Property).filter(Property.id == property_id).first()
    except SQLAlchemyError as e:
        logger.error("Property lookup failed", property_id=property_id, error=str(e))
        raise PersistenceException("Failed to load property") from e


def get_properties_for_user(db: Session, user_id: str) -> List[Property]:
    try:
        return (
            db.query(Property)
            .filter(Property.user_id == user_id)
            .order_by(Property.created_at)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("Property listing failed", user_id=user_id, error=str(e))
        raise PersistenceException("Failed to load properties") from e
