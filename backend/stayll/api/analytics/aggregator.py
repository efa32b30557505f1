"""
Analytics Aggregator - per-listing engagement counters

Every recording call is one transaction whose writes are SQL ``UPDATE``
statements computing the new values from the row itself, so concurrent
writers on the same listing serialize on the row lock and writers on
different listings never touch each other's rows.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel
from sqlalchemy import case, cast, literal, select, update, Float
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from stayll.core.exceptions import NotFoundException, PersistenceException, ValidationException
from stayll.core.logging import get_logger
from stayll.db.models import Listing, ListingAnalytics, new_id

logger = get_logger(__name__)

analytics_table = ListingAnalytics.__table__
c = analytics_table.c


class AnalyticsEvent(str, Enum):
    """Engagement events a client can report"""
    VIEW = "view"
    INQUIRY = "inquiry"
    FAVORITE = "favorite"


class AnalyticsSnapshot(BaseModel):
    """Current counters of one listing"""
    listingId: str
    views: int = 0
    inquiries: int = 0
    favorited: int = 0
    lastViewed: Optional[datetime] = None
    averageViewTime: float = 0.0
    clickThroughRate: float = 0.0


def _snapshot(row: Any) -> AnalyticsSnapshot:
    return AnalyticsSnapshot(
        listingId=row.listing_id,
        views=row.views,
        inquiries=row.inquiries,
        favorited=row.favorited,
        lastViewed=row.last_viewed,
        averageViewTime=row.average_view_time,
        clickThroughRate=row.click_through_rate,
    )


def view_update_values(duration_seconds: float, now: datetime) -> Dict[Any, Any]:
    """SET clause for a view; right-hand sides see the pre-update row."""
    duration = literal(float(duration_seconds), Float)
    return {
        c.views: c.views + 1,
        c.average_view_time: c.average_view_time + (duration - c.average_view_time) / (c.views + 1),
        c.click_through_rate: case(
            (c.inquiries > 0, cast(c.inquiries, Float) / (c.views + 1) * 100.0),
            else_=0.0,
        ),
        c.last_viewed: now,
    }


def inquiry_update_values() -> Dict[Any, Any]:
    return {
        c.inquiries: c.inquiries + 1,
        c.click_through_rate: case(
            (c.views > 0, cast(c.inquiries + 1, Float) / c.views * 100.0),
            else_=0.0,
        ),
    }


def favorite_update_values() -> Dict[Any, Any]:
    return {c.favorited: c.favorited + 1}


class AnalyticsAggregator:
    """Records engagement events and reads per-listing snapshots"""

    def __init__(self, db: Session):
        self.db = db

    def record_view(self, listing_id: str, duration_seconds: float = 0.0) -> AnalyticsSnapshot:
        if duration_seconds is None:
            duration_seconds = 0.0
        if not math.isfinite(duration_seconds) or duration_seconds < 0:
            raise ValidationException("viewDuration must be a finite non-negative number")
        now = datetime.now(timezone.utc)
        return self._record(listing_id, AnalyticsEvent.VIEW, view_update_values(duration_seconds, now))

    def record_inquiry(self, listing_id: str) -> AnalyticsSnapshot:
        return self._record(listing_id, AnalyticsEvent.INQUIRY, inquiry_update_values())

    def record_favorite(self, listing_id: str) -> AnalyticsSnapshot:
        return self._record(listing_id, AnalyticsEvent.FAVORITE, favorite_update_values())

    def get_analytics(self, listing_id: str) -> Optional[AnalyticsSnapshot]:
        try:
            row = self.db.execute(
                select(analytics_table).where(c.listing_id == listing_id)
            ).first()
        except SQLAlchemyError as e:
            logger.error("Analytics lookup failed", listing_id=listing_id, error=str(e))
            raise PersistenceException("Failed to load listing analytics") from e
        return _snapshot(row) if row is not None else None

    def _record(self, listing_id: str, event: AnalyticsEvent, values: Dict[Any, Any]) -> AnalyticsSnapshot:
        stmt = update(analytics_table).where(c.listing_id == listing_id).values(values)
        try:
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self._create_empty_row(listing_id)
                self.db.execute(stmt)
            row = self.db.execute(
                select(analytics_table).where(c.listing_id == listing_id)
            ).one()
            snapshot = _snapshot(row)
            self.db.commit()
        except NotFoundException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to record analytics event",
                        listing_id=listing_id,
                        analytics_event=event.value,
                        error=str(e))
            raise PersistenceException("Failed to record listing analytics") from e

        logger.info("Analytics event recorded",
                   listing_id=listing_id,
                   analytics_event=event.value,
                   views=snapshot.views,
                   inquiries=snapshot.inquiries)
        return snapshot

    def _create_empty_row(self, listing_id: str) -> None:
        """Insert an all-zero row unless a concurrent writer already did."""
        exists = self.db.execute(select(Listing.id).where(Listing.id == listing_id)).first()
        if exists is None:
            raise NotFoundException("Listing not found", details={"listing_id": listing_id})

        row = {
            "id": new_id(),
            "listing_id": listing_id,
            "views": 0,
            "inquiries": 0,
            "favorited": 0,
            "average_view_time": 0.0,
            "click_through_rate": 0.0,
        }
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            self.db.execute(pg_insert(analytics_table).values(**row).on_conflict_do_nothing(index_elements=["listing_id"]))
        elif dialect == "sqlite":
            self.db.execute(sqlite_insert(analytics_table).values(**row).on_conflict_do_nothing(index_elements=["listing_id"]))
        else:
            try:
                with self.db.begin_nested():
                    self.db.execute(analytics_table.insert().values(**row))
            except IntegrityError:
                logger.debug("Analytics row created concurrently", listing_id=listing_id)
