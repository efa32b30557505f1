"""
Rollup Compiler - per-user summaries folded over listing analytics
"""

from typing import List, Optional

from pydantic import BaseModel, Field
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stayll.core.exceptions import PersistenceException
from stayll.core.logging import get_logger
from stayll.db import property_store
from stayll.db.models import Listing, ListingAnalytics, Property

logger = get_logger(__name__)


class ListingBreakdown(BaseModel):
    id: str
    propertyId: str
    propertyTitle: Optional[str] = None
    views: int = 0
    inquiries: int = 0
    favorited: int = 0
    averageViewTime: float = 0.0
    clickThroughRate: float = 0.0


class UserRollup(BaseModel):
    """Read-time aggregate over a user's listings"""
    totalViews: int = 0
    totalInquiries: int = 0
    totalFavorites: int = 0
    avgViewsPerListing: float = 0.0
    avgInquiriesPerListing: float = 0.0
    listingsCount: int = 0
    listings: List[ListingBreakdown] = Field(default_factory=list)


class DashboardSummary(BaseModel):
    activeProperties: int = 0
    activeListings: int = 0
    newInquiries: int = 0
    averageRent: float = 0.0


def _owned_by(user_id: str):
    return or_(Listing.user_id == user_id, Property.user_id == user_id)


class RollupCompiler:
    """Pure reads; nothing here writes"""

    def __init__(self, db: Session):
        self.db = db

    def _breakdown(self, user_id: str) -> List[ListingBreakdown]:
        stmt = (
            select(
                Listing.id,
                Listing.property_id,
                Property.title,
                func.coalesce(ListingAnalytics.views, 0).label("views"),
                func.coalesce(ListingAnalytics.inquiries, 0).label("inquiries"),
                func.coalesce(ListingAnalytics.favorited, 0).label("favorited"),
                func.coalesce(ListingAnalytics.average_view_time, 0.0).label("average_view_time"),
                func.coalesce(ListingAnalytics.click_through_rate, 0.0).label("click_through_rate"),
            )
            .select_from(Listing)
            .outerjoin(Property, Listing.property_id == Property.id)
            .outerjoin(ListingAnalytics, ListingAnalytics.listing_id == Listing.id)
            .where(_owned_by(user_id))
            .order_by(Listing.created_at, Listing.id)
        )
        rows = self.db.execute(stmt).all()
        return [
            ListingBreakdown(
                id=row.id,
                propertyId=row.property_id,
                propertyTitle=row.title,
                views=row.views,
                inquiries=row.inquiries,
                favorited=row.favorited,
                averageViewTime=row.average_view_time,
                clickThroughRate=row.click_through_rate,
            )
            for row in rows
        ]

    def compile_user_rollup(self, user_id: str) -> UserRollup:
        try:
            listings = self._breakdown(user_id)
        except SQLAlchemyError as e:
            logger.error("User rollup query failed", user_id=user_id, error=str(e))
            raise PersistenceException("Failed to get user listings analytics") from e

        count = len(listings)
        total_views = sum(item.views for item in listings)
        total_inquiries = sum(item.inquiries for item in listings)
        total_favorites = sum(item.favorited for item in listings)

        return UserRollup(
            totalViews=total_views,
            totalInquiries=total_inquiries,
            totalFavorites=total_favorites,
            avgViewsPerListing=total_views / count if count else 0.0,
            avgInquiriesPerListing=total_inquiries / count if count else 0.0,
            listingsCount=count,
            listings=listings,
        )

    def compile_dashboard_summary(self, user_id: str) -> DashboardSummary:
        properties = property_store.get_properties_for_user(self.db, user_id)
        rollup = self.compile_user_rollup(user_id)

        active_properties = len(properties)
        total_rent = sum(p.rent or 0 for p in properties)

        return DashboardSummary(
            activeProperties=active_properties,
            activeListings=rollup.listingsCount,
            newInquiries=rollup.totalInquiries,
            averageRent=total_rent / active_properties if active_properties else 0.0,
        )
