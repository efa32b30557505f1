"""
Analytics Endpoints - engagement event recording and rollups
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from stayll.core.exceptions import NotFoundException, ValidationException
from stayll.core.logging import get_logger
from stayll.db.base import get_db
from stayll.api.analytics import AnalyticsAggregator, RollupCompiler
from stayll.api.endpoints.listings import path_listing_id

logger = get_logger(__name__)
router = APIRouter()


class ViewEvent(BaseModel):
    viewDuration: Optional[float] = None


def path_user_id(user_id: str) -> str:
    if not user_id or not user_id.strip():
        raise ValidationException("User ID is required")
    return user_id


# Event recording is public; each call is one atomic update of the listing's row

@router.post("/listings/{listing_id}/view")
def record_listing_view(
    payload: Optional[ViewEvent] = None,
    listing_id: str = Depends(path_listing_id),
    db: Session = Depends(get_db),
):
    duration = payload.viewDuration if payload and payload.viewDuration is not None else 0.0
    AnalyticsAggregator(db).record_view(listing_id, duration)
    return {"success": True}


@router.post("/listings/{listing_id}/inquiry")
def record_listing_inquiry(listing_id: str = Depends(path_listing_id), db: Session = Depends(get_db)):
    AnalyticsAggregator(db).record_inquiry(listing_id)
    return {"success": True}


@router.post("/listings/{listing_id}/favorite")
def record_listing_favorite(listing_id: str = Depends(path_listing_id), db: Session = Depends(get_db)):
    AnalyticsAggregator(db).record_favorite(listing_id)
    return {"success": True}


@router.get("/listings/{listing_id}")
def get_listing_analytics(listing_id: str = Depends(path_listing_id), db: Session = Depends(get_db)):
    analytics = AnalyticsAggregator(db).get_analytics(listing_id)
    if analytics is None:
        raise NotFoundException("Analytics not found for this listing")
    return {"success": True, "analytics": analytics}


@router.get("/user/{user_id}/listings")
def get_user_listings_analytics(user_id: str = Depends(path_user_id), db: Session = Depends(get_db)):
    rollup = RollupCompiler(db).compile_user_rollup(user_id)
    logger.info("User rollup compiled", user_id=user_id, listings=rollup.listingsCount)
    return {"success": True, "analytics": rollup}


@router.get("/user/{user_id}/dashboard")
def get_dashboard_summary(user_id: str = Depends(path_user_id), db: Session = Depends(get_db)):
    summary = RollupCompiler(db).compile_dashboard_summary(user_id)
    return {"success": True, "summary": summary}
