import math
import random
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.orm import sessionmaker

from stayll.api.analytics import AnalyticsAggregator
from stayll.core.exceptions import NotFoundException, ValidationException
from stayll.db.base import Base, create_db_engine
from stayll.db.models import Listing, ListingAnalytics, Property, User


@pytest.fixture
def aggregator(db, sample_listing):
    return AnalyticsAggregator(db)


def test_unobserved_listing_has_no_analytics(aggregator, sample_listing):
    assert aggregator.get_analytics(sample_listing.id) is None


def test_first_view_creates_row(aggregator):
    snapshot = aggregator.record_view("listing-1", 2)

    assert snapshot.views == 1
    assert snapshot.averageViewTime == pytest.approx(2.0)
    assert snapshot.inquiries == 0
    assert snapshot.clickThroughRate == 0
    assert snapshot.lastViewed is not None


def test_view_inquiry_scenario(aggregator):
    aggregator.record_view("listing-1", 2)

    second = aggregator.record_view("listing-1", 6)
    assert second.views == 2
    assert second.averageViewTime == pytest.approx(4.0)

    after_inquiry = aggregator.record_inquiry("listing-1")
    assert after_inquiry.inquiries == 1
    assert after_inquiry.clickThroughRate == pytest.approx(50.0)

    stored = aggregator.get_analytics("listing-1")
    assert stored.views == 2
    assert stored.inquiries == 1
    assert stored.averageViewTime == pytest.approx(4.0)


def test_average_matches_mean_of_durations(aggregator):
    durations = [3.5, 0, 12, 7.25, 1, 30, 4.75]
    for duration in durations:
        snapshot = aggregator.record_view("listing-1", duration)

    assert snapshot.views == len(durations)
    assert snapshot.averageViewTime == pytest.approx(sum(durations) / len(durations))


def test_inquiry_before_any_view_keeps_ctr_zero(aggregator):
    snapshot = aggregator.record_inquiry("listing-1")

    assert snapshot.inquiries == 1
    assert snapshot.views == 0
    assert snapshot.clickThroughRate == 0


def test_view_after_inquiries_recomputes_ctr(aggregator):
    aggregator.record_inquiry("listing-1")
    aggregator.record_inquiry("listing-1")

    first_view = aggregator.record_view("listing-1", 5)
    assert first_view.clickThroughRate == pytest.approx(200.0)

    for _ in range(3):
        snapshot = aggregator.record_view("listing-1", 5)
    assert snapshot.clickThroughRate == pytest.approx(2 / 4 * 100)


def test_ctr_invariant_holds_after_every_call(aggregator):
    rng = random.Random(7)
    for _ in range(40):
        choice = rng.choice(["view", "inquiry", "favorite"])
        if choice == "view":
            snapshot = aggregator.record_view("listing-1", rng.uniform(0, 20))
        elif choice == "inquiry":
            snapshot = aggregator.record_inquiry("listing-1")
        else:
            snapshot = aggregator.record_favorite("listing-1")

        expected = snapshot.inquiries / snapshot.views * 100 if snapshot.views else 0
        assert snapshot.clickThroughRate == pytest.approx(expected)


def test_favorite_leaves_other_counters_alone(aggregator):
    aggregator.record_view("listing-1", 4)
    aggregator.record_inquiry("listing-1")
    before = aggregator.get_analytics("listing-1")

    after = aggregator.record_favorite("listing-1")

    assert after.favorited == before.favorited + 1
    assert after.views == before.views
    assert after.inquiries == before.inquiries
    assert after.clickThroughRate == before.clickThroughRate
    assert after.averageViewTime == before.averageViewTime


def test_first_event_favorite_creates_row(aggregator):
    snapshot = aggregator.record_favorite("listing-1")
    assert (snapshot.favorited, snapshot.views, snapshot.inquiries) == (1, 0, 0)


def test_recording_is_not_idempotent(aggregator):
    aggregator.record_view("listing-1", 3)
    snapshot = aggregator.record_view("listing-1", 3)

    assert snapshot.views == 2


def test_unknown_listing_is_not_found(aggregator, db):
    with pytest.raises(NotFoundException):
        aggregator.record_view("missing", 1)
    with pytest.raises(NotFoundException):
        aggregator.record_inquiry("missing")

    assert db.query(ListingAnalytics).count() == 0


@pytest.mark.parametrize("duration", [-1, float("nan"), float("inf")])
def test_invalid_duration_rejected(aggregator, duration):
    with pytest.raises(ValidationException):
        aggregator.record_view("listing-1", duration)
    assert aggregator.get_analytics("listing-1") is None


def test_none_duration_counts_as_zero(aggregator):
    snapshot = aggregator.record_view("listing-1", None)
    assert snapshot.views == 1
    assert snapshot.averageViewTime == 0


def test_deleting_listing_cascades_to_analytics(aggregator, db, sample_listing):
    aggregator.record_view("listing-1", 1)

    db.delete(db.get(Listing, "listing-1"))
    db.commit()

    assert db.query(ListingAnalytics).count() == 0


# Concurrency: a file-backed database so each worker has its own connection

@pytest.fixture
def file_session_factory(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'analytics.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = factory()
    session.add(User(id="u1", email="owner@example.com"))
    session.add(Property(id="p1", user_id="u1", title="Duplex", rent=1800))
    session.add_all([
        Listing(id="hot", listing_text="Hot listing", property_id="p1", user_id="u1"),
        Listing(id="cold", listing_text="Cold listing", property_id="p1", user_id="u1"),
    ])
    session.commit()
    session.close()

    yield factory
    engine.dispose()


def _in_own_session(factory, action):
    session = factory()
    try:
        return action(AnalyticsAggregator(session))
    finally:
        session.close()


def test_concurrent_inquiries_lose_no_updates(file_session_factory):
    workers = 25

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(
            lambda _: _in_own_session(file_session_factory, lambda agg: agg.record_inquiry("hot")),
            range(workers),
        ))

    snapshot = _in_own_session(file_session_factory, lambda agg: agg.get_analytics("hot"))
    assert snapshot.inquiries == workers


def test_concurrent_views_keep_exact_mean(file_session_factory):
    durations = [float(d) for d in range(1, 31)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(
            lambda d: _in_own_session(file_session_factory, lambda agg: agg.record_view("hot", d)),
            durations,
        ))

    snapshot = _in_own_session(file_session_factory, lambda agg: agg.get_analytics("hot"))
    assert snapshot.views == len(durations)
    assert snapshot.averageViewTime == pytest.approx(sum(durations) / len(durations))


def test_concurrent_mixed_events_across_listings(file_session_factory):
    events = [("hot", "view")] * 10 + [("hot", "inquiry")] * 5 + [("cold", "favorite")] * 7 + [("cold", "view")] * 4

    def apply(event):
        listing_id, kind = event
        if kind == "view":
            return _in_own_session(file_session_factory, lambda agg: agg.record_view(listing_id, 2))
        if kind == "inquiry":
            return _in_own_session(file_session_factory, lambda agg: agg.record_inquiry(listing_id))
        return _in_own_session(file_session_factory, lambda agg: agg.record_favorite(listing_id))

    shuffled = list(events)
    random.Random(3).shuffle(shuffled)
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(apply, shuffled))

    hot = _in_own_session(file_session_factory, lambda agg: agg.get_analytics("hot"))
    cold = _in_own_session(file_session_factory, lambda agg: agg.get_analytics("cold"))

    assert (hot.views, hot.inquiries, hot.favorited) == (10, 5, 0)
    assert hot.clickThroughRate == pytest.approx(50.0)
    assert (cold.views, cold.inquiries, cold.favorited) == (4, 0, 7)
    assert cold.clickThroughRate == 0


def test_huge_durations_keep_average_finite(aggregator):
    aggregator.record_view("listing-1", 1e308)
    snapshot = aggregator.record_view("listing-1", 1e308)

    assert snapshot.views == 2
    assert math.isfinite(snapshot.averageViewTime)
    assert snapshot.averageViewTime == pytest.approx(1e308)


def test_recorded_event_is_logged(aggregator, mocker):
    logger = mocker.patch("stayll.api.analytics.aggregator.logger")

    aggregator.record_inquiry("listing-1")

    logger.info.assert_called_once()
    assert logger.info.call_args.kwargs["analytics_event"] == "inquiry"
    assert logger.info.call_args.kwargs["listing_id"] == "listing-1"
