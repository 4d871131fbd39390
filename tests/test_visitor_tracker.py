import pytest

from portfolio_backend.database import Base
from portfolio_backend.errors import StoreUnavailableError
from portfolio_backend.models.visitor import Visitor
from portfolio_backend.services.visitor_tracker import VisitorTracker

IP = "203.0.113.5"
UA = "TestAgent/1.0"
FULL_DIGEST = "0cae0f48929c9868f63d64b07c624fa8fb8b445a47ad68feea3ffe0e704e60c1"


@pytest.fixture
def tracker(db, clock):
    return VisitorTracker(db, clock=clock)


def _record(db, tracker, ip=IP, ua=UA) -> Visitor:
    db.expire_all()
    return db.query(Visitor).filter(Visitor.visitor_id == tracker.identify(ip, ua)).one()


def test_identify_is_sha256_prefix_and_stable(tracker):
    visitor_id = tracker.identify(IP, UA)

    assert visitor_id == FULL_DIGEST[:32]
    assert tracker.identify(IP, UA) == visitor_id
    assert tracker.identify(IP, "OtherAgent/2.0") != visitor_id
    assert tracker.identify("198.51.100.7", UA) != visitor_id


def test_identify_can_keep_full_digest(db):
    assert VisitorTracker(db, id_length=64).identify(IP, UA) == FULL_DIGEST


def test_identify_uses_unknown_sentinel_for_missing_values(tracker):
    assert tracker.identify("", "") == tracker.identify("unknown", "unknown")


def test_first_visit_creates_record(tracker, db, clock):
    result = tracker.track_visit(IP, UA)

    assert result.is_new_visitor is True
    assert result.unique_visitors == 1
    assert result.total_visits == 1
    record = _record(db, tracker)
    assert record.visit_count == 1
    assert record.last_visit == clock.now
    assert record.ip_address == IP
    assert record.user_agent == UA


def test_revisit_within_window_does_not_count(tracker, db, clock):
    tracker.track_visit(IP, UA)
    first_visit = _record(db, tracker).last_visit

    clock.advance(minutes=59)
    result = tracker.track_visit(IP, UA)

    assert result.is_new_visitor is False
    assert result.total_visits == 1
    record = _record(db, tracker)
    assert record.visit_count == 1
    assert record.last_visit == first_visit


def test_revisit_at_exactly_one_hour_does_not_count(tracker, db, clock):
    tracker.track_visit(IP, UA)
    clock.advance(hours=1)

    tracker.track_visit(IP, UA)

    assert _record(db, tracker).visit_count == 1


def test_revisit_after_window_increments_once(tracker, db, clock):
    tracker.track_visit(IP, UA)
    clock.advance(hours=1, seconds=1)

    result = tracker.track_visit(IP, UA)

    assert result.is_new_visitor is False
    assert result.unique_visitors == 1
    assert result.total_visits == 2
    record = _record(db, tracker)
    assert record.visit_count == 2
    assert record.last_visit == clock.now

    # Vuelve a abrirse la ventana desde la última visita contada
    clock.advance(minutes=30)
    tracker.track_visit(IP, UA)
    assert _record(db, tracker).visit_count == 2


def test_counts_match_store_contents(tracker, db, clock):
    for i in range(3):
        tracker.track_visit(f"10.0.0.{i}", UA)
    clock.advance(hours=2)
    tracker.track_visit("10.0.0.0", UA)
    tracker.track_visit("10.0.0.1", UA)

    counts = tracker.get_counts()

    records = db.query(Visitor).all()
    assert counts.unique_visitors == len(records) == 3
    assert counts.total_visits == sum(r.visit_count for r in records) == 5


def test_counts_on_empty_store(tracker):
    counts = tracker.get_counts()
    assert counts.unique_visitors == 0
    assert counts.total_visits == 0


def test_losing_insert_race_is_a_noop(tracker, db, clock):
    tracker.track_visit(IP, UA)

    # Segunda request que leyó "no existe" antes de que la primera insertara
    inserted = tracker._insert(tracker.identify(IP, UA), IP, UA, clock.now)

    assert inserted is False
    counts = tracker.get_counts()
    assert counts.unique_visitors == 1
    assert counts.total_visits == 1


def test_store_failure_is_raised_as_retryable(tracker, engine):
    Base.metadata.tables["visitors"].drop(bind=engine)

    with pytest.raises(StoreUnavailableError):
        tracker.track_visit(IP, UA)

    Base.metadata.tables["visitors"].create(bind=engine)


def test_list_visitors_second_page_by_last_visit_desc(tracker, clock):
    for i in range(25):
        tracker.track_visit(f"10.0.0.{i}", UA)
        clock.advance(minutes=1)

    page = tracker.list_visitors(page=2, page_size=10, sort_field="lastVisit", sort_direction="desc")

    assert page.total_count == 25
    assert [r.ip_address for r in page.records] == [f"10.0.0.{i}" for i in range(14, 4, -1)]


def test_list_visitors_unknown_sort_field_falls_back_to_last_visit(tracker, clock):
    for i in range(3):
        tracker.track_visit(f"10.0.0.{i}", UA)
        clock.advance(minutes=1)

    page = tracker.list_visitors(page=1, page_size=10, sort_field="userAgent; DROP TABLE visitors")

    assert [r.ip_address for r in page.records] == ["10.0.0.2", "10.0.0.1", "10.0.0.0"]


def test_list_visitors_sorted_by_visit_count_asc(tracker, clock):
    tracker.track_visit("10.0.0.1", UA)
    tracker.track_visit("10.0.0.2", UA)
    clock.advance(hours=2)
    tracker.track_visit("10.0.0.1", UA)

    page = tracker.list_visitors(page=1, page_size=10, sort_field="visitCount", sort_direction="asc")

    assert [(r.ip_address, r.visit_count) for r in page.records] == [("10.0.0.2", 1), ("10.0.0.1", 2)]


@pytest.mark.parametrize("id_length", [0, -4, 65])
def test_identifier_length_outside_digest_is_rejected(db, id_length):
    with pytest.raises(ValueError):
        VisitorTracker(db, id_length=id_length)
