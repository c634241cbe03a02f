from datetime import time

import pytest
from sqlalchemy import text

from app.core.exceptions import NotFoundError, ValidationError
from app.models import AvailabilityException, Booking, BusinessHours, Resource, Service
from app.services.availability.availability_service import AvailabilityService, weekday_values
from conftest import MONDAY, SUNDAY, at


def _starts(slots):
    return [slot["start_at"] for slot in slots]


def _book(session, user_id, service_id, resource_id, start, end, status="confirmed"):
    booking = Booking(
        user_id=user_id,
        service_id=service_id,
        resource_id=resource_id,
        start_at=start,
        end_at=end,
        duration_minutes=int((end - start).total_seconds() // 60),
        total_price=35,
        status=status,
    )
    session.add(booking)
    return booking


def test_weekday_values_cover_both_conventions():
    assert weekday_values(MONDAY) == (1, 1)
    assert weekday_values(SUNDAY) == (0, 7)


def test_open_day_enumerates_every_fitting_window(db, catalog):
    slots = AvailabilityService.compute_availability(db, MONDAY, catalog.wash, step_minutes=30)

    starts = _starts(slots)
    assert starts[0] == at(9)
    assert starts[-1] == at(17)
    assert len(starts) == 17
    assert all(slot["end_at"] <= at(18) for slot in slots)
    assert all(slot["resource_id"] == catalog.bay for slot in slots)


def test_existing_booking_blocks_overlapping_starts(db, catalog, users):
    _book(db, users.alice, catalog.wash, catalog.bay, at(10), at(11))
    db.commit()

    starts = _starts(AvailabilityService.compute_availability(db, MONDAY, catalog.wash, step_minutes=30))

    assert at(10) not in starts
    assert at(9, 30) not in starts
    assert at(10, 30) not in starts
    assert at(9) in starts
    assert at(11) in starts


def test_hourly_step_skips_booked_hour(db, catalog, users):
    _book(db, users.alice, catalog.wash, catalog.bay, at(10), at(11))
    db.commit()

    starts = _starts(AvailabilityService.compute_availability(db, MONDAY, catalog.wash, step_minutes=60))

    assert starts == [at(h) for h in (9, 11, 12, 13, 14, 15, 16, 17)]


@pytest.mark.parametrize("status", ["cancelled", "refused", "completed"])
def test_inactive_bookings_do_not_block(db, catalog, users, status):
    _book(db, users.alice, catalog.wash, catalog.bay, at(10), at(11), status=status)
    db.commit()

    starts = _starts(AvailabilityService.compute_availability(db, MONDAY, catalog.wash))

    assert at(10) in starts


def test_pending_bookings_block(db, catalog, users):
    _book(db, users.alice, catalog.wash, catalog.bay, at(10), at(11), status="pending")
    db.commit()

    assert at(10) not in _starts(AvailabilityService.compute_availability(db, MONDAY, catalog.wash))


def test_capacity_above_one_keeps_offering_until_full(db, catalog, users):
    bay = db.get(Resource, catalog.bay)
    bay.capacity = 2
    _book(db, users.alice, catalog.wash, catalog.bay, at(10), at(11))
    db.commit()

    assert at(10) in _starts(AvailabilityService.compute_availability(db, MONDAY, catalog.wash))

    _book(db, users.bob, catalog.wash, catalog.bay, at(10), at(11))
    db.commit()

    assert at(10) not in _starts(AvailabilityService.compute_availability(db, MONDAY, catalog.wash))


def test_partial_exception_is_carved_out(db, catalog):
    db.add(AvailabilityException(date=MONDAY, is_closed=False, start_time=time(12), end_time=time(13)))
    db.commit()

    starts = _starts(AvailabilityService.compute_availability(db, MONDAY, catalog.wash))

    assert at(11) in starts
    assert at(11, 30) not in starts
    assert at(12) not in starts
    assert at(12, 30) not in starts
    assert at(13) in starts


def test_full_day_closure_returns_nothing(db, catalog):
    db.add(AvailabilityException(date=MONDAY, is_closed=True, reason="Holiday"))
    db.commit()

    assert AvailabilityService.compute_availability(db, MONDAY, catalog.wash) == []


def test_closure_for_another_resource_does_not_apply(db, catalog):
    other = Resource(name="Baie 2", capacity=1, active=True)
    db.add(other)
    db.flush()
    db.add(AvailabilityException(resource_id=other.id, date=MONDAY, is_closed=True))
    db.commit()

    slots = AvailabilityService.compute_availability(db, MONDAY, catalog.wash)

    assert {slot["resource_id"] for slot in slots} == {catalog.bay}


def test_closed_weekday_returns_nothing(db, catalog):
    assert AvailabilityService.compute_availability(db, SUNDAY, catalog.wash) == []


def test_past_slots_filtered_for_today(db, catalog):
    now = at(14, 30)

    starts = _starts(AvailabilityService.compute_availability(db, MONDAY, catalog.wash, now=now))

    assert starts
    assert all(start > now for start in starts)
    assert starts[0] == at(15)


def test_past_filter_does_not_apply_to_other_days(db, catalog):
    # The day before: Monday's slots are all still in the future
    starts = _starts(AvailabilityService.compute_availability(db, MONDAY, catalog.wash, now=at(20, day=SUNDAY)))

    assert starts[0] == at(9)


def test_weekday_seven_is_stored_as_sunday(db, catalog):
    hours = BusinessHours(weekday=7, start_time=time(10), end_time=time(12))
    db.add(hours)
    db.commit()

    assert hours.weekday == 0
    starts = _starts(AvailabilityService.compute_availability(db, SUNDAY, catalog.wash, step_minutes=60))
    assert starts == [at(10, day=SUNDAY), at(11, day=SUNDAY)]


def test_legacy_weekday_seven_rows_are_still_read(db, catalog):
    db.execute(text(
        "INSERT INTO business_hours (weekday, start_time, end_time) VALUES (7, '14:00:00.000000', '15:00:00.000000')"
    ))
    db.commit()

    starts = _starts(AvailabilityService.compute_availability(db, SUNDAY, catalog.wash, step_minutes=60))

    assert starts == [at(14, day=SUNDAY)]


def test_resource_specific_hours_only_apply_to_that_resource(db, catalog):
    evening_bay = Resource(name="Baie soir", capacity=1, active=True)
    db.add(evening_bay)
    db.flush()
    db.add(BusinessHours(resource_id=evening_bay.id, weekday=1, start_time=time(18), end_time=time(20)))
    db.commit()

    slots = AvailabilityService.compute_availability(db, MONDAY, catalog.wash, step_minutes=60)
    late = [s for s in slots if s["start_at"] >= at(18)]

    assert {s["resource_id"] for s in late} == {evening_bay.id}
    assert not any(s["resource_id"] == catalog.bay and s["start_at"] >= at(18) for s in slots)


def test_slots_merged_across_resources_sorted_by_start(db, catalog):
    db.add(Resource(name="Baie 2", capacity=1, active=True))
    db.commit()

    slots = AvailabilityService.compute_availability(db, MONDAY, catalog.wash, step_minutes=60)
    starts = _starts(slots)

    assert starts == sorted(starts)
    assert slots[0]["start_at"] == slots[1]["start_at"] == at(9)
    assert slots[0]["resource_id"] < slots[1]["resource_id"]


def test_explicit_resource_limits_results(db, catalog):
    other = Resource(name="Baie 2", capacity=1, active=True)
    db.add(other)
    db.commit()

    slots = AvailabilityService.compute_availability(db, MONDAY, catalog.wash, resource_id=other.id)

    assert slots
    assert {s["resource_id"] for s in slots} == {other.id}


def test_no_resources_uses_global_timeline(db, seed, users):
    ids = seed(lambda s: {"svc": _add(s, Service(title="Lavage", duration_minutes=60, price=35, active=True))})
    db.add(BusinessHours(weekday=1, start_time=time(9), end_time=time(12)))
    _book(db, users.alice, ids.svc, None, at(10), at(11))
    db.commit()

    slots = AvailabilityService.compute_availability(db, MONDAY, ids.svc, step_minutes=60)

    assert [(s["resource_id"], s["start_at"]) for s in slots] == [(None, at(9)), (None, at(11))]


def _add(session, obj):
    session.add(obj)
    session.flush()
    return obj


def test_duplicate_hours_rows_do_not_duplicate_slots(db, catalog):
    db.add(BusinessHours(resource_id=catalog.bay, weekday=1, start_time=time(9), end_time=time(18)))
    db.commit()

    starts = _starts(AvailabilityService.compute_availability(db, MONDAY, catalog.wash))

    assert len(starts) == len(set(starts)) == 17


def test_inactive_service_is_not_found(db, catalog):
    with pytest.raises(NotFoundError):
        AvailabilityService.compute_availability(db, MONDAY, catalog.retired)


def test_unknown_resource_is_not_found(db, catalog):
    with pytest.raises(NotFoundError):
        AvailabilityService.compute_availability(db, MONDAY, catalog.wash, resource_id=999)


@pytest.mark.parametrize(
    "bad_date",
    [None, "", "2030-1-7", "07/01/2030", "2030-01-07T10:00", "2030-02-30", "2030-W02-1", "20300107"]
)
def test_invalid_date_is_a_validation_error(db, catalog, bad_date):
    with pytest.raises(ValidationError):
        AvailabilityService.get_availability(db, bad_date, catalog.wash)


def test_missing_service_is_a_validation_error(db, catalog):
    with pytest.raises(ValidationError):
        AvailabilityService.get_availability(db, "2030-01-07", None)


@pytest.mark.parametrize("step", [0, -15, 10_000])
def test_out_of_range_step_is_a_validation_error(db, catalog, step):
    with pytest.raises(ValidationError):
        AvailabilityService.get_availability(db, "2030-01-07", catalog.wash, step_minutes=step)


def test_payload_uses_iso_timestamps_with_business_offset(db, catalog):
    payload = AvailabilityService.get_availability(db, "2030-01-07", catalog.wash, step_minutes=60)

    assert payload["date"] == "2030-01-07"
    assert payload["serviceId"] == catalog.wash
    assert payload["stepMinutes"] == 60
    assert payload["slots"][0] == {
        "resourceId": catalog.bay,
        "startAt": "2030-01-07T09:00:00+01:00",
        "endAt": "2030-01-07T10:00:00+01:00",
    }
