"""Tests for the exposure session state machine."""

from datetime import timedelta

import pytest

from sunray.domain.conditions import CurrentConditions
from sunray.domain.models import ExposureSession, SkinType, UserSettings
from sunray.domain.sun import solar_elevation
from sunray.domain.synthesis import synthesized_iu
from tests.conftest import (
    NOON,
    FailingStore,
    FakeClock,
    InMemoryStore,
    RecordingHealthStore,
    build_session_service,
    make_fix,
)

SUNNY = CurrentConditions(uv_index=5.4, cloud_cover=0.2, solar_elevation=45)


def test_start_creates_active_session_with_settings_skin_type() -> None:
    service = build_session_service(settings=UserSettings(skin_type=SkinType.V))

    session = service.start(spf=30, exposed_percent=40)

    assert service.is_active
    assert session.start == NOON
    assert session.end is None
    assert session.estimated_iu is None
    assert session.skin_type is SkinType.V


def test_second_start_is_a_no_op() -> None:
    service = build_session_service()

    first = service.start(spf=15, exposed_percent=25)
    second = service.start(spf=50, exposed_percent=80)

    assert second is first
    assert service.active is not None
    assert service.active.spf == 15
    assert service.active.exposed_percent == 25


def test_adjust_updates_active_session_in_place() -> None:
    service = build_session_service()
    started = service.start(spf=15, exposed_percent=25)

    adjusted = service.adjust(spf=30, exposed_percent=50)

    assert adjusted is not None
    assert adjusted.id == started.id
    assert service.active is adjusted
    assert (adjusted.spf, adjusted.exposed_percent) == (30, 50)


def test_adjust_while_idle_is_a_no_op() -> None:
    service = build_session_service()

    assert service.adjust(spf=30, exposed_percent=50) is None
    assert service.active is None


def test_stop_while_idle_is_a_no_op() -> None:
    store = InMemoryStore()
    service = build_session_service(store=store)

    assert service.stop(SUNNY, position=None) is None
    assert service.history == []
    assert service.ledger.total() == 0
    assert store.saved_histories == 0


def test_stop_finalizes_and_records_dose() -> None:
    clock = FakeClock()
    store = InMemoryStore()
    health_store = RecordingHealthStore()
    service = build_session_service(store=store, health_store=health_store, clock=clock)
    service.start(spf=15, exposed_percent=25)
    clock.advance(minutes=30, seconds=40)

    finalized = service.stop(SUNNY, position=None)

    assert finalized is not None
    assert service.active is None
    assert finalized.end == clock.now
    assert finalized.duration_minutes() == 30
    assert finalized.estimated_iu == pytest.approx(27.3375)
    assert service.history == [finalized]
    assert store.history == [finalized]
    assert service.ledger.total() == pytest.approx(27.3375)
    assert health_store.exposures == [(30, 5.4, None)]


def test_stop_prepends_history_most_recent_first() -> None:
    clock = FakeClock()
    service = build_session_service(clock=clock)

    service.start(spf=15, exposed_percent=25)
    clock.advance(minutes=10)
    first = service.stop(SUNNY, position=None)
    service.start(spf=15, exposed_percent=25)
    clock.advance(minutes=20)
    second = service.stop(SUNNY, position=None)

    assert service.history == [second, first]
    assert service.ledger.total() == pytest.approx(
        (first.estimated_iu or 0) + (second.estimated_iu or 0)
    )


def test_stop_with_unknown_conditions_records_zero_dose() -> None:
    clock = FakeClock()
    health_store = RecordingHealthStore()
    service = build_session_service(health_store=health_store, clock=clock)
    service.start(spf=15, exposed_percent=25)
    clock.advance(minutes=15)

    finalized = service.stop(CurrentConditions.unknown(), position=None)

    assert finalized is not None
    assert finalized.estimated_iu == 0
    assert health_store.exposures == []
    assert len(service.history) == 1


def test_stop_survives_failing_collaborators() -> None:
    clock = FakeClock()
    service = build_session_service(
        store=FailingStore(),
        health_store=RecordingHealthStore(fail_writes=True),
        clock=clock,
    )
    service.start(spf=15, exposed_percent=25)
    clock.advance(minutes=30)

    finalized = service.stop(SUNNY, position=None)

    assert finalized is not None
    assert service.active is None
    assert service.history[0] is finalized
    assert service.ledger.total() == pytest.approx(finalized.estimated_iu or 0)


def test_load_history_failure_starts_empty() -> None:
    service = build_session_service(store=FailingStore())

    assert service.load_history() == []


def test_stop_uses_solar_elevation_at_stop_time() -> None:
    clock = FakeClock()
    service = build_session_service(clock=clock)
    service.start(spf=15, exposed_percent=25)
    clock.advance(hours=5)
    fix = make_fix()
    midday_reading = CurrentConditions(uv_index=5.4, cloud_cover=0.2, solar_elevation=70)
    evening_elevation = solar_elevation(fix.latitude, fix.longitude, clock.now)

    finalized = service.stop(midday_reading, position=fix)

    assert 0 < evening_elevation < 60
    dose_at = {
        elevation: synthesized_iu(
            uv_index=5.4,
            minutes=300,
            solar_elevation=elevation,
            cloud_cover=0.2,
            skin_factor=SkinType.III.synthesis_factor,
            spf=15,
            exposed_percent=25,
        )
        for elevation in (evening_elevation, 70)
    }
    assert finalized is not None
    assert finalized.estimated_iu == pytest.approx(dose_at[evening_elevation])
    assert finalized.estimated_iu != pytest.approx(dose_at[70])


def test_load_history_skips_unfinished_sessions() -> None:
    finished = ExposureSession(
        start=NOON,
        end=NOON + timedelta(minutes=10),
        spf=15,
        exposed_percent=25,
        skin_type=SkinType.III,
        estimated_iu=12.0,
    )
    unfinished = ExposureSession(
        start=NOON, spf=15, exposed_percent=25, skin_type=SkinType.III
    )
    service = build_session_service(store=InMemoryStore(history=[unfinished, finished]))

    assert service.load_history() == [finished]
