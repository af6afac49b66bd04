from datetime import timedelta

import httpx
import pytest

from app.client.api import TrackerClient
from app.client.emission import EmissionPolicy, TrackingSession
from app.client.positioning import ManualPositionSource, PositionFix
from app.models.location_log import LocationLog
from app.models.presence import Presence
from app.schemas.enums import PositionErrorCode


class FakeApi:
    def __init__(self):
        self.calls = []
        self.fail_location = False
        self.fail_status = False

    def set_sharing(self, is_sharing):
        if self.fail_status:
            raise httpx.ConnectError("offline")
        self.calls.append(("status", is_sharing))
        return {"success": True, "is_sharing": is_sharing}

    def send_location(self, fix):
        if self.fail_location:
            raise httpx.ConnectError("offline")
        self.calls.append(("location", fix))
        return {}

    def sent(self):
        return [c[1] for c in self.calls if c[0] == "location"]


ORIGIN = PositionFix(10.00000, 120.00000)


# ------------------------------------------------------------------
# Policy
# ------------------------------------------------------------------

def test_first_fix_always_transmits(clock):
    policy = EmissionPolicy()
    assert policy.reason(ORIGIN, clock()) == "first"


def test_small_move_inside_heartbeat_is_dropped(clock):
    policy = EmissionPolicy()
    policy.record(ORIGIN, clock())

    assert not policy.should_transmit(PositionFix(10.00005, 120.00005), clock.advance(seconds=5))


def test_move_beyond_threshold_transmits_immediately(clock):
    policy = EmissionPolicy()
    policy.record(ORIGIN, clock())

    assert policy.reason(PositionFix(10.00020, 120.00000), clock.advance(seconds=1)) == "moved"
    assert policy.reason(PositionFix(10.00000, 119.99980), clock()) == "moved"


def test_heartbeat_fires_after_interval_without_movement(clock):
    policy = EmissionPolicy()
    start = clock()
    policy.record(ORIGIN, start)

    assert not policy.should_transmit(ORIGIN, start + timedelta(seconds=29))
    assert policy.reason(ORIGIN, start + timedelta(seconds=30)) == "heartbeat"
    assert policy.reason(ORIGIN, start + timedelta(seconds=31)) == "heartbeat"


# ------------------------------------------------------------------
# Session
# ------------------------------------------------------------------

def test_start_marks_presence_before_watching(clock):
    api, source = FakeApi(), ManualPositionSource()
    session = TrackingSession(api, source, clock=clock)

    session.start()

    assert api.calls == [("status", True)]
    assert source.watching
    assert session.is_tracking


def test_session_gates_fixes(clock):
    api, source = FakeApi(), ManualPositionSource()
    session = TrackingSession(api, source, clock=clock)
    session.start()

    source.emit(ORIGIN)
    clock.advance(seconds=5)
    source.emit(PositionFix(10.00005, 120.00005))
    clock.advance(seconds=5)
    source.emit(PositionFix(10.00020, 120.00000))
    clock.advance(seconds=31)
    source.emit(PositionFix(10.00020, 120.00000))

    assert api.sent() == [
        ORIGIN,
        PositionFix(10.00020, 120.00000),
        PositionFix(10.00020, 120.00000),
    ]
    assert session.last_sync == clock()


def test_failed_send_keeps_previous_reference(clock):
    api, source = FakeApi(), ManualPositionSource()
    session = TrackingSession(api, source, clock=clock)
    session.start()
    source.emit(ORIGIN)
    sent_at = clock()

    api.fail_location = True
    clock.advance(seconds=2)
    source.emit(PositionFix(10.001, 120.0))

    assert session.policy.last_sent.fix == ORIGIN
    assert session.policy.last_sent.at == sent_at

    # next fix is still judged against the last successful send
    api.fail_location = False
    clock.advance(seconds=2)
    source.emit(PositionFix(10.00001, 120.0))
    assert api.sent() == [ORIGIN]

    clock.advance(seconds=30)
    source.emit(PositionFix(10.00001, 120.0))
    assert api.sent() == [ORIGIN, PositionFix(10.00001, 120.0)]


def test_stop_cancels_watch_and_clears_presence(clock):
    api, source = FakeApi(), ManualPositionSource()
    session = TrackingSession(api, source, clock=clock)
    session.start()
    source.emit(ORIGIN)

    session.stop()
    source.emit(PositionFix(11.0, 121.0))

    assert not source.watching
    assert not session.is_tracking
    assert api.calls[-1] == ("status", False)
    assert api.sent() == [ORIGIN]


def test_stop_does_not_raise_when_status_write_fails(clock):
    api, source = FakeApi(), ManualPositionSource()
    session = TrackingSession(api, source, clock=clock)
    session.start()

    api.fail_status = True
    session.stop()

    assert not session.is_tracking


def test_restart_sends_first_fix_again(clock):
    api, source = FakeApi(), ManualPositionSource()
    session = TrackingSession(api, source, clock=clock)
    session.start()
    source.emit(ORIGIN)
    session.stop()

    session.start()
    source.emit(ORIGIN)

    assert api.sent() == [ORIGIN, ORIGIN]


@pytest.mark.parametrize(
    "code, fragment",
    [
        (PositionErrorCode.permission_denied, "permission denied"),
        (PositionErrorCode.position_unavailable, "GPS"),
        (PositionErrorCode.timeout, "timed out"),
    ],
)
def test_position_error_sets_message_and_stops(clock, code, fragment):
    api, source = FakeApi(), ManualPositionSource()
    session = TrackingSession(api, source, clock=clock)
    session.start()

    source.fail(code)

    assert fragment in session.error
    assert not session.is_tracking
    assert not source.watching


# ------------------------------------------------------------------
# Against the API
# ------------------------------------------------------------------

def test_session_writes_samples_and_presence_through_api(client, db, student, auth, clock):
    token = auth(student)["Authorization"].split(" ", 1)[1]
    api = TrackerClient(http=client, token=token)
    source = ManualPositionSource()
    session = TrackingSession(api, source, clock=clock)

    session.start()
    source.emit(PositionFix(14.5995, 120.9842, accuracy=12.0))
    source.emit(PositionFix(14.5995, 120.9842, accuracy=12.0))

    db.expire_all()
    logs = db.query(LocationLog).filter(LocationLog.user_id == student.id).all()
    assert len(logs) == 1
    assert logs[0].accuracy == 12.0
    assert db.get(Presence, student.id).is_sharing is True

    session.stop()
    db.expire_all()
    assert db.get(Presence, student.id).is_sharing is False
