"""Toast queue expiry and dismissal."""
import asyncio

import pytest

from atelier.services.notifications import NotificationCenter, NotificationSeverity


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def center(clock):
    return NotificationCenter(ttl=4.0, clock=clock)


def messages(center):
    return [n.message for n in center.active()]


def test_notification_expires_after_four_seconds(center, clock):
    center.notify("Saved")
    clock.now += 3.99
    assert messages(center) == ["Saved"]

    clock.now += 0.02  # T + 4.01
    assert messages(center) == []


def test_each_notification_has_its_own_deadline(center, clock):
    center.notify("first")
    clock.now += 2
    center.notify("second")
    clock.now += 2.01

    assert messages(center) == ["second"]


def test_dismissing_one_leaves_the_others(center):
    first = center.notify("first", "info")
    second = center.notify("second", "error")
    third = center.notify("third")

    assert center.dismiss(second.id) is True
    assert messages(center) == ["first", "third"]
    assert center.dismiss(second.id) is False
    assert len({first.id, second.id, third.id}) == 3


def test_arrival_order_and_severity(center):
    center.notify("ok")
    center.notify("boom", "error")

    active = center.active()
    assert [n.severity for n in active] == [NotificationSeverity.SUCCESS, NotificationSeverity.ERROR]
    assert active[1].to_dict()["severity"] == "error"


def test_listener_receives_current_stack(center):
    seen = []
    center.on_change = seen.append

    entry = center.notify("hello")
    center.dismiss(entry.id)

    assert [[n.message for n in stack] for stack in seen] == [["hello"], []]


def test_closed_center_ignores_new_notifications(center):
    center.notify("before")
    center.close()

    assert center.notify("after") is None
    assert center.active() == []


async def test_timer_removes_entry_and_tells_listener():
    seen = []
    center = NotificationCenter(ttl=0.05, on_change=seen.append)
    center.notify("short lived")

    await asyncio.sleep(0.1)

    assert center.active() == []
    assert seen[-1] == []
