"""Tests for NotificationDispatcher — fan-out, partial failure, lifecycle."""

from __future__ import annotations

from zfswatch.monitor.channels import NotificationChannel
from zfswatch.monitor.dispatcher import NotificationDispatcher
from zfswatch.monitor.types import AlertMessage

# ── Helpers ─────────────────────────────────────────────────────


class FakeChannel(NotificationChannel):
    """In-memory channel for testing."""

    def __init__(self, name: str = "fake", ok: bool = True, raises: bool = False) -> None:
        self.name = name
        self.sent: list[AlertMessage] = []
        self._ok = ok
        self._raises = raises
        self.closed = False

    def send(self, msg: AlertMessage) -> bool:
        if self._raises:
            raise ConnectionError("fake error")
        self.sent.append(msg)
        return self._ok

    def close(self) -> None:
        if self._raises:
            raise RuntimeError("close failed")
        self.closed = True


def _msg() -> AlertMessage:
    return AlertMessage(
        subject="ZFS alert for tank on nas!",
        body="details\n",
        recipient="root",
        sender="root",
        pool="tank",
        host="nas",
        health="DEGRADED",
    )


# ── Delivery ────────────────────────────────────────────────────


class TestDelivery:
    def test_single_channel(self) -> None:
        ch = FakeChannel()
        assert NotificationDispatcher([ch]).send(_msg()) is True
        assert len(ch.sent) == 1

    def test_every_channel_gets_the_message(self) -> None:
        ch1, ch2 = FakeChannel("a"), FakeChannel("b")
        NotificationDispatcher([ch1, ch2]).send(_msg())
        assert len(ch1.sent) == 1
        assert len(ch2.sent) == 1

    def test_no_channels_is_not_delivered(self) -> None:
        assert NotificationDispatcher().send(_msg()) is False

    def test_channels_property_is_copy(self) -> None:
        disp = NotificationDispatcher([FakeChannel()])
        disp.channels.clear()
        assert len(disp.channels) == 1


# ── Failures ────────────────────────────────────────────────────


class TestFailures:
    def test_all_failed(self) -> None:
        assert NotificationDispatcher([FakeChannel(ok=False)]).send(_msg()) is False

    def test_partial_failure_counts_as_delivered(self) -> None:
        good = FakeChannel("good")
        disp = NotificationDispatcher([FakeChannel("bad", ok=False), good])
        assert disp.send(_msg()) is True
        assert len(good.sent) == 1

    def test_raising_channel_does_not_stop_others(self) -> None:
        good = FakeChannel("good")
        disp = NotificationDispatcher([FakeChannel("boom", raises=True), good])
        assert disp.send(_msg()) is True
        assert len(good.sent) == 1

    def test_raising_channel_alone_is_not_delivered(self) -> None:
        assert NotificationDispatcher([FakeChannel(raises=True)]).send(_msg()) is False


# ── Lifecycle ───────────────────────────────────────────────────


class TestLifecycle:
    def test_close_all(self) -> None:
        ch1, ch2 = FakeChannel("a"), FakeChannel("b")
        NotificationDispatcher([ch1, ch2]).close()
        assert ch1.closed
        assert ch2.closed

    def test_close_error_does_not_stop_others(self) -> None:
        good = FakeChannel("good")
        NotificationDispatcher([FakeChannel("boom", raises=True), good]).close()
        assert good.closed
