import threading
from collections import Counter
from datetime import date

import pytest

from scripts.digest_scheduler import DigestScheduler
from subscription_engine.digest import FOOTER, GREETING
from subscription_engine.region_directory import RegionDirectory
from subscription_engine.registry import SubscriptionRegistry

DAY = date(2026, 10, 19)
SEED = {"London UK": 44418, "New York USA": 2459115, "Mumbai India": 2295411}


class FakeTrends:
    """Trend provider that counts calls and can fail for chosen WOEIDs."""

    def __init__(self, failing=(), gate: threading.Event | None = None):
        self.calls = Counter()
        self.failing = set(failing)
        self.gate = gate

    def fetch_trends(self, location_id: int) -> list[str]:
        self.calls[location_id] += 1
        if self.gate is not None:
            self.gate.wait(5)
        if location_id in self.failing:
            raise RuntimeError("provider unavailable")
        return [f"Trend{location_id}-{i}" for i in range(8)]


class FakeSender:
    def __init__(self, failing_users=()):
        self.sent: dict[int, str] = {}
        self.failing_users = set(failing_users)

    def send(self, user_id: int, text: str) -> None:
        if user_id in self.failing_users:
            raise RuntimeError("DM rejected")
        self.sent[user_id] = text


@pytest.fixture
def registry() -> SubscriptionRegistry:
    return SubscriptionRegistry(RegionDirectory(SEED))


def _scheduler(registry, trends, sender, **kwargs) -> DigestScheduler:
    return DigestScheduler(registry, trends, sender, today=lambda: DAY, **kwargs)


def test_one_fetch_per_region_per_tick(registry: SubscriptionRegistry) -> None:
    for user_id in range(10):
        registry.update(user_id, "London UK", 0)
    trends, sender = FakeTrends(), FakeSender()

    report = _scheduler(registry, trends, sender).run_tick()

    assert trends.calls == Counter({44418: 1})
    assert report.sent == 10
    assert report.regions_fetched == 1
    assert len(set(sender.sent.values())) == 1
    assert "London UK (19-October-2026) :" in sender.sent[0]


def test_cache_discarded_between_ticks(registry: SubscriptionRegistry) -> None:
    registry.update(1, "London UK", 0)
    trends = FakeTrends()
    scheduler = _scheduler(registry, trends, FakeSender())

    scheduler.run_tick()
    scheduler.run_tick()

    assert trends.calls[44418] == 2


def test_message_layout_follows_subscription_order(registry: SubscriptionRegistry) -> None:
    registry.update(1, "New York USA", 0)
    registry.update(1, "London UK", 0)
    sender = FakeSender()

    _scheduler(registry, FakeTrends(), sender).run_tick()

    message = sender.sent[1]
    assert message.startswith(GREETING)
    assert message.endswith(FOOTER)
    assert message.index("New York USA (") < message.index("London UK (")
    assert message.count("\n. #") == 10


def test_failed_region_omitted_but_message_sent(registry: SubscriptionRegistry) -> None:
    registry.update(1, "London UK", 0)
    registry.update(1, "New York USA", 0)
    registry.update(2, "London UK", 0)
    trends, sender = FakeTrends(failing={44418}), FakeSender()

    report = _scheduler(registry, trends, sender).run_tick()

    assert "London UK (" not in sender.sent[1]
    assert "New York USA (19-October-2026) :" in sender.sent[1]
    assert sender.sent[2] == f"{GREETING}\n\n{FOOTER}"
    # The failure is not retried for the second subscriber.
    assert trends.calls[44418] == 1
    assert report.fetch_failures == 1
    assert report.sent == 2


def test_send_failure_does_not_block_others(registry: SubscriptionRegistry) -> None:
    for user_id in (1, 2, 3):
        registry.update(user_id, "Mumbai India", 0)
    sender = FakeSender(failing_users={2})

    report = _scheduler(registry, FakeTrends(), sender).run_tick()

    assert set(sender.sent) == {1, 3}
    assert report.send_failures == 1
    assert report.sent == 2


def test_duplicate_subscription_reuses_cached_block(registry: SubscriptionRegistry) -> None:
    registry.update(1, "London UK", 0)
    registry.update(1, "London UK", 0)
    trends, sender = FakeTrends(), FakeSender()

    _scheduler(registry, trends, sender).run_tick()

    assert trends.calls[44418] == 1
    assert sender.sent[1].count("London UK (") == 2


def test_no_subscribers_no_calls(registry: SubscriptionRegistry) -> None:
    trends, sender = FakeTrends(), FakeSender()
    report = _scheduler(registry, trends, sender).run_tick()
    assert report.subscribers == 0
    assert not trends.calls
    assert not sender.sent


def test_overlapping_tick_is_skipped(registry: SubscriptionRegistry) -> None:
    registry.update(1, "London UK", 0)
    gate = threading.Event()
    trends, sender = FakeTrends(gate=gate), FakeSender()
    scheduler = _scheduler(registry, trends, sender)

    first = scheduler.fire()
    assert first is not None
    assert scheduler.fire() is None
    assert scheduler.skipped_count == 1

    gate.set()
    first.join(5)
    assert sender.sent
    assert scheduler.cycle_count == 1


def test_start_and_stop(registry: SubscriptionRegistry) -> None:
    registry.update(1, "London UK", 0)
    delivered = threading.Event()

    class SignallingSender(FakeSender):
        def send(self, user_id: int, text: str) -> None:
            super().send(user_id, text)
            delivered.set()

    scheduler = _scheduler(registry, FakeTrends(), SignallingSender(), interval_seconds=0.01)
    scheduler.start()
    try:
        assert scheduler.running
        assert delivered.wait(5)
    finally:
        scheduler.stop(timeout=5)

    assert not scheduler.running
    assert scheduler.cycle_count >= 1


@pytest.mark.parametrize("interval", [0, -1, float("nan")])
def test_non_positive_interval_rejected(registry: SubscriptionRegistry, interval: float) -> None:
    with pytest.raises(ValueError):
        _scheduler(registry, FakeTrends(), FakeSender(), interval_seconds=interval)


def test_failed_worker_start_releases_busy_lock(registry: SubscriptionRegistry, monkeypatch) -> None:
    registry.update(1, "London UK", 0)
    sender = FakeSender()
    scheduler = _scheduler(registry, FakeTrends(), sender)
    real_start = threading.Thread.start

    def refuse_start(self):
        raise RuntimeError("can't start new thread")

    monkeypatch.setattr(threading.Thread, "start", refuse_start)
    assert scheduler.fire() is None

    monkeypatch.setattr(threading.Thread, "start", real_start)
    worker = scheduler.fire()
    assert worker is not None
    worker.join(5)
    assert 1 in sender.sent
    assert scheduler.skipped_count == 0


def test_stop_with_slow_tick_keeps_unfinished_worker(registry: SubscriptionRegistry) -> None:
    registry.update(1, "London UK", 0)
    gate = threading.Event()
    scheduler = _scheduler(registry, FakeTrends(gate=gate), FakeSender())
    worker = scheduler.fire()

    scheduler.stop(timeout=0.05)
    assert scheduler._workers == [worker]

    gate.set()
    scheduler.stop(timeout=5)
    assert scheduler._workers == []
