"""Tests for hashing and timestamp utilities."""

import threading
from datetime import datetime, timedelta, timezone

from event_mailer.utils import DispatchClock, epoch_millis, hash_string, short_digest, utc_now


class TestHashing:
    def test_hash_string(self):
        digest = hash_string("ada@example.com")

        assert len(digest) == 64
        assert digest == hash_string("ada@example.com")
        assert digest != hash_string("bob@example.com")

    def test_short_digest_normalises(self):
        assert short_digest("Ada@Example.com") == short_digest(" ada@example.com ")
        assert len(short_digest("ada@example.com")) == 16
        assert len(short_digest("ada@example.com", length=8)) == 8


class TestTimestamps:
    def test_utc_now_is_aware(self):
        now = utc_now()

        assert now.tzinfo == timezone.utc
        assert abs(datetime.now(timezone.utc) - now) < timedelta(seconds=5)

    def test_epoch_millis(self):
        assert epoch_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)) == 1000

    def test_epoch_millis_naive_is_utc(self):
        assert epoch_millis(datetime(1970, 1, 1, 0, 0, 2)) == 2000

    def test_epoch_millis_now(self):
        assert abs(epoch_millis() - epoch_millis(utc_now())) < 5000


class TestDispatchClock:
    def test_follows_source_when_it_advances(self):
        ticks = iter([100, 250, 900])
        clock = DispatchClock(lambda: next(ticks))

        assert [clock.next_millis() for _ in range(3)] == [100, 250, 900]

    def test_strictly_increasing_when_source_stalls(self):
        clock = DispatchClock(lambda: 500)

        assert [clock.next_millis() for _ in range(3)] == [500, 501, 502]

    def test_never_goes_backwards(self):
        ticks = iter([1000, 10])
        clock = DispatchClock(lambda: next(ticks))

        assert clock.next_millis() == 1000
        assert clock.next_millis() == 1001

    def test_unique_across_threads(self):
        clock = DispatchClock(lambda: 42)
        values = []

        def worker():
            for _ in range(200):
                values.append(clock.next_millis())

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(set(values)) == 800
