from __future__ import annotations

import unittest

from scrapekit.rate_limiter import BatchThrottle


class TestBatchThrottle(unittest.TestCase):
    def setUp(self) -> None:
        self.sleeps: list[float] = []
        self.throttle = BatchThrottle(
            request_interval_ms=2000,
            batch_size=3,
            batch_interval_ms=5000,
            sleep=self.sleeps.append,
        )

    def test_waits_request_interval_inside_batch(self) -> None:
        self.throttle.record_fetch()

        self.assertEqual(self.throttle.wait(), 2.0)
        self.assertEqual(self.throttle.fetched_pages, 1)
        self.assertEqual(self.sleeps, [2.0])

    def test_waits_batch_interval_after_full_batch_and_resets(self) -> None:
        for _ in range(3):
            self.throttle.record_fetch()

        self.assertEqual(self.throttle.wait(), 5.0)
        self.assertEqual(self.throttle.fetched_pages, 0)
        self.assertEqual(self.throttle.wait(), 2.0)
        self.assertEqual(self.sleeps, [5.0, 2.0])

    def test_zero_interval_does_not_sleep(self) -> None:
        throttle = BatchThrottle(
            request_interval_ms=0,
            batch_size=1,
            batch_interval_ms=0,
            sleep=self.sleeps.append,
        )
        throttle.record_fetch()

        self.assertEqual(throttle.wait(), 0.0)
        self.assertEqual(self.sleeps, [])

    def test_instances_do_not_share_counters(self) -> None:
        other = BatchThrottle(request_interval_ms=1, batch_size=3, batch_interval_ms=2)
        for _ in range(2):
            self.throttle.record_fetch()

        self.assertEqual(other.fetched_pages, 0)


if __name__ == "__main__":
    unittest.main()
