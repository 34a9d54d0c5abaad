"""Tests for SingleFlight call collapsing."""
import threading
import time
import unittest

from core.matching.singleflight import SingleFlight


class TestSingleFlight(unittest.TestCase):

    def test_sequential_calls_each_run(self):
        flights = SingleFlight()
        calls = []

        for i in range(3):
            result, shared = flights.do("k", lambda: calls.append(1) or len(calls))
            self.assertFalse(shared)

        self.assertEqual(len(calls), 3)
        self.assertEqual(flights.in_flight(), 0)

    def test_concurrent_callers_share_one_execution(self):
        flights = SingleFlight()
        release = threading.Event()
        started = threading.Event()
        executions = []

        def slow():
            executions.append(1)
            started.set()
            release.wait(5)
            return "value"

        results = []

        def leader():
            results.append(flights.do("k", slow))

        ready = threading.Barrier(4)

        def follower():
            ready.wait(5)
            results.append(flights.do("k", lambda: "other"))

        t1 = threading.Thread(target=leader)
        t1.start()
        self.assertTrue(started.wait(5))

        followers = [threading.Thread(target=follower) for _ in range(3)]
        for t in followers:
            t.start()
        ready.wait(5)
        # give followers time to block on the in-flight call
        time.sleep(0.2)
        self.assertEqual(flights.in_flight(), 1)
        release.set()

        t1.join(5)
        for t in followers:
            t.join(5)

        self.assertEqual(len(executions), 1)
        self.assertEqual(sorted(r[0] for r in results), ["value"] * 4)
        self.assertEqual(sum(1 for r in results if r[1]), 3)

    def test_error_propagates_to_waiters_and_clears_key(self):
        flights = SingleFlight()

        def boom():
            raise RuntimeError("failed")

        with self.assertRaises(RuntimeError):
            flights.do("k", boom)

        self.assertEqual(flights.in_flight(), 0)
        result, shared = flights.do("k", lambda: 42)
        self.assertEqual(result, 42)
        self.assertFalse(shared)

    def test_different_keys_do_not_share(self):
        flights = SingleFlight()
        self.assertEqual(flights.do("a", lambda: 1), (1, False))
        self.assertEqual(flights.do("b", lambda: 2), (2, False))


if __name__ == '__main__':
    unittest.main()
