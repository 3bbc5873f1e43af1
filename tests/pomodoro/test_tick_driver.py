import threading
import unittest

from pomodoro import TickDriver


class TickDriverTests(unittest.TestCase):
    def setUp(self) -> None:
        self.driver = TickDriver(interval_seconds=0.01)

    def tearDown(self) -> None:
        self.driver.close()

    def test_rejects_non_positive_interval(self) -> None:
        with self.assertRaises(ValueError):
            TickDriver(interval_seconds=0)

    def test_subscription_delivers_callbacks(self) -> None:
        fired = threading.Event()

        subscription = self.driver.subscribe(fired.set)

        self.assertTrue(fired.wait(2.0))
        self.assertTrue(subscription.active)
        self.assertTrue(self.driver.active)

    def test_subscribe_replaces_previous_subscription(self) -> None:
        first = self.driver.subscribe(lambda: None)
        second_fired = threading.Event()
        second = self.driver.subscribe(second_fired.set)

        self.assertTrue(second_fired.wait(2.0))
        first.join()
        self.assertFalse(first.active)
        self.assertTrue(second.active)

    def test_cancel_stops_callbacks(self) -> None:
        subscription = self.driver.subscribe(lambda: None)

        self.driver.cancel()
        subscription.join()

        self.assertFalse(subscription.active)
        self.assertFalse(self.driver.active)

    def test_callback_may_cancel_its_own_subscription(self) -> None:
        calls: list[int] = []
        ready = threading.Event()
        done = threading.Event()

        def _callback() -> None:
            ready.wait(2.0)
            calls.append(1)
            subscription.cancel()
            subscription.join()
            done.set()

        subscription = self.driver.subscribe(_callback)
        ready.set()

        self.assertTrue(done.wait(2.0))
        subscription.join()
        self.assertEqual(1, len(calls))
        self.assertFalse(subscription.active)

    def test_callback_errors_do_not_stop_ticking(self) -> None:
        calls: list[int] = []
        recovered = threading.Event()

        def _callback() -> None:
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            recovered.set()

        with self.assertLogs("tick_driver", level="ERROR"):
            self.driver.subscribe(_callback)
            self.assertTrue(recovered.wait(2.0))

    def test_close_joins_running_thread(self) -> None:
        subscription = self.driver.subscribe(lambda: None)

        self.driver.close()

        self.assertFalse(subscription.active)


if __name__ == "__main__":
    unittest.main()
