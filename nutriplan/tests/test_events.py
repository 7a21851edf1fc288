import unittest

from nutriplan.events import web_observers
from nutriplan.events.Event_Bus import EXPORT_FAILED, EventBus
from nutriplan.events.event_helpers import publish_export_failed, publish_export_succeeded


class TestEventBus(unittest.TestCase):
    def test_subscribe_publish_unsubscribe(self):
        bus, seen = EventBus(), []
        listener = lambda name, payload: seen.append((name, payload))
        bus.subscribe("x", listener)
        bus.subscribe("x", listener)
        bus.publish("x", 1)
        bus.unsubscribe("x", listener)
        bus.publish("x", 2)
        self.assertEqual(seen, [("x", 1)])

    def test_failing_subscriber_does_not_block_others(self):
        bus, seen = EventBus(), []

        def broken(name, payload):
            raise RuntimeError("boom")

        bus.subscribe("x", broken)
        bus.subscribe("x", lambda n, p: seen.append(p))
        with self.assertLogs("nutriplan.events.Event_Bus", level="ERROR"):
            bus.publish("x", "payload")
        self.assertEqual(seen, ["payload"])


class TestWebObservers(unittest.TestCase):
    def test_notifications_polling(self):
        web_observers.start()
        cursor = web_observers.get_events()["next_cursor"]
        publish_export_succeeded("pdf", "plan-1", "Plan_x.pdf")
        publish_export_failed("image", "plan-1")
        feed = web_observers.get_events(since=cursor)
        self.assertEqual(len(feed["events"]), 2)
        ok_evt, err_evt = feed["events"]
        self.assertEqual(ok_evt["message"], "PDF exportado exitosamente")
        self.assertEqual(ok_evt["filename"], "Plan_x.pdf")
        self.assertEqual(err_evt["type"], EXPORT_FAILED)
        self.assertEqual(err_evt["level"], "error")
        self.assertEqual(web_observers.get_events(since=feed["next_cursor"])["events"], [])


if __name__ == "__main__":
    unittest.main()
