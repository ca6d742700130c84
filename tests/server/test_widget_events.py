import datetime as dt
import json
import unittest

from server.events import EventReplayCache, make_event

NOW = dt.datetime(2024, 3, 4, 9, 0, tzinfo=dt.timezone.utc)


def _event(event_type: str, **payload):
    return make_event(event_type, now_fn=lambda: NOW, **payload)


class UIEventTests(unittest.TestCase):
    def test_event_serializes_type_timestamp_and_payload(self) -> None:
        decoded = json.loads(_event("cycle", text="00:05", period=1).to_json())

        self.assertEqual(
            {"type": "cycle", "timestamp": NOW.isoformat(), "text": "00:05", "period": 1},
            decoded,
        )


class EventReplayCacheTests(unittest.TestCase):
    def test_non_sticky_events_are_not_replayed(self) -> None:
        cache = EventReplayCache()
        self.assertFalse(cache.remember(_event("hello")))
        self.assertEqual([], cache.replay())

    def test_replay_follows_stable_order(self) -> None:
        cache = EventReplayCache()
        for event_type in ("state_update", "error", "history", "settings", "cycle"):
            cache.remember(_event(event_type))

        decoded_types = [json.loads(item)["type"] for item in cache.replay()]
        self.assertEqual(
            ["cycle", "settings", "history", "error", "state_update"],
            decoded_types,
        )

    def test_latest_event_per_type_wins(self) -> None:
        cache = EventReplayCache()
        cache.remember(_event("cycle", text="00:01"))
        cache.remember(_event("cycle", text="00:02"))

        replayed = cache.replay()
        self.assertEqual(1, len(replayed))
        self.assertEqual("00:02", json.loads(replayed[0])["text"])
        latest = cache.latest("cycle")
        self.assertIsNotNone(latest)
        if latest is None:
            self.fail("Expected a cached cycle event")
        self.assertEqual("00:02", latest.payload["text"])
        self.assertIsNone(cache.latest("settings"))


if __name__ == "__main__":
    unittest.main()
