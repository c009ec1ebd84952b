import json
import logging
import sys
from pathlib import Path
import unittest

import httpx

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from walking_rpg.domain.models.creature import Creature
from walking_rpg.domain.models.encounter import Encounter
from walking_rpg.domain.models.location import GeoPoint
from walking_rpg.infrastructure.notifications.log_notifier import LoggingEncounterNotifier
from walking_rpg.infrastructure.notifications.webhook_notifier import (
    ENCOUNTER_TITLE,
    WebhookEncounterNotifier,
    build_encounter_payload,
)
from walking_rpg.infrastructure.resilient_http import reset_circuit_breakers


def _encounter() -> Encounter:
    creature = Creature(id="wind_dancer", name="Wind Dancer", type="Air", level=4, max_hp=55)
    return Encounter(creature=creature, location=GeoPoint(latitude=0.0, longitude=0.0), timestamp=1700000000000)


class WebhookNotifierTests(unittest.TestCase):
    def tearDown(self) -> None:
        reset_circuit_breakers()

    def test_payload_shape(self) -> None:
        payload = build_encounter_payload(_encounter())

        self.assertEqual(ENCOUNTER_TITLE, payload["title"])
        self.assertEqual("A Wind Dancer appeared! Tap to view.", payload["body"])
        self.assertEqual(
            {"type": "encounter", "encounterId": "1700000000000", "creatureId": "wind_dancer", "creatureLevel": 4},
            payload["data"],
        )

    def test_notify_posts_payload_to_webhook(self) -> None:
        received = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append((str(request.url), json.loads(request.content)))
            return httpx.Response(202, json={"accepted": True})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        notifier = WebhookEncounterNotifier("https://push.example.test/hooks/encounter", http_client=client)

        notifier.notify_encounter(_encounter())
        notifier.close()

        self.assertEqual(1, len(received))
        url, body = received[0]
        self.assertEqual("https://push.example.test/hooks/encounter", url)
        self.assertEqual("wind_dancer", body["data"]["creatureId"])

    def test_notify_raises_after_retries_exhausted(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        notifier = WebhookEncounterNotifier("https://push.example.test/hook", retries=2, http_client=client)

        with self.assertRaises(httpx.HTTPStatusError):
            notifier.notify_encounter(_encounter())
        self.assertEqual(3, len(calls))


class LoggingNotifierTests(unittest.TestCase):
    def test_logs_and_records_message(self) -> None:
        logger = logging.getLogger("walking_rpg.tests.notifier")
        notifier = LoggingEncounterNotifier(logger)

        with self.assertLogs(logger, level="INFO") as captured:
            notifier.notify_encounter(_encounter())

        self.assertEqual(["A Wind Dancer appeared! Tap to view."], notifier.sent)
        self.assertIn("Wind Dancer", captured.output[0])


if __name__ == "__main__":
    unittest.main()
