"""Tests for ExpoPushClient."""

import json

from django.test import TestCase

import requests
import responses

from core.models import MobilePushToken
from core.schemas import PushPayload
from core.services.push.expo_push_client import (
    EXPO_CHUNK_SIZE,
    ExpoPushClient,
    chunk_tokens,
    is_expo_push_token,
)

EXPO_URL = "https://exp.host/--/api/v2/push/send"


def token(value="ExponentPushToken[abcdefghijklmnop]"):
    """Build an unsaved token row."""
    return MobilePushToken(expo_token=value)


class TestExpoPushClient(TestCase):
    """Test suite for ExpoPushClient."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = ExpoPushClient(push_url=EXPO_URL, access_token="expo-secret")
        self.payload = PushPayload(
            title="Food Expiring Soon!",
            body="Your Milk expires tomorrow",
            tag="expiry-notification",
            data={"url": "/inventory"},
            require_interaction=True,
        )

    @responses.activate
    def test_maps_each_ticket_to_a_result(self):
        """Test per-token results in request order."""
        tokens = [token("ExponentPushToken[one]"), token("ExpoPushToken[two]")]
        responses.add(
            responses.POST,
            EXPO_URL,
            json={"data": [{"status": "ok", "id": "ticket-1"}, {"status": "ok", "id": "ticket-2"}]},
            status=200,
        )

        results = self.client.send_chunk(tokens, self.payload)

        self.assertEqual([result.success for result in results], [True, True])
        self.assertEqual(results[0].target_id, str(tokens[0].id))
        self.assertEqual(results[0].target_kind, "expo")
        body = json.loads(responses.calls[0].request.body)
        self.assertEqual(body[0]["to"], "ExponentPushToken[one]")
        self.assertEqual(body[0]["title"], "Food Expiring Soon!")
        self.assertEqual(body[0]["priority"], "high")
        self.assertEqual(
            responses.calls[0].request.headers["Authorization"], "Bearer expo-secret"
        )

    @responses.activate
    def test_device_not_registered_marks_token_gone(self):
        """Test the ticket error that prunes a token."""
        responses.add(
            responses.POST,
            EXPO_URL,
            json={
                "data": [
                    {
                        "status": "error",
                        "message": "not registered",
                        "details": {"error": "DeviceNotRegistered"},
                    }
                ]
            },
            status=200,
        )

        [result] = self.client.send_chunk([token()], self.payload)

        self.assertFalse(result.success)
        self.assertTrue(result.gone)
        self.assertEqual(result.error, "DeviceNotRegistered")

    @responses.activate
    def test_other_ticket_errors_are_not_gone(self):
        """Test a transient ticket error."""
        responses.add(
            responses.POST,
            EXPO_URL,
            json={"data": [{"status": "error", "details": {"error": "MessageRateExceeded"}}]},
            status=200,
        )

        [result] = self.client.send_chunk([token()], self.payload)

        self.assertFalse(result.success)
        self.assertFalse(result.gone)

    @responses.activate
    def test_http_error_fails_the_whole_chunk(self):
        """Test that a provider error marks every token failed without raising."""
        responses.add(responses.POST, EXPO_URL, json={"errors": []}, status=500)

        results = self.client.send_chunk([token("ExpoPushToken[a]"), token("ExpoPushToken[b]")], self.payload)

        self.assertEqual(len(results), 2)
        self.assertTrue(all(not result.success for result in results))
        self.assertIn("500", results[0].error)

    @responses.activate
    def test_connection_error_fails_the_whole_chunk(self):
        """Test transport failures."""
        responses.add(responses.POST, EXPO_URL, body=requests.ConnectionError("refused"))

        results = self.client.send_chunk([token()], self.payload)

        self.assertFalse(results[0].success)

    @responses.activate
    def test_invalid_tokens_are_not_sent(self):
        """Test that malformed tokens fail locally and are marked gone."""
        results = self.client.send_chunk([token("not-a-token")], self.payload)

        self.assertEqual(len(responses.calls), 0)
        self.assertFalse(results[0].success)
        self.assertTrue(results[0].gone)

    @responses.activate
    def test_missing_ticket_is_a_failure(self):
        """Test a response with fewer tickets than messages."""
        responses.add(responses.POST, EXPO_URL, json={"data": []}, status=200)

        [result] = self.client.send_chunk([token()], self.payload)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Missing push ticket")

    @responses.activate
    def test_malformed_ticket_is_a_failure(self):
        """Test non-object tickets are reported per device instead of raising."""
        responses.add(
            responses.POST,
            EXPO_URL,
            json={"data": ["ok", {"status": "error", "details": "DeviceNotRegistered"}]},
            status=200,
        )

        first, second = self.client.send_chunk([token(), token()], self.payload)

        self.assertFalse(first.success)
        self.assertEqual(first.error, "Missing push ticket")
        self.assertFalse(second.success)
        self.assertFalse(second.gone)


class TestExpoHelpers(TestCase):
    """Test suite for token helpers."""

    def test_is_expo_push_token(self):
        """Test token format detection."""
        self.assertTrue(is_expo_push_token("ExponentPushToken[xxxxxxxx]"))
        self.assertTrue(is_expo_push_token("ExpoPushToken[xxxxxxxx]"))
        self.assertFalse(is_expo_push_token("ExponentPushToken[]"))
        self.assertFalse(is_expo_push_token(""))
        self.assertFalse(is_expo_push_token("fcm:abcdef"))

    def test_chunk_tokens_respects_limit(self):
        """Test chunking at the Expo request limit."""
        tokens = [token(f"ExpoPushToken[{index}]") for index in range(EXPO_CHUNK_SIZE * 2 + 1)]

        chunks = chunk_tokens(tokens)

        self.assertEqual([len(chunk) for chunk in chunks], [100, 100, 1])
