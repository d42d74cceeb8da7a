"""Unit tests for scheduler exception types."""

import unittest

from core.exceptions import (
    ConfigurationError,
    FatalSchedulerError,
    PushSubscriptionGoneError,
    QueryError,
    SchedulerError,
    TransientDeliveryError,
)


class TestSchedulerExceptions(unittest.TestCase):
    """Test cases for the exception hierarchy."""

    def test_configuration_error_message(self):
        """Test the rejected value is described."""
        error = ConfigurationError("timezone", "Mars/Olympus", user_id="u-1")

        self.assertEqual(str(error), "Invalid value for timezone: 'Mars/Olympus'")
        self.assertEqual(error.field, "timezone")
        self.assertEqual(error.user_id, "u-1")

    def test_gone_error_is_a_delivery_error(self):
        """Test gone targets carry their status code."""
        error = PushSubscriptionGoneError("https://push.example.com/abc", status_code=404)

        self.assertIsInstance(error, TransientDeliveryError)
        self.assertEqual(error.status_code, 404)
        self.assertEqual(error.target, "https://push.example.com/abc")
        self.assertIn("no longer registered", str(error))

    def test_query_error_scope(self):
        """Test the failing subset is kept."""
        error = QueryError("connection reset", user_id="u-1", scope="threshold:3")

        self.assertEqual(error.scope, "threshold:3")
        self.assertEqual(str(error), "connection reset")

    def test_all_errors_share_a_base(self):
        """Test every type derives from SchedulerError."""
        for error_cls in (
            ConfigurationError,
            FatalSchedulerError,
            PushSubscriptionGoneError,
            QueryError,
            TransientDeliveryError,
        ):
            with self.subTest(error_cls=error_cls.__name__):
                self.assertTrue(issubclass(error_cls, SchedulerError))
