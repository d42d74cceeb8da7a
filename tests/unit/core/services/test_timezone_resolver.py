"""Tests for the timezone resolver."""

from datetime import UTC, date, datetime
from unittest.mock import patch

from django.test import SimpleTestCase, override_settings

from core.services.timezone_resolver import get_zone, resolve_local_clock


class TestResolveLocalClock(SimpleTestCase):
    """Test suite for resolve_local_clock."""

    def test_converts_instant_to_local_wall_clock(self):
        """Test that the instant is expressed in the user's zone."""
        now = datetime(2026, 3, 10, 14, 0, tzinfo=UTC)

        clock = resolve_local_clock("America/New_York", now)

        self.assertEqual(clock.timezone, "America/New_York")
        self.assertEqual(clock.hour, 10)
        self.assertEqual(clock.minute, 0)
        self.assertEqual(clock.local_date, date(2026, 3, 10))
        self.assertEqual(clock.weekday, "tuesday")

    def test_local_date_can_differ_from_utc_date(self):
        """Test that far-east and far-west zones land on different dates."""
        now = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)

        kiritimati = resolve_local_clock("Pacific/Kiritimati", now)
        baker = resolve_local_clock("Etc/GMT+12", now)

        self.assertEqual(kiritimati.local_date, date(2026, 6, 2))
        self.assertEqual(kiritimati.hour, 2)
        self.assertEqual(baker.local_date, date(2026, 6, 1))
        self.assertEqual(baker.hour, 0)

    def test_naive_instant_is_treated_as_utc(self):
        """Test that a naive datetime is interpreted as UTC."""
        clock = resolve_local_clock("Europe/Berlin", datetime(2026, 1, 15, 8, 30))

        self.assertEqual(clock.hour, 9)
        self.assertEqual(clock.minute, 30)

    @override_settings(DEFAULT_TIMEZONE="America/Los_Angeles")
    def test_unknown_zone_falls_back_to_default(self):
        """Test that an unparseable zone id resolves to the default zone."""
        now = datetime(2026, 3, 10, 17, 0, tzinfo=UTC)

        with patch("core.services.timezone_resolver.logger") as mock_logger:
            clock = resolve_local_clock("Mars/Olympus_Mons", now, user_id="u-1")

        self.assertEqual(clock.timezone, "America/Los_Angeles")
        self.assertEqual(clock.hour, 10)
        mock_logger.warning.assert_called_once()
        self.assertEqual(mock_logger.warning.call_args[0][0], "Invalid timezone, using default")

    @override_settings(DEFAULT_TIMEZONE="America/Los_Angeles")
    def test_missing_zone_uses_default_without_warning(self):
        """Test that an absent zone silently uses the default."""
        with patch("core.services.timezone_resolver.logger") as mock_logger:
            zone = get_zone(None)

        self.assertEqual(zone.key, "America/Los_Angeles")
        mock_logger.warning.assert_not_called()

    def test_malformed_zone_string_falls_back(self):
        """Test that path-like garbage does not raise."""
        zone = get_zone("../../etc/passwd")

        self.assertEqual(zone.key, "America/Los_Angeles")
