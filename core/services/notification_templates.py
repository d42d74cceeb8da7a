"""Notification content for every category the scheduler sends.

Push payloads are built here from the items or reminder settings that
triggered them. Email categories map to a subject template and an HTML
template path; rendering happens at send time in the email service.
"""

from collections.abc import Sequence
from datetime import date
from typing import TypedDict

from core.enums import SummaryEmailKind
from core.models import InventoryItem
from core.schemas import DailyReminderConfig, PushPayload

EXPIRY_TITLE = "Food Expiring Soon!"
EXPIRED_TITLE = "⚠️ Expired Food Alert"
TEST_TITLE = "Test Notification"
TEST_BODY = (
    "Push notifications are working! "
    "You'll receive reminders when your food is about to expire."
)
# Payloads list item names up to this many items, then switch to a count
MAX_NAMED_ITEMS = 3
REMINDER_VIBRATION = [200, 100, 200]

REMINDER_URLS = {
    "meal_planning": "/mealplans",
    "shopping_reminder": "/shopping-lists",
    "dinner_prep": "/recipes",
    "breakfast_reminder": "/recipes",
    "lunch_reminder": "/recipes",
}
DEFAULT_REMINDER_URL = "/inventory"


class EmailTemplateConfig(TypedDict):
    """Configuration for an email template."""

    subject: str
    template: str


EMAIL_TEMPLATES: dict[SummaryEmailKind, EmailTemplateConfig] = {
    SummaryEmailKind.DAILY: {
        "subject": "{item_count} item(s) in your fridge expire soon",
        "template": "emails/daily_expiry.html",
    },
    SummaryEmailKind.WEEKLY: {
        "subject": "Your weekly expiry summary: {item_count} item(s) this week",
        "template": "emails/weekly_expiry.html",
    },
}


def describe_days_until(days: int) -> str:
    """Render a day count the way the expiry message phrases it."""
    if days < 0:
        return "already expired"
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    return f"in {days} days"


def _item_summaries(items: Sequence[InventoryItem]) -> list[dict]:
    return [
        {
            "id": item.id,
            "name": item.item_name,
            "expiryDate": item.expiration_date.isoformat()
            if item.expiration_date
            else None,
        }
        for item in items
    ]


def build_expiry_payload(items: Sequence[InventoryItem], today: date) -> PushPayload:
    """Build the "expiring soon" push for items crossing a threshold.

    Args:
        items: Items expiring on the same threshold date
        today: The user's local date, used to phrase a single item

    Returns:
        PushPayload tagged ``expiry-notification``
    """
    if len(items) == 1:
        item = items[0]
        days = (item.expiration_date - today).days
        body = f"Your {item.item_name} expires {describe_days_until(days)}"
    elif len(items) <= MAX_NAMED_ITEMS:
        names = ", ".join(item.item_name for item in items)
        body = f"{len(items)} items expiring soon: {names}"
    else:
        body = f"You have {len(items)} items expiring soon. Check your inventory!"

    return PushPayload(
        title=EXPIRY_TITLE,
        body=body,
        tag="expiry-notification",
        data={"url": "/inventory", "type": "expiry", "items": _item_summaries(items)},
        require_interaction=True,
    )


def build_expired_payload(items: Sequence[InventoryItem]) -> PushPayload:
    """Build the aggregated push for items already past expiry."""
    return PushPayload(
        title=EXPIRED_TITLE,
        body=f"You have {len(items)} expired item(s) in your inventory!",
        tag="expired-notification",
        data={"url": "/inventory", "type": "expired", "items": _item_summaries(items)},
        require_interaction=True,
    )


def build_reminder_payload(
    reminder_type: str, config: DailyReminderConfig
) -> PushPayload:
    """Build the push for one daily or weekly engagement reminder."""
    return PushPayload(
        title=f"{config.emoji} Trackabite Reminder",
        body=config.message,
        tag=f"daily-reminder-{reminder_type}",
        data={
            "url": REMINDER_URLS.get(reminder_type, DEFAULT_REMINDER_URL),
            "type": "daily-reminder",
            "reminderType": reminder_type,
        },
        vibrate=list(REMINDER_VIBRATION),
    )


def build_test_payload(items: Sequence[InventoryItem] = ()) -> PushPayload:
    """Build the operator-triggered test push.

    Up to three sample items are attached so the client can render a
    realistic preview.
    """
    return PushPayload(
        title=TEST_TITLE,
        body=TEST_BODY,
        tag="test-notification",
        data={
            "url": "/inventory",
            "type": "test",
            "items": _item_summaries(items[:MAX_NAMED_ITEMS]),
        },
        vibrate=list(REMINDER_VIBRATION),
    )
