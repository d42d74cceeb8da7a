"""Schema for one entry of a user's ``daily_reminders`` mapping."""

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel

DEFAULT_REMINDER_TIME = "17:30"
DEFAULT_REMINDER_MESSAGE = "Check your Trackabite app!"
DEFAULT_REMINDER_EMOJI = "📱"


class DailyReminderConfig(BaseSchemaModel):
    """Reminder settings; ``day`` turns a daily reminder into a weekly one."""

    enabled: bool = False
    time: str = Field(default=DEFAULT_REMINDER_TIME, description="Local HH:MM")
    day: str | None = Field(default=None, description="English weekday name")
    message: str = DEFAULT_REMINDER_MESSAGE
    emoji: str = DEFAULT_REMINDER_EMOJI
