"""Schema for a user's resolved local time."""

from datetime import date, datetime, time

from pydantic import ConfigDict

from core.schemas.base_schema_model import BaseSchemaModel


class LocalClock(BaseSchemaModel):
    """The current instant expressed in one user's timezone."""

    model_config = ConfigDict(frozen=True)

    timezone: str
    local_now: datetime
    local_date: date
    weekday: str

    @property
    def local_time(self) -> time:
        """Wall-clock time of day without tzinfo."""
        return self.local_now.time().replace(tzinfo=None)

    @property
    def hour(self) -> int:
        """Local hour (0-23)."""
        return self.local_now.hour

    @property
    def minute(self) -> int:
        """Local minute (0-59)."""
        return self.local_now.minute
