"""Schema summarizing one scheduler sweep."""

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class SweepReport(BaseSchemaModel):
    """Counters for one sweep, logged when the sweep finishes."""

    kind: str
    users_evaluated: int = 0
    sent: int = 0
    suppressed: int = Field(default=0, description="Vetoed by the dedup guard")
    failed: int = Field(default=0, description="Attempted but nothing delivered")
    errors: int = Field(default=0, description="Users whose processing raised")
    in_flight_skipped: int = Field(
        default=0, description="Users skipped because another sweep held them"
    )

    def merge(self, other: "SweepReport") -> "SweepReport":
        """Add another report's counters to this one and return self."""
        self.users_evaluated += other.users_evaluated
        self.sent += other.sent
        self.suppressed += other.suppressed
        self.failed += other.failed
        self.errors += other.errors
        self.in_flight_skipped += other.in_flight_skipped
        return self
