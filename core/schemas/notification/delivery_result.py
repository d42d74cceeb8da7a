"""Schemas for per-target push results and their aggregate."""

from pydantic import Field

from core.enums import PushTargetKind
from core.schemas.base_schema_model import BaseSchemaModel


class DeliveryResult(BaseSchemaModel):
    """Outcome of sending one notification to one push target."""

    target_id: str = Field(..., description="Subscription or token row id")
    target_kind: PushTargetKind
    success: bool
    error: str | None = None
    gone: bool = Field(
        default=False, description="Target is unregistered and should be pruned"
    )


class DispatchSummary(BaseSchemaModel):
    """Aggregate outcome of one fan-out across all of a user's targets."""

    results: list[DeliveryResult] = Field(default_factory=list)

    @property
    def success_count(self) -> int:
        """Number of targets that accepted the notification."""
        return sum(1 for result in self.results if result.success)

    @property
    def failure_count(self) -> int:
        """Number of targets that rejected the notification."""
        return sum(1 for result in self.results if not result.success)

    @property
    def delivered(self) -> bool:
        """True when at least one target succeeded."""
        return self.success_count > 0

    def error_message(self) -> str | None:
        """Summary stored on the delivery log row, or None if all succeeded."""
        if not self.results:
            return "No registered push targets"
        if self.failure_count:
            return f"Failed to send to {self.failure_count} device(s)"
        return None
