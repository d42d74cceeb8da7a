"""Schema for push notification payloads."""

from typing import Any

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class PushPayload(BaseSchemaModel):
    """Notification delivered to every registered push target of a user."""

    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., max_length=500)
    tag: str = Field(..., description="Collapse key; same tag replaces on device")
    icon: str = Field(default="/logo192.png")
    badge: str = Field(default="/logo192.png")
    data: dict[str, Any] = Field(default_factory=dict)
    require_interaction: bool = Field(default=False)
    vibrate: list[int] | None = Field(default=None)

    def to_json(self) -> str:
        """Serialize for the web push wire format (camelCase keys)."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
