"""Webhook request and response schemas."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class WebhookRequest(BaseModel):
    """Chat message forwarded by the automation workflow.

    The farm may arrive as ``farmID`` or ``farm_id`` and the text as
    ``message`` or ``chatInput``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    session_id: str | None = Field(default=None, alias="sessionId")
    message: str | None = None
    chat_input: str | None = Field(default=None, alias="chatInput")
    farm_id: int | str | None = Field(
        default=None, validation_alias=AliasChoices("farmID", "farm_id")
    )

    @property
    def original_message(self) -> str | None:
        return self.message or self.chat_input

    @property
    def user_message(self) -> str:
        return (self.original_message or "").lower()

    @property
    def has_farm(self) -> bool:
        return self.farm_id is not None and self.farm_id != ""


class WebhookResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Data retrieved successfully!"
    table_id: str = Field(alias="tableId")
    widget_code: str = Field(alias="widgetCode")
    temp_data_url: str = Field(alias="tempDataUrl")
    metadata: dict[str, Any]
    timestamp: str


class TowerDataResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    farm_id: str = Field(alias="farmId")
    data: list[dict[str, Any]]
    count: int
    timestamp: str


class TempDataResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    table_id: str = Field(alias="tableId")
    data: list[dict[str, Any]]
    count: int
    timestamp: str


__all__ = [
    "TempDataResponse",
    "TowerDataResponse",
    "WebhookRequest",
    "WebhookResponse",
]
