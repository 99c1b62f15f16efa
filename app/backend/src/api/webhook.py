"""Webhook endpoints that turn chat messages into farm reports."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from ..core.config import Settings, get_settings
from ..db import SessionLocal, get_engine
from ..reports import QueryProcessor, ReportMetadata, ReportOutput, build_default_registry
from ..reports.html import mock_rows, mock_table_page
from ..reports.modules.tower import TowerModule
from ..schemas.webhook import (
    TempDataResponse,
    TowerDataResponse,
    WebhookRequest,
    WebhookResponse,
)
from ..services.data_source import DataSourceGateway
from ..services.farm_names import FarmNameCache

LOGGER = structlog.get_logger(__name__)

router = APIRouter(tags=["webhook"])


def _timestamp(moment: datetime | None = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@lru_cache()
def get_gateway() -> DataSourceGateway:
    """Return the shared data-source gateway."""

    return DataSourceGateway(get_engine())


@lru_cache()
def get_query_processor() -> QueryProcessor:
    """Build the module registry once and share the processor across requests."""

    registry = build_default_registry(get_gateway(), farm_names=FarmNameCache(SessionLocal))
    return QueryProcessor(registry)


def _mock_output(user_message: str) -> ReportOutput:
    return ReportOutput(
        html_content=mock_table_page(user_message, datetime.now(timezone.utc)),
        metadata=ReportMetadata(
            title="Mock Data Table",
            description="No farm ID provided",
            record_count=len(mock_rows()),
            data_type="mock",
        ),
    )


@router.post("/webhook/n8n", response_model=WebhookResponse)
async def handle_webhook(
    payload: WebhookRequest,
    processor: QueryProcessor = Depends(get_query_processor),
    settings: Settings = Depends(get_settings),
) -> WebhookResponse:
    """Route the message to a report module and return the rendered widget."""

    user_message = payload.user_message
    table_id = f"table_{payload.session_id}_{int(time.time() * 1000)}"
    LOGGER.info(
        "webhook_received",
        session_id=payload.session_id,
        farm_id=payload.farm_id,
        message=user_message,
    )

    if payload.has_farm:
        pending = processor.process(user_message, payload.farm_id)
        try:
            if settings.request_timeout_seconds:
                result = await asyncio.wait_for(pending, settings.request_timeout_seconds)
            else:
                result = await pending
        except asyncio.TimeoutError as exc:
            LOGGER.error(
                "webhook_timeout",
                farm_id=payload.farm_id,
                timeout_seconds=settings.request_timeout_seconds,
            )
            raise HTTPException(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                detail="Report generation timed out.",
            ) from exc
    else:
        LOGGER.warning("webhook_missing_farm", session_id=payload.session_id)
        result = _mock_output(user_message)

    wire = result.to_wire()
    metadata: dict[str, Any] = {
        **wire["metadata"],
        "farmId": payload.farm_id,
        "userMessage": user_message,
        "originalMessage": payload.original_message,
        "createdAt": _timestamp(),
    }
    return WebhookResponse(
        table_id=table_id,
        widget_code=wire["htmlContent"],
        temp_data_url=f"/api/temp-data/{table_id}",
        metadata=metadata,
        timestamp=_timestamp(),
    )


@router.get("/api/tower-data/{farm_id}", response_model=TowerDataResponse)
def tower_data(
    farm_id: str,
    gateway: DataSourceGateway = Depends(get_gateway),
) -> TowerDataResponse:
    """Return the unformatted tower rows for a farm."""

    result = gateway.from_relation(TowerModule.relation, farm_id).execute()
    if result.error is not None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to load tower data.",
        )
    rows = result.rows or []
    return TowerDataResponse(
        farm_id=farm_id,
        data=rows,
        count=len(rows),
        timestamp=_timestamp(),
    )


@router.get("/api/temp-data/{table_id}", response_model=TempDataResponse)
def temp_data(table_id: str) -> TempDataResponse:
    """Compatibility endpoint serving sample rows for a table id."""

    rows = mock_rows()
    return TempDataResponse(
        table_id=table_id,
        data=rows,
        count=len(rows),
        timestamp=_timestamp(),
    )


__all__ = ["get_gateway", "get_query_processor", "router"]
