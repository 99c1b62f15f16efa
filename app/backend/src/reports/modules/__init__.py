"""Concrete report modules, one per report type."""

from __future__ import annotations

from .allocation_efficiency import AllocationEfficiencyModule
from .available_harvest import AvailableHarvestModule
from .customer_deliveries import CustomerDeliveriesModule
from .daily_operations import DailyOperationsModule
from .harvest_performance import HarvestPerformanceModule
from .inventory_aging import InventoryAgingModule
from .lighting import LightingModule
from .monitoring import MonitoringModule
from .pending_deliveries import PendingDeliveriesModule
from .pest import PestModule
from .sensor import SensorModule
from .spacer import SpacerModule
from .summary_stats import SummaryStatsModule
from .tasks import TasksModule
from .tower import TowerModule

MODULE_CLASSES = (
    PendingDeliveriesModule,
    AvailableHarvestModule,
    HarvestPerformanceModule,
    CustomerDeliveriesModule,
    DailyOperationsModule,
    InventoryAgingModule,
    AllocationEfficiencyModule,
    SummaryStatsModule,
    TasksModule,
    SpacerModule,
    PestModule,
    MonitoringModule,
    LightingModule,
    SensorModule,
    TowerModule,
)

__all__ = [cls.__name__ for cls in MODULE_CLASSES] + ["MODULE_CLASSES"]
