# src/fxbench/application/health.py
"""
Health Checker - Simulated Metrics and Component Checks

This module provides the dashboard-facing system metrics snapshot and a
component health report for the bot's /health command.

The metrics are simulated: each value is drawn uniformly from a fixed band
after a short collection delay. The component report runs real checks
against the rate table and the conversion engine.

Files that USE this module:
- fxbench.adapters.telegram.handlers (/health command)
- tests.test_health (unit tests)

Files that this module USES:
- fxbench.application.conversion_service (engine used by the probe)
- fxbench.shared.clock (Clock, RandomSource)
- fxbench.domain.models (HealthMetrics)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from fxbench.application.conversion_service import ConversionEngine, get_default_engine
from fxbench.domain.models import HealthMetrics
from fxbench.shared.clock import Clock, RandomSource, default_random_source, now_ms

logger = logging.getLogger(__name__)

# Simulated metric bands: (low, high)
METRIC_BANDS: Dict[str, Tuple[float, float]] = {
    "memory_usage": (50.0, 250.0),
    "cpu_usage": (10.0, 70.0),
    "response_time": (50.0, 250.0),
    "error_rate": (0.0, 5.0),
    "throughput": (50.0, 150.0),
    "network_latency": (20.0, 120.0),
    "disk_usage": (20.0, 60.0),
    "cache_hit_rate": (70.0, 100.0),
}
# Integer metrics: (low, high) inclusive
COUNT_BANDS: Dict[str, Tuple[int, int]] = {
    "gc_collections": (0, 9),
    "thread_count": (10, 29),
    "connection_pool_size": (5, 34),
}
COLLECTION_DELAY_MS = (10.0, 60.0)


@dataclass
class HealthStatus:
    """Represents the health status of a component."""
    is_healthy: bool
    message: str
    last_check: datetime
    details: Optional[Dict[str, Any]] = None


class HealthChecker:
    """Collects simulated metrics and checks the conversion components."""

    def __init__(self, engine: Optional[ConversionEngine] = None, clock: Optional[Clock] = None,
                 random_source: Optional[RandomSource] = None):
        self._engine = engine
        self._clock = clock
        self.random = random_source or default_random_source()

    @property
    def engine(self) -> ConversionEngine:
        return self._engine or get_default_engine()

    @property
    def clock(self) -> Clock:
        return self._clock or self.engine.clock

    def _uniform(self, low: float, high: float) -> float:
        return low + self.random.random() * (high - low)

    def _count(self, low: int, high: int) -> int:
        return low + min(int(self.random.random() * (high - low + 1)), high - low)

    async def collect_metrics(self) -> HealthMetrics:
        """
        Take a simulated metrics snapshot.

        Returns:
            HealthMetrics with every value inside its band
        """
        await self.clock.sleep(self._uniform(*COLLECTION_DELAY_MS) / 1000.0)

        values: Dict[str, Any] = {name: self._uniform(*band) for name, band in METRIC_BANDS.items()}
        values.update({name: self._count(*band) for name, band in COUNT_BANDS.items()})
        return HealthMetrics(timestamp=now_ms(self.clock), **values)

    def check_rate_table(self) -> HealthStatus:
        """Check that a non-empty rate table is loaded."""
        table = self.engine.rate_table
        pairs = len(table)
        return HealthStatus(
            is_healthy=pairs > 0,
            message=f"{pairs} rate pairs across {len(table.sources())} source currencies"
            if pairs else "Rate table is empty",
            last_check=datetime.now(timezone.utc),
            details={"pairs": pairs, "sources": list(table.sources())},
        )

    async def check_conversion(self) -> HealthStatus:
        """Run one sample conversion through the engine."""
        try:
            outcome = await self.engine.convert(100, "USD", "EUR")
            if outcome.success:
                return HealthStatus(
                    is_healthy=True,
                    message=f"100 USD -> {outcome.result} EUR in {outcome.response_time:.0f}ms",
                    last_check=datetime.now(timezone.utc),
                    details={"result": outcome.result, "response_time": outcome.response_time},
                )
            return HealthStatus(
                is_healthy=False,
                message=f"Probe conversion failed: {outcome.error}",
                last_check=datetime.now(timezone.utc),
                details={"error_type": outcome.error_type.value if outcome.error_type else None},
            )
        except Exception as e:
            logger.error("Conversion health check failed: %s", e)
            return HealthStatus(
                is_healthy=False,
                message=f"Conversion error: {str(e)}",
                last_check=datetime.now(timezone.utc),
            )

    async def check_metrics(self) -> HealthStatus:
        """Collect a metrics snapshot and flag an elevated error rate."""
        try:
            metrics = await self.collect_metrics()
            return HealthStatus(
                is_healthy=metrics.error_rate < 5.0,
                message=(f"CPU {metrics.cpu_usage:.0f}%, memory {metrics.memory_usage:.0f}MB, "
                         f"error rate {metrics.error_rate:.2f}%"),
                last_check=datetime.now(timezone.utc),
                details=metrics.to_dict(),
            )
        except Exception as e:
            logger.error("Metrics health check failed: %s", e)
            return HealthStatus(
                is_healthy=False,
                message=f"Metrics error: {str(e)}",
                last_check=datetime.now(timezone.utc),
            )

    async def get_overall_health(self) -> Dict[str, Any]:
        """
        Run all checks.

        Returns:
            {"overall_healthy": bool, "checks": {name: {...}}, "timestamp": iso str}
        """
        checks = {
            "rate_table": self.check_rate_table(),
            "conversion_probe": await self.check_conversion(),
            "metrics": await self.check_metrics(),
        }
        return {
            "overall_healthy": all(status.is_healthy for status in checks.values()),
            "checks": {
                name: {
                    "healthy": status.is_healthy,
                    "message": status.message,
                    "last_check": status.last_check.isoformat(),
                    "details": status.details or {},
                }
                for name, status in checks.items()
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


# Global health checker instance
health_checker = HealthChecker()


async def get_system_health_metrics() -> HealthMetrics:
    """Simulated system metrics snapshot for dashboard widgets."""
    return await health_checker.collect_metrics()
