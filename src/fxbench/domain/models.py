# src/fxbench/domain/models.py
"""
Domain Models - Pure Value Objects

This module contains the value objects exchanged across the engine:
- Validation outcomes (failure / success)
- Conversion outcomes and their metadata
- Load-test results
- Simulated health metrics snapshots

Every object is frozen and created fresh per call; none is persisted.

Files that USE this module:
- fxbench.shared.validators (builds ValidationFailure / ValidationSuccess)
- fxbench.application.* (all services build and consume these models)
- fxbench.adapters.formatting.formatter (renders them as text)
- tests.* (tests assert on these models)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class ErrorKind(str, Enum):
    """Category of a failed validation or conversion."""
    TYPE = "type"
    RANGE = "range"
    FORMAT = "format"
    SECURITY = "security"
    SYSTEM = "system"
    # Simulated transport failures, only produced after validation passed
    NETWORK = "network"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    SERVICE = "service"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def _plain(data: Dict[str, Any]) -> Dict[str, Any]:
    """Replace enum members by their string values."""
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in data.items()}


@dataclass(frozen=True)
class ValidationFailure:
    """
    Rejected input.

    Attributes:
        kind: Error category (type, range, format, security, system)
        severity: How serious the rejection is
        message: Short user-facing message
        details: Optional diagnostic detail naming the offending value
    """
    kind: ErrorKind
    severity: Severity
    message: str
    details: Optional[str] = None

    @property
    def valid(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": False, **_plain(asdict(self))}


@dataclass(frozen=True)
class ValidationSuccess:
    """
    Accepted input.

    Attributes:
        sanitized_amount: Finite, strictly positive amount as float
        normalized_from_currency: 3-letter uppercase code from the allow-list
        normalized_to_currency: 3-letter uppercase code from the allow-list
    """
    sanitized_amount: float
    normalized_from_currency: str
    normalized_to_currency: str

    @property
    def valid(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": True, **asdict(self)}


ValidationOutcome = Union[ValidationFailure, ValidationSuccess]


@dataclass(frozen=True)
class FaultSpec:
    """A simulated transport failure that the conversion engine may inject."""
    message: str
    kind: ErrorKind
    severity: Severity


@dataclass(frozen=True)
class ConversionMetadata:
    """
    Details of a successful conversion.

    Attributes:
        rate: Exchange rate applied (1.0 when the pair is missing from the table)
        precision: Decimal places the result was rounded to
        timestamp: Completion time in milliseconds since the epoch
        from_currency: Normalized source code
        to_currency: Normalized target code
        rate_found: False when the rate is the neutral fallback for a missing pair
    """
    rate: float
    precision: int
    timestamp: float
    from_currency: str
    to_currency: str
    rate_found: bool = True


@dataclass(frozen=True)
class ConversionOutcome:
    """
    Result of one conversion call.

    success is True iff result and metadata are set and error is None.
    Use the succeeded()/failed() constructors to keep that invariant.
    """
    success: bool
    response_time: float  # milliseconds
    result: Optional[float] = None
    error: Optional[str] = None
    error_type: Optional[ErrorKind] = None
    severity: Optional[Severity] = None
    metadata: Optional[ConversionMetadata] = None

    @classmethod
    def succeeded(cls, result: float, metadata: ConversionMetadata,
                  response_time: float) -> ConversionOutcome:
        return cls(success=True, result=result, metadata=metadata, response_time=response_time)

    @classmethod
    def failed(cls, error: str, error_type: ErrorKind, severity: Severity,
               response_time: float) -> ConversionOutcome:
        return cls(
            success=False,
            error=error,
            error_type=error_type,
            severity=severity,
            response_time=response_time,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = _plain(asdict(self))
        if self.metadata is None:
            data.pop("metadata")
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class LoadTestResult:
    """
    Aggregated statistics of one load-test run.

    total_requests == successful_requests + failed_requests and
    error_rate == 100 * failed_requests / total_requests (0 with no requests).
    Times are in milliseconds, throughput in requests per second.
    """
    total_requests: int
    successful_requests: int
    failed_requests: int
    average_response_time: float
    max_response_time: float
    min_response_time: float
    p95_response_time: float
    p99_response_time: float
    error_rate: float
    throughput: float
    duration: float
    timestamp: float
    batches: int = 0
    errors_by_type: Dict[str, int] = field(default_factory=dict)
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HealthMetrics:
    """Simulated system metrics snapshot consumed by dashboard widgets."""
    memory_usage: float  # MB
    cpu_usage: float  # %
    response_time: float  # ms
    error_rate: float  # %
    throughput: float  # requests per second
    network_latency: float  # ms
    disk_usage: float  # %
    cache_hit_rate: float  # %
    gc_collections: int
    thread_count: int
    connection_pool_size: int
    timestamp: float  # ms since epoch

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
