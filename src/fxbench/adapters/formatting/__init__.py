"""
Formatting Adapters - Message Presentation
"""

from fxbench.adapters.formatting.formatter import (
    format_amount,
    format_conversion,
    format_health_report,
    format_load_test,
    format_validation,
)

__all__ = [
    "format_amount",
    "format_conversion",
    "format_health_report",
    "format_load_test",
    "format_validation",
]
