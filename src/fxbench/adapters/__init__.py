"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Telegram (bot interface)
- Formatting (output)
"""

__all__ = []
