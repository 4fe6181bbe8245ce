from __future__ import annotations

from .logging import configure_logging
from .metrics import AssistantMetrics

__all__ = [
    "AssistantMetrics",
    "configure_logging",
]
