"""
Observability package: OpenTelemetry tracing setup and request instrumentation.
"""

from .config import setup_observability, setup_structured_logging, StructuredFormatter
from .middleware import add_observability_middleware

__all__ = [
    "setup_observability",
    "setup_structured_logging",
    "StructuredFormatter",
    "add_observability_middleware",
]
