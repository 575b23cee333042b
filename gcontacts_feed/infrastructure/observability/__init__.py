"""
Observability helpers (structured logging).
"""

from gcontacts_feed.infrastructure.observability.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
