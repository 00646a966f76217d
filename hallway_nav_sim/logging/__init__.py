"""Operational logging for hallway_nav_sim.

Library modules log through ``logging.getLogger(__name__)``; applications call
``setup_logging()`` once to send those records to loguru sinks.
"""

from .loguru_bootstrap import InterceptHandler, get_logger, setup_logging

__all__ = ["InterceptHandler", "get_logger", "setup_logging"]
