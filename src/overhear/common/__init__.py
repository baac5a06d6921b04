"""
Overhear common package.
"""

from overhear.common.format import Pretty, Seconds
from overhear.common.logs import get_logger, setup_logging, setup_logging_from_env

__all__ = [
  "get_logger",
  "setup_logging",
  "setup_logging_from_env",
  "Pretty",
  "Seconds",
]
