"""
Utility modules for the developer tool installer.
"""

from .logging import setup_root_logger, get_logger

__all__ = ["setup_root_logger", "get_logger"]
