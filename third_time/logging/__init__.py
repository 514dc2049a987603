"""
Logging configuration and utilities for the Third Time scheduler.
"""
from .config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
