"""Logging configuration for code_engine_sdk."""

from code_engine_sdk.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
