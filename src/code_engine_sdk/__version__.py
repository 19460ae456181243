"""Version information for code_engine_sdk."""

__version__ = "1.2.0"
