"""Python client for the IBM Cloud Code Engine APIs."""

import logging

from code_engine_sdk.__version__ import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["__version__"]
