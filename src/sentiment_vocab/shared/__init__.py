"""
Shared utilities for the sentiment vocabulary pipeline.

Cross-cutting concerns with no modelling logic:
- logging_utils.py: loguru sink configuration
- serialization.py: numpy-safe JSON conversion
- sklearn_compat.py: penalty arguments across scikit-learn releases
"""

from .logging_utils import setup_logging
from .serialization import pyify
from .sklearn_compat import penalty_params

__all__ = ["setup_logging", "pyify", "penalty_params"]
