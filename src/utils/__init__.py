"""
Utility modules for the carbon budget engine.
"""

from .logging_utils import setup_logger, get_logger
from .data_validation import validate_dataframe, validate_finite_columns

__all__ = [
    "setup_logger",
    "get_logger",
    "validate_dataframe",
    "validate_finite_columns",
]
