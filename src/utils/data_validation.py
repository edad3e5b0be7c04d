"""
Data validation utilities for simulation outputs and site tables.
"""

from typing import List, Optional
import numpy as np
import pandas as pd
from src.utils.logging_utils import get_logger

logger = get_logger(__name__)


def validate_dataframe(
    df: pd.DataFrame,
    required_columns: Optional[List[str]] = None,
    min_rows: int = 1
) -> bool:
    """
    Validate a pandas DataFrame meets basic requirements.

    Args:
        df: DataFrame to validate
        required_columns: List of column names that must be present
        min_rows: Minimum number of rows required

    Returns:
        True if validation passes, raises ValueError otherwise

    Raises:
        ValueError: If validation fails
    """
    if not isinstance(df, pd.DataFrame):
        raise ValueError("Input must be a pandas DataFrame")

    if len(df) < min_rows:
        raise ValueError(f"DataFrame must have at least {min_rows} rows")

    if required_columns:
        missing = set(required_columns) - set(df.columns)
        if missing:
            raise ValueError(f"Missing required columns: {missing}")

    logger.debug(f"DataFrame validation passed: {len(df)} rows, {len(df.columns)} columns")
    return True


def validate_finite_columns(
    df: pd.DataFrame,
    columns: Optional[List[str]] = None
) -> bool:
    """
    Check that numeric columns hold no NaN or infinite values.

    Args:
        df: DataFrame to check
        columns: Columns to check (defaults to every numeric column)

    Returns:
        True if validation passes, raises ValueError otherwise
    """
    if columns is None:
        columns = list(df.select_dtypes(include=[np.number]).columns)

    bad = [col for col in columns if not np.isfinite(df[col].to_numpy(dtype=float)).all()]
    if bad:
        raise ValueError(f"Non-finite values in columns: {bad}")

    logger.debug(f"Finite check passed for {len(columns)} columns")
    return True
