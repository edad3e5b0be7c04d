"""
Tests for validation and logging helpers.
"""

import logging

import numpy as np
import pandas as pd
import pytest

from src.utils.data_validation import validate_dataframe, validate_finite_columns
from src.utils.logging_utils import get_logger, set_level


def test_validate_dataframe():
    df = pd.DataFrame({"year": [0, 1], "cveg": [1.0, 2.0]})
    assert validate_dataframe(df, required_columns=["year"])
    with pytest.raises(ValueError):
        validate_dataframe(df, required_columns=["csoil"])
    with pytest.raises(ValueError):
        validate_dataframe(df.iloc[0:0])
    with pytest.raises(ValueError):
        validate_dataframe([1, 2])


def test_validate_finite_columns():
    assert validate_finite_columns(pd.DataFrame({"a": [1.0, 2.0], "s": ["x", "y"]}))
    with pytest.raises(ValueError):
        validate_finite_columns(pd.DataFrame({"a": [1.0, np.inf]}))
    with pytest.raises(ValueError):
        validate_finite_columns(pd.DataFrame({"a": [np.nan]}), columns=["a"])


def test_set_level_applies_to_engine_loggers():
    logger = get_logger("src.carbon.test_logging")
    set_level("WARNING")
    try:
        assert logger.level == logging.WARNING
        assert all(h.level == logging.WARNING for h in logger.handlers)
    finally:
        set_level("INFO")
