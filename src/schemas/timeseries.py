"""TimeSeries schema for exported carbon simulation runs."""

from typing import Optional

import pandas as pd
from pydantic import BaseModel, Field, ValidationError
from pydantic import ConfigDict

from src.utils.data_validation import validate_dataframe, validate_finite_columns


class CarbonTimeSeriesSchema(BaseModel):
    """Canonical schema for one year of an exported run."""

    year: int = Field(..., ge=0, description="Year index (0 = initial year)")
    calendar_year: Optional[int] = Field(default=None, description="Calendar year")

    temp: float = Field(..., description="Driven temperature (degC)")
    precip: float = Field(..., description="Driven precipitation (mm)")
    aridity: Optional[float] = Field(default=None, description="Effective aridity index")

    gpp: float = Field(..., ge=0, description="Gross primary production")
    npp: float = Field(..., ge=0, description="Net primary production")
    ra: float = Field(..., description="Autotrophic respiration")
    rh: float = Field(..., description="Heterotrophic respiration")
    litter: float = Field(..., description="Litterfall flux")
    human_extraction: Optional[float] = Field(default=None, description="Human extraction flux")

    cveg: float = Field(..., ge=0, description="Vegetation carbon stock")
    csoil: float = Field(..., ge=0, description="Soil carbon stock")
    catm_accumulated: float = Field(..., description="Cumulative net exchange to the atmosphere")
    total_storage: Optional[float] = Field(default=None, ge=0, description="cveg + csoil")

    f_t: float = Field(..., ge=0, description="Temperature factor")
    f_w: float = Field(..., ge=0, le=1, description="Water factor")

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)


def validate_timeseries_df(df: pd.DataFrame) -> bool:
    """
    Validate a DataFrame conforms to CarbonTimeSeriesSchema row by row.

    Args:
        df: pandas DataFrame, e.g. from ``steps_to_frame`` or a read-back CSV

    Returns:
        True if valid, raises ValueError otherwise
    """
    validate_dataframe(df, required_columns=["year"])
    validate_finite_columns(df)

    for idx, row in df.iterrows():
        row_dict = {key: (None if pd.isna(value) else value) for key, value in row.to_dict().items()}
        try:
            CarbonTimeSeriesSchema.model_validate(row_dict)
        except ValidationError as exc:
            raise ValueError(f"Row {idx} invalid: {exc}") from exc

    years = df["year"].tolist()
    if years != list(range(years[0], years[0] + len(years))):
        raise ValueError("Year index must increase by exactly 1 per row")

    return True
