"""Run report schema for scenario execution results."""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class SensitivityRow(BaseModel):
    """One tornado bar."""

    parameter: str
    label: str
    baseline: float
    low: float
    high: float
    change_low: Optional[float] = Field(default=None, description="% change, None when undefined")
    change_high: Optional[float] = Field(default=None, description="% change, None when undefined")
    degenerate: bool = False


class RunReport(BaseModel):
    """Report of a scenario run with parameters, metrics, sensitivity table and artifacts."""

    scenario: str = Field(..., description="Scenario name")
    scenario_path: Optional[str] = Field(default=None, description="Path to scenario YAML file")
    site: str = Field(..., description="Site identifier")
    horizon_years: int = Field(..., description="Simulated years after year 0")
    parameters: Dict[str, float] = Field(..., description="Resolved model parameters")
    metrics: Dict[str, float] = Field(..., description="Computed metrics")
    sensitivity: List[SensitivityRow] = Field(default_factory=list, description="Ranked sensitivity table")
    artifacts: List[str] = Field(default_factory=list, description="List of artifact file paths")
    notes: Optional[Dict[str, Any]] = Field(default=None, description="Free-form run notes")
