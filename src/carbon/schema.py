"""Schema for site records, model parameters and scenario configuration files."""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Dict, Any
from pathlib import Path
import yaml

from src.config import Config


class SiteRecord(BaseModel):
    """One site's initial conditions, as delivered by the ingestion layer.

    Values are taken as already defaulted; the engine does not re-validate
    ranges (HMI in [0, 1] is guaranteed upstream).
    """
    model_config = ConfigDict(frozen=True)

    site: str = Field(..., description="Site identifier")
    lat: float = Field(default=0.0, description="Latitude (degrees)")
    lon: float = Field(default=0.0, description="Longitude (degrees)")
    habitat: str = Field(default="F", description="Habitat class (F = forest, G = grassland)")
    mat: float = Field(..., description="Mean annual temperature (degC)")
    map: float = Field(..., description="Mean annual precipitation (mm)")
    aridity_index: float = Field(..., description="Aridity index (P/PET)")
    hmi: float = Field(default=0.0, description="Human modification index (0-1)")
    npp: float = Field(default=0.0, description="Observed net primary production")
    gpp: float = Field(..., description="Observed gross primary production")
    cveg_initial: float = Field(..., description="Initial vegetation carbon stock")
    soil_c_mean: float = Field(default=0.0, description="Soil carbon proxy (preferred)")
    soc: float = Field(default=0.0, description="Coarse soil organic carbon value")
    elevation: float = Field(default=0.0, description="Elevation (m)")


class ModelParams(BaseModel):
    """Tunable model parameters and the forcing scenario.

    Each field is independently tunable; no range checks are applied.
    """
    model_config = ConfigDict(frozen=True)

    epsilon_max: float = Field(default=1.1, description="Light-use efficiency ceiling (g C MJ-1 PAR)")
    q10: float = Field(default=2.0, description="Temperature sensitivity (Q10)")
    alpha_ra: float = Field(default=0.53, description="Autotrophic respiration fraction of GPP")
    k_lit: float = Field(default=0.15, description="Litterfall turnover rate (1/yr)")
    k_soil: float = Field(default=0.03, description="Soil decomposition rate (1/yr)")
    h_human: float = Field(default=0.01, description="Human disturbance coefficient")
    warming_rate: float = Field(default=0.0, description="Warming rate (degC/yr)")
    precip_change: float = Field(default=0.0, description="Precipitation change (%/yr)")


class ModelConstants(BaseModel):
    """Fixed constants of the regulatory functions and initialization heuristics."""
    model_config = ConfigDict(frozen=True)

    t_ref: float = Field(default=10.0, description="Reference temperature for Q10 (degC)")
    ai_opt: float = Field(default=1.5, description="Aridity index at which photosynthesis is unstressed")
    heat_penalty_base: float = Field(default=1.05, description="Base of the Ra heat penalty per degC of warming")
    fw_floor: float = Field(default=0.1, description="Floor of the photosynthesis water factor")
    fw_soil_floor: float = Field(default=0.05, description="Floor of the decomposition water factor")
    pet_per_degree: float = Field(default=0.02, description="Fractional PET increase per degC of warming")
    # Unit conversions below are approximations, not measured conversions
    soil_c_mean_factor: float = Field(default=10.0, description="Csoil = soil_c_mean * factor")
    soc_factor: float = Field(default=20.0, description="Csoil = soc * factor when soil_c_mean is absent")
    fallback_apar: float = Field(default=1000.0, description="Baseline APAR when observed GPP <= 0")
    eps: float = Field(default=1e-9, gt=0, description="Small positive constant guarding divisions")


DEFAULT_PARAMS = ModelParams()
DEFAULT_CONSTANTS = ModelConstants()


def with_override(params: ModelParams, field: str, value: float) -> ModelParams:
    """Return a copy of ``params`` with one field replaced; ``params`` is untouched."""
    if field not in ModelParams.model_fields:
        raise ValueError(f"Unknown model parameter: {field}")
    return params.model_copy(update={field: float(value)})


class TimeConfig(BaseModel):
    """Time configuration."""
    horizon_years: int = Field(default=Config.DEFAULT_HORIZON_YEARS, ge=0, description="Number of simulated years after year 0")
    start_year: int = Field(default=Config.DEFAULT_START_YEAR, description="Calendar year of year index 0")


class OutputsConfig(BaseModel):
    """Output configuration."""
    out_dir: str = Field(default="runs", description="Output directory")
    save_csv: bool = Field(default=True, description="Save CSV timeseries")
    save_markdown: bool = Field(default=False, description="Save Markdown summary table")
    sensitivity: bool = Field(default=False, description="Run the tornado sensitivity analysis")
    metrics: List[str] = Field(
        default_factory=lambda: ["final_total_storage", "net_exchange", "mean_npp"],
        description="Metrics to print after a run",
    )


class ScenarioConfig(BaseModel):
    """Schema for scenario configuration files."""

    name: str = Field(..., description="Scenario name")
    description: Optional[str] = Field(default=None, description="Scenario description")

    site: Optional[SiteRecord] = Field(default=None, description="Inline site record")
    site_table: Optional[str] = Field(default=None, description="Path to a site table")
    site_id: Optional[str] = Field(default=None, description="Site identifier within site_table")

    preset: Optional[str] = Field(default=None, description="Named parameter preset")
    parameters: Dict[str, float] = Field(default_factory=dict, description="Parameter overrides")
    constants: ModelConstants = Field(default_factory=ModelConstants, description="Model constants")

    time: TimeConfig = Field(default_factory=TimeConfig, description="Time configuration")
    outputs: OutputsConfig = Field(default_factory=OutputsConfig, description="Output configuration")

    @model_validator(mode="after")
    def validate_site_source(self):
        """Exactly one of an inline site or a site table must be given."""
        if (self.site is None) == (self.site_table is None):
            raise ValueError("Provide exactly one of 'site' or 'site_table'")
        if self.site_table is not None and not self.site_id:
            raise ValueError("'site_id' is required with 'site_table'")
        unknown = set(self.parameters) - set(ModelParams.model_fields)
        if unknown:
            raise ValueError(f"Unknown parameter overrides: {sorted(unknown)}")
        return self

    @property
    def years(self) -> List[int]:
        """Calendar years covered by the run."""
        return list(range(self.time.start_year, self.time.start_year + self.time.horizon_years + 1))

    def resolve_params(self) -> ModelParams:
        """Preset (or defaults) with the scenario's overrides applied."""
        from .presets import get_preset

        params = get_preset(self.preset) if self.preset else DEFAULT_PARAMS
        for field, value in self.parameters.items():
            params = with_override(params, field, value)
        return params

    def resolve_site(self, base_dir: Optional[Path] = None) -> SiteRecord:
        """Inline site, or the named row of the referenced site table."""
        if self.site is not None:
            return self.site

        from src.ingest import read_site_table

        table = Path(self.site_table)
        if not table.is_absolute() and base_dir is not None:
            table = base_dir / table
        for record in read_site_table(table):
            if record.site == self.site_id:
                return record
        raise ValueError(f"Site '{self.site_id}' not found in {table}")


def load_scenario(path: str) -> ScenarioConfig:
    """Load and validate scenario from YAML file."""
    scenario_path = Path(path)
    if not scenario_path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")

    with open(scenario_path, "r", encoding="utf-8") as f:
        data: Dict[str, Any] = yaml.safe_load(f) or {}

    return ScenarioConfig(**data)
