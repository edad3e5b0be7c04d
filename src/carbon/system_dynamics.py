"""
System dynamics facade for the site carbon budget model.

Bundles a site, a parameter set and the model constants so callers can run
the forward simulation and the tornado sensitivity analysis without threading
the same arguments through every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .model import SimulationStep
from .schema import DEFAULT_CONSTANTS, DEFAULT_PARAMS, ModelConstants, ModelParams, SiteRecord, with_override
from .sensitivity import SensitivityResult, analyze_sensitivity, rank_by_impact
from .simulate import simulate


@dataclass(frozen=True)
class CarbonBudgetModel:
    """
    Three-stock carbon model (vegetation, soil, cumulative atmospheric exchange).

    Stocks:
    - Cveg: fed by NPP, drained by litterfall and human extraction
    - Csoil: fed by litterfall, drained by heterotrophic respiration
    - Catm: running sum of Ra + Rh - GPP (positive = net source)

    Instances are immutable; ``with_param`` returns a new model.
    """

    site: SiteRecord
    params: ModelParams = DEFAULT_PARAMS
    constants: ModelConstants = DEFAULT_CONSTANTS
    horizon_years: int = 50

    def run(self) -> List[SimulationStep]:
        return simulate(self.site, self.params, self.horizon_years, self.constants)

    def sensitivity(self, ranked: bool = True) -> List[SensitivityResult]:
        results = analyze_sensitivity(self.site, self.params, self.horizon_years, self.constants)
        return rank_by_impact(results) if ranked else results

    def with_param(self, name: str, value: float) -> "CarbonBudgetModel":
        return CarbonBudgetModel(
            site=self.site,
            params=with_override(self.params, name, value),
            constants=self.constants,
            horizon_years=self.horizon_years,
        )
