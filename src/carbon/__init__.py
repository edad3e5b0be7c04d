"""Site carbon budget engine (simulation + tornado sensitivity)."""
from .schema import ModelConstants, ModelParams, ScenarioConfig, SiteRecord, with_override
from .simulate import run_scenario, simulate
from .sensitivity import SensitivityResult, analyze_sensitivity, rank_by_impact
from .system_dynamics import CarbonBudgetModel

__all__ = [
    "ModelConstants",
    "ModelParams",
    "ScenarioConfig",
    "SiteRecord",
    "with_override",
    "simulate",
    "run_scenario",
    "SensitivityResult",
    "analyze_sensitivity",
    "rank_by_impact",
    "CarbonBudgetModel",
]
