"""
One-at-a-time (tornado) sensitivity analysis of final carbon storage.

Each tracked parameter is moved down and up around its baseline value while
every other parameter is held fixed, and the final-year total storage
(vegetation + soil) of each run is compared with the baseline run. Every run
is an independent call to ``simulate``; nothing is shared between them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import pandas as pd

from src.utils.logging_utils import get_logger

from .schema import DEFAULT_CONSTANTS, ModelConstants, ModelParams, SiteRecord, with_override
from .simulate import simulate

logger = get_logger(__name__)

RELATIVE_DELTA = 0.1
# Absolute step for parameters whose baseline may sit at zero
ABSOLUTE_DELTA = 0.005


@dataclass(frozen=True)
class TrackedParameter:
    key: str
    label: str
    absolute: bool = False


TRACKED_PARAMETERS: Tuple[TrackedParameter, ...] = (
    TrackedParameter("q10", "Q10 (temperature sensitivity)"),
    TrackedParameter("epsilon_max", "εmax (light-use efficiency)"),
    TrackedParameter("h_human", "h (human disturbance coefficient)", absolute=True),
    TrackedParameter("k_soil", "kSoil (soil decomposition rate)"),
)


@dataclass(frozen=True)
class SensitivityResult:
    parameter: str
    label: str
    baseline: float
    low: float
    high: float
    change_low: Optional[float]  # % vs baseline, None when degenerate
    change_high: Optional[float]
    degenerate: bool = False

    @property
    def impact(self) -> Optional[float]:
        """Swing between the two perturbed runs, in percentage points."""
        if self.degenerate:
            return None
        return abs(self.change_high - self.change_low)


def final_total_storage(
    site: SiteRecord,
    params: ModelParams,
    horizon_years: int = 50,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> float:
    last = simulate(site, params, horizon_years, constants)[-1]
    return last.cveg + last.csoil


def perturbed_values(tracked: TrackedParameter, value: float) -> Tuple[float, float]:
    """Low and high values for one parameter (absolute step floored at 0, else +/-10%)."""
    if tracked.absolute:
        return max(0.0, value - ABSOLUTE_DELTA), value + ABSOLUTE_DELTA
    return value * (1 - RELATIVE_DELTA), value * (1 + RELATIVE_DELTA)


def percent_change(perturbed: float, baseline: float) -> Optional[float]:
    if baseline == 0:
        return None
    return (perturbed - baseline) / baseline * 100


def analyze_sensitivity(
    site: SiteRecord,
    baseline_params: ModelParams,
    horizon_years: int = 50,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> List[SensitivityResult]:
    """
    Run 1 baseline + 2 perturbed simulations per tracked parameter.

    Results come back in the order of ``TRACKED_PARAMETERS``; use
    ``rank_by_impact`` for tornado ordering. When the baseline total is
    exactly zero the percentage changes are undefined: those results carry
    ``degenerate=True`` and ``None`` changes instead of NaN/inf.
    """
    baseline = final_total_storage(site, baseline_params, horizon_years, constants)
    degenerate = baseline == 0
    if degenerate:
        logger.warning(
            f"Baseline final storage is zero for site {site.site}; "
            "percentage changes are undefined"
        )

    results: List[SensitivityResult] = []
    for tracked in TRACKED_PARAMETERS:
        value = getattr(baseline_params, tracked.key)
        low_value, high_value = perturbed_values(tracked, value)

        low = final_total_storage(
            site, with_override(baseline_params, tracked.key, low_value), horizon_years, constants
        )
        high = final_total_storage(
            site, with_override(baseline_params, tracked.key, high_value), horizon_years, constants
        )
        results.append(
            SensitivityResult(
                parameter=tracked.key,
                label=tracked.label,
                baseline=baseline,
                low=low,
                high=high,
                change_low=percent_change(low, baseline),
                change_high=percent_change(high, baseline),
                degenerate=degenerate,
            )
        )
        logger.debug(f"{tracked.key}: low={low:.3f} high={high:.3f} baseline={baseline:.3f}")

    return results


def rank_by_impact(results: List[SensitivityResult]) -> List[SensitivityResult]:
    """Sort by descending swing; degenerate entries go last in their original order."""
    defined = [r for r in results if not r.degenerate]
    undefined = [r for r in results if r.degenerate]
    return sorted(defined, key=lambda r: r.impact, reverse=True) + undefined


def sensitivity_frame(results: List[SensitivityResult]) -> pd.DataFrame:
    rows = [
        {
            "parameter": r.parameter,
            "label": r.label,
            "baseline": r.baseline,
            "low": r.low,
            "high": r.high,
            "change_low": r.change_low,
            "change_high": r.change_high,
            "impact": r.impact,
            "degenerate": r.degenerate,
        }
        for r in results
    ]
    return pd.DataFrame(rows)
