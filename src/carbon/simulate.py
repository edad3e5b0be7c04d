from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from src.utils.logging_utils import get_logger

from .metrics import compute_metrics
from .model import SimulationStep, baseline_apar, initial_state, step
from .schema import DEFAULT_CONSTANTS, ModelConstants, ModelParams, ScenarioConfig, SiteRecord

logger = get_logger(__name__)


def simulate(
    site: SiteRecord,
    params: ModelParams,
    horizon_years: int = 50,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> List[SimulationStep]:
    """
    Run the three-stock carbon model for years 0..horizon_years inclusive.

    Pure function of its inputs: the state record is rebuilt every year and
    nothing is shared between calls.

    Returns:
        horizon_years + 1 step records, one per year, stocks post-update.
    """
    apar = baseline_apar(site, params, constants)
    s = initial_state(site, constants)

    steps: List[SimulationStep] = []
    for _ in range(horizon_years + 1):
        s, record = step(site, params, s, apar, constants)
        steps.append(record)
    return steps


def run_scenario(
    cfg: ScenarioConfig,
    base_dir: Optional[Path] = None,
    site: Optional[SiteRecord] = None,
    params: Optional[ModelParams] = None,
) -> Tuple[pd.DataFrame, Dict[str, float]]:
    """
    Resolve a scenario's site and parameters, simulate, and compute metrics.

    Callers that already resolved ``site`` or ``params`` pass them in so a
    site table is not parsed twice.
    """
    # local import: src.export depends on this package's model types
    from src.export import steps_to_frame

    if site is None:
        site = cfg.resolve_site(base_dir)
    if params is None:
        params = cfg.resolve_params()
    logger.info(
        f"Simulating {cfg.name}: site={site.site} horizon={cfg.time.horizon_years}y "
        f"warming={params.warming_rate} precip_change={params.precip_change}"
    )

    steps = simulate(site, params, cfg.time.horizon_years, cfg.constants)
    df = steps_to_frame(steps, start_year=cfg.time.start_year)
    s0 = initial_state(site, cfg.constants)
    metrics = compute_metrics(df, initial_total=s0.cveg + s0.csoil)
    logger.debug(f"{cfg.name} metrics: {metrics}")
    return df, metrics
