from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .drivers import drivers_for_year
from .regulation import heat_penalty, soil_water_factor, temperature_factor, water_factor
from .schema import ModelConstants, ModelParams, SiteRecord


@dataclass(frozen=True)
class CarbonState:
    year: int
    cveg: float
    csoil: float
    catm_accumulated: float


@dataclass(frozen=True)
class SimulationStep:
    year: int
    temp: float
    precip: float
    aridity: float
    gpp: float
    npp: float
    ra: float
    rh: float
    litter: float
    human_extraction: float
    cveg: float
    csoil: float
    catm_accumulated: float
    f_t: float
    f_w: float

    @property
    def total_storage(self) -> float:
        return self.cveg + self.csoil


def initial_soil_carbon(site: SiteRecord, constants: ModelConstants) -> float:
    """
    Soil stock at year 0 from whichever proxy the site carries.

    Both conversion factors are unit heuristics rather than measured
    conversions; ``soil_c_mean`` wins when it is positive.
    """
    if site.soil_c_mean > 0:
        return site.soil_c_mean * constants.soil_c_mean_factor
    return site.soc * constants.soc_factor


def baseline_apar(site: SiteRecord, params: ModelParams, constants: ModelConstants) -> float:
    """
    Effective absorbed radiation back-solved so year-0 GPP matches the observed GPP.

    Falls back to ``constants.fallback_apar`` when observed GPP is non-positive
    or the efficiency/regulation product vanishes.
    """
    f_t0 = temperature_factor(site.mat, params.q10, constants.t_ref, constants.eps)
    f_w0 = water_factor(site.aridity_index, constants.ai_opt, constants.fw_floor)
    capacity = params.epsilon_max * f_t0 * f_w0
    if site.gpp <= 0 or capacity <= constants.eps:
        return constants.fallback_apar
    return site.gpp / capacity


def initial_state(site: SiteRecord, constants: ModelConstants) -> CarbonState:
    return CarbonState(
        year=0,
        cveg=site.cveg_initial,
        csoil=initial_soil_carbon(site, constants),
        catm_accumulated=0.0,
    )


def step(
    site: SiteRecord,
    params: ModelParams,
    s: CarbonState,
    apar: float,
    constants: ModelConstants,
) -> Tuple[CarbonState, SimulationStep]:
    """Advance one year with explicit forward Euler (dt = 1 yr)."""
    drv = drivers_for_year(site, params, s.year, constants)

    # 1) regulatory factors
    f_t = temperature_factor(drv.temp, params.q10, constants.t_ref, constants.eps)
    f_w = water_factor(drv.aridity, constants.ai_opt, constants.fw_floor)
    f_w_soil = soil_water_factor(drv.aridity, constants.fw_soil_floor)

    # 2) production and plant respiration
    gpp = params.epsilon_max * apar * f_t * f_w
    ra = params.alpha_ra * gpp * heat_penalty(drv.temp_anomaly, constants.heat_penalty_base)
    npp = max(0.0, gpp - ra)

    # 3) turnover, decomposition, extraction
    litter = params.k_lit * s.cveg
    rh = params.k_soil * s.csoil * f_t * f_w_soil
    extraction = params.h_human * site.hmi * s.cveg

    # 4) stock update; the floor can break mass balance when outflows exceed the stock
    d_cveg = npp - litter - extraction
    d_csoil = litter - rh
    d_catm = ra + rh - gpp

    s_next = CarbonState(
        year=s.year + 1,
        cveg=max(0.0, s.cveg + d_cveg),
        csoil=max(0.0, s.csoil + d_csoil),
        catm_accumulated=s.catm_accumulated + d_catm,
    )
    record = SimulationStep(
        year=s.year,
        temp=drv.temp,
        precip=drv.precip,
        aridity=drv.aridity,
        gpp=gpp,
        npp=npp,
        ra=ra,
        rh=rh,
        litter=litter,
        human_extraction=extraction,
        cveg=s_next.cveg,
        csoil=s_next.csoil,
        catm_accumulated=s_next.catm_accumulated,
        f_t=f_t,
        f_w=f_w,
    )
    return s_next, record
