from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from src.carbon.model import CarbonState, baseline_apar, initial_soil_carbon, initial_state, step
from src.carbon.schema import DEFAULT_CONSTANTS, ModelParams, SiteRecord, with_override
from src.carbon.simulate import simulate


@pytest.fixture
def site() -> SiteRecord:
    return SiteRecord(
        site="EX-ref-F01",
        mat=10.0,
        map=1000.0,
        aridity_index=1.0,
        hmi=0.2,
        gpp=1200.0,
        cveg_initial=8000.0,
        soil_c_mean=1000.0,
    )


def test_example_scenario_shape_and_invariants(site):
    """Reference site with default parameters over 50 years."""
    steps = simulate(site, ModelParams(), horizon_years=50)

    assert len(steps) == 51
    assert [s.year for s in steps] == list(range(51))
    assert steps[0].gpp == pytest.approx(1200.0, rel=1e-9)

    for s in steps:
        assert s.cveg >= 0.0 and s.csoil >= 0.0
        assert s.npp >= 0.0
        for value in (s.cveg, s.csoil, s.catm_accumulated, s.gpp, s.ra, s.rh):
            assert math.isfinite(value)


def test_first_step_golden_values(site):
    """Hand-computed year 0 fluxes and post-update stocks (no climate trend)."""
    s0 = simulate(site, ModelParams(), horizon_years=0)[0]

    assert s0.f_t == pytest.approx(1.0)
    assert s0.f_w == pytest.approx(1.0 / 1.5)
    assert s0.ra == pytest.approx(0.53 * 1200.0, rel=1e-9)
    assert s0.npp == pytest.approx(1200.0 - 636.0, rel=1e-9)
    assert s0.litter == pytest.approx(0.15 * 8000.0)
    assert s0.human_extraction == pytest.approx(0.01 * 0.2 * 8000.0)
    assert s0.rh == pytest.approx(0.03 * 10000.0)

    assert s0.cveg == pytest.approx(8000.0 + 564.0 - 1200.0 - 16.0, rel=1e-9)
    assert s0.csoil == pytest.approx(10000.0 + 1200.0 - 300.0, rel=1e-9)
    assert s0.catm_accumulated == pytest.approx(636.0 + 300.0 - 1200.0, rel=1e-9)


def test_constant_drivers_keep_gpp_constant(site):
    steps = simulate(site, ModelParams(), horizon_years=20)
    for s in steps:
        assert s.gpp == pytest.approx(1200.0, rel=1e-9)
        assert s.temp == 10.0
        assert s.precip == 1000.0


def test_simulation_is_deterministic(site):
    params = ModelParams(warming_rate=0.05, precip_change=-0.3, q10=2.3)
    assert simulate(site, params, 40) == simulate(site, params, 40)


@pytest.mark.parametrize("horizon", [0, 1, 7, 100])
def test_horizon_length(site, horizon):
    steps = simulate(site, ModelParams(), horizon_years=horizon)
    assert len(steps) == horizon + 1
    years = [s.year for s in steps]
    assert all(b - a == 1 for a, b in zip(years, years[1:]))


@pytest.mark.parametrize("mat,aridity", [(-2.0, 0.3), (10.0, 1.0), (25.0, 2.4)])
def test_baseline_gpp_reproduced(mat, aridity):
    """Back-solved capacity reproduces observed GPP at year 0 for any site climate."""
    site = SiteRecord(site="S", mat=mat, map=800.0, aridity_index=aridity, gpp=950.0, cveg_initial=5000.0)
    params = ModelParams(q10=2.4, epsilon_max=0.8)
    assert simulate(site, params, 5)[0].gpp == pytest.approx(950.0, rel=1e-9)


def test_npp_floor_when_respiration_exceeds_gpp(site):
    params = ModelParams(alpha_ra=1.5, warming_rate=0.1)
    steps = simulate(site, params, 30)
    assert all(s.npp == 0.0 for s in steps)
    cveg = [s.cveg for s in steps]
    assert all(b <= a for a, b in zip(cveg, cveg[1:]))


@pytest.mark.parametrize(
    "overrides",
    [
        {"k_lit": 2.0},
        {"h_human": 10.0},
        {"k_soil": 5.0, "q10": 3.0, "warming_rate": 0.2},
    ],
)
def test_stocks_never_negative_in_pathological_regimes(site, overrides):
    params = ModelParams(**overrides)
    for s in simulate(site, params, 50):
        assert s.cveg >= 0.0
        assert s.csoil >= 0.0


@pytest.mark.parametrize("q10", [0.0, -1.5])
def test_non_positive_q10_on_cold_site_runs_finite(q10):
    cold = SiteRecord(site="C", mat=5.0, map=600.0, aridity_index=0.8, hmi=0.1,
                      gpp=900.0, cveg_initial=5000.0, soil_c_mean=400.0)
    params = ModelParams(q10=q10, warming_rate=-0.05)

    steps = simulate(cold, params, 20)

    assert len(steps) == 21
    for s in steps:
        for value in (s.gpp, s.npp, s.ra, s.rh, s.cveg, s.csoil, s.catm_accumulated, s.f_t):
            assert isinstance(value, float)
            assert math.isfinite(value)
    assert steps[0].gpp == pytest.approx(900.0)


def test_zero_gpp_uses_fallback_capacity():
    site = SiteRecord(site="Z", mat=10.0, map=1000.0, aridity_index=1.0, gpp=0.0, cveg_initial=100.0)
    params = ModelParams()
    assert baseline_apar(site, params, DEFAULT_CONSTANTS) == 1000.0

    s0 = simulate(site, params, 3)[0]
    assert s0.gpp == pytest.approx(1.1 * 1000.0 * 1.0 * (1.0 / 1.5))
    assert math.isfinite(s0.cveg)


def test_soil_initialisation_paths():
    base = dict(site="S", mat=10.0, map=1000.0, aridity_index=1.0, gpp=1000.0, cveg_initial=1.0)
    with_mean = SiteRecord(**base, soil_c_mean=6.3, soc=2.0)
    soc_only = SiteRecord(**base, soil_c_mean=0.0, soc=2.0)

    assert initial_soil_carbon(with_mean, DEFAULT_CONSTANTS) == pytest.approx(63.0)
    assert initial_soil_carbon(soc_only, DEFAULT_CONSTANTS) == pytest.approx(40.0)


def test_step_is_pure(site):
    """step() returns a new state and leaves the input untouched."""
    params = ModelParams()
    apar = baseline_apar(site, params, DEFAULT_CONSTANTS)
    s = initial_state(site, DEFAULT_CONSTANTS)

    s_next, record = step(site, params, s, apar, DEFAULT_CONSTANTS)

    assert s == CarbonState(year=0, cveg=8000.0, csoil=10000.0, catm_accumulated=0.0)
    assert s_next.year == 1
    assert record.year == 0
    assert record.cveg == s_next.cveg
    assert record.total_storage == pytest.approx(s_next.cveg + s_next.csoil)


def test_with_override_leaves_baseline_untouched():
    base = ModelParams()
    changed = with_override(base, "k_soil", 0.05)

    assert changed.k_soil == 0.05
    assert base.k_soil == 0.03
    assert changed.q10 == base.q10

    with pytest.raises(ValueError):
        with_override(base, "not_a_param", 1.0)
    with pytest.raises(ValidationError):
        base.k_soil = 0.1
