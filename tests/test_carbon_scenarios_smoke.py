from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from src.carbon.schema import load_scenario
from src.carbon.simulate import run_scenario
from src.schemas.timeseries import validate_timeseries_df

ROOT = Path(__file__).resolve().parent.parent
SCENARIOS_DIR = ROOT / "scenarios"

SCENARIO_FILES = [
    "carbon_baseline.yaml",
    "carbon_high_warming.yaml",
    "carbon_high_disturbance.yaml",
    "carbon_drying_fr_hes.yaml",
]


def _run(name: str):
    cfg = load_scenario(str(SCENARIOS_DIR / name))
    df, metrics = run_scenario(cfg, base_dir=SCENARIOS_DIR)
    return cfg, df, metrics


@pytest.mark.parametrize("scenario_file", SCENARIO_FILES)
def test_scenario_smoke(scenario_file: str):
    """Smoke test: run scenario and verify outputs are finite, valid and deterministic."""
    path = SCENARIOS_DIR / scenario_file
    assert path.exists(), f"Scenario file must exist: {path}"

    cfg, df, metrics = _run(scenario_file)

    required_cols = ["year", "calendar_year", "temp", "precip", "gpp", "npp", "ra", "rh",
                     "litter", "cveg", "csoil", "catm_accumulated", "f_t", "f_w", "total_storage"]
    for col in required_cols:
        assert col in df.columns, f"DataFrame must have column: {col}"

    assert len(df) == cfg.time.horizon_years + 1, "One row per year including year 0"
    assert df["calendar_year"].tolist() == cfg.years
    assert validate_timeseries_df(df)

    for metric in ["final_total_storage", "net_exchange", "mean_npp", "peak_gpp", "min_f_w"]:
        assert metric in metrics, f"Metrics must include: {metric}"
    for metric_name, metric_value in metrics.items():
        assert abs(metric_value) < float("inf"), f"Metric {metric_name} must be finite, got {metric_value}"
        assert metric_value == metric_value, f"Metric {metric_name} must not be NaN"

    assert (df["cveg"] >= 0).all(), "Vegetation stock must be non-negative"
    assert (df["csoil"] >= 0).all(), "Soil stock must be non-negative"
    assert (df["npp"] >= 0).all(), "NPP must be non-negative"

    _, df2, metrics2 = _run(scenario_file)
    assert metrics == metrics2, "Metrics must be deterministic"
    assert (df["total_storage"] == df2["total_storage"]).all()


def test_baseline_reproduces_observed_gpp():
    cfg, df, _ = _run("carbon_baseline.yaml")
    assert df["gpp"].iloc[0] == pytest.approx(cfg.site.gpp, rel=1e-9)


def test_warming_reduces_water_factor():
    _, _, base = _run("carbon_baseline.yaml")
    _, _, warm = _run("carbon_high_warming.yaml")
    assert warm["min_f_w"] < base["min_f_w"]


def test_disturbance_reduces_vegetation_carbon():
    cfg, _, disturbed = _run("carbon_high_disturbance.yaml")
    _, _, base = _run("carbon_baseline.yaml")

    params = cfg.resolve_params()
    assert params.h_human == 0.1, "Scenario override must win over the preset"
    assert params.epsilon_max == 0.9
    assert disturbed["final_cveg"] < base["final_cveg"]


def test_site_table_scenario_resolves_site():
    cfg = load_scenario(str(SCENARIOS_DIR / "carbon_drying_fr_hes.yaml"))
    site = cfg.resolve_site(SCENARIOS_DIR)
    assert site.site == "FR-Hes-F01"
    assert cfg.resolve_params().precip_change == -1.0


def test_missing_scenario_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_scenario(str(tmp_path / "missing.yaml"))


@pytest.mark.parametrize(
    "body",
    [
        # neither site nor table
        "name: bad\n",
        # unknown parameter override
        "name: bad\nsite: {site: S, mat: 10, map: 1000, aridity_index: 1, gpp: 1, cveg_initial: 1}\n"
        "parameters: {not_a_param: 1.0}\n",
        # table without id
        "name: bad\nsite_table: ../data/sample_sites.tsv\n",
    ],
)
def test_invalid_scenarios_rejected(tmp_path, body):
    path = tmp_path / "bad.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ValidationError):
        load_scenario(str(path))


def test_unknown_site_id(tmp_path):
    path = tmp_path / "s.yaml"
    path.write_text(
        f"name: s\nsite_table: {ROOT / 'data' / 'sample_sites.tsv'}\nsite_id: XX-none\n",
        encoding="utf-8",
    )
    cfg = load_scenario(str(path))
    with pytest.raises(ValueError):
        run_scenario(cfg)


def test_storage_change_includes_first_year(tmp_path):
    body = (SCENARIOS_DIR / "carbon_baseline.yaml").read_text(encoding="utf-8")
    path = tmp_path / "one_year.yaml"
    path.write_text(body.replace("horizon_years: 50", "horizon_years: 0"), encoding="utf-8")

    cfg = load_scenario(str(path))
    df, metrics = run_scenario(cfg)

    assert len(df) == 1
    # 8000 + 10000 before the update, 7348 + 10900 after it
    assert metrics["final_total_storage"] == pytest.approx(18248.0)
    assert metrics["storage_change"] == pytest.approx(248.0)


def test_run_scenario_uses_resolved_site_and_params(monkeypatch):
    cfg = load_scenario(str(SCENARIOS_DIR / "carbon_drying_fr_hes.yaml"))
    site = cfg.resolve_site(SCENARIOS_DIR)
    params = cfg.resolve_params()
    _, _, expected = _run("carbon_drying_fr_hes.yaml")

    def fail(*args, **kwargs):
        raise AssertionError("site table parsed again")

    monkeypatch.setattr("src.ingest.read_site_table", fail)
    df, metrics = run_scenario(cfg, site=site, params=params)

    assert len(df) == cfg.time.horizon_years + 1
    assert metrics == expected


def test_run_scenario_script_reads_site_table_once(tmp_path, monkeypatch):
    import src.ingest
    from scripts import run_scenario as script

    calls = []
    real = src.ingest.read_site_table

    def counting(source):
        calls.append(source)
        return real(source)

    monkeypatch.setattr("src.ingest.read_site_table", counting)
    monkeypatch.setattr(
        "sys.argv",
        ["run_scenario.py", "--scenario", str(SCENARIOS_DIR / "carbon_drying_fr_hes.yaml"),
         "--out-dir", str(tmp_path)],
    )

    assert script.main() == 0
    assert len(calls) == 1
    assert (tmp_path / "report.json").exists()
    assert (tmp_path / "sensitivity.md").exists()
