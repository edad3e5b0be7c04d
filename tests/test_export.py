"""
Tests for run and sensitivity exports.
"""

import pandas as pd
import pytest

from src.carbon.schema import ModelParams, SiteRecord
from src.carbon.sensitivity import SensitivityResult, analyze_sensitivity
from src.carbon.simulate import simulate
from src.export import STEP_COLUMNS, sensitivity_to_markdown, steps_to_frame, to_csv, to_markdown


@pytest.fixture
def steps():
    site = SiteRecord(site="S", mat=10.0, map=1000.0, aridity_index=1.0, hmi=0.2,
                      gpp=1200.0, cveg_initial=8000.0, soil_c_mean=1000.0)
    return simulate(site, ModelParams(), horizon_years=50)


def test_steps_to_frame(steps):
    df = steps_to_frame(steps, start_year=2000)

    assert list(df.columns[:2]) == ["year", "calendar_year"]
    for col in STEP_COLUMNS:
        assert col in df.columns
    assert df["calendar_year"].iloc[0] == 2000
    assert df["calendar_year"].iloc[-1] == 2050
    assert (df["total_storage"] == df["cveg"] + df["csoil"]).all()


def test_to_csv_has_bom_and_two_decimals(steps, tmp_path):
    path = to_csv(steps, tmp_path / "out" / "timeseries.csv")

    raw = path.read_bytes()
    assert raw.startswith(b"\xef\xbb\xbf")

    lines = raw.decode("utf-8-sig").splitlines()
    assert lines[0].split(",")[:3] == ["year", "temp", "precip"]
    first = dict(zip(lines[0].split(","), lines[1].split(",")))
    assert first["year"] == "0"
    assert first["gpp"] == "1200.00"

    df = pd.read_csv(path, encoding="utf-8-sig")
    assert len(df) == 51


def test_to_markdown_samples_every_interval(steps):
    md = to_markdown(steps, interval=5)
    lines = md.splitlines()

    # header + separator + years 0, 5, ..., 50
    assert len(lines) == 2 + 11
    assert lines[0].startswith("| Year")
    assert lines[-1].startswith("| 50")


def test_to_markdown_keeps_last_year(steps):
    lines = to_markdown(steps[:13], interval=5).splitlines()
    assert [line.split("|")[1].strip() for line in lines[2:]] == ["0", "5", "10", "12"]


def test_to_markdown_empty():
    assert to_markdown([]) == ""


def test_sensitivity_markdown(steps):
    site = SiteRecord(site="S", mat=10.0, map=1000.0, aridity_index=1.0, hmi=0.2,
                      gpp=1200.0, cveg_initial=8000.0, soil_c_mean=1000.0)
    md = sensitivity_to_markdown(analyze_sensitivity(site, ModelParams(), horizon_years=10))
    assert len(md.splitlines()) == 2 + 4
    assert "kSoil" in md


def test_sensitivity_markdown_degenerate():
    degenerate = SensitivityResult("q10", "Q10", 0.0, 0.0, 0.0, None, None, True)
    md = sensitivity_to_markdown([degenerate])
    assert "undefined" in md
