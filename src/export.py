"""
Tabular export of simulation runs and sensitivity tables.

Column names are the SimulationStep field names so downstream charts and
spreadsheets can bind to them directly.
"""

from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd
from tabulate import tabulate

from src.carbon.model import SimulationStep
from src.carbon.sensitivity import SensitivityResult, rank_by_impact
from src.utils.logging_utils import get_logger

logger = get_logger(__name__)

STEP_COLUMNS = [
    "year",
    "temp",
    "precip",
    "aridity",
    "gpp",
    "npp",
    "ra",
    "rh",
    "litter",
    "human_extraction",
    "cveg",
    "csoil",
    "catm_accumulated",
    "f_t",
    "f_w",
]

MARKDOWN_COLUMNS = {
    "year": "Year",
    "temp": "Temp (°C)",
    "gpp": "GPP",
    "npp": "NPP",
    "rh": "Rh",
    "cveg": "Cveg",
    "csoil": "Csoil",
    "catm_accumulated": "Net exchange",
}


def steps_to_frame(steps: List[SimulationStep], start_year: Optional[int] = None) -> pd.DataFrame:
    """
    One row per simulated year.

    Adds ``total_storage`` and, when ``start_year`` is given, a
    ``calendar_year`` column next to the year index.
    """
    df = pd.DataFrame([asdict(s) for s in steps], columns=STEP_COLUMNS)
    df["total_storage"] = df["cveg"] + df["csoil"]
    if start_year is not None:
        df.insert(1, "calendar_year", df["year"] + start_year)
    return df


def to_csv(
    steps: Union[List[SimulationStep], pd.DataFrame],
    path: Union[str, Path],
    decimals: int = 2,
) -> Path:
    """Write a run as CSV with a UTF-8 BOM so spreadsheet tools detect the encoding."""
    df = steps if isinstance(steps, pd.DataFrame) else steps_to_frame(steps)
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False, float_format=f"%.{decimals}f", encoding="utf-8-sig")
    logger.info(f"Wrote {len(df)} rows to {out}")
    return out


def to_markdown(steps: Union[List[SimulationStep], pd.DataFrame], interval: int = 5) -> str:
    """Markdown table sampled every ``interval`` years, always keeping the last year."""
    df = steps if isinstance(steps, pd.DataFrame) else steps_to_frame(steps)
    if df.empty:
        return ""

    positions = [i for i in range(len(df)) if i % interval == 0 or i == len(df) - 1]
    sampled = df.iloc[positions][list(MARKDOWN_COLUMNS)]
    rows = [
        [str(int(r["year"])), f"{r['temp']:.1f}"] + [f"{r[c]:.0f}" for c in list(MARKDOWN_COLUMNS)[2:]]
        for _, r in sampled.iterrows()
    ]
    return tabulate(rows, headers=list(MARKDOWN_COLUMNS.values()), tablefmt="pipe", disable_numparse=True)


def _fmt_change(value: Optional[float]) -> str:
    return "undefined" if value is None else f"{value:+.2f}%"


def sensitivity_to_markdown(results: List[SensitivityResult]) -> str:
    """Ranked tornado table; degenerate rows show 'undefined' changes."""
    rows = [
        [
            r.label,
            f"{r.baseline:.1f}",
            f"{r.low:.1f}",
            f"{r.high:.1f}",
            _fmt_change(r.change_low),
            _fmt_change(r.change_high),
            "undefined" if r.impact is None else f"{r.impact:.2f}",
        ]
        for r in rank_by_impact(results)
    ]
    headers = ["Parameter", "Baseline", "Low (-)", "High (+)", "Change low", "Change high", "Impact (pp)"]
    return tabulate(rows, headers=headers, tablefmt="pipe", disable_numparse=True)
