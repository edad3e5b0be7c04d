"""
Best-effort reader for delimited site tables.

Detects the separator and header row, maps columns with
``infer_site_mapping`` and fills missing values with fixed defaults so the
engine always receives complete SiteRecords.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from src.carbon.schema import SiteRecord
from src.utils.logging_utils import get_logger

from .mapping import HEADER_MIN_HITS, header_keyword_hits, infer_site_mapping

logger = get_logger(__name__)

SEPARATORS = ["\t", ",", ";"]
HEADER_SEARCH_LINES = 20

# Substituted when a column is missing or a cell does not parse
NUMERIC_DEFAULTS: Dict[str, float] = {
    "lon": 0.0,
    "lat": 0.0,
    "mat": 15.0,
    "map": 1000.0,
    "soc": 50.0,
    "aridity_index": 1.0,
    "hmi": 0.0,
    "elevation": 0.0,
    "soil_c_mean": 0.0,
}
DEFAULT_HABITAT = "F"
DEFAULT_NPP = 500.0
GPP_PER_NPP = 2.2
CVEG_PER_NPP = 10.0


def detect_layout(lines: List[str]) -> Tuple[int, str]:
    """Return (header line index, separator); falls back to line 0 and tab."""
    for i, line in enumerate(lines[:HEADER_SEARCH_LINES]):
        if header_keyword_hits(line) >= HEADER_MIN_HITS:
            best = max(SEPARATORS, key=lambda sep: len(line.split(sep)))
            return i, best
    return 0, "\t"


def _looks_like_table(text: str) -> bool:
    if "\n" in text.strip():
        return True
    # a lone header line still reads as table text
    return any(sep in text for sep in SEPARATORS) and header_keyword_hits(text) >= HEADER_MIN_HITS


def _read_text(source: Union[str, Path]) -> str:
    if isinstance(source, str) and _looks_like_table(source):
        return source
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Site table not found: {path}")
    logger.info(f"Loading site table from {path}")
    return path.read_text(encoding="utf-8-sig")


def read_site_frame(source: Union[str, Path]) -> pd.DataFrame:
    """
    Raw table as strings, starting at the row after the detected header.

    Fields are taken by position: cells beyond the header width are dropped
    and short rows are padded with NaN. The index is the row's line number
    among the non-blank lines of the source.
    """
    text = _read_text(source)
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    if not lines:
        return pd.DataFrame()

    header_index, sep = detect_layout(lines)
    body = lines[header_index:]
    # name every position so ragged rows never turn a column into the index
    width = max(len(line.split(sep)) for line in body)
    raw = pd.read_csv(
        io.StringIO("\n".join(body)),
        sep=sep,
        header=None,
        names=list(range(width)),
        index_col=False,
        dtype=str,
        keep_default_na=False,
        skipinitialspace=True,
    )

    header = raw.iloc[0].fillna("").astype(str).str.strip()
    n_cols = max((i + 1 for i, name in enumerate(header) if name), default=0)
    df = raw.iloc[1:, :n_cols].copy()
    df.columns = list(header.iloc[:n_cols])
    # first occurrence of a repeated column name wins
    df = df.loc[:, ~df.columns.duplicated()]
    df.index = range(header_index + 1, header_index + 1 + len(df))
    return df


def _numeric(df: pd.DataFrame, column: Optional[str], default: float) -> pd.Series:
    if column is None:
        return pd.Series(default, index=df.index, dtype=float)
    values = pd.to_numeric(df[column].fillna("").astype(str).str.strip(), errors="coerce")
    return values.where(np.isfinite(values), default).astype(float)


def _text(df: pd.DataFrame, column: Optional[str]) -> pd.Series:
    if column is None:
        return pd.Series("", index=df.index, dtype=str)
    return df[column].fillna("").astype(str).str.strip()


def read_site_table(source: Union[str, Path]) -> List[SiteRecord]:
    """
    Parse a site table into SiteRecords.

    Args:
        source: Path to a tab/comma/semicolon separated file, or the raw text

    Returns:
        One record per usable row. Rows whose mapped NPP is missing or
        non-positive are skipped; when the table has no NPP column every row
        gets the default NPP.
    """
    df = read_site_frame(source)
    if df.empty:
        return []

    result = infer_site_mapping(list(df.columns))
    mapping = result["mapping"]
    if result["missing"]:
        logger.debug(f"Site table columns without a match: {result['missing']}")

    # rows with fewer than two filled cells are blank separators
    filled = (df.apply(lambda col: col.fillna("").astype(str).str.strip() != "")).sum(axis=1)

    npp_col = mapping.get("npp")
    npp_raw = _numeric(df, npp_col, 0.0)
    npp = npp_raw.where(npp_raw > 0, DEFAULT_NPP)
    gpp = _numeric(df, mapping.get("gpp"), np.nan)
    gpp = gpp.where(gpp.notna(), npp * GPP_PER_NPP)
    cveg = _numeric(df, mapping.get("cveg_initial"), np.nan)
    cveg = cveg.where(cveg.notna(), npp * CVEG_PER_NPP)

    numeric = {name: _numeric(df, mapping.get(name), default) for name, default in NUMERIC_DEFAULTS.items()}
    sites = _text(df, mapping.get("site"))
    habitats = _text(df, mapping.get("habitat"))

    records: List[SiteRecord] = []
    for idx in df.index:
        if filled[idx] < 2:
            continue
        if npp_col is not None and npp_raw[idx] <= 0:
            continue

        soil_c_mean = numeric["soil_c_mean"][idx]
        soc = numeric["soc"][idx]
        if soil_c_mean == 0 and soc > 0:
            soil_c_mean = soc

        records.append(
            SiteRecord(
                site=sites[idx] or f"Site-{idx}",
                lon=numeric["lon"][idx],
                lat=numeric["lat"][idx],
                habitat=habitats[idx] or DEFAULT_HABITAT,
                mat=numeric["mat"][idx],
                map=numeric["map"][idx],
                aridity_index=numeric["aridity_index"][idx],
                hmi=numeric["hmi"][idx],
                npp=float(npp[idx]),
                gpp=float(gpp[idx]),
                cveg_initial=float(cveg[idx]),
                soil_c_mean=soil_c_mean,
                soc=soc,
                elevation=numeric["elevation"][idx],
            )
        )

    skipped = len(df) - len(records)
    if skipped:
        logger.warning(f"Skipped {skipped} site rows (blank or non-positive NPP)")
    logger.info(f"Parsed {len(records)} site records")
    return records
