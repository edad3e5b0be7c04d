"""Heuristic column mapping from messy site tables to SiteRecord fields."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

# Candidate source columns per site field, in priority order (case-insensitive)
SITE_ALIASES: Dict[str, List[str]] = {
    "site": ["Site", "site_id", "SiteID"],
    "lon": ["Lon", "Longitude"],
    "lat": ["Lat", "Latitude"],
    "habitat": ["Habitat"],
    "mat": ["MAT"],
    "map": ["MAP"],
    "soc": ["SOC"],
    "npp": ["NPP_total_withLitter", "MOD17_NPP", "NPP_mean", "NPP"],
    "gpp": ["MOD17_GPP", "GPP"],
    "aridity_index": ["AridityIndex", "AI"],
    "hmi": ["HMI", "gHM"],
    "elevation": ["Elevation"],
    "soil_c_mean": ["SoilC_mean"],
    "cveg_initial": ["Cveg_initial", "Cveg"],
}

# Words that mark a header row when at least HEADER_MIN_HITS of them appear
HEADER_KEYWORDS = ["site", "lon", "lat", "habitat", "npp", "mat", "map"]
HEADER_MIN_HITS = 3


def infer_site_mapping(df_cols: Sequence[str]) -> Dict[str, Any]:
    """
    Map SiteRecord fields to source columns by exact, case-insensitive alias match.

    The first alias present wins, so e.g. ``NPP_total_withLitter`` is preferred
    over ``MOD17_NPP`` when a table carries both.

    Returns:
        Dict with ``mapping`` (field -> source column), ``rationale`` and
        ``missing`` (fields with no matching column).
    """
    source_lower = {}
    for col in df_cols:
        source_lower.setdefault(str(col).strip().lower(), col)

    mapping: Dict[str, str] = {}
    rationale: List[str] = []
    missing: List[str] = []

    for field, aliases in SITE_ALIASES.items():
        match = next((source_lower[a.lower()] for a in aliases if a.lower() in source_lower), None)
        if match is None:
            missing.append(field)
            rationale.append(f"{field} <- None (default applies)")
        else:
            mapping[field] = match
            rationale.append(f"{field} <- {match}")

    return {
        "mapping": mapping,
        "rationale": "; ".join(rationale),
        "missing": missing,
    }


def header_keyword_hits(line: str) -> int:
    lowered = line.lower()
    return sum(1 for key in HEADER_KEYWORDS if key in lowered)
