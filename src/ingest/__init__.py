"""Site table ingestion: column heuristics and default substitution."""

from .mapping import SITE_ALIASES, infer_site_mapping
from .sites import read_site_frame, read_site_table

__all__ = [
    "SITE_ALIASES",
    "infer_site_mapping",
    "read_site_frame",
    "read_site_table",
]
