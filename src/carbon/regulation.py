"""Dimensionless regulatory factors for production and decomposition."""

from __future__ import annotations


def _clip(x: float, lo: float, hi: float) -> float:
    return float(min(max(x, lo), hi))


def temperature_factor(temp: float, q10: float, t_ref: float = 10.0, floor: float = 1e-9) -> float:
    """
    Q10 response, 1.0 at ``t_ref``. Shared by photosynthesis and respiration.

    The base is floored at ``floor`` so a zero or negative Q10 stays real and
    finite below ``t_ref``.
    """
    return max(q10, floor) ** ((temp - t_ref) / 10.0)


def water_factor(aridity: float, ai_opt: float = 1.5, floor: float = 0.1) -> float:
    """Photosynthesis water limitation, linear in aridity up to ``ai_opt``."""
    return _clip(aridity / ai_opt, floor, 1.0)


def soil_water_factor(aridity: float, floor: float = 0.05) -> float:
    # decomposition tolerates drier conditions than photosynthesis, hence the lower floor
    return _clip(aridity, floor, 1.0)


def heat_penalty(temp_anomaly: float, base: float = 1.05) -> float:
    """Supralinear Ra multiplier for warming above the site baseline."""
    return base ** temp_anomaly
