"""Named parameter presets for common forcing scenarios."""

from __future__ import annotations

from typing import Dict

from .schema import DEFAULT_PARAMS, ModelParams

PARAMETER_PRESETS: Dict[str, Dict[str, object]] = {
    "CLASSIC": {
        "label": "Classic literature values",
        "params": DEFAULT_PARAMS,
    },
    "HIGH_WARMING": {
        # ~4 degC over 50 years with a drying trend
        "label": "High-emission warming (RCP 8.5-like)",
        "params": DEFAULT_PARAMS.model_copy(
            update={"warming_rate": 0.08, "q10": 2.2, "precip_change": -0.5}
        ),
    },
    "DRYING": {
        "label": "Drying trend",
        "params": DEFAULT_PARAMS.model_copy(update={"precip_change": -1.0}),
    },
    "HIGH_DISTURBANCE": {
        "label": "Strong human disturbance (logging/degradation)",
        "params": DEFAULT_PARAMS.model_copy(update={"h_human": 0.08, "epsilon_max": 0.9}),
    },
}


def get_preset(name: str) -> ModelParams:
    """Look up a preset by name (case-insensitive)."""
    key = name.upper()
    if key not in PARAMETER_PRESETS:
        raise ValueError(f"Unknown preset: {name}. Available: {sorted(PARAMETER_PRESETS)}")
    return PARAMETER_PRESETS[key]["params"]  # type: ignore[return-value]
