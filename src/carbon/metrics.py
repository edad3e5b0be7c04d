from __future__ import annotations

from typing import Dict, Optional

import pandas as pd


def compute_metrics(df: pd.DataFrame, initial_total: Optional[float] = None) -> Dict[str, float]:
    """
    Scalar summary of one run.

    ``storage_change`` is measured against ``initial_total`` (the year-0 stock
    before any update). Without it the first emitted row is used, which
    already includes the first year's change.
    """
    # Expect columns: year, gpp, npp, cveg, csoil, catm_accumulated, f_w
    first = df.iloc[0]
    last = df.iloc[-1]
    final_total = float(last["cveg"] + last["csoil"])
    if initial_total is None:
        initial_total = float(first["cveg"] + first["csoil"])

    return {
        "final_total_storage": final_total,
        "final_cveg": float(last["cveg"]),
        "final_csoil": float(last["csoil"]),
        "storage_change": final_total - initial_total,
        "net_exchange": float(last["catm_accumulated"]),
        "mean_npp": float(df["npp"].mean()),
        "mean_gpp": float(df["gpp"].mean()),
        "peak_gpp": float(df["gpp"].max()),
        "min_f_w": float(df["f_w"].min()),
    }
