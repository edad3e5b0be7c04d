# scripts/plot_run.py

import argparse
from pathlib import Path
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


def plot_stocks(df: pd.DataFrame, title: str, out_path: Path) -> Path:
    fig, (ax1, ax3) = plt.subplots(2, 1, figsize=(8, 7), sharex=True)

    ax1.plot(df["year"], df["cveg"], color="forestgreen", linewidth=2, label="Cveg")
    ax1.plot(df["year"], df["csoil"], color="saddlebrown", linewidth=2, label="Csoil")
    ax1.set_ylabel("Carbon stock")
    ax1.legend(loc="upper left")

    ax2 = ax1.twinx()
    ax2.plot(df["year"], df["catm_accumulated"], color="slategray", linestyle="--", linewidth=1.5)
    ax2.set_ylabel("Cumulative net exchange", color="slategray")
    ax2.tick_params(axis="y", labelcolor="slategray")

    for col, color in [("gpp", "navy"), ("npp", "teal"), ("ra", "orange"), ("rh", "crimson")]:
        ax3.plot(df["year"], df[col], color=color, linewidth=1.5, label=col.upper())
    ax3.set_ylabel("Flux per year")
    ax3.set_xlabel("Year")
    ax3.legend(loc="upper left", ncol=4)

    ax1.set_title(title)
    fig.tight_layout()

    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=200)
    plt.close(fig)
    return out_path


def plot_tornado(sens: pd.DataFrame, title: str, out_path: Path) -> Path:
    # largest swing on top; undefined rows cannot be drawn
    sens = sens[~sens["degenerate"]].copy()
    sens["impact"] = (sens["change_high"] - sens["change_low"]).abs()
    sens = sens.sort_values("impact")

    fig, ax = plt.subplots(figsize=(8, 0.6 * max(len(sens), 1) + 1.5))
    ax.barh(sens["label"], sens["change_low"], color="steelblue", label="-")
    ax.barh(sens["label"], sens["change_high"], color="indianred", label="+")
    ax.axvline(0, color="black", linewidth=0.8)
    ax.set_xlabel("Change in final total storage (%)")
    ax.set_title(title)
    ax.legend(loc="lower right")
    fig.tight_layout()

    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=200)
    plt.close(fig)
    return out_path


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--run",
        required=True,
        help="Path to run directory containing timeseries.csv"
    )
    parser.add_argument(
        "--sensitivity",
        default=None,
        help="Optional sensitivity CSV (from run_sensitivity.py --out) to draw as a tornado"
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Output PNG path (default: outputs/<run_name>.png)"
    )
    args = parser.parse_args()

    run_dir = Path(args.run)
    ts_path = run_dir / "timeseries.csv"

    if not ts_path.exists():
        raise FileNotFoundError(f"Missing timeseries.csv in {run_dir}")

    df = pd.read_csv(ts_path, encoding="utf-8-sig")

    required = {"year", "cveg", "csoil", "catm_accumulated", "gpp", "npp", "ra", "rh"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns: {missing}")

    title = run_dir.name.replace("_", " ")
    out_path = (
        Path(args.out)
        if args.out
        else Path("outputs") / f"{run_dir.name}.png"
    )
    print(f"Saved figure → {plot_stocks(df, title, out_path)}")

    if args.sensitivity:
        sens = pd.read_csv(args.sensitivity)
        tornado_path = out_path.with_name(out_path.stem + "_tornado.png")
        print(f"Saved figure → {plot_tornado(sens, title, tornado_path)}")


if __name__ == "__main__":
    main()
