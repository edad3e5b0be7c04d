#!/usr/bin/env python3
from __future__ import annotations

import json
from pathlib import Path
from datetime import datetime
from typing import List

import pandas as pd

from src.carbon.schema import load_scenario
from src.carbon.simulate import run_scenario
from src.export import to_csv
from src.utils.logging_utils import get_logger

logger = get_logger(__name__)


def find_scenarios(scenarios_dir: Path) -> List[Path]:
    """Find all YAML scenario files in the scenarios directory."""
    if not scenarios_dir.exists():
        raise FileNotFoundError(f"Scenarios directory not found: {scenarios_dir}")
    return sorted(scenarios_dir.glob("*.yaml"))


def run_suite(scenarios_dir: Path = Path("scenarios"), output_base: Path = Path("runs")) -> pd.DataFrame:
    """
    Run all scenarios in the scenarios directory and return summary DataFrame.

    Args:
        scenarios_dir: Directory containing scenario YAML files
        output_base: Base directory for outputs

    Returns:
        DataFrame with one row per scenario and all metrics as columns
    """
    scenario_files = find_scenarios(scenarios_dir)

    if not scenario_files:
        raise ValueError(f"No scenario files found in {scenarios_dir}")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    suite_dir = output_base / f"suite_{timestamp}"
    suite_dir.mkdir(parents=True, exist_ok=True)

    summary_rows = []

    for scenario_path in scenario_files:
        try:
            cfg = load_scenario(str(scenario_path))
            df, metrics = run_scenario(cfg, base_dir=scenario_path.parent)

            scenario_dir = suite_dir / cfg.name
            scenario_dir.mkdir(parents=True, exist_ok=True)
            to_csv(df, scenario_dir / "timeseries.csv")
            with open(scenario_dir / "metrics.json", "w", encoding="utf-8") as f:
                json.dump(metrics, f, indent=2, sort_keys=True)

            summary_rows.append({
                "scenario": cfg.name,
                "scenario_file": scenario_path.name,
                **metrics
            })

        except (OSError, ValueError) as e:
            # pydantic's ValidationError is a ValueError; record it and keep going
            logger.error(f"Error running {scenario_path.name}: {e}")
            summary_rows.append({
                "scenario": scenario_path.stem,
                "scenario_file": scenario_path.name,
                "error": str(e)
            })

    summary_df = pd.DataFrame(summary_rows)

    summary_path = suite_dir / "summary.csv"
    summary_df.to_csv(summary_path, index=False)

    logger.info(f"Suite run complete: {len(summary_df)} scenarios")
    logger.info(f"Summary: {summary_path}")

    return summary_df


def main() -> int:
    """Main entrypoint for batch scenario runner."""
    import argparse

    parser = argparse.ArgumentParser(description="Run all scenarios in scenarios/ directory")
    parser.add_argument("--scenarios-dir", type=str, default="scenarios",
                       help="Directory containing scenario YAML files")
    parser.add_argument("--output-dir", type=str, default="runs",
                       help="Base output directory")
    args = parser.parse_args()

    summary_df = run_suite(Path(args.scenarios_dir), Path(args.output_dir))

    print("\n=== Summary ===")
    print(summary_df.to_string(index=False))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
