#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path
from datetime import datetime

from src.carbon.schema import load_scenario
from src.carbon.sensitivity import analyze_sensitivity, rank_by_impact
from src.carbon.simulate import run_scenario
from src.export import sensitivity_to_markdown, to_csv, to_markdown
from src.schemas.report import RunReport, SensitivityRow
from src.utils.logging_utils import set_level


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a site carbon budget scenario.")
    parser.add_argument("--scenario", required=True, help="Path to scenario YAML.")
    parser.add_argument("--out-dir", dest="out_dir", type=str, default=None,
                       help="Output directory (if not provided, uses runs/<scenario>/<timestamp>/)")
    parser.add_argument("--log-level", dest="log_level", type=str, default=None,
                       help="Override LOG_LEVEL for this run")
    args = parser.parse_args()
    if args.log_level:
        set_level(args.log_level)

    scenario_path = Path(args.scenario)
    cfg = load_scenario(args.scenario)
    site = cfg.resolve_site(scenario_path.parent)
    params = cfg.resolve_params()
    df, metrics = run_scenario(cfg, site=site, params=params)

    # Determine output directory
    if args.out_dir:
        out_dir = Path(args.out_dir)
    else:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        out_dir = Path(cfg.outputs.out_dir) / cfg.name / ts
    out_dir.mkdir(parents=True, exist_ok=True)

    artifacts = []
    if cfg.outputs.save_csv:
        artifacts.append(str(to_csv(df, out_dir / "timeseries.csv")))
    if cfg.outputs.save_markdown:
        md_path = out_dir / "timeseries.md"
        md_path.write_text(to_markdown(df) + "\n", encoding="utf-8")
        artifacts.append(str(md_path))
    with open(out_dir / "metrics.json", "w", encoding="utf-8") as f:
        json.dump(metrics, f, indent=2, sort_keys=True)
    artifacts.append(str(out_dir / "metrics.json"))

    sensitivity = []
    if cfg.outputs.sensitivity:
        results = rank_by_impact(
            analyze_sensitivity(site, params, cfg.time.horizon_years, cfg.constants)
        )
        sensitivity = [SensitivityRow(**asdict(r)) for r in results]
        tornado_path = out_dir / "sensitivity.md"
        tornado_path.write_text(sensitivity_to_markdown(results) + "\n", encoding="utf-8")
        artifacts.append(str(tornado_path))

    report = RunReport(
        scenario=cfg.name,
        scenario_path=str(scenario_path),
        site=site.site,
        horizon_years=cfg.time.horizon_years,
        parameters=params.model_dump(),
        metrics=metrics,
        sensitivity=sensitivity,
        artifacts=artifacts,
    )
    (out_dir / "report.json").write_text(report.model_dump_json(indent=2), encoding="utf-8")

    # Print summary
    print(f"Scenario: {cfg.name} (site {site.site})")
    print(f"Years: {cfg.years[0]}–{cfg.years[-1]} ({cfg.time.horizon_years + 1} steps)")
    for k in cfg.outputs.metrics:
        if k in metrics:
            print(f"{k}: {metrics[k]:.6f}")
    for row in sensitivity:
        if row.degenerate:
            print(f"{row.parameter}: undefined (zero baseline storage)")
        else:
            print(f"{row.parameter}: low {row.change_low:+.3f}% high {row.change_high:+.3f}%")
    print(f"Outputs: {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
