#!/usr/bin/env python3
"""Tornado sensitivity analysis for one site from a scenario or a site table."""
from __future__ import annotations

import argparse
from pathlib import Path

from src.carbon.presets import get_preset
from src.carbon.schema import DEFAULT_CONSTANTS, load_scenario
from src.carbon.sensitivity import analyze_sensitivity, rank_by_impact, sensitivity_frame
from src.config import Config
from src.export import sensitivity_to_markdown
from src.ingest import read_site_table


def main() -> int:
    parser = argparse.ArgumentParser(description="One-at-a-time sensitivity of final carbon storage.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--scenario", help="Scenario YAML (site, parameters, horizon, constants)")
    source.add_argument("--site-table", dest="site_table", help="Delimited site table")
    parser.add_argument("--site-id", dest="site_id", default=None, help="Site within --site-table (default: first row)")
    parser.add_argument("--preset", default="CLASSIC", help="Parameter preset when using --site-table")
    parser.add_argument("--horizon", type=int, default=Config.DEFAULT_HORIZON_YEARS, help="Horizon in years")
    parser.add_argument("--out", default=None, help="Optional CSV path for the ranked table")
    args = parser.parse_args()

    if args.scenario:
        cfg = load_scenario(args.scenario)
        site = cfg.resolve_site(Path(args.scenario).parent)
        params = cfg.resolve_params()
        horizon = cfg.time.horizon_years
        constants = cfg.constants
    else:
        records = read_site_table(Path(args.site_table))
        if not records:
            raise ValueError(f"No usable sites in {args.site_table}")
        if args.site_id:
            matches = [r for r in records if r.site == args.site_id]
            if not matches:
                raise ValueError(f"Site '{args.site_id}' not found in {args.site_table}")
            site = matches[0]
        else:
            site = records[0]
        params = get_preset(args.preset)
        horizon = args.horizon
        constants = DEFAULT_CONSTANTS

    results = rank_by_impact(analyze_sensitivity(site, params, horizon, constants))

    print(f"Site: {site.site}  horizon: {horizon}y")
    print(sensitivity_to_markdown(results))

    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        sensitivity_frame(results).to_csv(out, index=False)
        print(f"Outputs: {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
