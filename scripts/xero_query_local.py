"""Run a Xero query scenario from the terminal.

What this does:
- Loads the scenario catalog (XERO_SCENARIOS_PATH or data/scenarios.json)
- Authenticates with your Custom Connection credentials
- Runs the chosen scenario, prints the result table and optionally writes CSV

Prereqs (env vars, or pass --client-id/--client-secret):
- XERO_CLIENT_ID
- XERO_CLIENT_SECRET

Safe output policy:
- Never print the client secret or access token.

Run:
  python scripts/xero_query_local.py --list
  python scripts/xero_query_local.py unreconciled-bank-transactions --param dateRange=90
  python scripts/xero_query_local.py invoices --param fromDate=2024-01-01 \
      --sort Total:desc --export .
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console


# Ensure `import src.*` works when running as `python scripts/...` from repo root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.backend.common.config.app_config import config
from src.backend.integrations.xero_auth import XeroCredentials
from src.backend.integrations.xero_errors import NoDataToExport, ScenarioNotFound
from src.backend.use_cases.results_table import build_results_table, discover_columns, summarize
from src.backend.use_cases.scenario_catalog import load_scenario_catalog
from src.backend.use_cases.scenario_runner import ScenarioRunner
from src.backend.use_cases.session_state import (
    SessionState,
    execute,
    export_results,
    select_scenario,
    set_parameter,
    toggle_sort,
)


def _parse_param(raw: str) -> tuple[str, str]:
    if "=" not in raw:
        raise argparse.ArgumentTypeError(f"expected name=value, got {raw!r}")
    name, value = raw.split("=", 1)
    return name.strip(), value.strip()


def _print_catalog(catalog) -> None:
    for scenario in catalog:
        print(f"{scenario.id}: {scenario.name}")
        if scenario.description:
            print(f"    {scenario.description}")
        for spec in scenario.parameters:
            if spec.type == "hidden":
                continue
            choices = ", ".join(o.value for o in spec.options)
            extra = f" [{choices}]" if choices else ""
            print(f"    --param {spec.name}=...  {spec.display_label} ({spec.type}){extra}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a Xero query scenario")
    parser.add_argument("scenario", nargs="?", help="scenario id (see --list)")
    parser.add_argument("--list", action="store_true", help="list scenarios and exit")
    parser.add_argument("--param", action="append", default=[], type=_parse_param)
    parser.add_argument("--sort", help="column to sort by, optionally COLUMN:desc")
    parser.add_argument("--export", help="directory to write the CSV export into")
    parser.add_argument("--client-id", default=None)
    parser.add_argument("--client-secret", default=None)
    args = parser.parse_args()

    load_dotenv(dotenv_path=".env", override=False)

    catalog = load_scenario_catalog(config.XERO_SCENARIOS_PATH)
    if args.list or not args.scenario:
        _print_catalog(catalog)
        return 0

    credentials = XeroCredentials(
        client_id=args.client_id or os.environ.get("XERO_CLIENT_ID", ""),
        client_secret=args.client_secret or os.environ.get("XERO_CLIENT_SECRET", ""),
    )

    try:
        scenario = catalog.get(args.scenario)
    except ScenarioNotFound as e:
        print(f"ERROR: {e.message}")
        return 1

    state = select_scenario(SessionState(), scenario)
    for name, value in args.param:
        state = set_parameter(state, name, value)

    print(f"Running {state.scenario.name}...")
    state = execute(state, ScenarioRunner.from_env(), credentials)
    if state.error:
        print(f"ERROR: {state.error}")
        return 1

    if args.sort:
        column, _, direction = args.sort.partition(":")
        state = toggle_sort(state, column)
        if direction.lower() == "desc":
            state = toggle_sort(state, column)

    rows = state.visible_rows
    print(summarize(len(rows)))
    if rows:
        columns = discover_columns(rows, state.scenario.display_fields)
        Console().print(build_results_table(rows, columns, title=state.scenario.name))

    if args.export:
        try:
            filename, content = export_results(state)
        except NoDataToExport as e:
            print(e.message)
            return 0
        out_path = Path(args.export) / filename
        out_path.write_text(content, encoding="utf-8", newline="")
        print(f"\nCSV written to: {out_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
