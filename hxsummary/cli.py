"""
Command Line Interface (CLI)
============================

Run it like:

    python -m hxsummary.cli --valid attendees.csv --cancelled cancelled.csv

One-shot mode (write a file and exit):

    hxsummary --valid a.csv --cancelled c.csv --view gateway --breakdown ticket_type --export-csv out.csv

Without an output option an interactive REPL starts, where you can switch
views, pick a breakdown, expand/collapse rows and export.

The CLI never modifies the input files. It loads them once and works on the
in-memory report.
"""

from __future__ import annotations
import argparse, shlex, sys
from typing import List, Optional

from .engine import generate_report
from .export import export_filename, write_csv, write_json
from .loader import load_exports
from .logger import log, set_verbose
from .models import ReportData, parse_dimension
from .table import ViewState, render_table

HELP = """
Commands:
  help
  show                              print the table for the current view

  view <dimension>                  (example: view gateway)
  breakdown <dimension>|none        (example: breakdown sales_channel)
  expand <key>|all                  (example: expand "General Admission")
  collapse <key>|all

  export csv ["<path.csv>"]         default name: <event>_<date>.csv
  export json "<path.json>"
  report "<path.docx>"
  quit

Dimensions: ticket_type, gateway, sales_channel
"""


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="hxsummary", description="Summarise an event's attendee exports.")
    ap.add_argument("--valid", required=True, help="Path to the valid attendees export (.csv or .xlsx)")
    ap.add_argument("--cancelled", help="Path to the cancelled attendees export (.csv or .xlsx)")
    ap.add_argument("--view", default="ticket_type", type=parse_dimension,
                    help="Primary dimension: ticket_type | gateway | sales_channel")
    ap.add_argument("--breakdown", type=parse_dimension, help="Breakdown dimension")
    ap.add_argument("--export-csv", metavar="PATH", help="Write the CSV export and exit")
    ap.add_argument("--export-json", metavar="PATH", help="Write the JSON export and exit")
    ap.add_argument("--report", metavar="PATH", help="Write a DOCX report and exit")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI.

    1) Load both exports
    2) Aggregate
    3) Either write the requested outputs, or start the REPL
    """
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)

    if args.breakdown is not None and args.breakdown == args.view:
        log.error("--breakdown must differ from --view")
        return 1

    try:
        valid, cancelled = load_exports(args.valid, args.cancelled)
    except (OSError, KeyError, ValueError) as e:
        log.error("Could not load exports: %s", e)
        return 1

    report = generate_report(valid, cancelled)
    state = ViewState(primary=args.view, breakdown=args.breakdown)
    sources = [p for p in (args.valid, args.cancelled) if p]

    if args.export_csv or args.export_json or args.report:
        try:
            if args.export_csv:
                write_csv(report, args.export_csv, state.primary, state.breakdown)
            if args.export_json:
                write_json(report, args.export_json)
            if args.report:
                _write_report(report, state, args.report, sources)
        except (OSError, ImportError, ValueError) as e:
            log.error("Export failed: %s", e)
            return 1
        return 0

    print(f"Loaded {len(valid)} valid and {len(cancelled)} cancelled attendee(s) "
          f"for '{report.event_name}'. Type 'help' for commands.")
    print(render_table(report, state))
    while True:
        try:
            line = input("hx> ")
        except EOFError:
            break
        line = line.strip()
        if not line:
            continue
        if line.lower() in ("quit", "exit"):
            break
        try:
            handle(report, state, line, sources)
        except Exception as e:
            print(f"Error: {e}")
    return 0


def handle(report: ReportData, state: ViewState, line: str, sources: Optional[List[str]] = None) -> None:
    """Handle one REPL command line."""
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP)
        return

    if cmd == "show":
        print(render_table(report, state))
        return

    if cmd == "view":
        if len(parts) < 2:
            raise ValueError("Usage: view <dimension>")
        state.set_primary(parse_dimension(parts[1]))
        print(render_table(report, state))
        return

    if cmd == "breakdown":
        arg = parts[1] if len(parts) >= 2 else "none"
        if arg.lower() == "none":
            state.breakdown = None
        else:
            dim = parse_dimension(arg)
            if dim == state.primary:
                raise ValueError("breakdown must differ from the current view")
            state.breakdown = dim
            state.expand_all(report)
        print(render_table(report, state))
        return

    if cmd in ("expand", "collapse"):
        if len(parts) < 2:
            raise ValueError(f"Usage: {cmd} <key>|all")
        key = parts[1]
        if key.lower() == "all":
            if cmd == "expand": state.expand_all(report)
            else: state.collapse_all()
        else:
            known = {r.key for r in report.rows_for(state.primary)}
            if key not in known:
                raise ValueError(f"No row {key!r} in this view")
            if cmd == "expand": state.expand(key)
            else: state.collapse(key)
        print(render_table(report, state))
        return

    if cmd == "export":
        # export csv ["<path>"] | export json "<path>"
        if len(parts) < 2:
            print('Usage: export csv ["out.csv"]  OR  export json "out.json"')
            return
        fmt = parts[1].lower()
        if fmt == "csv":
            path = parts[2] if len(parts) >= 3 else export_filename(report.event_name)
            write_csv(report, path, state.primary, state.breakdown)
            print(f"Exported CSV to {path}")
            return
        if fmt == "json":
            if len(parts) < 3:
                print('Usage: export json "out.json"')
                return
            write_json(report, parts[2])
            print(f"Exported JSON to {parts[2]}")
            return
        print("Unknown export format. Use: csv or json")
        return

    if cmd == "report":
        if len(parts) < 2:
            raise ValueError('Usage: report "<path.docx>"')
        _write_report(report, state, parts[1], sources)
        print(f"Report written to {parts[1]}")
        return

    print("Unknown command. Type 'help'.")


def _write_report(report: ReportData, state: ViewState, path: str, sources: Optional[List[str]]) -> None:
    from .report import generate_docx_report, ReportConfig
    cfg = ReportConfig(source_files=sources)
    generate_docx_report(report, path, state.primary, state.breakdown, config=cfg)


if __name__ == "__main__":
    sys.exit(main())
