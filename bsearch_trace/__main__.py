from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from bsearch_trace.engine import initialize, run_to_completion
from bsearch_trace.event_sink import InMemoryEventSink
from bsearch_trace.reporting import render_log, render_state
from bsearch_trace.stream_io import (
    InputFormatError,
    SessionConfig,
    dump_event_stream,
    load_session_config,
)

logger = logging.getLogger("bsearch_trace")


def _setup_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _cmd_run(args: argparse.Namespace) -> int:
    if args.steps is not None and args.steps < 0:
        print("ERROR: --steps must be >= 0.", file=sys.stderr)
        return 2

    if args.session:
        try:
            config = load_session_config(Path(str(args.session)))
        except InputFormatError as e:
            print(f"ERROR: invalid session file: {e}", file=sys.stderr)
            return 2
    else:
        config = SessionConfig()

    key_input = str(args.key) if args.key is not None else config.key_input

    sink = InMemoryEventSink()
    state = initialize(key_input, config.array, base_address=config.base_address, event_sink=sink)
    history = run_to_completion(state, event_sink=sink, max_steps=args.steps)
    final = history[-1] if history else state

    outcome = sink.outcome()
    if outcome is None:
        logger.info("run stopped before termination (low=%s high=%s)", final.low, final.high)
    else:
        logger.info("%s after probing %s", outcome.type.value, sink.probed_indices())

    out: list[str] = ["Execution Log"]
    out.extend(f"  {line}" for line in render_log(final))
    sys.stdout.write("\n".join(out) + "\n")

    if not args.no_state:
        sys.stdout.write("\n" + render_state(final))

    if args.events_out:
        events_path = Path(str(args.events_out))
        events_path.parent.mkdir(parents=True, exist_ok=True)
        events_path.write_text(json.dumps(dump_event_stream(sink.events), indent=2), encoding="utf-8")
        logger.info("wrote %d event(s) to %s", len(sink.events), events_path)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="bsearch_trace",
        description=(
            "Binary Search Register Trace: replays a binary search on a simple\n"
            "register machine and prints the instruction trace."
        ),
    )
    parser.add_argument("--verbose", "-v", action="count", default=0, help="Increase log verbosity (-v, -vv).")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log errors.")

    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Initialize with a key and step until the search terminates.")
    run.add_argument("--key", type=str, default=None, help="Search key, hex (0x..) or decimal.")
    run.add_argument("--session", type=str, help="Session JSON overriding array/base_address/key.")
    run.add_argument(
        "--steps",
        type=int,
        default=None,
        help="Optional: stop after this many steps even if the search has not terminated.",
    )
    run.add_argument("--events-out", type=str, help="Write the structured event stream as JSON.")
    run.add_argument("--no-state", action="store_true", help="Print only the execution log.")
    run.set_defaults(func=_cmd_run)

    return parser


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(int(args.verbose), bool(args.quiet))
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
