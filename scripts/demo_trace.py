from __future__ import annotations

from bsearch_trace.engine import INITIAL_ARRAY, initialize, step
from bsearch_trace.reporting import result_text
from bsearch_trace.snapshots import appended_log_lines, diff_snapshots


def main() -> None:
    for key_input in ("0x66", "0x99"):
        state = initialize(key_input, INITIAL_ARRAY)
        print(f"\n=== key={key_input} ===")
        for line in state.log:
            print(f"  {line}")

        n = 0
        while not state.is_finished:
            n += 1
            nxt = step(state)
            changes = diff_snapshots(state, nxt)
            changed = ", ".join(k for k in changes if k != "log")
            print(f"\nStep {n:2d} | low={nxt.low} high={nxt.high} mid={nxt.mid} | changed: {changed}")
            for line in appended_log_lines(state, nxt):
                print(f"  {line}")
            state = nxt

        print(f"\nResult: {result_text(state)}")


if __name__ == "__main__":
    main()
