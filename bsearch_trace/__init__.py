"""
Binary Search Register Trace

Core modules:
- engine: initialize/step/reset transitions over immutable snapshots
- models: core dataclasses (registers, simulation snapshot)
- trace: hex formatting and the instruction lines written to the log (no behavior)
"""
