from bsearch_trace.engine import (
    ARRAY_ADDR,
    INITIAL_ARRAY,
    INITIAL_KEY_INPUT,
    can_initialize,
    can_step,
    default_state,
    initialize,
    reset,
    run_to_completion,
    set_key_input,
    step,
)
from bsearch_trace.models import READY_MESSAGE, Registers


def test_initialize_loads_registers_and_interval():
    state = initialize("0x66", INITIAL_ARRAY)

    assert state.is_initialized is True
    assert state.is_finished is False
    assert state.key_to_search == 0x66
    assert (state.low, state.high, state.mid, state.found_index) == (0, 9, None, None)
    assert state.registers == Registers(A=0, B=0, C=9, D=0, E=0x66)
    assert state.hl == ARRAY_ADDR
    assert len(state.log) == 5


def test_initialize_replaces_previous_log():
    first = run_to_completion(initialize("0x66"))[-1]
    again = initialize("0x20")
    assert again.log[0] == "--- Simulation Initialized ---"
    assert len(again.log) == 5
    assert first.log != again.log


def test_found_sequence_for_0x66():
    """
    Array 10,20,35,42,58,66,73,89,91,A4 (hex) and key 0x66:
      step 1 -> mid=4, 0x58 < 0x66, low=5
      step 2 -> mid=7, 0x89 > 0x66, high=6
      step 3 -> mid=5, 0x66 == key, found at 5
    """
    s0 = initialize("0x66", INITIAL_ARRAY)

    s1 = step(s0)
    assert (s1.mid, s1.low, s1.high) == (4, 5, 9)
    assert s1.registers.A == 0x58
    assert s1.registers.B == 5
    assert s1.registers.D == 4
    assert s1.hl == ARRAY_ADDR + 4
    assert s1.is_finished is False

    s2 = step(s1)
    assert (s2.mid, s2.low, s2.high) == (7, 5, 6)
    assert s2.registers.A == 0x89
    assert s2.registers.C == 6
    assert s2.is_finished is False

    s3 = step(s2)
    assert s3.mid == 5
    assert s3.found_index == 5
    assert s3.is_finished is True
    assert s3.hl == ARRAY_ADDR + 5
    # Found path mirrors the index (not the value) into A.
    assert s3.registers.A == 5
    assert s3.registers.D == 5
    assert s3.array[s3.found_index] == 0x66


def test_not_found_sequence_for_0x99():
    state = initialize("0x99", INITIAL_ARRAY)
    history = run_to_completion(state)

    assert [s.mid for s in history[:-1]] == [4, 7, 8, 9]
    final = history[-1]
    assert final.found_index == -1
    assert final.registers.A == 0xFF
    assert final.is_finished is True
    assert final.low == 9 and final.high == 8
    # found_index never takes a non-negative value on the way
    assert all(s.found_index is None for s in history[:-1])


def test_step_after_finish_returns_identical_snapshot():
    final = run_to_completion(initialize("0x66"))[-1]
    again = step(final)
    assert again == final
    assert again is final


def test_step_before_initialize_is_noop():
    state = default_state()
    assert step(state) is state
    assert run_to_completion(state) == []


def test_every_step_extends_the_log():
    state = initialize("0x99")
    prev = state
    for nxt in run_to_completion(state):
        assert len(nxt.log) > len(prev.log)
        assert nxt.log[: len(prev.log)] == prev.log
        prev = nxt


def test_predecessor_snapshot_is_untouched_by_step():
    s0 = initialize("0x66")
    copy = s0.evolve()
    step(s0)
    assert s0 == copy


def test_key_below_every_value_wraps_register_c():
    history = run_to_completion(initialize("0x01"))
    # high walks 3 -> 0 -> -1, then the loop check fails
    assert [s.high for s in history] == [3, 0, -1, -1]
    assert history[-2].registers.C == 0xFF
    assert history[-1].found_index == -1


def test_empty_array_terminates_on_first_step():
    state = initialize("5", ())
    assert (state.low, state.high) == (0, -1)
    assert state.registers.C == 0xFF

    final = step(state)
    assert final.is_finished is True
    assert final.found_index == -1


def test_run_to_completion_honors_max_steps():
    history = run_to_completion(initialize("0x66"), max_steps=2)
    assert len(history) == 2
    assert history[-1].is_finished is False


def _sweep_arrays():
    for n in range(0, 17):
        yield tuple(range(3, 3 + 5 * n, 5))
    yield (1, 1, 1, 2, 2, 9)
    yield (0, 0xFF)


def test_interval_shrinks_and_bound_holds_for_every_reachable_state():
    for array in _sweep_arrays():
        for key in range(0, 0x60):
            state = initialize(str(key), array)
            assert state.low <= state.high + 1
            for nxt in run_to_completion(state):
                assert nxt.low <= nxt.high + 1 or nxt.is_finished
                if not nxt.is_finished:
                    assert (nxt.high - nxt.low) < (state.high - state.low)
                if nxt.mid is not None and nxt.mid != state.mid:
                    assert state.low <= nxt.mid <= state.high
                state = nxt


def test_termination_bound_and_result_for_every_key():
    for array in _sweep_arrays():
        # ceil(log2(N + 1)) + 1
        bound = len(array).bit_length() + 1
        for key in range(0, 0x60):
            history = run_to_completion(initialize(str(key), array))
            assert 1 <= len(history) <= bound
            final = history[-1]
            assert final.is_finished is True
            if key in array:
                assert final.found_index >= 0
                assert array[final.found_index] == key
            else:
                assert final.found_index == -1


def test_reset_returns_default_session():
    state = reset()
    assert state == default_state()
    assert state.key_input == INITIAL_KEY_INPUT
    assert state.key_to_search == 0x66
    assert state.log == (READY_MESSAGE,)
    assert state.registers == Registers()
    assert state.hl == 0
    assert state.is_initialized is False
    assert state.low is None and state.high is None


def test_set_key_input_discards_run():
    state = set_key_input("42")
    assert state.key_input == "42"
    assert state.key_to_search == 42
    assert state.is_initialized is False
    assert state.log == (READY_MESSAGE,)


def test_control_enablement():
    idle = default_state()
    assert can_initialize(idle) and not can_step(idle)

    running = initialize("0x66")
    assert not can_initialize(running) and can_step(running)

    done = run_to_completion(running)[-1]
    assert can_initialize(done) and not can_step(done)


def test_custom_base_address_flows_through_steps():
    state = initialize("7", (1, 3, 7), base_address=0x2000)
    assert state.hl == 0x2000
    final = run_to_completion(state)[-1]
    assert final.found_index == 2
    assert final.hl == 0x2002
