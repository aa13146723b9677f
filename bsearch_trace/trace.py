from __future__ import annotations

REGISTER_WIDTH = 2
POINTER_WIDTH = 4


def format_hex(value: int, width: int = REGISTER_WIDTH) -> str:
    """
    Render an unsigned value as 0x + uppercase hex, zero-padded to width digits.

    Values wider than width are rendered in full (padding is a minimum).
    """
    if value < 0:
        raise ValueError(f"format_hex expects a non-negative value (got {value})")
    return f"0x{value:0{width}X}"


# ----------------------------
# Initialization block
# ----------------------------

def init_lines(*, base_address: int, key: int, high: int, high_register: int) -> list[str]:
    # high is -1 for an empty array; the C operand shows the 8-bit register value.
    hl = format_hex(base_address, POINTER_WIDTH)
    return [
        "--- Simulation Initialized ---",
        f"LXI H, {hl}   ; HL (base addr) = {hl}",
        f"MVI E, {format_hex(key)}      ; E (key) = {format_hex(key)}",
        "MVI B, 00H        ; B (low) = 0",
        f"MVI C, {format_hex(high_register)}H        ; C (high) = {high}",
    ]


# ----------------------------
# One loop iteration
# ----------------------------

def probe_lines(*, low: int, high: int, mid: int, base_address: int, value: int, key: int) -> list[str]:
    """Lines for the mid computation, the memory read and the compare."""
    address = base_address + mid
    return [
        "--- New Loop Iteration ---",
        f"CALC MID: (low:{low} + high:{high}) / 2 = {mid}",
        f"MOV D, {format_hex(mid)}          ; D (mid) = {format_hex(mid)}",
        f"GET M: HL = {format_hex(base_address, POINTER_WIDTH)} + {mid} = {format_hex(address, POINTER_WIDTH)}",
        f"MOV A, M          ; A = ARRAY[mid] = {format_hex(value)}",
        f"CMP E             ; Compare A ({format_hex(value)}) with E ({format_hex(key)})",
    ]


def found_lines(*, mid: int) -> list[str]:
    return [f"JZ FOUND          ; Values are equal. Key found at index {mid}."]


def upper_half_lines(*, value: int, key: int, new_low: int) -> list[str]:
    return [
        f"JC IS_SMALLER     ; {format_hex(value)} < {format_hex(key)}. Search upper half.",
        f"INR B             ; new low = mid + 1 = {new_low}",
    ]


def lower_half_lines(*, value: int, key: int, new_high: int) -> list[str]:
    return [
        f"IS_LARGER         ; {format_hex(value)} > {format_hex(key)}. Search lower half.",
        f"DCR C             ; new high = mid - 1 = {new_high}",
    ]


def not_found_lines(*, low: int, high: int) -> list[str]:
    return [
        f"LOOP CHECK: low ({low}) > high ({high}). Key not found.",
        "NOT_FOUND: MVI A, FFH",
    ]
