"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, CSI navigation keys, focus reports, and SGR
mouse events (including pointer motion).
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_SINGLE_BYTE_KEYS = {
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER_CR",
    b"\n": "ENTER_LF",
    b"\x03": "CTRL_C",
}

_CSI_FINAL_KEYS = {
    "A": "UP",
    "B": "DOWN",
    "C": "RIGHT",
    "D": "LEFT",
    "H": "HOME",
    "F": "END",
    "Z": "BACKTAB",
    "I": "FOCUS_IN",
    "O": "FOCUS_OUT",
}

_CSI_TILDE_KEYS = {
    "1": "HOME",
    "7": "HOME",
    "4": "END",
    "8": "END",
    "3": "DELETE",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
}

_SS3_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _decode_text(fd: int, first: bytes) -> str:
    data = first
    for _ in range(_utf8_length(first[0]) - 1):
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            break
        data += part
    return data.decode("utf-8", errors="replace")


def _decode_sgr_mouse(payload: bytes, final: bytes) -> str:
    """Translate an SGR mouse report ``btn;col;row`` into a token."""
    try:
        btn_s, col_s, row_s = payload.decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return "ESC"
    button = btn & 0b11
    if btn & 0b0100_0000:
        if button == 0:
            return f"MOUSE_WHEEL_UP:{col}:{row}"
        if button == 1:
            return f"MOUSE_WHEEL_DOWN:{col}:{row}"
        return "MOUSE"
    if btn & 0b0010_0000:
        return f"MOUSE_MOVE:{col}:{row}"
    if button == 0:
        suffix = "DOWN" if final == b"M" else "UP"
        return f"MOUSE_LEFT_{suffix}:{col}:{row}"
    return "MOUSE"


def _read_csi(fd: int) -> str:
    """Decode the remainder of a ``ESC [`` sequence."""
    first = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if first is None:
        return "ESC"
    if first == b"<":
        payload: list[bytes] = []
        while True:
            part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                return "ESC"
            if part in {b"M", b"m"}:
                return _decode_sgr_mouse(b"".join(payload), part)
            payload.append(part)
            if len(payload) > 64:
                return "ESC"

    params: list[bytes] = []
    part = first
    while not (0x40 <= part[0] <= 0x7E):
        params.append(part)
        if len(params) > 16:
            return "ESC"
        next_part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if next_part is None:
            return "ESC"
        part = next_part

    final = part.decode("ascii", errors="replace")
    param_text = b"".join(params).decode("ascii", errors="replace")
    if final == "~":
        return _CSI_TILDE_KEYS.get(param_text.split(";")[0], "ESC")
    # Modified arrows (``1;5A``) map to their plain key.
    return _CSI_FINAL_KEYS.get(final, "ESC")


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token; returns ``""`` when ``timeout_ms`` elapses first."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    named = _SINGLE_BYTE_KEYS.get(ch)
    if named is not None:
        return named

    if ch != b"\x1b":
        return _decode_text(fd, ch)

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        seq2 = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if seq2 is None:
            return "ESC"
        return _SS3_KEYS.get(seq2, "ESC")
    _PENDING_BYTES.append(seq)
    return "ESC"


def parse_mouse_token(token: str) -> tuple[str, int, int] | None:
    """Split ``"MOUSE_KIND:col:row"`` into ``(kind, col, row)`` (1-based)."""
    if not token.startswith("MOUSE_"):
        return None
    parts = token.split(":")
    if len(parts) != 3:
        return None
    try:
        return parts[0], int(parts[1]), int(parts[2])
    except ValueError:
        return None
