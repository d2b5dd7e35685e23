import json
import math
import re
from typing import Any, Dict, NamedTuple, Optional, Union

from relay.models import INERTIAL_KEYS, ImuMessage

_DECIMAL = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_RADIX = {"0x": 16, "0o": 8, "0b": 2}
_RADIX_DIGITS = {16: re.compile(r"[0-9a-fA-F]+"), 8: re.compile(r"[0-7]+"), 2: re.compile(r"[01]+")}


class Frame(NamedTuple):
    """One message unit as it travels through the relay."""

    payload: Union[str, bytes]
    binary: bool = False


def _reject_constant(token: str):
    # NaN / Infinity literals are not JSON; treat the frame as unparseable.
    raise ValueError(f"non-standard JSON constant {token}")


def _string_to_number(value: str) -> Union[int, float]:
    text = value.strip()
    if not text:
        return 0
    radix = _RADIX.get(text[:2].lower())
    if radix is not None:
        digits = text[2:]
        return int(digits, radix) if _RADIX_DIGITS[radix].fullmatch(digits) else math.nan
    if not _DECIMAL.fullmatch(text):
        return math.nan
    number = float(text)
    return int(number) if number.is_integer() else number


def to_number(value: Any) -> Union[int, float]:
    """
    Numeric cast with the semantics of JavaScript's ``Number()``, which is
    what the dashboard protocol was written against.

    Numbers pass through, booleans become 1/0, null and blank strings become
    0, decimal and 0x/0o/0b strings are parsed, a one-element array converts
    like its element and anything else is NaN.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        return _string_to_number(value)
    if isinstance(value, list):
        while isinstance(value, list):
            if not value:
                return 0
            if len(value) > 1:
                return math.nan
            value = value[0]
        if value is None:
            return 0
        if isinstance(value, (bool, dict)):
            return math.nan
        return to_number(value)
    return math.nan


def is_finite(value: Union[int, float]) -> bool:
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def _orientation(value: Any) -> Union[int, float]:
    number = to_number(value)
    return number if is_finite(number) else 0


def to_canonical_imu(reading: Dict[str, Any]) -> Optional[ImuMessage]:
    """
    Map a flat {ax..gz} reading onto the dashboard IMU schema.

    Returns None when any of the six axes is not a finite number, so the
    caller can fall back to plain passthrough instead of emitting NaN.
    """
    accel = [to_number(reading[key]) for key in INERTIAL_KEYS[:3]]
    gyro = [to_number(reading[key]) for key in INERTIAL_KEYS[3:]]
    if not all(is_finite(value) for value in accel + gyro):
        return None
    return ImuMessage(
        accel=accel,
        gyro=gyro,
        roll=_orientation(reading.get("roll")),
        pitch=_orientation(reading.get("pitch")),
        yaw=_orientation(reading.get("yaw")),
    )


def _serialize(parsed: Any) -> Optional[str]:
    try:
        text = json.dumps(parsed, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (ValueError, RecursionError):
        # inf from overflowing literals (1e999) has no strict JSON encoding.
        return None
    # Lone surrogates left by \uD800-style escapes cannot be sent as UTF-8; keep them escaped.
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def normalize_frame(payload: Union[str, bytes], binary: bool = False) -> Frame:
    """
    Produce the frame to broadcast for one inbound frame.

    Binary payloads and text that is not a JSON object or array are returned
    untouched. JSON objects carrying all six inertial keys become canonical
    IMU messages; every other object or array is re-serialized compactly.
    """
    if binary:
        return Frame(payload, True)

    try:
        parsed = json.loads(payload, parse_constant=_reject_constant)
    except (ValueError, TypeError, RecursionError):
        return Frame(payload, False)
    if not isinstance(parsed, (dict, list)):
        return Frame(payload, False)

    if isinstance(parsed, dict) and all(key in parsed for key in INERTIAL_KEYS):
        message = to_canonical_imu(parsed)
        if message is not None:
            return Frame(message.model_dump_json(), False)

    text = _serialize(parsed)
    return Frame(payload if text is None else text, False)
