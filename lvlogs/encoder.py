"""Encoders that turn log call arguments into a message string."""

from __future__ import annotations

import abc
import json
import math
from decimal import Decimal
from typing import Any

from .config import ENCODING_JSON, ENCODING_PLAIN, LogConfigError


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    decimal_exp = exponent + len(digit_tuple) - 1
    digits = "".join(map(str, digit_tuple)).rstrip("0") or "0"
    if decimal_exp < -4 or decimal_exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "-" if decimal_exp < 0 else "+"
        text = f"{mantissa}e{exp_sign}{abs(decimal_exp):02d}"
    elif decimal_exp >= 0:
        whole = digits[: decimal_exp + 1].ljust(decimal_exp + 1, "0")
        fraction = digits[decimal_exp + 1 :]
        text = whole + ("." + fraction if fraction else "")
    else:
        text = "0." + "0" * (-decimal_exp - 1) + digits
    return ("-" if sign else "") + text


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        try:
            items = sorted(value.items())
        except TypeError:
            items = list(value.items())
        body = " ".join(f"{_format_value(k)}:{_format_value(v)}" for k, v in items)
        return "map[" + body + "]"
    return str(value)


def sprint(*args: Any) -> str:
    """Join values, putting a space between two neighbours when neither is a string."""
    parts: list[str] = []
    previous_is_str = True
    for index, arg in enumerate(args):
        is_str = isinstance(arg, str)
        if index > 0 and not is_str and not previous_is_str:
            parts.append(" ")
        parts.append(_format_value(arg))
        previous_is_str = is_str
    return "".join(parts)


class Encoder(abc.ABC):
    """Turns the arguments of a log call into the message text."""

    @abc.abstractmethod
    def encode(self, *args: Any) -> str:
        """Return the message text for ``args``."""


class PlainEncoder(Encoder):
    """Encodes arguments as plain text."""

    def encode(self, *args: Any) -> str:
        return sprint(*args)


_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class JsonEncoder(Encoder):
    """Encodes the arguments as a compact JSON array."""

    def encode(self, *args: Any) -> str:
        try:
            text = json.dumps(
                list(args), ensure_ascii=False, allow_nan=False, separators=(",", ":")
            )
        except (TypeError, ValueError) as err:
            return f"JSON marshal error: {err}"
        for char, escaped in _HTML_ESCAPES.items():
            text = text.replace(char, escaped)
        return text


def encoder_for(encoding: str) -> Encoder:
    """Return the encoder for an encoding name ("plain" or "json")."""
    if encoding == ENCODING_PLAIN:
        return PlainEncoder()
    if encoding == ENCODING_JSON:
        return JsonEncoder()
    raise LogConfigError(f"unsupported log encoding: {encoding}")