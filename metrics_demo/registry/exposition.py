"""Helpers for rendering samples in the Prometheus text format (0.0.4)."""

from __future__ import annotations

import math
from typing import Sequence

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def escape_help(text: str) -> str:
    return text.replace("\\", r"\\").replace("\n", r"\n")


def escape_label_value(value: str) -> str:
    return value.replace("\\", r"\\").replace("\n", r"\n").replace('"', r"\"")


def format_labels(keys: Sequence[str], values: Sequence[str]) -> str:
    """Render a ``{k="v",...}`` block, or an empty string for unlabeled series."""

    if not keys:
        return ""
    pairs = [f'{key}="{escape_label_value(value)}"' for key, value in zip(keys, values)]
    return "{" + ",".join(pairs) + "}"


def format_sample(name: str, keys: Sequence[str], values: Sequence[str], value: float) -> str:
    return f"{name}{format_labels(keys, values)} {format_value(value)}"
