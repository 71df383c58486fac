# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Reduction of per-operation data into the resource output."""

import asyncio
import inspect
import json
import logging
from collections.abc import Mapping
from typing import Any

from .directives import OutputMode, output_mode
from .errors import MalformedObjectOutputError, UnsupportedOutputModeError
from .operation import UNSET

logger = logging.getLogger(__name__)


def as_text(value: Any) -> str:
    """Text form used when concatenating; ``None`` contributes nothing."""
    if value is None or value is UNSET:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def select_property(value: Any, key: Any) -> str:
    if key is None or key is UNSET:
        return ""
    if isinstance(value, Mapping):
        try:
            return as_text(value[key]) if key in value else ""
        except TypeError:
            return ""
    if isinstance(key, str) and not isinstance(value, (str, bytes, int, float)) and hasattr(value, key):
        return as_text(getattr(value, key))
    return ""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def gather_data(values: list[Any]) -> list[Any]:
    """Await every pending value, keeping list order."""
    if not any(inspect.isawaitable(v) for v in values):
        return list(values)
    return list(await asyncio.gather(*(_settle(v) for v in values)))


def reduce_values(values: list[Any], mode: Any, as_key: Any = None) -> Any:
    """
    Reduce settled data values according to an ``out`` argument.

    Args:
        values: Data values in operation order
        mode: The ``out`` argument (``raw``, ``string``, ``""``, ``None``,
            ``first_serve``, ``object`` or ``property``)
        as_key: Property name used by the ``property`` reduction

    Returns:
        The reduced resource output

    Raises:
        UnsupportedOutputModeError: If ``mode`` is not a known reduction
        MalformedObjectOutputError: If ``object`` text is not valid JSON
    """
    resolved = output_mode(mode)
    logger.debug("Reducing %d value(s) with mode %s", len(values), resolved)
    if resolved in (OutputMode.raw, OutputMode.string):
        return "".join(as_text(v) for v in values)
    if resolved is OutputMode.first_serve:
        return values[0] if values else None
    if resolved is OutputMode.object:
        text = "".join(as_text(v) for v in values)
        try:
            return json.loads(text, parse_constant=_reject_constant)
        except ValueError as e:
            raise MalformedObjectOutputError(text, str(e)) from e
    if resolved is OutputMode.property:
        return "".join(select_property(v, as_key) for v in values)
    raise UnsupportedOutputModeError(mode)
