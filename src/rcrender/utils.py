# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Shared helpers for settings and command line handling."""

from __future__ import annotations

import copy
from typing import Any

import yaml


def cast_literal(s: str) -> Any:
    """
    Lightweight casting via YAML loader to get bool/int/float/list/dict.

    Args:
        s: String value to cast

    Returns:
        Casted value, or the original string when it is not valid YAML
    """
    try:
        return yaml.safe_load(s)
    except yaml.YAMLError:
        return s


def assign_path(target: dict[str, Any], dotted_key: str, value: Any) -> None:
    parts = [p for p in dotted_key.split(".") if p]
    if not parts:
        return
    node = target
    for segment in parts[:-1]:
        next_node = node.setdefault(segment, {})
        if not isinstance(next_node, dict):
            next_node = {}
            node[segment] = next_node
        node = next_node
    node[parts[-1]] = value


def parse_cli_params(argv: list[str]) -> dict[str, Any]:
    """
    Parse command-line parameters in dotted key=value format.

    Args:
        argv: List of ``KEY=VALUE`` strings

    Returns:
        Nested dictionary of parsed parameters
    """
    cli_params: dict[str, Any] = {}
    for item in argv:
        if "=" not in item:
            raise ValueError(f"Expected KEY=VALUE, got '{item}'")
        key, val = item.split("=", 1)
        assign_path(cli_params, key.strip(), cast_literal(val))
    return cli_params


def deep_merge(base: dict[str, Any], incoming: dict[str, Any] | None) -> dict[str, Any]:
    if not incoming:
        return dict(base)
    merged = dict(base)
    for key, value in incoming.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
