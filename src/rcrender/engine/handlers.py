# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Directive handlers.

Every handler receives the owning resource context and the operation it
belongs to. Primary handlers assign ``operation.data``; secondary handlers
assign ``operation.with_value`` / ``operation.as_value``; the input handler
assigns the resource ``in_value``; the output handler assigns the resource
``out_value``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

from .directives import OUTPUT_DIRECTIVE, PrimaryDirective, SecondaryDirective
from .operation import Operation, build_operations
from .reduction import gather_data, reduce_values

if TYPE_CHECKING:
    from .context import ResourceContext

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Operation], Awaitable[None]]


def _location(argument: Any, directive: str) -> tuple[str, str]:
    if isinstance(argument, Mapping):
        return str(argument.get("path", "") or ""), str(argument.get("name", "") or "")
    if isinstance(argument, str):
        return "", argument
    raise TypeError(f"'{directive}' expects a mapping with 'path' and 'name', got {type(argument).__name__}")


def _with_or_none(operation: Operation) -> Any:
    return operation.with_value if operation.has_with else None


async def handle_file(resource: ResourceContext, operation: Operation) -> None:
    app = resource.app
    rel_path, name = _location(operation.argument("file"), "file")
    path = app.files.join(app.settings.folders.file, rel_path)
    operation.data = await asyncio.to_thread(app.files.get_file, path, name)


async def handle_scss(resource: ResourceContext, operation: Operation) -> None:
    operation.data = await asyncio.to_thread(resource.app.compile_stylesheet, _with_or_none(operation))


async def handle_md(resource: ResourceContext, operation: Operation) -> None:
    operation.data = resource.app.render_markdown(_with_or_none(operation))


async def handle_njk(resource: ResourceContext, operation: Operation) -> None:
    app = resource.app
    rel_path, name = _location(operation.argument("njk"), "njk")
    path = app.files.join(app.settings.folders.file, rel_path)
    operation.data = await asyncio.to_thread(app.render_template, path, name, _with_or_none(operation))


async def handle_yml(resource: ResourceContext, operation: Operation) -> None:
    operation.data = resource.app.parse_yaml(_with_or_none(operation))


async def handle_raw(resource: ResourceContext, operation: Operation) -> None:
    operation.data = operation.argument("raw")


def custom_key(argument: Any) -> str:
    """Registry key for a ``custom`` argument: ``name`` or ``path/name``."""
    if isinstance(argument, str):
        return argument
    if isinstance(argument, Mapping):
        name = str(argument.get("name", "") or "")
        path = str(argument.get("path", "") or "").strip("/")
        return f"{path}/{name}" if path else name
    raise TypeError(f"'custom' expects a handler name or mapping, got {type(argument).__name__}")


async def handle_custom(resource: ResourceContext, operation: Operation) -> None:
    key = custom_key(operation.argument("custom"))
    callback = resource.app.get_custom_handler(key)
    logger.debug("Running custom handler '%s' for resource '%s'", key, resource.name)
    result = callback(resource, operation)
    if inspect.isawaitable(result):
        result = await result
    if result is not None and not operation.has_data:
        operation.data = result


async def handle_in(resource: ResourceContext, operation: Operation) -> None:
    resource.in_value = resource.in_data


async def handle_with(resource: ResourceContext, operation: Operation) -> None:
    from .context import ResourceContext

    nested = ResourceContext(resource, resource.name, resource.in_value)
    nested.operations = build_operations(operation.argument("with"))
    operation.with_value = await nested.process()


async def handle_as(resource: ResourceContext, operation: Operation) -> None:
    operation.as_value = resource.in_value


def _as_key(resource: ResourceContext, operation: Operation) -> Any:
    if operation.has_as:
        return operation.as_value
    for candidate in resource.operations:
        if candidate.has_as:
            return candidate.as_value
    return None


async def handle_out(resource: ResourceContext, operation: Operation) -> None:
    values = await gather_data([op.data for op in resource.operations if op.has_data])
    resource.out_value = reduce_values(values, operation.argument(OUTPUT_DIRECTIVE), _as_key(resource, operation))


PRIMARY_HANDLERS: dict[PrimaryDirective, Handler] = {
    PrimaryDirective.file: handle_file,
    PrimaryDirective.scss: handle_scss,
    PrimaryDirective.md: handle_md,
    PrimaryDirective.njk: handle_njk,
    PrimaryDirective.yml: handle_yml,
    PrimaryDirective.raw: handle_raw,
    PrimaryDirective.custom: handle_custom,
}

SECONDARY_HANDLERS: dict[SecondaryDirective, Handler] = {
    SecondaryDirective.with_: handle_with,
    SecondaryDirective.as_: handle_as,
}


def primary_handler(name: str) -> Handler:
    return PRIMARY_HANDLERS[PrimaryDirective(name)]


def secondary_handler(name: str) -> Handler:
    return SECONDARY_HANDLERS[SecondaryDirective(name)]
