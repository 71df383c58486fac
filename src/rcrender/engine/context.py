# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Resource context.

A context evaluates one resource. The operation list is split into four
queues by directive class and the queues run as barriers in a fixed order:
input, secondary, primary, output. Actions within a queue run concurrently on
the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Optional

from .directives import INPUT_DIRECTIVE, OUTPUT_DIRECTIVE, DirectiveKind, is_primary, require_kind
from .errors import DuplicatePrimaryError, ResourceStateError, UnknownResourceError
from .handlers import handle_in, handle_out, primary_handler, secondary_handler
from .operation import Operation, build_operations

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[None]]

PHASES = (DirectiveKind.input, DirectiveKind.secondary, DirectiveKind.primary, DirectiveKind.output)


class ResourceContext:
    """
    Runtime state of one resource evaluation.

    Constructed from the host application for a top-level resource, or from
    another ``ResourceContext`` for a sub-resource declared by ``with``.

    Attributes:
        depth (int): 0 for the top-level context, parent depth + 1 when nested
        name (str): Resource name
        in_data: Seed data supplied by the caller, stored verbatim
        operations (list[Operation] | None): Private working list
        in_value: Input received by the resource, set by the ``in`` directive
        out_value: Reduced output, set by the ``out`` directive
        children (list[ResourceContext]): Nested contexts, root context only
        index (int | None): Position of a nested context in ``root.children``
    """

    def __init__(self, app_or_parent: Any, name: str, in_data: Any = None):
        self._lock = asyncio.Lock()
        self.name = name
        self.in_data = in_data
        self.in_value: Any = None
        self.out_value: Any = None
        self.children: list[ResourceContext] = []
        self.queues: dict[DirectiveKind, list[Action]] = {kind: [] for kind in PHASES}
        self._processed = False

        if isinstance(app_or_parent, ResourceContext):
            root = app_or_parent.root
            self.depth = app_or_parent.depth + 1
            self.parent_depth: Optional[int] = app_or_parent.depth
            self._root_ref = weakref.ref(root)
            self.operations: Optional[list[Operation]] = None
            self.index: Optional[int] = len(root.children)
            root.children.append(self)
        else:
            self.depth = 0
            self.parent_depth = None
            self._root_ref = weakref.ref(self)
            self.parent = app_or_parent
            self.index = None
            self.operations = build_operations(self._load_definition(app_or_parent, name))

    @staticmethod
    def _load_definition(app: Any, name: str) -> Any:
        try:
            entry = app.resources[name]
        except KeyError:
            raise UnknownResourceError(name) from None
        if isinstance(entry, Mapping):
            return entry.get("main")
        return getattr(entry, "main", None)

    @property
    def root(self) -> ResourceContext:
        root = self._root_ref()
        if root is None:
            raise ResourceStateError(f"Root context of resource '{self.name}' is gone")
        return root

    @property
    def app(self) -> Any:
        """Host application, reached through the root context."""
        return self.root.parent

    @property
    def is_root(self) -> bool:
        return self.depth == 0

    def _primary_action(self, name: str, operation: Operation) -> Action:
        handler = primary_handler(name)

        async def action() -> None:
            async with self._lock:
                if operation.primary_executed:
                    raise DuplicatePrimaryError(self.name)
                operation.primary_executed = True
            await handler(self, operation)

        return action

    def _classify(self) -> None:
        for index, operation in enumerate(self.operations):
            primaries = [d for d in operation.directives if is_primary(d)]
            if len(primaries) > 1:
                raise DuplicatePrimaryError(self.name, index, primaries)
            for directive in operation.directives:
                kind = require_kind(directive, self.name)
                if kind is DirectiveKind.auxiliary:
                    continue
                if kind is DirectiveKind.primary:
                    action = self._primary_action(directive, operation)
                elif kind is DirectiveKind.output:
                    action = self._bind(handle_out, operation)
                elif kind is DirectiveKind.input:
                    action = self._bind(handle_in, operation)
                else:
                    action = self._bind(secondary_handler(directive), operation)
                self.queues[kind].append(action)
                logger.debug("Queued %s directive '%s' of operation %d (%s)", kind.value, directive, index, self.name)

    def _bind(self, handler, operation: Operation) -> Action:
        return lambda: handler(self, operation)

    def _inject_defaults(self) -> None:
        # The input default goes in first so the output default still targets the last element.
        if not self.queues[DirectiveKind.input]:
            self.operations.insert(0, Operation(directives={INPUT_DIRECTIVE: "raw"}))
            self.queues[DirectiveKind.input].append(lambda: handle_in(self, self.operations[0]))
        if not self.queues[DirectiveKind.output]:
            self.operations.append(Operation(directives={OUTPUT_DIRECTIVE: "raw"}))
            self.queues[DirectiveKind.output].append(lambda: handle_out(self, self.operations[len(self.operations) - 1]))

    async def process(self) -> Any:
        """
        Evaluate the resource.

        Returns:
            The reduced output value of the resource

        Raises:
            ResourceError: On a malformed definition or reduction failure;
                collaborator errors propagate unchanged
        """
        if self.operations is None:
            raise ResourceStateError(f"No operations assigned to resource '{self.name}' at depth {self.depth}")
        if self._processed:
            raise ResourceStateError(f"Resource '{self.name}' at depth {self.depth} was already processed")
        self._processed = True

        logger.debug("Processing resource '%s' at depth %d", self.name, self.depth)
        self._classify()
        self._inject_defaults()

        for kind in PHASES:
            actions = self.queues[kind]
            if actions:
                await asyncio.gather(*(f() for f in actions))

        logger.debug("Resource '%s' at depth %d finished", self.name, self.depth)
        return self.out_value

    def __repr__(self) -> str:
        return f"ResourceContext(name={self.name!r}, depth={self.depth})"
