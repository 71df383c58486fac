# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Errors raised while evaluating a resource.

Every error here is fatal to the current ``process()`` call. Errors coming
from collaborators (missing files, template syntax, YAML parse errors, custom
handler exceptions) are not wrapped and propagate as raised.
"""


class ResourceError(Exception):
    """Base class for resource evaluation failures."""


class DuplicatePrimaryError(ResourceError):
    """An operation carries more than one primary directive or was executed twice."""

    def __init__(self, resource: str, index: int | None = None, directives: list[str] | None = None):
        self.resource = resource
        self.index = index
        self.directives = directives or []
        if directives:
            msg = f"Operation {index} of resource '{resource}' declares several primary directives: {directives}"
        else:
            msg = f"Operation of resource '{resource}' already ran its primary directive"
        super().__init__(msg)


class UnknownDirectiveError(ResourceError):
    """A key on an operation is not a known directive."""

    def __init__(self, directive: str, resource: str | None = None):
        self.directive = directive
        self.resource = resource
        where = f" in resource '{resource}'" if resource else ""
        super().__init__(f"Unknown directive '{directive}'{where}")


class UnsupportedOutputModeError(ResourceError):
    """The ``out`` directive names an unknown reduction mode."""

    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Unsupported output mode: {mode!r}")


class MalformedObjectOutputError(ResourceError):
    """The ``object`` reduction produced text that is not valid JSON."""

    def __init__(self, text: str, reason: str):
        self.text = text
        super().__init__(f"Output is not a valid object: {reason}")


class UnknownResourceError(ResourceError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Resource not found: {name}")


class UnknownCustomHandlerError(ResourceError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No custom handler registered for '{key}'")


class ResourceDefinitionError(ResourceError):
    """A stored resource definition has the wrong shape."""


class ResourceStateError(ResourceError):
    """``process()`` was called on a context that cannot run."""
