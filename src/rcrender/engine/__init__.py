# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Resource evaluation engine.

This module exposes a single import surface so callers do not need to know
where the classifier, context, handlers and errors live internally.
"""

from .context import ResourceContext
from .directives import DirectiveKind, OutputMode, PrimaryDirective, classify, require_kind
from .errors import (
    DuplicatePrimaryError,
    MalformedObjectOutputError,
    ResourceDefinitionError,
    ResourceError,
    ResourceStateError,
    UnknownCustomHandlerError,
    UnknownDirectiveError,
    UnknownResourceError,
    UnsupportedOutputModeError,
)
from .operation import UNSET, Operation, build_operations
from .reduction import reduce_values

__all__ = [
    "UNSET",
    "DirectiveKind",
    "DuplicatePrimaryError",
    "MalformedObjectOutputError",
    "Operation",
    "OutputMode",
    "PrimaryDirective",
    "ResourceContext",
    "ResourceDefinitionError",
    "ResourceError",
    "ResourceStateError",
    "UnknownCustomHandlerError",
    "UnknownDirectiveError",
    "UnknownResourceError",
    "UnsupportedOutputModeError",
    "build_operations",
    "classify",
    "reduce_values",
    "require_kind",
]
