# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Directive classification.

There are four kinds of directives:

1. Primary directives produce the ``data`` of an operation.
2. Secondary directives derive the input of a primary directive (``with``, ``as``).
3. Input directives declare how the resource receives its seed value (``in``).
4. Output directives declare how operation data is reduced (``out``).

Primary directives take either static arguments or arguments provided by
secondary directives. The table is closed: anything else is rejected.
"""

from enum import Enum
from typing import Optional

from .errors import UnknownDirectiveError


class DirectiveKind(Enum):
    """
    Directive class.
    """

    primary = "primary"
    secondary = "secondary"
    input = "in"
    output = "out"
    auxiliary = "aux"
    unknown = "unknown"


class PrimaryDirective(Enum):
    """
    Primary directive variants.
    """

    file = "file"
    scss = "scss"
    md = "md"
    njk = "njk"
    raw = "raw"
    yml = "yml"
    custom = "custom"


class SecondaryDirective(Enum):
    """
    Secondary directive variants.
    """

    with_ = "with"
    as_ = "as"


class OutputMode(Enum):
    """
    Reduction applied by the ``out`` directive.
    """

    raw = "raw"
    string = "string"
    first_serve = "first_serve"
    object = "object"
    property = "property"


INPUT_DIRECTIVE = "in"
OUTPUT_DIRECTIVE = "out"

# Names attached to operations at runtime; never directives.
AUXILIARY_NAMES = frozenset({"data", "primaryCounter", "_with", "_as"})

_TABLE: dict[str, DirectiveKind] = {
    **{d.value: DirectiveKind.primary for d in PrimaryDirective},
    **{d.value: DirectiveKind.secondary for d in SecondaryDirective},
    INPUT_DIRECTIVE: DirectiveKind.input,
    OUTPUT_DIRECTIVE: DirectiveKind.output,
}


def classify(name: str) -> DirectiveKind:
    """Return the directive class of ``name``."""
    kind = _TABLE.get(name)
    if kind is not None:
        return kind
    if name in AUXILIARY_NAMES:
        return DirectiveKind.auxiliary
    return DirectiveKind.unknown


def require_kind(name: str, resource: Optional[str] = None) -> DirectiveKind:
    """Classify ``name``, raising ``UnknownDirectiveError`` when it is not in the table."""
    kind = classify(name)
    if kind is DirectiveKind.unknown:
        raise UnknownDirectiveError(name, resource)
    return kind


def is_primary(name: str) -> bool:
    return _TABLE.get(name) is DirectiveKind.primary


def output_mode(value) -> Optional[OutputMode]:
    """
    Map an ``out`` argument to its reduction.

    ``None`` and the empty string are aliases of ``raw``. Returns ``None`` for
    unknown values so the caller decides how to fail.
    """
    if value is None or value == "":
        return OutputMode.raw
    if not isinstance(value, str):
        return None
    try:
        return OutputMode(value)
    except ValueError:
        return None
