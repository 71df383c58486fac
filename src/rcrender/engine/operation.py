# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .directives import AUXILIARY_NAMES
from .errors import ResourceDefinitionError


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNSET = _Unset()


@dataclass(eq=False)
class Operation:
    """
    One step of a resource.

    ``directives`` holds what the definition declares. The remaining fields are
    computed while the resource is processed and stay ``UNSET`` until a handler
    assigns them; ``None`` is a legitimate computed value.
    """

    directives: dict[str, Any] = field(default_factory=dict)
    data: Any = UNSET
    with_value: Any = UNSET
    as_value: Any = UNSET
    primary_executed: bool = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Operation:
        if isinstance(mapping, Operation):
            return mapping.clone()
        if not isinstance(mapping, Mapping):
            raise ResourceDefinitionError(f"Operation must be a mapping, got {type(mapping).__name__}")
        directives = {k: copy.deepcopy(v) for k, v in mapping.items() if k not in AUXILIARY_NAMES}
        # Auxiliary names written in a definition seed the computed fields.
        return cls(
            directives=directives,
            data=copy.deepcopy(mapping.get("data", UNSET)),
            with_value=copy.deepcopy(mapping.get("_with", UNSET)),
            as_value=copy.deepcopy(mapping.get("_as", UNSET)),
            primary_executed="primaryCounter" in mapping,
        )

    def clone(self) -> Operation:
        return Operation(
            directives=copy.deepcopy(self.directives),
            data=copy.deepcopy(self.data),
            with_value=copy.deepcopy(self.with_value),
            as_value=copy.deepcopy(self.as_value),
            primary_executed=self.primary_executed,
        )

    @property
    def has_data(self) -> bool:
        return self.data is not UNSET

    @property
    def has_with(self) -> bool:
        return self.with_value is not UNSET

    @property
    def has_as(self) -> bool:
        return self.as_value is not UNSET

    def argument(self, directive: str, default: Any = None) -> Any:
        return self.directives.get(directive, default)

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping view, computed fields under their auxiliary names."""
        out = dict(self.directives)
        if self.has_data:
            out["data"] = self.data
        if self.has_with:
            out["_with"] = self.with_value
        if self.has_as:
            out["_as"] = self.as_value
        return out


def build_operations(definition: Any) -> list[Operation]:
    """Build a private working list of operations from a stored definition."""
    if definition is None:
        return []
    if isinstance(definition, (str, bytes)) or not isinstance(definition, Iterable):
        raise ResourceDefinitionError(f"Resource definition must be a list of operations, got {type(definition).__name__}")
    return [Operation.from_mapping(item) for item in definition]
