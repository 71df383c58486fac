# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from .renderers import load_yaml_file
from .utils import deep_merge

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "rcrender.yml"


@dataclass
class Folders:
    """
    Folder layout, relative to the root directory.
    """

    file: str = "file"  # content root for file and njk directives
    rc: str = "rc"  # per-resource working directories


@dataclass
class Settings:
    """
    Host settings.
    """

    root_dir: str = "."
    folders: Folders = field(default_factory=Folders)

    @classmethod
    def from_dict(cls, payload: dict[str, Any], base_dir: Optional[str] = None) -> "Settings":
        if not isinstance(payload, dict):
            raise TypeError("Settings must be a YAML mapping.")
        unknown = set(payload) - {"root_dir", "folders"}
        if unknown:
            raise ValueError(f"Unknown settings keys: {sorted(unknown)}")
        folders = payload.get("folders") or {}
        if not isinstance(folders, dict):
            raise TypeError("'folders' must be a mapping.")
        root_dir = str(payload.get("root_dir") or ".")
        if not os.path.isabs(root_dir):
            root_dir = os.path.join(base_dir or os.getcwd(), root_dir)
        return cls(
            root_dir=os.path.abspath(root_dir),
            folders=Folders(
                file=str(folders.get("file", Folders.file)),
                rc=str(folders.get("rc", Folders.rc)),
            ),
        )


def load_settings(path: Optional[str] = None, overrides: Optional[dict[str, Any]] = None) -> Settings:
    """
    Load settings from a YAML file and apply overrides.

    A relative ``root_dir`` is resolved against the directory holding the
    settings file, or the working directory when no file is given.

    Args:
        path: Optional settings YAML path
        overrides: Nested overrides merged over the file contents

    Raises:
        FileNotFoundError: If ``path`` does not exist
    """
    payload: dict[str, Any] = {}
    base_dir = None
    if path:
        path = os.path.abspath(path)
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Settings file not found: {path}")
        payload = load_yaml_file(path) or {}
        base_dir = os.path.dirname(path)
        logger.debug("Loaded settings from %s", path)
    if not isinstance(payload, dict):
        raise TypeError("Settings must be a YAML mapping.")
    return Settings.from_dict(deep_merge(payload, overrides), base_dir=base_dir)
