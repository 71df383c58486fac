# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Global pytest configuration and fixtures.

Fixtures build a throwaway site under ``tmp_path``:
- ``file/`` holds content read by ``file`` and ``njk`` directives
- ``rc/<name>/resource.yml`` holds stored resource definitions
"""

from pathlib import Path
from typing import Any, Optional

import pytest
import yaml

from rcrender.app import Application
from rcrender.config import Folders, Settings


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    (tmp_path / "file").mkdir()
    (tmp_path / "rc").mkdir()
    return tmp_path


@pytest.fixture
def write_file(site_dir: Path):
    """Write a content file under ``file/`` and return its path."""

    def _write(relative: str, content: str) -> Path:
        path = site_dir / "file" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_resource(site_dir: Path):
    """Store a resource definition as ``rc/<name>/resource.yml``."""

    def _write(name: str, main: list[dict[str, Any]]) -> Path:
        path = site_dir / "rc" / name / "resource.yml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump({"main": main}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_app(site_dir: Path):
    """Factory for an ``Application`` rooted at the site with in-memory resources."""

    def _factory(resources: Optional[dict[str, Any]] = None, **kwargs: Any) -> Application:
        settings = Settings(root_dir=str(site_dir), folders=Folders(file="file", rc="rc"))
        return Application(settings, resources=resources, **kwargs)

    return _factory
