# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Reference host application.

The engine reaches its collaborators through the object passed as the parent
of a top-level ``ResourceContext``. That object must expose:

- ``files.join(base, *parts)`` and ``files.get_file(path, name)``
- ``root_dir`` and ``settings.folders.file`` / ``settings.folders.rc``
- ``render_template(path, name, context)``, ``parse_yaml(text)``,
  ``render_markdown(text)``, ``compile_stylesheet(text)``
- ``resources[name].main``
- ``get_custom_handler(key)``

``Application`` implements it on top of the local filesystem.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from . import renderers
from .config import Settings, load_settings
from .engine import ResourceContext, ResourceDefinitionError, UnknownCustomHandlerError
from .engine.handlers import custom_key

logger = logging.getLogger(__name__)

RESOURCE_FILE_NAMES = ("resource.yml", "resource.yaml")

CustomHandler = Callable[[ResourceContext, Any], Any]


class FileService:
    """Filesystem access rooted at the application root directory."""

    def __init__(self, root_dir: str):
        self.root_dir = os.path.abspath(root_dir)

    def join(self, base: str, *parts: str) -> str:
        return os.path.normpath(os.path.join(base, *[p for p in parts if p]))

    def resolve(self, path: str) -> str:
        if os.path.isabs(path):
            return path
        return os.path.join(self.root_dir, path)

    def get_file(self, path: str, name: str) -> str:
        full_path = self.resolve(self.join(path, name))
        with open(full_path, encoding="utf-8") as f:
            return f.read()


@dataclass
class ResourceEntry:
    name: str
    main: list[Any] = field(default_factory=list)
    source: Optional[str] = None


class ResourceStore(Mapping):
    """Named resource definitions, read-only once loaded."""

    def __init__(self, entries: Optional[Mapping[str, Any]] = None):
        self._entries: dict[str, ResourceEntry] = {}
        for name, payload in (entries or {}).items():
            self._entries[name] = _make_entry(name, payload)

    @classmethod
    def from_directory(cls, rc_dir: str) -> ResourceStore:
        """
        Load every ``<rc_dir>/<name>/resource.yml``.

        Args:
            rc_dir: Directory holding one working directory per resource

        Returns:
            Store keyed by resource directory name
        """
        store = cls()
        if not os.path.isdir(rc_dir):
            logger.warning("Resource directory not found: %s", rc_dir)
            return store
        for name in sorted(os.listdir(rc_dir)):
            for file_name in RESOURCE_FILE_NAMES:
                path = os.path.join(rc_dir, name, file_name)
                if os.path.isfile(path):
                    store._entries[name] = _make_entry(name, renderers.load_yaml_file(path), source=path)
                    break
        logger.debug("Loaded %d resource(s) from %s", len(store._entries), rc_dir)
        return store

    def __getitem__(self, name: str) -> ResourceEntry:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def _make_entry(name: str, payload: Any, source: Optional[str] = None) -> ResourceEntry:
    if isinstance(payload, ResourceEntry):
        return payload
    if isinstance(payload, list):
        main = payload
    elif isinstance(payload, Mapping) and "main" in payload:
        main = payload["main"] or []
    else:
        raise ResourceDefinitionError(f"Resource '{name}' must be a list or a mapping with a 'main' list")
    if not isinstance(main, list) or not all(isinstance(op, Mapping) for op in main):
        raise ResourceDefinitionError(f"Resource '{name}' main must be a list of operations")
    return ResourceEntry(name=name, main=main, source=source)


class Application:
    """
    Local host for resource rendering.

    Args:
        settings: Folder layout and root directory
        resources: Resource store; loaded from ``<root_dir>/<folders.rc>`` when omitted
        template_renderer, yaml_parser, markdown_renderer, stylesheet_compiler:
            Optional collaborator overrides
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        resources: Optional[Mapping[str, Any]] = None,
        template_renderer: Optional[Callable[[str, str, Any], str]] = None,
        yaml_parser: Optional[Callable[[Any], Any]] = None,
        markdown_renderer: Optional[Callable[[str], str]] = None,
        stylesheet_compiler: Optional[Callable[[str], str]] = None,
    ):
        self.settings = settings or Settings.from_dict({})
        self.files = FileService(self.settings.root_dir)
        if resources is None:
            self.resources = ResourceStore.from_directory(self.files.resolve(self.settings.folders.rc))
        elif isinstance(resources, ResourceStore):
            self.resources = resources
        else:
            self.resources = ResourceStore(resources)
        self._template_renderer = template_renderer or renderers.render_template
        self._yaml_parser = yaml_parser or renderers.parse_yaml
        self._markdown_renderer = markdown_renderer or renderers.render_markdown
        self._stylesheet_compiler = stylesheet_compiler or renderers.compile_stylesheet
        self._custom_handlers: dict[str, CustomHandler] = {}

    @classmethod
    def from_settings_file(cls, path: Optional[str] = None, overrides: Optional[dict[str, Any]] = None) -> Application:
        return cls(load_settings(path, overrides))

    @property
    def root_dir(self) -> str:
        return self.files.root_dir

    def register_custom(self, name: str, handler: CustomHandler, path: Optional[str] = None) -> None:
        """Register a handler for ``custom: name`` or ``custom: {path, name}``."""
        key = custom_key({"path": path, "name": name})
        if key in self._custom_handlers:
            logger.warning("Replacing custom handler '%s'", key)
        self._custom_handlers[key] = handler

    def custom_handler(self, name: str, path: Optional[str] = None) -> Callable[[CustomHandler], CustomHandler]:
        def decorator(fn: CustomHandler) -> CustomHandler:
            self.register_custom(name, fn, path=path)
            return fn

        return decorator

    def get_custom_handler(self, key: str) -> CustomHandler:
        try:
            return self._custom_handlers[key]
        except KeyError:
            raise UnknownCustomHandlerError(key) from None

    def render_template(self, path: str, name: str, context: Any = None) -> str:
        return self._template_renderer(self.files.resolve(path), name, context)

    def parse_yaml(self, text: Any) -> Any:
        return self._yaml_parser(text)

    def render_markdown(self, text: str) -> str:
        return self._markdown_renderer(text)

    def compile_stylesheet(self, text: str) -> str:
        return self._stylesheet_compiler(text)

    def working_dir(self, name: str) -> str:
        """Absolute per-resource working directory under ``folders.rc``."""
        return self.files.resolve(self.files.join(self.settings.folders.rc, name))

    async def render(self, name: str, in_data: Any = None) -> Any:
        """Evaluate the named resource and return its output."""
        start = time.perf_counter()
        logger.info("Rendering resource '%s'", name)
        context = ResourceContext(self, name, in_data)
        out = await context.process()
        logger.info("Rendered resource '%s' in %.3f seconds", name, time.perf_counter() - start)
        return out

    def render_sync(self, name: str, in_data: Any = None) -> Any:
        return asyncio.run(self.render(name, in_data))
