# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Default collaborators used by the reference host application.

Templates are rendered with Jinja2, structured data is parsed with PyYAML,
markdown is rendered with markdown-it-py and style sheets are compiled with
libsass.
"""

import logging
import os
import threading
from collections.abc import Mapping
from typing import Any, Optional

import sass
import yaml
from jinja2 import Environment, FileSystemLoader
from markdown_it import MarkdownIt

logger = logging.getLogger(__name__)
_TEMPLATE_ENV_CACHE: dict[str, Environment] = {}
_TEMPLATE_ENV_LOCK = threading.Lock()


def _template_env(templates_dir: str) -> Environment:
    templates_dir = os.path.abspath(templates_dir)
    with _TEMPLATE_ENV_LOCK:
        env = _TEMPLATE_ENV_CACHE.get(templates_dir)
        if env is None:
            env = Environment(loader=FileSystemLoader(templates_dir), trim_blocks=True, lstrip_blocks=True)
            logger.debug("Created template environment for %s", templates_dir)
            _TEMPLATE_ENV_CACHE[templates_dir] = env
    return env


def render_template(templates_dir: str, name: str, context: Optional[Any] = None) -> str:
    """
    Render a template file with an optional context.

    Args:
        templates_dir: Absolute directory the template is looked up in
        name: Template file name relative to ``templates_dir``
        context: Mapping exposed as template variables; any other non-None
            value is exposed as ``data``

    Returns:
        Rendered text
    """
    if not os.path.isdir(templates_dir):
        raise FileNotFoundError(f"Templates directory not found: {templates_dir}")
    tmpl = _template_env(templates_dir).get_template(name)
    if context is None:
        variables: dict[str, Any] = {}
    elif isinstance(context, Mapping):
        variables = dict(context)
    else:
        variables = {"data": context}
    return tmpl.render(**variables)


def parse_yaml(text: Any) -> Any:
    """Parse YAML text. Already-parsed values are returned unchanged."""
    if text is None:
        return None
    if not isinstance(text, (str, bytes)):
        return text
    return yaml.safe_load(text)


def render_markdown(text: str) -> str:
    return MarkdownIt().render(text)


def compile_stylesheet(text: str) -> str:
    """Compile SCSS source to CSS without source comments."""
    return sass.compile(string=text, source_comments=False)


def load_yaml_file(path: str) -> Any:
    """Load a YAML document from disk."""
    with open(os.path.abspath(path), encoding="utf-8") as f:
        return yaml.safe_load(f)
