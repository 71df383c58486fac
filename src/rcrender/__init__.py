# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

__version__ = "0.1.0"

from rcrender.app import Application, FileService, ResourceStore
from rcrender.config import Folders, Settings, load_settings
from rcrender.engine import Operation, ResourceContext

__all__ = [
    "Application",
    "FileService",
    "Folders",
    "Operation",
    "ResourceContext",
    "ResourceStore",
    "Settings",
    "__version__",
    "load_settings",
]
