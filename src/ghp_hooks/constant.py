from __future__ import annotations

import importlib.metadata

NAME = importlib.metadata.metadata("ghp-hooks")["Name"]
VERSION = importlib.metadata.version("ghp-hooks")
