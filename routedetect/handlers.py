"""
Build handler identities.

A handler is one of a closed set of external build processes. ``CUSTOM`` covers
runtimes named explicitly by a function configuration; their identifier is
kept verbatim.
"""
from enum import Enum
from typing import Optional

from .config import settings


class Handler(str, Enum):
    NODE = "node"
    GO = "go"
    PYTHON = "python"
    RUBY = "ruby"
    FRAMEWORK = "next"
    STATIC_BUILD = "static-build"
    STATIC = "static"
    CUSTOM = "custom"

    def use(self, tag: Optional[str] = None, runtime: Optional[str] = None) -> str:
        """Render the ``use`` identifier, e.g. ``@now/node@canary``."""
        if self is Handler.CUSTOM:
            if not runtime:
                raise ValueError("custom handlers need an explicit runtime")
            return runtime
        with_tag = f"@{tag}" if tag else ""
        return f"{settings.HANDLER_SCOPE}/{self.value}{with_tag}"
