from __future__ import annotations
import os
from dataclasses import dataclass

def _int(env: str, default: int) -> int:
    v = os.getenv(env)
    if v is None or not v.strip():
        return default
    return int(v)

@dataclass
class Settings:
    # Handler identifiers
    HANDLER_SCOPE: str = os.getenv("ROUTEDETECT_HANDLER_SCOPE", "@now")

    # Project layout
    API_DIRECTORY: str = os.getenv("ROUTEDETECT_API_DIRECTORY", "api")
    DEFAULT_OUTPUT_DIRECTORY: str = os.getenv("ROUTEDETECT_DEFAULT_OUTPUT_DIRECTORY", "public")
    MANIFEST_FILE: str = os.getenv("ROUTEDETECT_MANIFEST_FILE", "package.json")

    # Function configuration limits
    MAX_FUNCTION_GLOB_LENGTH: int = _int("ROUTEDETECT_MAX_FUNCTION_GLOB_LENGTH", 256)
    MIN_FUNCTION_DURATION: int = _int("ROUTEDETECT_MIN_FUNCTION_DURATION", 1)
    MAX_FUNCTION_DURATION: int = _int("ROUTEDETECT_MAX_FUNCTION_DURATION", 900)
    MIN_FUNCTION_MEMORY: int = _int("ROUTEDETECT_MIN_FUNCTION_MEMORY", 128)
    MAX_FUNCTION_MEMORY: int = _int("ROUTEDETECT_MAX_FUNCTION_MEMORY", 3008)
    FUNCTION_MEMORY_STEP: int = _int("ROUTEDETECT_FUNCTION_MEMORY_STEP", 64)

settings = Settings()
