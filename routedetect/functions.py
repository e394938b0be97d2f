"""
Validation and matching of user-declared function configurations.

The function map is keyed by globs over project paths. Declaration order is
significant: the first invalid entry is reported and the first matching glob
wins.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

import semver
from wcmatch import glob

from .config import settings
from .errors import (
    InvalidFunctionDurationError,
    InvalidFunctionError,
    InvalidFunctionGlobError,
    InvalidFunctionMemoryError,
    InvalidFunctionPropertyError,
    InvalidFunctionRuntimeError,
    InvalidFunctionSourceError,
    UnusedFunctionError,
)
from .handlers import Handler
from .models import FunctionConfig

logger = logging.getLogger(__name__)

# minimatch defaults: globstar, extglob, braces and leading "!" negation
GLOB_FLAGS = glob.GLOBSTAR | glob.EXTGLOB | glob.BRACE | glob.NEGATE | glob.NEGATEALL

FRAMEWORK_ROUTE_PREFIXES = ("pages/", "src/pages")


@dataclass
class FunctionMatch:
    key: Optional[str]
    config: Optional[FunctionConfig]


def glob_matches(path: str, pattern: str) -> bool:
    return path == pattern or glob.globmatch(path, pattern, flags=GLOB_FLAGS)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _valid_duration(value: Any) -> bool:
    if not _is_number(value) or (isinstance(value, float) and not value.is_integer()):
        return False
    return settings.MIN_FUNCTION_DURATION <= value <= settings.MAX_FUNCTION_DURATION


def _valid_memory(value: Any) -> bool:
    if not _is_number(value):
        return False
    if not settings.MIN_FUNCTION_MEMORY <= value <= settings.MAX_FUNCTION_MEMORY:
        return False
    return value % settings.FUNCTION_MEMORY_STEP == 0


def _valid_runtime_version(runtime: Any) -> bool:
    tag = f"{runtime}".split("@")[-1]
    # a single leading "v" is the only prefix allowed, e.g. "v1.0.0"
    tag = tag.strip()
    if tag.startswith("v"):
        tag = tag[1:]
    return bool(tag) and semver.Version.is_valid(tag)


def validate_functions(functions: Optional[Mapping[str, Any]]) -> Dict[str, FunctionConfig]:
    """
    Check every entry of ``functions`` in declaration order.

    Raises the error of the first violation found. Returns the entries as
    ``FunctionConfig`` models in the same order.
    """
    validated: Dict[str, FunctionConfig] = {}

    for path, func in (functions or {}).items():
        if len(path) > settings.MAX_FUNCTION_GLOB_LENGTH:
            raise InvalidFunctionGlobError(
                f"Function globs must be less than {settings.MAX_FUNCTION_GLOB_LENGTH} characters long."
            )

        if isinstance(func, FunctionConfig):
            func = func.model_dump(exclude_none=True)

        if not func or not isinstance(func, Mapping):
            if isinstance(func, Mapping):
                raise InvalidFunctionError("Function must contain at least one property.")
            raise InvalidFunctionError("Function must be an object.")

        if func.get("maxDuration") is not None and not _valid_duration(func["maxDuration"]):
            raise InvalidFunctionDurationError(
                f"Functions must have a duration between {settings.MIN_FUNCTION_DURATION} "
                f"and {settings.MAX_FUNCTION_DURATION}."
            )

        if func.get("memory") is not None and not _valid_memory(func["memory"]):
            raise InvalidFunctionMemoryError(
                f"Functions must have a memory value between {settings.MIN_FUNCTION_MEMORY} "
                f"and {settings.MAX_FUNCTION_MEMORY} in steps of {settings.FUNCTION_MEMORY_STEP}."
            )

        if path.startswith("/"):
            raise InvalidFunctionSourceError(
                f'The function path "{path}" is invalid. The path must be relative to your '
                "project root and therefore cannot start with a slash."
            )

        if func.get("runtime") is not None and not _valid_runtime_version(func["runtime"]):
            raise InvalidFunctionRuntimeError(
                "Function Runtimes must have a valid version, for example `now-php@1.0.0`."
            )

        for prop in ("includeFiles", "excludeFiles"):
            if func.get(prop) is not None and not isinstance(func[prop], str):
                raise InvalidFunctionPropertyError(f"The property `{prop}` must be a string.")

        validated[path] = FunctionConfig(**func)

    return validated


def match_function(file_path: str, functions: Mapping[str, FunctionConfig]) -> FunctionMatch:
    for key, config in functions.items():
        if glob_matches(file_path, key):
            return FunctionMatch(key=key, config=config)
    return FunctionMatch(key=None, config=None)


def check_unused_functions(
    functions: Mapping[str, FunctionConfig],
    used_keys: Iterable[str],
    frontend_handler: Optional[Handler],
) -> None:
    """Raise ``UnusedFunctionError`` for the first glob no builder consumed."""
    used = set(used_keys)
    unused = [key for key in functions if key not in used]

    if not unused:
        return

    # the framework handler consumes page globs itself
    if frontend_handler is Handler.FRAMEWORK:
        for key in unused:
            if not key.startswith(FRAMEWORK_ROUTE_PREFIXES):
                raise UnusedFunctionError(f"The function for {key} can't be handled by any builder")
        logger.debug(f"Framework handler consumes {len(unused)} page function(s)")
        return

    raise UnusedFunctionError(
        f"The function for {unused[0]} can't be handled by any builder. "
        f"Make sure it is inside the {settings.API_DIRECTORY}/ directory."
    )
