"""
routedetect: zero-configuration build and route detection.
"""
from .assembler import detect_api_directory, detect_api_extensions, detect_output_directory
from .classifier import sort_files, sort_files_by_segment_count
from .conflicts import AbsolutePathCache
from .detect import detect_builders
from .errors import DetectionError
from .handlers import Handler
from .models import (
    BuilderConfig,
    BuilderRecord,
    DetectionResult,
    DetectOptions,
    ErrorResponse,
    FunctionConfig,
    PackageManifest,
    ProjectSettings,
    RouteHandle,
    RouteSource,
)

__all__ = [
    "AbsolutePathCache",
    "BuilderConfig",
    "BuilderRecord",
    "DetectionError",
    "DetectionResult",
    "DetectOptions",
    "ErrorResponse",
    "FunctionConfig",
    "Handler",
    "PackageManifest",
    "ProjectSettings",
    "RouteHandle",
    "RouteSource",
    "detect_api_directory",
    "detect_api_extensions",
    "detect_builders",
    "detect_output_directory",
    "sort_files",
    "sort_files_by_segment_count",
]
