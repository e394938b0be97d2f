"""
Error kinds raised during detection.

Every kind carries a stable ``code``. ``detect_builders`` turns the first one
raised into the single entry of ``DetectionResult.errors``.
"""
from .models import ErrorResponse


class DetectionError(Exception):
    """Base class for fatal detection errors."""
    code = "detection_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(code=self.code, message=self.message)


class InvalidFunctionGlobError(DetectionError):
    code = "invalid_function_glob"

class InvalidFunctionError(DetectionError):
    code = "invalid_function"

class InvalidFunctionDurationError(DetectionError):
    code = "invalid_function_duration"

class InvalidFunctionMemoryError(DetectionError):
    code = "invalid_function_memory"

class InvalidFunctionSourceError(DetectionError):
    code = "invalid_function_source"

class InvalidFunctionRuntimeError(DetectionError):
    code = "invalid_function_runtime"

class InvalidFunctionPropertyError(DetectionError):
    code = "invalid_function_property"

class MissingBuildScriptError(DetectionError):
    code = "missing_build_script"

class UnusedFunctionError(DetectionError):
    code = "unused_function"

class ConflictingPathSegmentError(DetectionError):
    code = "conflicting_path_segment"

class ConflictingFilePathError(DetectionError):
    code = "conflicting_file_path"
