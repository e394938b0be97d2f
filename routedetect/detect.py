"""
Zero-configuration builder and route detection.

``detect_builders`` takes a project's file list, its optional package manifest
and the detection options, and returns the builders and route tables that make
the project deployable. Nothing is read from disk; every input is data.
"""
import logging
from typing import Any, Iterable, Mapping, Optional, Union

from .assembler import assemble_routes
from .classifier import BuilderClassifier
from .errors import DetectionError
from .functions import validate_functions
from .models import DetectionResult, DetectOptions, PackageManifest

logger = logging.getLogger(__name__)

OptionsInput = Union[DetectOptions, Mapping[str, Any], None]
ManifestInput = Union[PackageManifest, Mapping[str, Any], None]


def _options(options: OptionsInput) -> DetectOptions:
    if options is None:
        return DetectOptions()
    if isinstance(options, DetectOptions):
        return options
    return DetectOptions(**{k: v for k, v in options.items() if v is not None})


def _manifest(pkg: ManifestInput) -> Optional[PackageManifest]:
    if pkg is None or isinstance(pkg, PackageManifest):
        return pkg
    # missing or null sections count as empty
    return PackageManifest(**{k: v for k, v in pkg.items() if v is not None})


def detect_builders(
    files: Iterable[str],
    pkg: ManifestInput = None,
    options: OptionsInput = None,
) -> DetectionResult:
    """
    Detect builders and routes for a project.

    Args:
        files: Project-relative paths, in any order
        pkg: Parsed package manifest, if the project has one
        options: ``DetectOptions`` or a dict with the same keys

    Returns:
        DetectionResult. When ``errors`` is set it holds exactly one error and
        the builder and route lists are None.
    """
    files = list(files)
    opts = _options(options)
    manifest = _manifest(pkg)

    try:
        functions = validate_functions(opts.functions)
        classifier = BuilderClassifier(files, manifest, opts, functions)
        classification = classifier.classify()
    except DetectionError as e:
        logger.warning(f"Detection failed with {e.code}: {e.message}")
        return DetectionResult.failed(e.to_response())

    tables = assemble_routes(
        classification.api_routes,
        classification.dynamic_routes,
        classification.output_directory,
        classification.api_builders,
        classification.frontend_builder,
        opts,
    )

    builders = classification.builders
    for warning in classification.warnings:
        logger.warning(f"{warning.code}: {warning.message}")
    logger.info(
        f"Detected {len(builders)} builder(s) for {len(files)} file(s), "
        f"{len(classification.api_routes)} API route(s)"
    )

    return DetectionResult(
        builders=builders or None,
        errors=None,
        warnings=classification.warnings,
        defaultRoutes=tables.default_routes,
        redirectRoutes=tables.redirect_routes,
        rewriteRoutes=tables.rewrite_routes,
    )
