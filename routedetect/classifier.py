"""
Builder classification for zero-configuration projects.

Walks the file list once, deepest paths first and static segments ahead of
placeholder ones, so literal routes are matched before their dynamic
siblings. Files under the API directory get one builder
each (plus a route); everything else only feeds the flags used to pick a single
frontend builder afterwards.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .config import settings
from .conflicts import AbsolutePathCache, check_conflicts
from .errors import MissingBuildScriptError
from .functions import check_unused_functions, glob_matches, match_function
from .handlers import Handler
from .models import (
    BuilderConfig,
    BuilderRecord,
    DetectOptions,
    ErrorResponse,
    FunctionConfig,
    PackageManifest,
    RouteSource,
)
from .routes import compile_route
from .utils.paths import trailing_placeholder_count

logger = logging.getLogger(__name__)

STATIC_BUILD_ENTRYPOINTS = (
    "package.json",
    "config.yaml",
    "config.toml",
    "config.json",
    "_config.yml",
    "config.yml",
    "config.rb",
)
PROJECT_CONFIG_FILES = ("now.json", "vercel.json")
FRAMEWORK_API_PREFIXES = ("pages/api", "src/pages/api")
NEXTJS = "nextjs"


def sort_files(files: Sequence[str]) -> List[str]:
    """Alphabetical order keeps route tables stable between runs."""
    return sorted(files)


def sort_files_by_segment_count(files: Sequence[str]) -> List[str]:
    """Deeper paths first; at equal depth, fewer trailing placeholders first.

    The sort is stable, so alphabetical order from ``sort_files`` breaks ties.
    """
    return sorted(files, key=lambda f: (-len(f.split("/")), trailing_placeholder_count(f)))


def default_api_matches() -> List[Tuple[str, Handler]]:
    api = settings.API_DIRECTORY
    return [
        (f"{api}/**/*.js", Handler.NODE),
        (f"{api}/**/*.ts", Handler.NODE),
        (f"{api}/**/!(*_test).go", Handler.GO),
        (f"{api}/**/*.py", Handler.PYTHON),
        (f"{api}/**/*.rb", Handler.RUBY),
    ]


@dataclass
class Classification:
    """Everything the route assembler and the result need from one run."""
    api_builders: List[BuilderRecord] = field(default_factory=list)
    frontend_builder: Optional[BuilderRecord] = None
    api_routes: List[RouteSource] = field(default_factory=list)
    dynamic_routes: List[RouteSource] = field(default_factory=list)
    output_directory: str = ""
    warnings: List[ErrorResponse] = field(default_factory=list)

    @property
    def builders(self) -> List[BuilderRecord]:
        if self.frontend_builder is None:
            return list(self.api_builders)
        return [*self.api_builders, self.frontend_builder]


class BuilderClassifier:
    """
    Decides which builder handles which file.

    One instance serves one detection run; the path cache and the set of
    consumed function globs live on the instance.
    """

    def __init__(
        self,
        files: Sequence[str],
        pkg: Optional[PackageManifest],
        options: DetectOptions,
        functions: Dict[str, FunctionConfig],
    ):
        self.files = sort_files(files)
        self.pkg = pkg
        self.options = options
        self.functions = functions
        self.api_matches = default_api_matches()
        self.cache = AbsolutePathCache()
        self.used_functions: Set[str] = set()

    # ---- API files ----
    def is_api_candidate(self, file_path: str) -> bool:
        if not file_path.startswith(f"{settings.API_DIRECTORY}/"):
            return False
        if "/." in file_path or "/_" in file_path:
            return False
        if "/node_modules/" in file_path:
            return False
        return not file_path.endswith(".d.ts")

    def api_builder_for(self, file_path: str) -> Optional[BuilderRecord]:
        """Builder for an API file, or None when no handler applies."""
        if not self.is_api_candidate(file_path):
            return None

        default = next((h for pattern, h in self.api_matches if glob_matches(file_path, pattern)), None)
        fn = match_function(file_path, self.functions)

        if fn.config is not None and fn.config.runtime:
            handler, use = Handler.CUSTOM, Handler.CUSTOM.use(runtime=fn.config.runtime)
        elif default is not None:
            handler, use = default, default.use(self.options.tag)
        else:
            return None

        config = BuilderConfig(zeroConfig=True)
        if fn.key is not None and fn.config is not None:
            config.functions = {fn.key: fn.config.model_copy()}
            if fn.config.includeFiles:
                config.includeFiles = fn.config.includeFiles
            if fn.config.excludeFiles:
                config.excludeFiles = fn.config.excludeFiles

        return BuilderRecord(use=use, src=file_path, config=config, handler=handler)

    # ---- Frontend ----
    def _framework_builder(self, fallback_entrypoint: Optional[str]) -> BuilderRecord:
        tag = self.options.tag
        project = self.options.projectSettings
        framework = project.framework

        config = BuilderConfig(zeroConfig=True)
        if project.framework:
            config.framework = project.framework
        if project.devCommand:
            config.devCommand = project.devCommand
        if project.buildCommand:
            config.buildCommand = project.buildCommand
        if project.outputDirectory:
            config.outputDirectory = project.outputDirectory

        if self.pkg is not None and self.pkg.depends_on("next"):
            framework = NEXTJS

        unused = {k: f.model_copy() for k, f in self.functions.items() if k not in self.used_functions}
        if unused:
            config.functions = unused

        if framework == NEXTJS:
            return BuilderRecord(
                use=Handler.FRAMEWORK.use(tag), src=settings.MANIFEST_FILE,
                config=config, handler=Handler.FRAMEWORK,
            )

        if self.pkg is not None:
            source = settings.MANIFEST_FILE
        else:
            source = (
                next((f for f in self.files if f in STATIC_BUILD_ENTRYPOINTS), None)
                or fallback_entrypoint
                or settings.MANIFEST_FILE
            )

        return BuilderRecord(
            use=Handler.STATIC_BUILD.use(tag), src=source,
            config=config, handler=Handler.STATIC_BUILD,
        )

    def _static_builder(self, src: str, output_directory: Optional[str] = None) -> BuilderRecord:
        config = BuilderConfig(zeroConfig=True, outputDirectory=output_directory)
        return BuilderRecord(use=Handler.STATIC.use(), src=src, config=config, handler=Handler.STATIC)

    # ---- Run ----
    def classify(self) -> Classification:
        project = self.options.projectSettings
        build_command = project.buildCommand
        output_directory = project.outputDirectory
        api_dir = settings.API_DIRECTORY
        manifest = settings.MANIFEST_FILE

        make_frontend_static = build_command == "" or output_directory == ""
        used_output_directory = output_directory or settings.DEFAULT_OUTPUT_DIRECTORY

        result = Classification(output_directory=used_output_directory)
        has_used_output_directory = False
        has_non_api_files = False
        has_framework_api_files = False
        fallback_entrypoint: Optional[str] = None

        candidates: Dict[str, BuilderRecord] = {}
        for file_path in self.files:
            builder = self.api_builder_for(file_path)
            if builder is not None:
                candidates[file_path] = builder
        ordered = sort_files_by_segment_count(self.files)
        api_files = [f for f in ordered if f in candidates]

        for file_path in ordered:
            api_builder = candidates.get(file_path)

            if api_builder is not None:
                check_conflicts(file_path, api_files, self.cache)
                compiled = compile_route(
                    file_path, self.options.featHandleMiss, self.options.cleanUrls
                )
                result.api_routes.append(compiled.route)
                if compiled.is_dynamic:
                    result.dynamic_routes.append(compiled.route)

                if api_builder.config.functions:
                    self.used_functions.add(next(iter(api_builder.config.functions)))
                result.api_builders.append(api_builder)
                logger.debug(f"{file_path} -> {api_builder.use}")
                continue

            if not has_used_output_directory and file_path.startswith(f"{used_output_directory}/"):
                has_used_output_directory = True

            if not has_non_api_files and not file_path.startswith(f"{api_dir}/") and file_path != manifest:
                has_non_api_files = True

            if not has_framework_api_files and file_path.startswith(FRAMEWORK_API_PREFIXES):
                has_framework_api_files = True

            if (
                fallback_entrypoint is None
                and build_command
                and "/" not in file_path
                and file_path not in PROJECT_CONFIG_FILES
            ):
                fallback_entrypoint = file_path

        has_build_script = self.pkg is not None and self.pkg.has_build_script()

        if not make_frontend_static and (has_build_script or build_command or project.framework):
            result.frontend_builder = self._framework_builder(fallback_entrypoint)
        else:
            if (
                self.pkg is not None
                and not make_frontend_static
                and not result.api_builders
                and not self.options.ignoreBuildScript
            ):
                # the manifest's dependencies may serve the API builders
                raise MissingBuildScriptError(
                    f"Your `{manifest}` file is missing a `build` property inside the `scripts` property."
                    "\nMore details: https://vercel.com/docs/v2/platform/frequently-asked-questions#missing-build-script"
                )

            if has_used_output_directory and output_directory != "":
                result.frontend_builder = self._static_builder(
                    f"{used_output_directory}/**/*", used_output_directory
                )
            elif result.api_builders and has_non_api_files:
                result.frontend_builder = self._static_builder(f"!{{{api_dir}/**,{manifest}}}")

        check_unused_functions(
            self.functions,
            self.used_functions,
            result.frontend_builder.handler if result.frontend_builder else None,
        )

        if result.frontend_builder is not None and has_framework_api_files and result.api_builders:
            result.warnings.append(ErrorResponse(
                code="conflicting_files",
                message=(
                    f"It is not possible to use `{api_dir}` and `pages/{api_dir}` at the same time, "
                    "please only use one option"
                ),
            ))

        logger.debug(
            f"Classified {len(self.files)} files: {len(result.api_builders)} API builder(s), "
            f"frontend={result.frontend_builder.use if result.frontend_builder else None}"
        )
        return result
