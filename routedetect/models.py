from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any, Union

from .handlers import Handler

# ---- Inputs ----
class FunctionConfig(BaseModel):
    """Execution settings declared for every file matching a glob."""
    model_config = ConfigDict(extra="allow")

    runtime: Optional[str] = Field(None, description="Runtime identifier with version, e.g. now-php@1.0.0")
    memory: Optional[int] = Field(None, description="Memory in MB, multiple of 64")
    maxDuration: Optional[int] = Field(None, description="Maximum execution time in seconds")
    includeFiles: Optional[str] = Field(None, description="Glob of extra files bundled with the function")
    excludeFiles: Optional[str] = Field(None, description="Glob of files left out of the function bundle")

class ProjectSettings(BaseModel):
    framework: Optional[str] = Field(None, description="Framework slug chosen by the user")
    devCommand: Optional[str] = Field(None, description="Command that starts the dev server")
    buildCommand: Optional[str] = Field(None, description="Command that builds the project")
    outputDirectory: Optional[str] = Field(None, description="Directory holding the build output")

class PackageManifest(BaseModel):
    model_config = ConfigDict(extra="allow")

    dependencies: Dict[str, Any] = Field(default_factory=dict, description="Runtime dependencies")
    devDependencies: Dict[str, Any] = Field(default_factory=dict, description="Development dependencies")
    scripts: Dict[str, Any] = Field(default_factory=dict, description="Named package scripts")

    def has_build_script(self) -> bool:
        return bool(self.scripts.get("build"))

    def depends_on(self, name: str) -> bool:
        return bool(self.dependencies.get(name) or self.devDependencies.get(name))

class DetectOptions(BaseModel):
    tag: Optional[str] = Field(None, description="Release tag appended to handler identifiers")
    functions: Optional[Dict[str, Any]] = Field(None, description="Raw glob to function configuration map")
    ignoreBuildScript: bool = Field(False, description="Do not require a build script in the manifest")
    projectSettings: ProjectSettings = Field(default_factory=ProjectSettings)
    cleanUrls: bool = Field(False, description="Serve API routes without extensions")
    trailingSlash: bool = Field(False, description="Canonical API paths end with a slash")
    featHandleMiss: bool = Field(False, description="Emit routes for the miss-handling phase")

# ---- Builders ----
class BuilderConfig(BaseModel):
    zeroConfig: bool = Field(True, description="Builder was inferred, not declared")
    functions: Optional[Dict[str, FunctionConfig]] = Field(None, description="Function configuration consumed by this builder")
    includeFiles: Optional[str] = None
    excludeFiles: Optional[str] = None
    framework: Optional[str] = None
    devCommand: Optional[str] = None
    buildCommand: Optional[str] = None
    outputDirectory: Optional[str] = None

class BuilderRecord(BaseModel):
    use: str = Field(..., description="Rendered handler identifier")
    src: str = Field(..., description="File path or glob handled by the builder")
    config: BuilderConfig = Field(default_factory=BuilderConfig)
    handler: Handler = Field(..., exclude=True, description="Handler kind behind `use`")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

# ---- Routes ----
class RouteSource(BaseModel):
    """Match rule, redirect or status rule."""
    model_config = ConfigDict(populate_by_name=True)

    src: str = Field(..., description="Anchored regular expression")
    dest: Optional[str] = Field(None, description="Destination template using $N captures")
    headers: Optional[Dict[str, str]] = None
    status: Optional[int] = None
    check: Optional[bool] = Field(None, description="Re-run later phases after a match")
    continue_: Optional[bool] = Field(None, alias="continue", description="Keep matching after this rule")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

class RouteHandle(BaseModel):
    """Phase marker."""
    handle: str = Field(..., description="Routing phase name, e.g. miss")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

Route = Union[RouteSource, RouteHandle]

# ---- Result ----
class ErrorResponse(BaseModel):
    code: str
    message: str

class DetectionResult(BaseModel):
    builders: Optional[List[BuilderRecord]] = None
    errors: Optional[List[ErrorResponse]] = None
    warnings: List[ErrorResponse] = Field(default_factory=list)
    defaultRoutes: Optional[List[Route]] = None
    redirectRoutes: Optional[List[Route]] = None
    rewriteRoutes: Optional[List[Route]] = None

    @classmethod
    def failed(cls, error: ErrorResponse, warnings: Optional[List[ErrorResponse]] = None) -> "DetectionResult":
        return cls(errors=[error], warnings=list(warnings or []))

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict wire shape; empty fields stay ``None``."""
        def routes(items):
            return None if items is None else [r.to_dict() for r in items]

        return {
            "builders": None if self.builders is None else [b.to_dict() for b in self.builders],
            "errors": None if self.errors is None else [e.model_dump() for e in self.errors],
            "warnings": [w.model_dump() for w in self.warnings],
            "defaultRoutes": routes(self.defaultRoutes),
            "redirectRoutes": routes(self.redirectRoutes),
            "rewriteRoutes": routes(self.rewriteRoutes),
        }
