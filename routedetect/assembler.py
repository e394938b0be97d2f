"""
Assemble the final route tables.

Routes are matched top to bottom by the routing engine, so the order in which
they are appended here is part of the output contract.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .config import settings
from .handlers import Handler
from .models import BuilderRecord, DetectOptions, Route, RouteHandle, RouteSource
from .utils.paths import parse_name

logger = logging.getLogger(__name__)


@dataclass
class RouteTables:
    default_routes: List[Route] = field(default_factory=list)
    redirect_routes: List[Route] = field(default_factory=list)
    rewrite_routes: List[Route] = field(default_factory=list)


def _is_zero_config_api(builder: BuilderRecord) -> bool:
    return bool(
        builder.config
        and builder.config.zeroConfig
        and builder.src
        and builder.src.startswith(f"{settings.API_DIRECTORY}/")
    )


def detect_api_extensions(builders: Iterable[BuilderRecord]) -> List[str]:
    """Distinct extensions of zero-config API builders, in builder order."""
    extensions = (parse_name(b.src)[2] for b in builders if _is_zero_config_api(b))
    return list(dict.fromkeys(ext for ext in extensions if ext))


def detect_api_directory(builders: Iterable[BuilderRecord]) -> Optional[str]:
    if any(_is_zero_config_api(b) for b in builders):
        return settings.API_DIRECTORY
    return None


def detect_output_directory(builders: Iterable[BuilderRecord]) -> Optional[str]:
    """Directory served by the zero-config static builder (``<dir>/**/*``)."""
    for builder in builders:
        if (
            builder.handler is Handler.STATIC
            and builder.config.zeroConfig
            and builder.src.endswith("/**/*")
        ):
            return builder.src[: -len("/**/*")]
    return None


def _extension_group(extensions: Sequence[str]) -> str:
    return f"(?:\\.(?:{'|'.join(ext[1:] for ext in extensions)}))"


def assemble_routes(
    api_routes: Sequence[RouteSource],
    dynamic_routes: Sequence[RouteSource],
    output_directory: Optional[str],
    api_builders: Sequence[BuilderRecord],
    frontend_builder: Optional[BuilderRecord],
    options: DetectOptions,
) -> RouteTables:
    tables = RouteTables()
    api = settings.API_DIRECTORY
    not_found = f"^/{api}(/.*)?$"

    if api_routes:
        if options.featHandleMiss:
            extensions = detect_api_extensions(api_builders)

            if extensions:
                ext_group = _extension_group(extensions)

                if options.cleanUrls:
                    tables.redirect_routes.append(RouteSource(
                        src=f"^/({api}(?:.+)?)/index{ext_group}?/?$",
                        headers={"Location": "/$1/" if options.trailingSlash else "/$1"},
                        status=308,
                    ))
                    tables.redirect_routes.append(RouteSource(
                        src=f"^/{api}/(.+){ext_group}/?$",
                        headers={"Location": f"/{api}/$1/" if options.trailingSlash else f"/{api}/$1"},
                        status=308,
                    ))
                else:
                    tables.default_routes.append(RouteHandle(handle="miss"))
                    tables.default_routes.append(RouteSource(
                        src=f"^/{api}/(.+){ext_group}$",
                        dest=f"/{api}/$1",
                        check=True,
                    ))

            tables.rewrite_routes.extend(dynamic_routes)
            tables.rewrite_routes.append(RouteSource(src=not_found, status=404, continue_=True))
        else:
            tables.default_routes.extend(api_routes)
            tables.default_routes.append(RouteSource(status=404, src=not_found))

    if (
        output_directory
        and frontend_builder is not None
        and not options.featHandleMiss
        and frontend_builder.handler is Handler.STATIC
    ):
        tables.default_routes.append(RouteSource(src="/(.*)", dest=f"/{output_directory}/$1"))

    logger.debug(
        f"Assembled {len(tables.default_routes)} default, {len(tables.redirect_routes)} redirect "
        f"and {len(tables.rewrite_routes)} rewrite route(s)"
    )
    return tables
