"""
Compile an API file path into a route.

``api/users/[id].ts`` becomes ``^/api/users/([^/]+)$`` with destination
``/api/users/[id].ts?id=$1``. Bracketed segments turn into capture groups
numbered in order of appearance; the last segment also accepts the name with
a trailing slash and, unless clean URLs are served in miss-handling mode, the
name with its extension.
"""
from dataclasses import dataclass
from typing import List

from .models import RouteSource
from .utils.paths import escape_for_pattern, parse_name, segment_name, split_segments

CAPTURE_SEGMENT = "([^/]+)"


@dataclass
class CompiledRoute:
    route: RouteSource
    is_dynamic: bool


def _last_segment_pattern(segment: str, handle_miss: bool, clean_urls: bool) -> str:
    _, name, ext = parse_name(segment)
    is_index = name == "index"
    prefix = "/" if is_index else ""

    names = [
        prefix if is_index else f"{name}/",
        prefix + escape_for_pattern(name),
    ]
    if not (handle_miss and clean_urls):
        names.append(prefix + escape_for_pattern(name) + escape_for_pattern(ext))

    return f"({'|'.join(n for n in names if n)}){'?' if is_index else ''}"


def compile_route(file_path: str, handle_miss: bool = False, clean_urls: bool = False) -> CompiledRoute:
    parts = split_segments(file_path)
    query: List[str] = []
    src_parts: List[str] = []

    for i, segment in enumerate(parts):
        name = segment_name(segment)
        if name is not None:
            query.append(f"{name}=${len(query) + 1}")
            src_parts.append(CAPTURE_SEGMENT)
        elif i == len(parts) - 1:
            src_parts.append(_last_segment_pattern(segment, handle_miss, clean_urls))
        else:
            src_parts.append(escape_for_pattern(segment))

    _, file_name, ext = parse_name(file_path)
    query_string = f"?{'&'.join(query)}" if query else ""

    if file_name == "index":
        # the optional group carries its own leading slash
        src = f"^/{'/'.join(src_parts[:-1])}{src_parts[-1]}$"
    else:
        src = f"^/{'/'.join(src_parts)}$"

    if handle_miss:
        extensionless = file_path[: -len(ext)] if ext else file_path
        route = RouteSource(src=src, dest=f"/{extensionless}{query_string}", check=True)
    else:
        route = RouteSource(src=src, dest=f"/{file_path}{query_string}")

    return CompiledRoute(route=route, is_dynamic=bool(query))
