"""
End-to-end tests for detect_builders.
"""
import re

import pytest

from routedetect import DetectOptions, PackageManifest, detect_builders

NEXT_PKG = {"scripts": {"build": "next build"}, "dependencies": {"next": "9.0.0"}}


def assert_failed(result, code):
    assert result.errors is not None
    assert [e.code for e in result.errors] == [code]
    assert result.builders is None
    assert result.defaultRoutes is None
    assert result.redirectRoutes is None
    assert result.rewriteRoutes is None


class TestSingleApiFile:
    """A lone function without a manifest."""

    def test_builder_and_routes(self):
        result = detect_builders(["api/hello.js"])
        assert result.errors is None
        assert [b.to_dict() for b in result.builders] == [
            {"use": "@now/node", "src": "api/hello.js", "config": {"zeroConfig": True}},
        ]
        assert [r.to_dict() for r in result.defaultRoutes] == [
            {"src": "^/api/(hello/|hello|hello\\.js)$", "dest": "/api/hello.js"},
            {"status": 404, "src": "^/api(/.*)?$"},
        ]
        assert result.redirectRoutes == []
        assert result.rewriteRoutes == []
        assert result.warnings == []

    def test_to_dict(self):
        out = detect_builders(["api/hello.js"]).to_dict()
        assert out["errors"] is None
        assert out["builders"][0]["use"] == "@now/node"
        assert out["defaultRoutes"][-1] == {"status": 404, "src": "^/api(/.*)?$"}


class TestDynamicRoutes:
    def test_placeholder_next_to_literal(self):
        result = detect_builders(["api/[id].ts", "api/users.ts"])
        assert result.errors is None
        assert [b.src for b in result.builders] == ["api/users.ts", "api/[id].ts"]
        dynamic = result.defaultRoutes[1]
        assert dynamic.src == "^/api/([^/]+)$"
        assert dynamic.dest == "/api/[id].ts?id=$1"

    @pytest.mark.parametrize("path, dest", [
        ("/api/users", "/api/users.ts"),
        ("/api/42", "/api/[id].ts?id=$1"),
    ])
    def test_literal_route_matches_before_placeholder(self, path, dest):
        result = detect_builders(["api/[id].ts", "api/users.ts"])
        first = next(r for r in result.defaultRoutes if r.dest and re.match(r.src, path))
        assert first.dest == dest

    @pytest.mark.parametrize("files", [
        ["api/[id].js", "api/[name].js"],
        ["api/[id].js", "api/1.js"],
        ["api/[team]/a.js", "api/[org]/b.js"],
        ["api/user.js", "api/user.go"],
    ])
    def test_conflicting_files(self, files):
        assert_failed(detect_builders(files), "conflicting_file_path")

    def test_conflicting_segment(self):
        result = detect_builders(["api/[id]/[id].js"])
        assert_failed(result, "conflicting_path_segment")
        assert '"id"' in result.errors[0].message

    def test_conflict_message_names_other_file(self):
        result = detect_builders(["api/[id].js", "api/1.js"])
        assert result.errors[0].message.endswith(
            'The path "api/1.js" has conflicts with "api/[id].js".'
        )

    def test_skipped_api_files_do_not_conflict(self):
        result = detect_builders(["api/[id].js", "api/1.md"])
        assert result.errors is None
        assert [b.src for b in result.builders] == ["api/[id].js"]


class TestFunctions:
    def test_invalid_memory_fails_before_classification(self):
        result = detect_builders(["api/a.js"], None, {"functions": {"api/a.js": {"memory": 100}}})
        assert_failed(result, "invalid_function_memory")

    def test_function_config_is_attached(self):
        functions = {"api/user.js": {"memory": 128, "maxDuration": 10}}
        result = detect_builders(["api/user.js"], None, {"functions": functions})
        assert result.builders[0].to_dict()["config"] == {
            "zeroConfig": True,
            "functions": {"api/user.js": {"memory": 128, "maxDuration": 10}},
        }

    def test_custom_runtime(self):
        functions = {"api/user.php": {"runtime": "now-php@0.0.5"}}
        result = detect_builders(["api/user.php"], None, {"functions": functions})
        assert result.builders[0].use == "now-php@0.0.5"
        assert result.defaultRoutes[0].dest == "/api/user.php"

    def test_unused_function_discards_progress(self):
        functions = {"server/a.js": {"memory": 128}}
        result = detect_builders(["api/user.js", "server/a.js"], None, {"functions": functions})
        assert_failed(result, "unused_function")

    def test_next_page_functions(self):
        functions = {"pages/index.js": {"memory": 128}}
        result = detect_builders(["package.json", "pages/index.js"], NEXT_PKG, {"functions": functions})
        assert result.errors is None
        assert result.builders[0].use == "@now/next"
        assert list(result.builders[0].config.functions) == ["pages/index.js"]


class TestManifest:
    def test_missing_build_script(self):
        result = detect_builders(["package.json"], {"scripts": {}})
        assert_failed(result, "missing_build_script")

    def test_missing_build_script_ignored(self):
        result = detect_builders(["package.json"], {"scripts": {}}, {"ignoreBuildScript": True})
        assert result.errors is None
        assert result.builders is None
        assert result.defaultRoutes == []

    def test_manifest_model_input(self):
        result = detect_builders(
            ["package.json", "pages/index.js"],
            PackageManifest(**NEXT_PKG),
            DetectOptions(tag="canary"),
        )
        assert result.builders[0].use == "@now/next@canary"

    def test_non_string_section_values(self):
        pkg = {"scripts": {"build": "x"}, "dependencies": {"next": None}}
        result = detect_builders(["package.json", "index.html"], pkg)
        assert result.errors is None
        assert [b.use for b in result.builders] == ["@now/static-build"]

    def test_null_build_script(self):
        result = detect_builders(["package.json"], {"scripts": {"build": None}})
        assert_failed(result, "missing_build_script")

    def test_null_sections(self):
        result = detect_builders(["api/a.js", "package.json"], {"scripts": None, "dependencies": None})
        assert result.errors is None
        assert [b.src for b in result.builders] == ["api/a.js"]

    def test_api_and_pages_api_warning(self):
        result = detect_builders(["api/a.js", "package.json", "pages/api/b.js"], NEXT_PKG)
        assert result.errors is None
        assert [w.code for w in result.warnings] == ["conflicting_files"]
        assert [b.use for b in result.builders] == ["@now/node", "@now/next"]


class TestStatic:
    def test_public_directory(self):
        result = detect_builders(["public/index.html"])
        assert [b.to_dict() for b in result.builders] == [{
            "use": "@now/static",
            "src": "public/**/*",
            "config": {"zeroConfig": True, "outputDirectory": "public"},
        }]
        assert [r.to_dict() for r in result.defaultRoutes] == [{"src": "/(.*)", "dest": "/public/$1"}]

    def test_api_and_static_files(self):
        result = detect_builders(["api/user.go", "index.html"])
        assert [b.use for b in result.builders] == ["@now/go", "@now/static"]
        assert result.builders[1].src == "!{api/**,package.json}"
        assert result.defaultRoutes[-2].to_dict() == {"status": 404, "src": "^/api(/.*)?$"}
        assert result.defaultRoutes[-1].to_dict() == {"src": "/(.*)", "dest": "/public/$1"}

    def test_nothing_to_build(self):
        result = detect_builders(["README.md"])
        assert result.errors is None
        assert result.builders is None
        assert result.defaultRoutes == []


class TestHandleMiss:
    def test_clean_urls_omit_extensions(self):
        files = ["api/index.js", "api/[id].js", "api/users/list.py"]
        result = detect_builders(files, None, {"featHandleMiss": True, "cleanUrls": True})
        assert result.errors is None
        for route in result.rewriteRoutes[:-1]:
            assert ".js" not in route.src and ".py" not in route.src
        assert len(result.redirectRoutes) == 2
        assert result.redirectRoutes[1].src == "^/api/(.+)(?:\\.(?:py|js))/?$"

    def test_dynamic_routes_go_to_rewrites(self):
        result = detect_builders(["api/[id].js", "api/user.js"], None, {"featHandleMiss": True})
        assert [r.to_dict() for r in result.defaultRoutes] == [
            {"handle": "miss"},
            {"src": "^/api/(.+)(?:\\.(?:js))$", "dest": "/api/$1", "check": True},
        ]
        assert [r.to_dict() for r in result.rewriteRoutes] == [
            {"src": "^/api/([^/]+)$", "dest": "/api/[id]?id=$1", "check": True},
            {"src": "^/api(/.*)?$", "status": 404, "continue": True},
        ]


def test_detection_is_deterministic():
    files = ["api/b.js", "api/[id]/index.py", "public/a.css", "api/a.go"]
    first = detect_builders(list(files)).to_dict()
    second = detect_builders(list(reversed(files))).to_dict()
    assert first == second


def test_input_list_is_not_mutated():
    files = ["b.js", "api/a.js"]
    detect_builders(files)
    assert files == ["b.js", "api/a.js"]
