"""Tests for bundlerig.resolve: variable interpolation on parsed config."""

import logging
import sys

import pytest

from bundlerig.errors import ConfigError
from bundlerig.resolve import Resolver, default_context


class TestResolveRef:
    def test_bare_reference(self):
        r = Resolver({"root": "/proj"})
        assert r._resolve_ref("root") == "/proj"

    def test_dotted_reference_dict(self):
        r = Resolver({"env": {"HOME": "/home/user"}})
        assert r._resolve_ref("env.HOME") == "/home/user"

    def test_dotted_reference_getattr(self):
        class Paths:
            store = "internals/node_modules"

        r = Resolver({"paths": Paths()})
        assert r._resolve_ref("paths.store") == "internals/node_modules"

    def test_undefined_raises(self):
        r = Resolver({"root": "/proj"})
        with pytest.raises(ValueError, match="missing"):
            r._resolve_ref("missing")

    def test_undefined_is_config_error(self):
        r = Resolver({"root": "/proj"})
        with pytest.raises(ConfigError, match="HOME_X"):
            r.resolve({"command": "echo ${HOME_X}"})

    def test_unset_env_resolves_empty(self, caplog):
        r = Resolver({"env": {"HOME": "/home"}})
        with caplog.at_level(logging.WARNING, logger="bundlerig.resolve"):
            assert r._resolve_ref("env.MISSING") == ""
        assert "MISSING" in caplog.text

    def test_undefined_nested_raises(self):
        r = Resolver({"paths": {"store": "x"}})
        with pytest.raises(ValueError, match="paths.missing"):
            r._resolve_ref("paths.missing")

    def test_callable_value(self):
        r = Resolver({"cwd": lambda: "/tmp/work"})
        assert r._resolve_ref("cwd") == "/tmp/work"

    def test_callable_not_invoked_on_intermediate(self):
        r = Resolver({"get_value": lambda: "result"})
        with pytest.raises(ValueError, match="get_value.attr"):
            r._resolve_ref("get_value.attr")


class TestResolveValue:
    def test_no_interpolation(self):
        r = Resolver({"root": "/proj"})
        assert r._resolve_value("build/index") == "build/index"

    def test_single_full_interpolation_preserves_type_bool(self):
        r = Resolver({"release": True})
        assert r._resolve_value("${release}") is True

    def test_single_full_interpolation_preserves_type_list(self):
        r = Resolver({"entries": ["src/bin.ts"]})
        assert r._resolve_value("${entries}") == ["src/bin.ts"]

    def test_embedded_interpolation_stringifies(self):
        r = Resolver({"platform": "linux"})
        assert r._resolve_value("helpers/${platform}/open") == "helpers/linux/open"

    def test_multiple_interpolations(self):
        r = Resolver({"root": "/proj", "name": "cli"})
        assert r._resolve_value("${root}/build/${name}") == "/proj/build/cli"

    def test_escaped_dollar_not_interpolated(self):
        r = Resolver({"root": "/proj"})
        assert r._resolve_value("$${root}") == "${root}"

    def test_double_brace_passthrough(self):
        r = Resolver({"root": "/proj"})
        assert r._resolve_value("${{ root }}") == "${{ root }}"


class TestResolve:
    def test_nested_dict(self):
        r = Resolver({"root": "/proj"})
        data = {"target": [{"cli": {"manifest": "${root}/package.json"}}]}
        assert r.resolve(data) == {"target": [{"cli": {"manifest": "/proj/package.json"}}]}

    def test_list_values(self):
        r = Resolver({"a": "x", "b": "y"})
        assert r.resolve({"items": ["${a}", "${b}"]}) == {"items": ["x", "y"]}

    def test_non_string_values_untouched(self):
        r = Resolver({"root": "/proj"})
        data = {"bundle": True, "count": 5, "empty": None}
        assert r.resolve(data) == data

    def test_original_dict_not_mutated(self):
        r = Resolver({"root": "/proj"})
        data = {"outfile": "${root}/build"}
        r.resolve(data)
        assert data == {"outfile": "${root}/build"}

    def test_empty_context(self):
        r = Resolver()
        assert r.resolve({"title": "plain"}) == {"title": "plain"}


class TestDefaultContext:
    def test_builtin_variables(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BUNDLERIG_TEST", "yes")
        ctx = default_context(tmp_path)
        assert ctx["root"] == str(tmp_path.resolve())
        assert ctx["platform"] == sys.platform
        assert ctx["env"]["BUNDLERIG_TEST"] == "yes"

    def test_extra_overrides(self, tmp_path):
        ctx = default_context(tmp_path, {"platform": "win32", "release": True})
        assert ctx["platform"] == "win32"
        assert ctx["release"] is True
