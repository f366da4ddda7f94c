"""Tests for bundlerig.step and bundlerig.stepop."""

from __future__ import annotations

import logging

import pytest

from bundlerig.context import Context
from bundlerig.step import Step, _step_registry, step
from bundlerig.stepop import Ensure, Present

# -- Concrete steps for testing --


class AlwaysEqual(Step):
    def equals(self, ctx: Context) -> bool:
        return True

    def apply(self, ctx: Context) -> None:
        pass


class NeverEqual(Step):
    def equals(self, ctx: Context) -> bool:
        return False

    def exists(self, ctx: Context) -> bool:
        return False

    def apply(self, ctx: Context) -> None:
        self._applied = True


class ExistsButNotEqual(Step):
    """Artifact exists but is out of date."""

    def equals(self, ctx: Context) -> bool:
        return False

    def exists(self, ctx: Context) -> bool:
        return True

    def apply(self, ctx: Context) -> None:
        self._applied = True


class Skipped(NeverEqual):
    def skip(self, ctx: Context) -> bool:
        return True


class Failing(NeverEqual):
    def apply(self, ctx: Context) -> None:
        raise OSError("disk full")


def _make_ctx(tmp_path, cli_target, dry_run: bool = False) -> Context:
    return Context(cli_target, root=tmp_path, dry_run=dry_run)


# -- Step tests --


class TestStep:
    def test_exists_defaults_to_equals(self, ctx):
        assert AlwaysEqual().exists(ctx) is True

    def test_exists_overridable(self, ctx):
        s = ExistsButNotEqual()
        assert s.exists(ctx) is True
        assert s.equals(ctx) is False

    def test_skip_defaults_false(self, ctx):
        assert AlwaysEqual().skip(ctx) is False

    def test_str_is_class_name(self):
        assert str(AlwaysEqual()) == "AlwaysEqual"


# -- Present tests --


class TestPresent:
    def test_skips_when_exists(self, ctx):
        s = ExistsButNotEqual()
        Present(s)(ctx)
        assert not hasattr(s, "_applied")

    def test_applies_when_not_exists(self, ctx):
        s = NeverEqual()
        Present(s)(ctx)
        assert s._applied is True

    def test_dry_run_skips_apply(self, tmp_path, cli_target):
        s = NeverEqual()
        Present(s)(_make_ctx(tmp_path, cli_target, dry_run=True))
        assert not hasattr(s, "_applied")

    def test_skips_when_not_applicable(self, ctx):
        s = Skipped()
        Present(s)(ctx)
        assert not hasattr(s, "_applied")


# -- Ensure tests --


class TestEnsure:
    def test_skips_when_equal(self, ctx):
        Ensure(AlwaysEqual())(ctx)  # should not raise

    def test_applies_when_not_equal(self, ctx):
        s = ExistsButNotEqual()
        Ensure(s)(ctx)
        assert s._applied is True

    def test_dry_run_skips_apply(self, tmp_path, cli_target):
        s = ExistsButNotEqual()
        Ensure(s)(_make_ctx(tmp_path, cli_target, dry_run=True))
        assert not hasattr(s, "_applied")

    def test_skips_when_not_applicable(self, ctx):
        s = Skipped()
        Ensure(s)(ctx)
        assert not hasattr(s, "_applied")

    def test_apply_errors_propagate(self, ctx):
        with pytest.raises(OSError, match="disk full"):
            Ensure(Failing())(ctx)


# -- Logging tests --


class TestStepOpLogging:
    def test_present_logs_skip(self, ctx, caplog):
        with caplog.at_level(logging.DEBUG, logger="bundlerig.stepop"):
            Present(AlwaysEqual())(ctx)
        assert "already exists" in caplog.text

    def test_ensure_logs_skip(self, ctx, caplog):
        with caplog.at_level(logging.DEBUG, logger="bundlerig.stepop"):
            Ensure(AlwaysEqual())(ctx)
        assert "up to date" in caplog.text

    def test_logs_not_applicable(self, ctx, caplog):
        with caplog.at_level(logging.DEBUG, logger="bundlerig.stepop"):
            Ensure(Skipped())(ctx)
        assert "not applicable" in caplog.text

    def test_logs_apply(self, ctx, caplog):
        with caplog.at_level(logging.INFO, logger="bundlerig.stepop"):
            Ensure(NeverEqual())(ctx)
        assert "Applying NeverEqual" in caplog.text

    def test_present_logs_dry_run(self, tmp_path, cli_target, caplog):
        with caplog.at_level(logging.INFO, logger="bundlerig.stepop"):
            Present(NeverEqual())(_make_ctx(tmp_path, cli_target, dry_run=True))
        assert "DRY RUN" in caplog.text

    def test_ensure_logs_dry_run(self, tmp_path, cli_target, caplog):
        with caplog.at_level(logging.INFO, logger="bundlerig.stepop"):
            Ensure(ExistsButNotEqual())(_make_ctx(tmp_path, cli_target, dry_run=True))
        assert "DRY RUN" in caplog.text


# -- @step() decorator tests --


class TestStepDecorator:
    @pytest.fixture(autouse=True)
    def _clean_registry(self):
        saved = _step_registry.copy()
        yield
        _step_registry.clear()
        _step_registry.update(saved)

    def test_registers_class(self):
        @step("test_widget")
        class Widget(AlwaysEqual):
            pass

        assert _step_registry["test_widget"] is Widget

    def test_returns_class_unchanged(self):
        @step("test_gadget")
        class Gadget(AlwaysEqual):
            pass

        assert Gadget.__name__ == "Gadget"
