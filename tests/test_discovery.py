"""Tests for tagged method discovery."""

import pytest

from tagrunner import annotations as tags
from tagrunner.annotations import TimeUnit
from tagrunner.core.discovery import Discoverer
from tagrunner.errors import InvalidTimeoutError, UnsupportedMethodError


class Calculator:
    @tags.before_all
    def open(self):
        pass

    @tags.before_method
    def reset(self):
        pass

    @tags.test
    def addition(self):
        pass

    @tags.test
    @tags.timeout(2, TimeUnit.SECONDS)
    @tags.description("divides slowly")
    def division(self):
        pass

    def helper(self):
        pass

    @tags.after_method
    def tidy(self):
        pass

    @tags.after_all
    def close(self):
        pass

    @tags.test
    def _hidden(self):
        pass


class ExtendedCalculator(Calculator):
    @tags.test
    def multiplication(self):
        pass

    def addition(self):
        """Override without tags drops the test."""


def names(handles):
    return [h.name for h in handles]


class TestDiscoverer:
    """Tests for Discoverer."""

    def test_partitions_by_role(self):
        """Test that every role list is populated."""
        methods = Discoverer().discover(Calculator)

        assert names(methods.before_all) == ["open"]
        assert names(methods.before_each) == ["reset"]
        assert names(methods.tests) == ["addition", "division"]
        assert names(methods.after_each) == ["tidy"]
        assert names(methods.after_all) == ["close"]

    def test_untagged_and_private_methods_ignored(self):
        """Test that helpers and underscore names are skipped."""
        methods = Discoverer().discover(Calculator)

        all_names = names(methods.tests) + names(methods.before_each)
        assert "helper" not in all_names
        assert "_hidden" not in all_names

    def test_timeout_and_description_carried(self):
        """Test modifier tags on a test handle."""
        division = Discoverer().discover(Calculator).tests[1]

        assert division.timeout.limit_millis == 2000
        assert division.description == "divides slowly"

    def test_test_without_modifiers(self):
        """Test that a plain test has no timeout or description."""
        addition = Discoverer().discover(Calculator).tests[0]

        assert addition.timeout is None
        assert addition.description is None

    def test_inherited_methods_come_first(self):
        """Test base-class declaration order and untagged overrides."""
        methods = Discoverer().discover(ExtendedCalculator)

        assert names(methods.tests) == ["division", "multiplication"]
        assert names(methods.before_all) == ["open"]

    def test_handle_with_several_roles(self):
        """Test that one method may appear under several roles."""

        class Dual:
            @tags.before_method
            @tags.after_method
            def checkpoint(self):
                pass

        methods = Discoverer().discover(Dual)
        assert names(methods.before_each) == ["checkpoint"]
        assert names(methods.after_each) == ["checkpoint"]

    def test_static_and_class_methods(self):
        """Test discovery of static and class methods."""

        class Mixed:
            @tags.test
            @staticmethod
            def static_check():
                pass

            @tags.before_all
            @classmethod
            def prepare(cls):
                pass

        methods = Discoverer().discover(Mixed)
        assert names(methods.tests) == ["static_check"]
        assert names(methods.before_all) == ["prepare"]

    def test_class_without_tags(self):
        """Test that an untagged class yields empty lists."""

        class Empty:
            def run(self):
                pass

        methods = Discoverer().discover(Empty)
        assert methods.total == 0

    def test_unknown_timeout_unit_is_fatal(self):
        """Test that discovery rejects an unrecognized unit."""

        class BadUnit:
            @tags.test
            @tags.timeout(1, "HOURS")
            def slow(self):
                pass

        with pytest.raises(InvalidTimeoutError) as exc_info:
            Discoverer().discover(BadUnit)

        assert "BadUnit.slow" in exc_info.value.method_name

    def test_non_positive_timeout_is_fatal(self):
        """Test that a zero duration is rejected."""

        class ZeroTime:
            @tags.test
            @tags.timeout(0)
            def instant(self):
                pass

        with pytest.raises(InvalidTimeoutError):
            Discoverer().discover(ZeroTime)

    def test_async_test_is_rejected(self):
        """Test that a coroutine test method is a configuration error."""

        class AsyncSuite:
            @tags.test
            async def fetch(self):
                pass

        with pytest.raises(UnsupportedMethodError) as exc_info:
            Discoverer().discover(AsyncSuite)

        assert exc_info.value.method_name.endswith("AsyncSuite.fetch")

    def test_async_hook_is_rejected(self):
        """Test that a coroutine hook is rejected as well."""

        class AsyncHook:
            @tags.before_all
            async def connect(self):
                pass

            @tags.test
            def works(self):
                pass

        with pytest.raises(UnsupportedMethodError):
            Discoverer().discover(AsyncHook)

    def test_untagged_async_method_is_ignored(self):
        """Test that async helpers without tags are left alone."""

        class WithHelper:
            async def helper(self):
                pass

            @tags.test
            def works(self):
                pass

        assert names(Discoverer().discover(WithHelper).tests) == ["works"]

    def test_discovery_is_stable(self):
        """Test that repeated discovery yields the same order."""
        first = Discoverer().discover(Calculator)
        second = Discoverer().discover(Calculator)

        assert names(first.tests) == names(second.tests)
