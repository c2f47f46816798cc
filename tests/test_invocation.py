"""
Tests for native-image command line construction.
"""

from pathlib import Path

import pytest

from nativebuild.compiler.invocation import (
    NATIVE_IMAGE,
    STATIC_LIBC_FLAG,
    build_invocation,
    split_arguments,
    version_invocation,
)
from nativebuild.errors import ConfigError
from nativebuild.stack import StackID

LAYER = Path("/layers/native-image")


def invocation(arguments="", stack_id=StackID.BIONIC):
    return build_invocation(
        arguments=arguments,
        stack_id=stack_id,
        layer_path=LAYER,
        start_class="com.example.Application",
        classpath="/workspace:/workspace/BOOT-INF/classes",
    )


class TestBuildInvocation:
    def test_argument_order(self):
        execution = invocation("--no-fallback -H:+ReportExceptionStackTraces")

        assert execution.command == NATIVE_IMAGE
        assert execution.args == (
            "--no-fallback",
            "-H:+ReportExceptionStackTraces",
            "-H:Name=/layers/native-image/com.example.Application",
            "-cp",
            "/workspace:/workspace/BOOT-INF/classes",
            "com.example.Application",
        )
        assert execution.dir == LAYER

    def test_quoted_arguments(self):
        execution = invocation("-Dgreeting='hello world' --verbose")

        assert execution.args[:2] == ("-Dgreeting=hello world", "--verbose")

    def test_no_arguments(self):
        assert invocation().args[0].startswith("-H:Name=")

    def test_tiny_stack_adds_flag_before_name(self):
        execution = invocation("a b", StackID.TINY)

        assert execution.args.count(STATIC_LIBC_FLAG) == 1
        position = execution.args.index(STATIC_LIBC_FLAG)
        assert execution.args[position + 1].startswith("-H:Name=")
        assert execution.args[:position] == ("a", "b")

    @pytest.mark.parametrize("stack_id", [StackID.BIONIC, StackID.JAMMY, StackID.UNKNOWN])
    def test_other_stacks_have_no_flag(self, stack_id):
        tiny = invocation("a b", StackID.TINY).args

        assert STATIC_LIBC_FLAG not in invocation("a b", stack_id).args
        assert invocation("a b", stack_id).args == tuple(
            arg for arg in tiny if arg != STATIC_LIBC_FLAG
        )

    def test_unbalanced_quotes(self):
        with pytest.raises(ConfigError, match="Unable to parse"):
            split_arguments("-Dx='unterminated")


class TestVersionInvocation:
    def test_version(self):
        execution = version_invocation(LAYER)

        assert execution.command_line() == ["native-image", "--version"]
        assert execution.dir == LAYER


class TestStackID:
    def test_parse_known(self):
        assert StackID.parse("io.paketo.stacks.tiny") is StackID.TINY
        assert StackID.parse(" io.buildpacks.stacks.bionic ") is StackID.BIONIC

    def test_parse_unknown(self):
        assert StackID.parse("org.example.custom") is StackID.UNKNOWN
        assert StackID.parse(None) is StackID.UNKNOWN
        assert StackID.parse("") is StackID.UNKNOWN

    def test_only_tiny_is_tiny(self):
        assert [s for s in StackID if s.is_tiny] == [StackID.TINY]
