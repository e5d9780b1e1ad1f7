"""Unit tests for the asset-compiler exception hierarchy."""

from __future__ import annotations

import pytest

from asset_compiler.errors import (
    AssetCompilerError,
    AssetResolutionError,
    ConfigurationError,
    FilterExecutionError,
    InvalidTargetExtension,
)


class TestAssetCompilerError:
    """Tests for the base AssetCompilerError exception."""

    def test_str_returns_user_message(self) -> None:
        """str(error) should return user_message."""
        error = AssetCompilerError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.user_message == "Something went wrong"

    def test_logs_internal_details(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Internal details are logged but not part of the message."""
        error = AssetCompilerError("User sees this", internal_details="stderr: line 3")

        captured = capsys.readouterr()
        assert "stderr: line 3" in captured.out
        assert "asset_compiler_error" in captured.out
        assert "stderr" not in str(error)

    def test_no_log_without_internal_details(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Nothing is logged when internal_details is omitted."""
        AssetCompilerError("Just a message")
        assert "asset_compiler_error" not in capsys.readouterr().out

    @pytest.mark.parametrize(
        "error",
        [
            InvalidTargetExtension("out.xyz", "xyz"),
            AssetResolutionError("a.css", "file not found"),
            FilterExecutionError("sass", "process exited with status 1"),
            ConfigurationError("Unknown option", option="nope"),
        ],
    )
    def test_subclasses_inherit_base(self, error: AssetCompilerError) -> None:
        """Every package error is an AssetCompilerError."""
        assert isinstance(error, AssetCompilerError)


class TestInvalidTargetExtension:
    """Tests for InvalidTargetExtension."""

    def test_message_lists_supported_extensions(self) -> None:
        """Message names the rejected path and the accepted extensions."""
        error = InvalidTargetExtension("build/app.xyz", "xyz")
        assert "(css|js)" in str(error)
        assert "build/app.xyz" in str(error)
        assert error.extension == "xyz"


class TestAssetResolutionError:
    """Tests for AssetResolutionError."""

    def test_stores_source_and_reason(self) -> None:
        """Source and reason are kept as attributes and shown in the message."""
        error = AssetResolutionError("css/missing.css", "file not found")
        assert error.source == "css/missing.css"
        assert error.reason == "file not found"
        assert str(error) == "Cannot resolve asset 'css/missing.css': file not found"


class TestFilterExecutionError:
    """Tests for FilterExecutionError."""

    def test_stores_returncode(self) -> None:
        """The process exit status is kept."""
        error = FilterExecutionError("yui_css", "process exited with status 2", returncode=2)
        assert error.filter_name == "yui_css"
        assert error.returncode == 2
        assert "yui_css" in str(error)

    def test_returncode_defaults_to_none(self) -> None:
        """returncode is None when the process never ran."""
        assert FilterExecutionError("sass", "executable not found").returncode is None


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_option_context_in_message(self) -> None:
        """The offending option is appended to the message."""
        error = ConfigurationError("Unknown option", option="sassPath")
        assert str(error) == "Unknown option (option 'sassPath')"
        assert error.option == "sassPath"

    def test_without_option(self) -> None:
        """Message is unchanged when no option is given."""
        assert str(ConfigurationError("Bad URL")) == "Bad URL"
