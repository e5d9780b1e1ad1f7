"""Pydantic configuration model for asset-compiler.

This module provides:
- CompilerOptions: Option set with defaults for every external binary
- DEFAULT_OPTIONS: The default option instance

Options are addressed by their camelCase names (``sassCompilerPath``)
or by the Python attribute name (``sass_compiler_path``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from asset_compiler.errors import ConfigurationError


class CompilerOptions(BaseModel):
    """Options controlling filters and compression.

    Attributes:
        debug: Skip the final compression step (default True).
        sass_compiler_path: Path to the Sass/Scss compiler binary.
        closure_compiler_jar_path: Path to the Closure Compiler jar (JS compressor).
        yui_compressor_jar_path: Path to the YUI Compressor jar (CSS compressor).
        lessc_path: Path to the Less compiler binary.
        coffee_path: Path to the CoffeeScript compiler binary.
        java_path: Java executable used to run the jar-based compressors.
        js_compressor: Which compressor handles .js targets ("closure" or "yui").
        http_timeout_seconds: Timeout for fetching remote assets.

    Example:
        >>> options = CompilerOptions().merge({"sassCompilerPath": "/custom/sass"})
        >>> options.sass_compiler_path
        '/custom/sass'
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    debug: bool = Field(
        default=True,
        description="Suppress the final compression step",
    )
    sass_compiler_path: str = Field(
        default="/usr/bin/sass",
        alias="sassCompilerPath",
        min_length=1,
        description="Path to the Sass/Scss compiler binary",
    )
    closure_compiler_jar_path: str = Field(
        default="/usr/share/closure-compiler/compiler.jar",
        alias="closureCompilerJarPath",
        min_length=1,
        description="Path to the Closure Compiler jar",
    )
    yui_compressor_jar_path: str = Field(
        default="/usr/share/yui-compressor/yui-compressor.jar",
        alias="yuiCompressorJarPath",
        min_length=1,
        description="Path to the YUI Compressor jar",
    )
    lessc_path: str = Field(
        default="/usr/bin/lessc",
        alias="lesscPath",
        min_length=1,
        description="Path to the Less compiler binary",
    )
    coffee_path: str = Field(
        default="/usr/bin/coffee",
        alias="coffeePath",
        min_length=1,
        description="Path to the CoffeeScript compiler binary",
    )
    java_path: str = Field(
        default="java",
        alias="javaPath",
        min_length=1,
        description="Java executable for jar-based compressors",
    )
    js_compressor: Literal["closure", "yui"] = Field(
        default="closure",
        alias="jsCompressor",
        description="Compressor used for .js targets",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        alias="httpTimeoutSeconds",
        gt=0.0,
        description="Timeout for remote asset fetches in seconds",
    )

    @classmethod
    def option_names(cls) -> dict[str, str]:
        """Map every accepted key (alias and attribute name) to its attribute name."""
        names: dict[str, str] = {}
        for field_name, field in cls.model_fields.items():
            names[field_name] = field_name
            if field.alias:
                names[field.alias] = field_name
        return names

    def merge(self, updates: Mapping[str, Any]) -> CompilerOptions:
        """Return a new instance with ``updates`` applied over the current values.

        Args:
            updates: Option values keyed by camelCase or attribute name.

        Returns:
            Validated CompilerOptions. The current instance is unchanged.

        Raises:
            ConfigurationError: If a key is unknown or a value is invalid.
        """
        names = self.option_names()
        data = self.model_dump()
        for key, value in updates.items():
            if key not in names:
                raise ConfigurationError("Unknown option", option=key)
            data[names[key]] = value

        try:
            return type(self).model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            option = ".".join(str(part) for part in first["loc"]) or None
            raise ConfigurationError(
                "Invalid option value",
                option=option,
                internal_details=str(e),
            ) from e

    def to_mapping(self) -> dict[str, Any]:
        """Return the options keyed by their camelCase names."""
        return self.model_dump(by_alias=True)


DEFAULT_OPTIONS = CompilerOptions()
