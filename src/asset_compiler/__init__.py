"""asset-compiler: bundle CSS/JS sources into one compressed file.

This package provides:
- AssetCompiler: Collect files, globs and URLs and compile them to a target
- CompilerOptions: Paths to external compilers/compressors and the debug flag
- Filters: Sass, Scss, Less, CoffeeScript, YUI and Closure wrappers
- Error types raised by the pipeline

Example:
    >>> from asset_compiler import AssetCompiler
    >>> AssetCompiler({"debug": False}).add_glob("assets/css", "*.scss").compile("public/app.css")
"""

from __future__ import annotations

__version__ = "0.1.0"

from asset_compiler.assets import AssetKind, AssetReference
from asset_compiler.compiler import AssetCompiler
from asset_compiler.config import DEFAULT_OPTIONS, CompilerOptions
from asset_compiler.discovery import find_files
from asset_compiler.errors import (
    AssetCompilerError,
    AssetResolutionError,
    ConfigurationError,
    FilterExecutionError,
    InvalidTargetExtension,
)
from asset_compiler.filters import (
    ClosureJsCompressorFilter,
    CoffeeScriptFilter,
    LessFilter,
    SassFilter,
    ScssFilter,
    TransformFilter,
    YuiCssCompressorFilter,
    YuiJsCompressorFilter,
    compressor_for,
    filters_for,
)
from asset_compiler.observability import configure_logging

__all__ = [
    "__version__",
    # Compiler
    "AssetCompiler",
    "AssetReference",
    "AssetKind",
    "find_files",
    # Configuration
    "CompilerOptions",
    "DEFAULT_OPTIONS",
    "configure_logging",
    # Filters
    "TransformFilter",
    "SassFilter",
    "ScssFilter",
    "LessFilter",
    "CoffeeScriptFilter",
    "YuiCssCompressorFilter",
    "YuiJsCompressorFilter",
    "ClosureJsCompressorFilter",
    "filters_for",
    "compressor_for",
    # Errors
    "AssetCompilerError",
    "InvalidTargetExtension",
    "AssetResolutionError",
    "FilterExecutionError",
    "ConfigurationError",
]
