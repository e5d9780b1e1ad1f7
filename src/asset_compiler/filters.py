"""Transform filters and compressors backed by external processes.

This module provides:
- TransformFilter: Protocol every filter satisfies
- ProcessFilter: Base class that runs a binary over a temporary input file
- Sass/Scss/Less/CoffeeScript source filters
- YUI and Closure compressors
- filters_for() / compressor_for(): extension lookup tables

The package never parses CSS or JS itself; every transform is delegated
to the configured binary and its stdout is taken as the result.
"""

from __future__ import annotations

import os
import subprocess
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Protocol, runtime_checkable
from urllib.parse import urlsplit

from asset_compiler.config import CompilerOptions
from asset_compiler.errors import FilterExecutionError, InvalidTargetExtension
from asset_compiler.observability import get_logger

REMOTE_SCHEMES = frozenset({"http", "https"})


@runtime_checkable
class TransformFilter(Protocol):
    """Anything that turns text into text.

    Implementations must not keep mutable state between calls.
    """

    name: ClassVar[str]

    def apply(self, content: str, *, source: str | None = None) -> str:
        """Transform ``content``.

        Args:
            content: Text to transform.
            source: Path or URL the content came from, if any.

        Returns:
            Transformed text.

        Raises:
            FilterExecutionError: If the transform fails.
        """
        ...


def is_remote_url(source: str) -> bool:
    """Return True if ``source`` is an http(s) URL."""
    return urlsplit(source).scheme.lower() in REMOTE_SCHEMES


def extension_of(source: str) -> str:
    """Return the lowercased extension of a path or URL, without the dot.

    For URLs only the path component is considered, so query strings and
    fragments do not affect the result.

    Example:
        >>> extension_of("https://cdn.example.com/app.coffee?v=3")
        'coffee'
    """
    path = urlsplit(source).path if is_remote_url(source) else source
    return os.path.splitext(path)[1].lstrip(".").lower()


def run_process(filter_name: str, command: list[str]) -> str:
    """Run ``command`` and return its stdout.

    Args:
        filter_name: Filter name used in errors and log events.
        command: Argument vector; the first element is the executable.

    Returns:
        Decoded stdout of the process.

    Raises:
        FilterExecutionError: If the executable is missing, cannot be
            started, exits with a non-zero status, or prints output that
            is not valid UTF-8.
    """
    logger = get_logger()
    logger.debug("filter_process_started", filter=filter_name, command=command)

    try:
        completed = subprocess.run(command, capture_output=True, check=False)
    except FileNotFoundError as e:
        raise FilterExecutionError(
            filter_name,
            f"executable not found: {command[0]}",
            internal_details=str(e),
        ) from e
    except OSError as e:
        raise FilterExecutionError(
            filter_name,
            f"cannot start {command[0]}",
            internal_details=str(e),
        ) from e

    if completed.returncode != 0:
        stderr = completed.stderr.decode("utf-8", errors="replace")
        raise FilterExecutionError(
            filter_name,
            f"process exited with status {completed.returncode}",
            returncode=completed.returncode,
            internal_details=stderr.strip() or None,
        )

    try:
        return completed.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FilterExecutionError(
            filter_name,
            "output is not valid UTF-8",
            internal_details=str(e),
        ) from e


@dataclass(frozen=True)
class ProcessFilter(ABC):
    """Base class for filters that run an external binary.

    The input is written to a temporary file carrying ``suffix`` so that
    tools which infer syntax from the extension behave correctly. The
    temporary directory is removed when the call ends, successful or not.
    """

    name: ClassVar[str] = "process"
    suffix: ClassVar[str] = ".txt"

    def apply(self, content: str, *, source: str | None = None) -> str:
        """Run the binary over ``content`` and return its stdout."""
        source_dir = _local_directory(source)
        with tempfile.TemporaryDirectory(prefix="asset-compiler-") as tmp_dir:
            input_path = Path(tmp_dir) / f"input{self.suffix}"
            input_path.write_text(content, encoding="utf-8")
            return run_process(self.name, self.command(str(input_path), source_dir))

    @abstractmethod
    def command(self, input_path: str, source_dir: str | None) -> list[str]:
        """Build the argument vector for ``input_path``."""
        ...


def _local_directory(source: str | None) -> str | None:
    if source is None or is_remote_url(source):
        return None
    return str(Path(source).resolve().parent)


@dataclass(frozen=True)
class SassFilter(ProcessFilter):
    """Compile indented Sass syntax to CSS."""

    sass_path: str = "/usr/bin/sass"

    name: ClassVar[str] = "sass"
    suffix: ClassVar[str] = ".sass"

    def command(self, input_path: str, source_dir: str | None) -> list[str]:
        args = [self.sass_path]
        if source_dir:
            args += ["--load-path", source_dir]
        return [*args, input_path]


@dataclass(frozen=True)
class ScssFilter(SassFilter):
    """Compile SCSS syntax to CSS."""

    name: ClassVar[str] = "scss"
    suffix: ClassVar[str] = ".scss"


@dataclass(frozen=True)
class LessFilter(ProcessFilter):
    """Compile Less to CSS with lessc."""

    lessc_path: str = "/usr/bin/lessc"

    name: ClassVar[str] = "less"
    suffix: ClassVar[str] = ".less"

    def command(self, input_path: str, source_dir: str | None) -> list[str]:
        args = [self.lessc_path]
        if source_dir:
            args.append(f"--include-path={source_dir}")
        return [*args, input_path]


@dataclass(frozen=True)
class CoffeeScriptFilter(ProcessFilter):
    """Compile CoffeeScript to JavaScript."""

    coffee_path: str = "/usr/bin/coffee"

    name: ClassVar[str] = "coffee"
    suffix: ClassVar[str] = ".coffee"

    def command(self, input_path: str, source_dir: str | None) -> list[str]:
        return [self.coffee_path, "--compile", "--print", input_path]


@dataclass(frozen=True)
class YuiCssCompressorFilter(ProcessFilter):
    """Minify CSS with the YUI Compressor jar."""

    jar_path: str = "/usr/share/yui-compressor/yui-compressor.jar"
    java_path: str = "java"

    name: ClassVar[str] = "yui_css"
    suffix: ClassVar[str] = ".css"
    content_type: ClassVar[str] = "css"

    def command(self, input_path: str, source_dir: str | None) -> list[str]:
        return [
            self.java_path,
            "-jar",
            self.jar_path,
            "--type",
            self.content_type,
            "--charset",
            "utf-8",
            input_path,
        ]


@dataclass(frozen=True)
class YuiJsCompressorFilter(YuiCssCompressorFilter):
    """Minify JavaScript with the YUI Compressor jar."""

    name: ClassVar[str] = "yui_js"
    suffix: ClassVar[str] = ".js"
    content_type: ClassVar[str] = "js"


@dataclass(frozen=True)
class ClosureJsCompressorFilter(ProcessFilter):
    """Minify JavaScript with the Closure Compiler jar."""

    jar_path: str = "/usr/share/closure-compiler/compiler.jar"
    java_path: str = "java"

    name: ClassVar[str] = "closure_js"
    suffix: ClassVar[str] = ".js"

    def command(self, input_path: str, source_dir: str | None) -> list[str]:
        return [self.java_path, "-jar", self.jar_path, "--js", input_path]


# Source extension -> filter chain, applied in order
SOURCE_FILTERS: dict[str, Callable[[CompilerOptions], tuple[TransformFilter, ...]]] = {
    "sass": lambda options: (SassFilter(options.sass_compiler_path),),
    "scss": lambda options: (ScssFilter(options.sass_compiler_path),),
    "less": lambda options: (LessFilter(options.lessc_path),),
    "coffee": lambda options: (CoffeeScriptFilter(options.coffee_path),),
}


def _js_compressor(options: CompilerOptions) -> TransformFilter:
    if options.js_compressor == "yui":
        return YuiJsCompressorFilter(options.yui_compressor_jar_path, options.java_path)
    return ClosureJsCompressorFilter(options.closure_compiler_jar_path, options.java_path)


# Target extension -> compressor
TARGET_COMPRESSORS: dict[str, Callable[[CompilerOptions], TransformFilter]] = {
    "css": lambda options: YuiCssCompressorFilter(
        options.yui_compressor_jar_path, options.java_path
    ),
    "js": _js_compressor,
}


def filters_for(source: str, options: CompilerOptions) -> tuple[TransformFilter, ...]:
    """Return the filter chain for ``source`` based on its extension.

    Unknown extensions (and files without one) get an empty chain.
    """
    factory = SOURCE_FILTERS.get(extension_of(source))
    if factory is None:
        return ()
    return factory(options)


def compressor_for(target_path: str, options: CompilerOptions) -> TransformFilter:
    """Return the compressor for ``target_path`` based on its extension.

    Raises:
        InvalidTargetExtension: If the extension is not css or js.
    """
    extension = extension_of(target_path)
    factory = TARGET_COMPRESSORS.get(extension)
    if factory is None:
        raise InvalidTargetExtension(target_path, extension)
    return factory(options)
