"""AssetCompiler: bundle source files into one compressed CSS/JS file.

The pipeline is linear:

    resolve assets -> per-asset filters -> concatenate
        -> compressor (skipped in debug mode) -> write target

Compressor selection happens first, so an unsupported target extension
fails before any asset is read. The target file is only replaced once
the whole pipeline has succeeded.
"""

from __future__ import annotations

import contextlib
import os
import stat
import tempfile
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import httpx

from asset_compiler.assets import AssetKind, AssetReference
from asset_compiler.config import DEFAULT_OPTIONS, CompilerOptions
from asset_compiler.discovery import DEFAULT_PATTERN, find_files
from asset_compiler.filters import compressor_for
from asset_compiler.observability import get_logger, span

# Mode given to newly created targets; replaced targets keep their own
TARGET_FILE_MODE = 0o644


class AssetCompiler:
    """Compile files to a single compressed CSS/JS file.

    Assets are kept in insertion order. Options start from
    ``CompilerOptions`` defaults and are overridden by set_option() and
    set_options(). Every mutator returns the compiler for chaining.

    Attributes:
        assets: Registered asset references, in order.
        options: Current CompilerOptions.

    Example:
        >>> (
        ...     AssetCompiler()
        ...     .set_option("debug", False)
        ...     .add_file("css/reset.css")
        ...     .add_glob("css/components", "*.scss")
        ...     .compile("public/app.css")
        ... )
    """

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the compiler.

        Args:
            options: Optional overrides applied over the defaults.
            http_client: Client used for remote assets. When omitted, a
                client is opened for each compile() that needs one.

        Raises:
            ConfigurationError: If an option is unknown or invalid.
        """
        self._assets: list[AssetReference] = []
        self._options: CompilerOptions = DEFAULT_OPTIONS
        self._http_client = http_client
        if options:
            self.set_options(options)

    @property
    def assets(self) -> tuple[AssetReference, ...]:
        """Registered assets in insertion order."""
        return tuple(self._assets)

    @property
    def options(self) -> CompilerOptions:
        """Current options."""
        return self._options

    def add_file(self, path: str | os.PathLike[str]) -> AssetCompiler:
        """Add a local file; filters are chosen from its extension."""
        return self._add(AssetReference.from_file(path, self._options))

    def add_glob(
        self,
        base_path: str | os.PathLike[str],
        pattern: str = DEFAULT_PATTERN,
    ) -> AssetCompiler:
        """Add every file under ``base_path`` whose name matches ``pattern``.

        See ``asset_compiler.discovery.find_files`` for the traversal rules.

        Raises:
            AssetResolutionError: If a directory is missing or unreadable.
        """
        for path in find_files(base_path, pattern):
            self.add_file(path)
        return self

    def add_remote(self, url: str) -> AssetCompiler:
        """Add an asset fetched over HTTP(S) at compile time.

        Raises:
            ConfigurationError: If ``url`` is not an http(s) URL.
        """
        return self._add(AssetReference.from_url(url, self._options))

    def set_option(self, key: str, value: Any) -> AssetCompiler:
        """Override a single option.

        Raises:
            ConfigurationError: If the key is unknown or the value invalid.
        """
        return self.set_options({key: value})

    def set_options(self, options: Mapping[str, Any]) -> AssetCompiler:
        """Merge ``options`` over the current options; later values win.

        Raises:
            ConfigurationError: If a key is unknown or a value invalid. The
                current options are left unchanged.
        """
        self._options = self._options.merge(options)
        get_logger().debug("options_updated", keys=sorted(options))
        return self

    def dump(self, target_path: str | os.PathLike[str]) -> str:
        """Return the content compile() would write to ``target_path``.

        Raises:
            InvalidTargetExtension: If the target is not .css or .js.
            AssetResolutionError: If an asset cannot be read or fetched.
            FilterExecutionError: If a filter or the compressor fails.
        """
        compressor = compressor_for(os.fspath(target_path), self._options)

        with self._http_session() as client:
            content = "".join(asset.render(client) for asset in self._assets)

        if self._options.debug:
            get_logger().debug("compression_skipped", compressor=compressor.name)
            return content

        return compressor.apply(content)

    def compile(self, target_path: str | os.PathLike[str]) -> AssetCompiler:
        """Compile every asset into ``target_path``, replacing it.

        Raises:
            InvalidTargetExtension: If the target is not .css or .js.
            AssetResolutionError: If an asset cannot be read or fetched.
            FilterExecutionError: If a filter or the compressor fails.
        """
        target = os.fspath(target_path)
        attributes = {
            "target": target,
            "assets": len(self._assets),
            "debug": self._options.debug,
        }
        with span("compile", attributes=attributes):
            content = self.dump(target)
            _write_atomic(Path(target), content.encode("utf-8"))
        return self

    def _add(self, asset: AssetReference) -> AssetCompiler:
        self._assets.append(asset)
        get_logger().debug(
            "asset_added",
            source=asset.source,
            kind=asset.kind.value,
            filters=[transform.name for transform in asset.filters],
        )
        return self

    @contextlib.contextmanager
    def _http_session(self) -> Iterator[httpx.Client | None]:
        if self._http_client is not None:
            yield self._http_client
        elif any(asset.kind is AssetKind.HTTP for asset in self._assets):
            with httpx.Client(
                timeout=self._options.http_timeout_seconds,
                follow_redirects=True,
            ) as client:
                yield client
        else:
            yield None


def _write_atomic(target: Path, data: bytes) -> None:
    """Write ``data`` to a sibling temporary file and rename it over ``target``."""
    target.parent.mkdir(parents=True, exist_ok=True)
    mode = _existing_mode(target)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


def _existing_mode(target: Path) -> int:
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return TARGET_FILE_MODE
