"""Asset references and content resolution.

An AssetReference names one input (a local file or a remote URL) and the
filter chain chosen for it when it was added. References are immutable;
content is only read when the compiler renders the bundle.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import httpx

from asset_compiler.config import DEFAULT_OPTIONS, CompilerOptions
from asset_compiler.errors import AssetResolutionError, ConfigurationError
from asset_compiler.filters import TransformFilter, filters_for, is_remote_url
from asset_compiler.observability import get_logger


class AssetKind(str, Enum):
    """Where an asset's content comes from."""

    FILE = "file"
    HTTP = "http"


@dataclass(frozen=True)
class AssetReference:
    """One input of the bundle.

    Attributes:
        source: Local file path or http(s) URL.
        kind: FILE or HTTP.
        filters: Transform filters applied in order when rendering.

    Example:
        >>> ref = AssetReference.from_file("css/main.scss", CompilerOptions())
        >>> [f.name for f in ref.filters]
        ['scss']
    """

    source: str
    kind: AssetKind
    filters: tuple[TransformFilter, ...] = ()

    @classmethod
    def from_file(cls, path: str | os.PathLike[str], options: CompilerOptions) -> AssetReference:
        """Create a reference to a local file, binding filters from its extension."""
        source = os.fspath(path)
        return cls(source=source, kind=AssetKind.FILE, filters=filters_for(source, options))

    @classmethod
    def from_url(cls, url: str, options: CompilerOptions) -> AssetReference:
        """Create a reference to a remote asset, binding filters from the URL path.

        Raises:
            ConfigurationError: If ``url`` is not an http(s) URL.
        """
        if not is_remote_url(url):
            raise ConfigurationError(f"Remote assets must use http or https: {url}")
        return cls(source=url, kind=AssetKind.HTTP, filters=filters_for(url, options))

    def load(
        self,
        client: httpx.Client | None = None,
        *,
        timeout: float = DEFAULT_OPTIONS.http_timeout_seconds,
    ) -> str:
        """Read the raw asset content.

        Args:
            client: HTTP client for remote assets. A temporary client is
                created when none is given.
            timeout: Timeout in seconds for the temporary client.

        Returns:
            Raw content, decoded as UTF-8 for files.

        Raises:
            AssetResolutionError: If the content cannot be read or fetched.
        """
        if self.kind is AssetKind.HTTP:
            if client is None:
                with httpx.Client(timeout=timeout, follow_redirects=True) as owned:
                    return self._fetch(owned)
            return self._fetch(client)
        return self._read()

    def render(self, client: httpx.Client | None = None) -> str:
        """Load the content and run it through every filter in order."""
        content = self.load(client)
        for transform in self.filters:
            content = transform.apply(content, source=self.source)
        get_logger().debug(
            "asset_rendered",
            source=self.source,
            filters=[transform.name for transform in self.filters],
            length=len(content),
        )
        return content

    def _read(self) -> str:
        try:
            return Path(self.source).read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise AssetResolutionError(self.source, "file not found") from e
        except IsADirectoryError as e:
            raise AssetResolutionError(self.source, "path is a directory") from e
        except UnicodeDecodeError as e:
            raise AssetResolutionError(
                self.source,
                "content is not valid UTF-8",
                internal_details=str(e),
            ) from e
        except OSError as e:
            raise AssetResolutionError(
                self.source,
                "file is not readable",
                internal_details=str(e),
            ) from e

    def _fetch(self, client: httpx.Client) -> str:
        try:
            response = client.get(self.source)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AssetResolutionError(
                self.source,
                f"server returned status {e.response.status_code}",
                internal_details=e.response.text[:200],
            ) from e
        except httpx.HTTPError as e:
            raise AssetResolutionError(
                self.source,
                "request failed",
                internal_details=str(e),
            ) from e
        return response.text
