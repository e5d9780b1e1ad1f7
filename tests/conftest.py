"""Shared pytest fixtures for asset-compiler tests.

Provides structlog configuration for output capture, a small source tree
of CSS/JS assets, and POSIX shell scripts standing in for sass, lessc,
coffee and java.
"""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest
import structlog


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


def write_script(path: Path, body: str) -> Path:
    """Write an executable /bin/sh script and return its path."""
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


# The input file is always the last argument
_LAST_ARG = "for last; do :; done\n"


@pytest.fixture
def fake_tools(tmp_path: Path) -> dict[str, Path]:
    """Create stand-in binaries for every external tool.

    - sass/lessc/coffee prefix the input with a marker comment
    - java "minifies" by deleting newlines and spaces
    - broken writes to stderr and exits with status 3
    - garbled prints bytes that are not valid UTF-8

    Returns:
        Mapping of tool name to script path.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return {
        "sass": write_script(
            bin_dir / "sass", _LAST_ARG + "printf '/* sass */\\n'\ncat \"$last\"\n"
        ),
        "lessc": write_script(
            bin_dir / "lessc", _LAST_ARG + "printf '/* less */\\n'\ncat \"$last\"\n"
        ),
        "coffee": write_script(
            bin_dir / "coffee", _LAST_ARG + "printf '// coffee\\n'\ncat \"$last\"\n"
        ),
        "java": write_script(bin_dir / "java", _LAST_ARG + "tr -d ' \\n' < \"$last\"\n"),
        "broken": write_script(bin_dir / "broken", "echo 'boom' >&2\nexit 3\n"),
        "garbled": write_script(bin_dir / "garbled", "printf '\\377\\376'\n"),
    }


@pytest.fixture
def tool_options(fake_tools: dict[str, Path]) -> dict[str, str]:
    """Options pointing every binary at its stand-in script."""
    return {
        "sassCompilerPath": str(fake_tools["sass"]),
        "lesscPath": str(fake_tools["lessc"]),
        "coffeePath": str(fake_tools["coffee"]),
        "javaPath": str(fake_tools["java"]),
    }


@pytest.fixture
def asset_tree(tmp_path: Path) -> Path:
    """Create a small source tree.

    Layout::

        assets/
            a.css
            b.css
            app.js
            .hidden.css
            nested/
                c.css
                deeper/
                    d.css
            vendor/
                e.css
                lib.js
    """
    root = tmp_path / "assets"
    (root / "nested" / "deeper").mkdir(parents=True)
    (root / "vendor").mkdir()

    (root / "a.css").write_text("a { color: red; }\n")
    (root / "b.css").write_text("b { color: blue; }\n")
    (root / "app.js").write_text("var app = 1;\n")
    (root / ".hidden.css").write_text(".hidden {}\n")
    (root / "nested" / "c.css").write_text("c { margin: 0; }\n")
    (root / "nested" / "deeper" / "d.css").write_text("d { padding: 0; }\n")
    (root / "vendor" / "e.css").write_text("e { border: 0; }\n")
    (root / "vendor" / "lib.js").write_text("var lib = 2;\n")
    return root
