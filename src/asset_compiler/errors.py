"""Custom exception hierarchy for asset-compiler.

This module defines the exception classes raised by the compiler:
- AssetCompilerError: Base exception for all asset-compiler errors
- InvalidTargetExtension: Raised when the output extension is not css/js
- AssetResolutionError: Raised when an asset cannot be read or fetched
- FilterExecutionError: Raised when an external filter process fails
- ConfigurationError: Raised when an option is unknown or invalid

User-facing messages are safe to display. Technical details such as
process stderr, OS error text or HTTP response bodies are logged via
structlog and never embedded in the message. Messages name the asset
source, target path or binary the caller configured. Paths the package
creates itself, such as temporary input files, only appear in the
internal details.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)


class AssetCompilerError(Exception):
    """Base exception for asset-compiler.

    The user message may contain caller-supplied paths and URLs, but
    never temporary paths or tool output.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but never exposed in the exception message.

    Example:
        >>> raise AssetCompilerError(
        ...     "Compilation failed",
        ...     internal_details="sass exited with status 65: Invalid CSS after ..."
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize AssetCompilerError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "asset_compiler_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class InvalidTargetExtension(AssetCompilerError):
    """Raised when the target path does not end with a supported extension.

    Raised by compile() before any asset is read or any file is written.

    Attributes:
        target_path: The rejected target path.
        extension: The extension found on the target path ("" if none).

    Example:
        >>> raise InvalidTargetExtension("build/app.xyz")
        # User sees: "Target extension is invalid, it must end with one of
        #            the following extensions (css|js): build/app.xyz"
    """

    def __init__(self, target_path: str, extension: str = "") -> None:
        """Initialize InvalidTargetExtension.

        Args:
            target_path: The rejected target path.
            extension: The extension found on the target path.
        """
        super().__init__(
            "Target extension is invalid, it must end with one of the "
            f"following extensions (css|js): {target_path}"
        )
        self.target_path = target_path
        self.extension = extension


class AssetResolutionError(AssetCompilerError):
    """Raised when an asset cannot be resolved.

    Use this exception when:
    - A referenced file does not exist or cannot be read
    - A directory passed to add_glob() is missing or unreadable
    - A remote fetch fails or returns an error status
    - Asset content is not valid UTF-8

    Attributes:
        source: File path or URL of the asset.
        reason: Short description of the failure.
    """

    def __init__(
        self,
        source: str,
        reason: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize AssetResolutionError.

        Args:
            source: File path or URL of the asset.
            reason: Short description of the failure.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(
            f"Cannot resolve asset '{source}': {reason}",
            internal_details=internal_details,
        )
        self.source = source
        self.reason = reason


class FilterExecutionError(AssetCompilerError):
    """Raised when an external transform or compressor fails.

    Use this exception when:
    - The configured binary (sass, lessc, coffee, java) is missing
    - The process cannot be started
    - The process exits with a non-zero status
    - The process prints output that is not valid UTF-8

    Attributes:
        filter_name: Name of the failing filter (e.g. "sass", "yui_css").
        returncode: Process exit status, None if the process never ran.

    Example:
        >>> raise FilterExecutionError(
        ...     "sass",
        ...     "process exited with status 65",
        ...     returncode=65,
        ...     internal_details="Error: Invalid CSS after \\"a {\\"",
        ... )
    """

    def __init__(
        self,
        filter_name: str,
        reason: str,
        *,
        returncode: int | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize FilterExecutionError.

        Args:
            filter_name: Name of the failing filter.
            reason: Short description of the failure.
            returncode: Process exit status if the process ran.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(
            f"Filter '{filter_name}' failed: {reason}",
            internal_details=internal_details,
        )
        self.filter_name = filter_name
        self.returncode = returncode


class ConfigurationError(AssetCompilerError):
    """Raised when an option or asset reference is invalid.

    Use this exception when:
    - set_option() receives an unknown key
    - An option value fails validation
    - add_remote() receives a URL that is not http(s)

    Attributes:
        option: Name of the offending option (if applicable).
    """

    def __init__(
        self,
        user_message: str,
        *,
        option: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with optional option context.

        Args:
            user_message: Safe message to display to the user.
            option: Name of the offending option.
            internal_details: Technical details for internal logging only.
        """
        if option:
            user_message = f"{user_message} (option '{option}')"
        super().__init__(user_message, internal_details=internal_details)
        self.option = option
