"""
Exception hierarchy for importmapper.

Every error raised on purpose by importmapper derives from
:class:`ImportMapperError`, which carries a human-readable message plus an
optional ``details`` mapping rendered after the message. The CLI catches the
base class, prints the message and exits with status 1.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class ImportMapperError(Exception):
    """Base exception for all importmapper errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class InvalidSpecifierError(ImportMapperError):
    """Raised when a package specifier string cannot be parsed.

    Args:
        message: Error description.
        specifier: The offending specifier string.
    """

    __slots__ = ("specifier",)

    def __init__(self, message: str, *, specifier: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "specifier", specifier)
        super().__init__(message, details)
        self.specifier = specifier


class AssetNotFoundError(ImportMapperError):
    """Raised when a declared entry's path has no matching asset.

    Args:
        message: Error description.
        path: Path that could not be resolved.
        import_name: Import map entry that declared the path.
    """

    __slots__ = ("path", "import_name")

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        import_name: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", path)
        _add_if(details, "entry", import_name)
        super().__init__(message, details)
        self.path = path
        self.import_name = import_name


class UnknownEntryError(ImportMapperError):
    """Raised when an operation targets an import name that is not declared."""

    __slots__ = ("import_name",)

    def __init__(self, message: str, *, import_name: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "entry", import_name)
        super().__init__(message, details)
        self.import_name = import_name


class InvalidEntrypointError(ImportMapperError):
    """Raised when a declared entry cannot be used as an entrypoint."""

    __slots__ = ("import_name",)

    def __init__(self, message: str, *, import_name: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "entry", import_name)
        super().__init__(message, details)
        self.import_name = import_name


class NetworkError(ImportMapperError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class RegistryError(NetworkError):
    """Raised when the package registry cannot resolve a package.

    Args:
        message: Error description.
        package_name: Name of the package involved.
        **kwargs: Additional arguments forwarded to ``NetworkError``.
    """

    __slots__ = ("package_name",)

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        self.package_name = package_name
        if package_name is not None:
            self.details["package"] = package_name


class DownloadError(ImportMapperError):
    """Raised when vendoring a package fails (HTTP or filesystem).

    Args:
        message: Error description.
        import_name: Entry being vendored.
        url: Remote URL of the package content.
        original_error: Underlying exception, if any.
    """

    __slots__ = ("import_name", "url", "original_error")

    def __init__(
        self,
        message: str,
        *,
        import_name: Optional[str] = None,
        url: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "entry", import_name)
        _add_if(details, "url", url)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )
        super().__init__(message, details)

        self.import_name = import_name
        self.url = url
        self.original_error = original_error


class FileOperationError(ImportMapperError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/delete).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class ConfigError(ImportMapperError):
    """Raised when configuration or the persisted entry file is invalid.

    Args:
        message: Error description.
        config_path: File being loaded.
        option: Offending option name, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)
        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
