from __future__ import annotations

from typing import Any, Dict, Mapping


class MantlInstallError(Exception):
    """Base exception for mantl-install."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class NotFoundError(MantlInstallError, LookupError):
    """Raised when a repository, index or package does not exist.

    Callers treat this as "nothing to do" rather than a failure.
    """

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        MantlInstallError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class RepositoryNotFoundError(NotFoundError):
    """Raised when the base (index 0) repository is absent."""


class PackageIndexNotFoundError(NotFoundError):
    """Raised when the base repository has no package index."""


class PackageNotFoundError(NotFoundError):
    """Raised when a named package is not in the catalog."""


class NoInstallableVersionError(MantlInstallError):
    """Raised when a package exists but declares no versions."""


class DocumentParseError(MantlInstallError, ValueError):
    """Raised when a stored document is not well-formed structured data."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        details: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["key"] = key
        if details:
            ctx["details"] = details
        MantlInstallError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)
        self.key = key


class IndexParseError(DocumentParseError):
    """Raised when the base package index cannot be parsed."""


class SchemaParseError(DocumentParseError):
    """Raised when a package configuration schema cannot be parsed."""


class OptionsParseError(DocumentParseError):
    """Raised when a package options document cannot be parsed."""


class TemplateParseError(DocumentParseError):
    """Raised when a deployment template cannot be parsed."""


class RequestParseError(DocumentParseError):
    """Raised when a package request body cannot be parsed."""


class StoreError(MantlInstallError, OSError):
    """Raised when the key-value store cannot serve a read."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["key"] = key
        MantlInstallError.__init__(self, message, context=ctx)
        OSError.__init__(self, message)
        self.key = key


class ConfigError(MantlInstallError):
    """Raised when the application configuration is invalid."""


__all__ = [
    "MantlInstallError",
    "NotFoundError",
    "RepositoryNotFoundError",
    "PackageIndexNotFoundError",
    "PackageNotFoundError",
    "NoInstallableVersionError",
    "DocumentParseError",
    "IndexParseError",
    "SchemaParseError",
    "OptionsParseError",
    "TemplateParseError",
    "RequestParseError",
    "StoreError",
    "ConfigError",
]
