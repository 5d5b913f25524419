"""Custom exception hierarchy for the font resolution pipeline."""

from __future__ import annotations


class FontshelfError(RuntimeError):
    """Base exception for font resolution failures."""


class ConfigError(FontshelfError):
    """Raised when a configuration file cannot be loaded or validated."""


class UnresolvedProviderError(FontshelfError):
    """Raised when a family references a provider that is not registered."""

    def __init__(self, provider: str, family: str | None = None) -> None:
        self.provider = provider
        self.family = family
        message = f'No matching provider for "{provider}"'
        if family:
            message = f'{message} (family "{family}")'
        super().__init__(message)


class UnknownFamilyError(FontshelfError):
    """Raised by a provider that does not know the requested family."""

    def __init__(self, family: str, provider: str | None = None) -> None:
        self.family = family
        self.provider = provider
        origin = f" by provider '{provider}'" if provider else ""
        super().__init__(f"Font family '{family}' is not provided{origin}.")


class FetchError(FontshelfError):
    """Raised when a font asset or catalog cannot be read from its origin."""

    def __init__(
        self,
        url: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        message = f"Failed to fetch '{url}'"
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TLSCertificateError(FetchError):
    """Raised when TLS certificate verification fails during downloads."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


__all__ = [
    "ConfigError",
    "FetchError",
    "FontshelfError",
    "TLSCertificateError",
    "UnknownFamilyError",
    "UnresolvedProviderError",
    "exception_messages",
]
