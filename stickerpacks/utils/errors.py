"""Custom exception hierarchy for the sticker pack service.

All application exceptions inherit from :class:`StickerPackError`, which
carries an optional ``provider_name`` so handlers can tell which adapter
(e.g. "sqlite_submission", "local_blob") raised the failure.

    StickerPackError  (base -- caught by ErrorHandlingMiddleware)
    +-- ValidationError          (malformed or incomplete client input)
    +-- NotFoundError            (referenced record or user absent)
    +-- StorageUnavailableError  (store / blob adapter I/O failure)
    +-- AuthenticationError      (caller lacks the required principal)
    +-- ConfigurationError       (startup / invalid config)

Nothing in the core retries on these.  Each request fails on its own and
the middleware turns the error into a structured JSON body.
"""

from __future__ import annotations

from enum import Enum


class StickerPackError(Exception):
    """Base exception for all sticker pack service errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name``.  ``__str__`` prefixes the provider in brackets,
    e.g. ``[sqlite_submission] database is locked``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Client input errors
# ---------------------------------------------------------------------------


class ValidationReason(str, Enum):
    """Machine-readable cause attached to a :class:`ValidationError`."""

    MISSING_ASSET = "missing_asset"
    MISSING_OWNER = "missing_owner"
    MALFORMED_METADATA = "malformed_metadata"
    TOO_MANY_ASSETS = "too_many_assets"
    ASSET_TOO_LARGE = "asset_too_large"
    INVALID_TRANSITION = "invalid_transition"
    MISSING_CREDENTIALS = "missing_credentials"
    DUPLICATE_USER = "duplicate_user"


_DEFAULT_REASON_MESSAGES: dict[ValidationReason, str] = {
    ValidationReason.MISSING_ASSET: "At least one sticker file is required",
    ValidationReason.MISSING_OWNER: "Submission has no owner",
    ValidationReason.MALFORMED_METADATA: "Submission metadata is malformed",
    ValidationReason.TOO_MANY_ASSETS: "Too many sticker files in one submission",
    ValidationReason.ASSET_TOO_LARGE: "Sticker file exceeds the size limit",
    ValidationReason.INVALID_TRANSITION: "Requested approval status is not allowed",
    ValidationReason.MISSING_CREDENTIALS: "Username and password are required",
    ValidationReason.DUPLICATE_USER: "A user with that username already exists",
}


class ValidationError(StickerPackError):
    """Raised when a submission or command is malformed or incomplete.

    Raised before any blob or store write takes place.
    """

    def __init__(
        self,
        reason: ValidationReason,
        message: str | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._reason = reason
        super().__init__(
            message=message or _DEFAULT_REASON_MESSAGES[reason],
            provider_name=provider_name,
        )

    @property
    def reason(self) -> ValidationReason:
        return self._reason


class NotFoundError(StickerPackError):
    """Raised when a referenced record (or user) does not exist."""

    def __init__(
        self,
        resource: str = "stickerpack",
        identifier: str | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._resource = resource
        self._identifier = identifier
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message=message, provider_name=provider_name)

    @property
    def resource(self) -> str:
        return self._resource

    @property
    def identifier(self) -> str | None:
        return self._identifier


# ---------------------------------------------------------------------------
# Infrastructure errors
# ---------------------------------------------------------------------------


class StorageUnavailableError(StickerPackError):
    """Raised when the submission store, user store or blob store fails I/O."""

    def __init__(
        self,
        message: str = "Storage is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AuthenticationError(StickerPackError):
    """Raised when a route needs a principal the request does not carry."""

    def __init__(
        self,
        message: str = "Authentication required",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(StickerPackError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
