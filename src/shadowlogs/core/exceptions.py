"""Custom exceptions for the shadowlogs package."""


class ShadowLogsError(Exception):
    """Base exception for shadowlogs package."""
    pass


class SchemaError(ShadowLogsError):
    """Unparseable or structurally inconsistent parameter schema."""
    pass


class DecodeError(ShadowLogsError):
    """Buffer too short, offset/length out of bounds, or element-count mismatch."""
    pass


class EventError(ShadowLogsError):
    """Topic count mismatch, wrong selector, or parameter name collision."""
    pass


class ArtifactError(ShadowLogsError):
    """Missing or unreadable contract artifact, or event not found in its ABI."""
    pass


class ShadowStoreError(ShadowLogsError):
    """Shadow contract record not found or store file unreadable."""
    pass
