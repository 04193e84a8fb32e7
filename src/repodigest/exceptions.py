"""Custom exceptions for RepoDigest."""


class RepoDigestError(Exception):
    """Base exception for all RepoDigest errors."""


class ConfigError(RepoDigestError):
    """Configuration-related errors."""


class ScanError(RepoDigestError):
    """The scan root itself cannot be used; no snapshot can be built."""

    def __init__(self, root: str, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot scan '{root}': {reason}")
