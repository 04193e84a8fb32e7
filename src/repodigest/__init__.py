"""RepoDigest - bounded-size, priority-aware digests of source repositories."""

__version__ = "0.1.0"
