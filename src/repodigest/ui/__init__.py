"""Terminal UI for RepoDigest."""
