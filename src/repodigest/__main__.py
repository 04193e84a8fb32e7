"""Allow running RepoDigest with ``python -m repodigest``."""

from repodigest.cli import main

main()
