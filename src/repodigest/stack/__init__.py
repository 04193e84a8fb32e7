"""Technology stack detection for RepoDigest."""

from repodigest.stack.detector import detect_frameworks, detect_languages, detect_services, detect_stack
from repodigest.stack.models import LanguageShare, Service, ServiceType, StackProfile

__all__ = [
    "LanguageShare",
    "Service",
    "ServiceType",
    "StackProfile",
    "detect_frameworks",
    "detect_languages",
    "detect_services",
    "detect_stack",
]
