"""Language-aware structural reduction of source files."""

from repodigest.skeleton.extractor import BODY_PLACEHOLDER, SKELETON_MARKER, is_skeleton, skeletonize
from repodigest.skeleton.profiles import C_FAMILY, TYPESCRIPT, LanguageProfile, profile_for

__all__ = [
    "BODY_PLACEHOLDER",
    "C_FAMILY",
    "LanguageProfile",
    "SKELETON_MARKER",
    "TYPESCRIPT",
    "is_skeleton",
    "profile_for",
    "skeletonize",
]
