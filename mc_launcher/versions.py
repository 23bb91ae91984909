"""
Version comparison and Java runtime selection.

Minecraft releases are plain dotted numbers. Missing or non-numeric segments
count as 0 so the comparison never fails.
"""
from __future__ import annotations
from typing import List, Tuple
from .settings import Settings

DEFAULT_JAVA_VERSION = "8"

# Highest threshold first; the first threshold the version reaches wins.
JAVA_VERSION_TABLE: List[Tuple[str, str]] = [
    ("1.20.5", "21"),
    ("1.18", "17"),
    ("1.17", "16"),
]


def _segment(parts: List[str], idx: int) -> int:
    if idx >= len(parts):
        return 0
    try:
        return int(parts[idx])
    except ValueError:
        return 0


def version_greater_or_equal(a: str, b: str) -> bool:
    """
    Return True if version ``a`` is greater than or equal to ``b``.

    ``"1.20" >= "1.20.0"`` holds because absent segments are zero.
    """
    parts_a = a.split(".")
    parts_b = b.split(".")
    for idx in range(max(len(parts_a), len(parts_b))):
        seg_a = _segment(parts_a, idx)
        seg_b = _segment(parts_b, idx)
        if seg_a != seg_b:
            return seg_a > seg_b
    return True


def java_version_for(minecraft_version: str) -> str:
    if not minecraft_version:
        return DEFAULT_JAVA_VERSION
    for threshold, java_version in JAVA_VERSION_TABLE:
        if version_greater_or_equal(minecraft_version, threshold):
            return java_version
    return DEFAULT_JAVA_VERSION


def select_java_version(settings: Settings) -> str:
    """JAVA_VERSION_OVERRIDE wins verbatim, otherwise map MINECRAFT_VERSION."""
    if settings.java_version_override:
        return settings.java_version_override
    return java_version_for(settings.minecraft_version)
