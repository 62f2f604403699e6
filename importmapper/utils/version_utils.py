"""
Version comparison helpers for importmapper.

npm versions pinned in CDN URLs (``1.2.3``, ``5.3.0-alpha1``) are close
enough to PEP 440 for ``packaging`` to order them, which is all the
``update`` report needs.
"""

from __future__ import annotations

from typing import Optional, Tuple

from packaging.version import InvalidVersion, Version, parse


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
) -> str:
    """Classify the change between two package versions.

    Returns:
        One of ``"new"``, ``"same"``, ``"downgrade"``, ``"major"``,
        ``"minor"``, ``"patch"``, ``"update"`` (pre-release or metadata only)
        or ``"unknown"`` (missing target or unparseable version).

    Examples:
        >>> get_update_type("1.2.3", "1.2.9")
        'patch'
        >>> get_update_type(None, "4.17.21")
        'new'
    """
    if target_version is None:
        return "unknown"

    if current_version is None:
        return "new"

    try:
        current = _parse_version(current_version)
        target = _parse_version(target_version)
    except InvalidVersion:
        return "unknown"

    if target == current:
        return "same"
    if target < current:
        return "downgrade"
    return _classify_upgrade(current, target)


def _parse_version(value: str) -> Version:
    parsed = parse(value)
    if not isinstance(parsed, Version):
        raise InvalidVersion(value)
    return parsed


def _classify_upgrade(current: Version, target: Version) -> str:
    for label, before, after in zip(
        ("major", "minor", "patch"),
        _normalize_release(current),
        _normalize_release(target),
    ):
        if before != after:
            return label
    return "update"


def _normalize_release(version: Version) -> Tuple[int, int, int]:
    """Pad a release segment to (major, minor, patch)."""
    release = tuple(version.release) + (0, 0, 0)
    return release[0], release[1], release[2]
