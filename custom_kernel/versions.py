"""
Kernel version ordering.

Provides version-sort comparison of kernel version strings and the
next-version search used when advancing the custom kernel.
"""

import re
from typing import Iterable, List, Optional, Pattern, Tuple

_RUN_PATTERN = re.compile(r'[0-9]+|[^0-9]+')
_DIGITS = '0123456789'

# Key element for one run: digits sort before text at the same position
_Run = Tuple[int, int, str]


def _split_runs(version: str) -> List[_Run]:
    """
    Split a version string into alternating digit and non-digit runs.

    Examples:
        '6.9.10-generic' -> [(0, 6, ''), (1, 0, '.'), (0, 9, ''), (1, 0, '.'),
                             (0, 10, ''), (1, 0, '-generic')]
    """
    runs = []
    for run in _RUN_PATTERN.findall(version):
        if run[0] in _DIGITS:
            runs.append((0, int(run), ''))
        else:
            runs.append((1, 0, run))
    return runs


def version_sort_key(version: str) -> Tuple[List[_Run], str]:
    """
    Sort key implementing natural version order.

    Numeric runs compare by value, text runs lexically, and a strict prefix
    sorts first. Strings whose runs are numerically equal ('6.01' and '6.1')
    fall back to plain string order so that only identical strings tie.
    """
    return _split_runs(version), version


def compare_kernel_versions(version1: str, version2: str) -> int:
    """
    Compare two kernel version strings.

    Args:
        version1: First kernel version (e.g., '6.9.2-generic')
        version2: Second kernel version (e.g., '6.9.10-generic')

    Returns:
        int: -1 if version1 < version2, 0 if equal, 1 if version1 > version2
    """
    key1 = version_sort_key(version1)
    key2 = version_sort_key(version2)
    if key1 < key2:
        return -1
    if key1 > key2:
        return 1
    return 0


def sort_kernel_versions(versions: Iterable[str]) -> List[str]:
    """Return versions in ascending version-sort order."""
    return sorted(versions, key=version_sort_key)


def version_family_pattern(version: str) -> Pattern:
    """
    Build the version family pattern for a kernel version.

    Every maximal digit run becomes '[0-9]+'; everything else is matched
    literally. '6.9.2-generic' matches '7.0.1-generic' but not
    '6.9.2-lowlatency' or '6.9.2-76060902-generic'.

    Args:
        version: Reference kernel version

    Returns:
        Pattern: Compiled regular expression, to be used with fullmatch()
    """
    parts = []
    for run in _RUN_PATTERN.findall(version):
        if run[0] in _DIGITS:
            parts.append('[0-9]+')
        else:
            parts.append(re.escape(run))
    return re.compile(''.join(parts))


def filter_family(versions: Iterable[str], current: str) -> List[str]:
    """
    Return the members of versions in the same family as current, sorted.
    """
    pattern = version_family_pattern(current)
    return sort_kernel_versions(v for v in versions if pattern.fullmatch(v))


def find_next_version(available: Iterable[str], current: str) -> Optional[str]:
    """
    Find the next higher kernel in the family of the current one.

    Args:
        available: Installed kernel versions
        current: Currently selected custom kernel version

    Returns:
        Optional[str]: The next version, or None when current is already the
            newest of its family or is no longer installed
    """
    family = filter_family(available, current)

    try:
        index = family.index(current)
    except ValueError:
        return None

    if index + 1 < len(family):
        return family[index + 1]
    return None
