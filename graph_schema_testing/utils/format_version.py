# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Data model version utilities.

Class schemas are served from versioned directories (e.g. ``0.1.0``).

Compatibility rule (semver-like):
  * **Major** must match exactly.
  * **Minor** falls back to the closest available minor.
  * **Patch** picks the largest available.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..exceptions import FormatVersionError


_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """A parsed semantic version (major, minor, patch)."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_format_version(raw: str) -> SemanticVersion:
    """Parse a version string like ``0.1.0`` (with or without 'v' prefix).

    Raises:
        FormatVersionError: If the string cannot be parsed.
    """
    if not isinstance(raw, str):
        raise FormatVersionError(
            f"Data model version must be a string, got {type(raw).__name__}: {raw!r}"
        )

    m = _VERSION_RE.match(raw.strip())
    if m is None:
        raise FormatVersionError(
            f"Invalid data model version string: '{raw}'. "
            "Expected 'MAJOR.MINOR.PATCH' (e.g. '0.1.0')."
        )
    return SemanticVersion(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def parse_available_versions(names: Iterable[str]) -> List[SemanticVersion]:
    """Parse directory names, skipping the ones that are not versions."""
    versions = []
    for name in names:
        try:
            versions.append(parse_format_version(name))
        except FormatVersionError:
            continue
    return sorted(versions)


def select_version(
    requested: Optional[SemanticVersion],
    available: List[SemanticVersion],
) -> Optional[SemanticVersion]:
    """Pick the best available version for *requested*.

    Resolution rules:
    - No request → the largest available version
    - Major version must match exactly
    - Exact version if available
    - Otherwise the largest patch of the same minor
    - Otherwise the closest larger minor (largest patch within it)
    - Otherwise the largest available version within the same major

    Returns:
        The selected version, or None when nothing shares the major version.
    """
    if not available:
        return None

    if requested is None:
        return max(available)

    same_major = [v for v in available if v.major == requested.major]
    if not same_major:
        return None

    if requested in same_major:
        return requested

    same_minor = [v for v in same_major if v.minor == requested.minor]
    if same_minor:
        return max(same_minor)

    larger_minor = [v for v in same_major if v.minor > requested.minor]
    if larger_minor:
        min_larger_minor = min(v.minor for v in larger_minor)
        return max(v for v in larger_minor if v.minor == min_larger_minor)

    return max(same_major)
