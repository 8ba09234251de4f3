# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Version parsing and capability negotiation for the ktlint dependency."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Final

from packaging.version import InvalidVersion, Version

from .errors import UnsupportedCapabilityError, UnsupportedVersionError

_RELEASE_COMPONENTS: Final[int] = 3


class Capability(str, Enum):
    """Named ktlint behaviours gated by a minimum version."""

    MINIMUM_SUPPORTED = "minimum_supported"
    EXPERIMENTAL_RULES = "experimental_rules"
    PINTEREST_COORDINATES = "pinterest_coordinates"
    DISABLED_RULES = "disabled_rules"


@dataclass(frozen=True, slots=True, order=True)
class KtlintVersion:
    """Immutable ``major.minor.patch`` triple compared lexicographically."""

    major: int
    minor: int
    patch: int
    raw: str = field(default="", compare=False)

    @classmethod
    def parse(cls, raw: str) -> KtlintVersion:
        """Parse ``raw`` into a version triple.

        Args:
            raw: Version string supplied by configuration, e.g. ``"0.32.0"``.

        Returns:
            KtlintVersion: Parsed version retaining the original text.

        Raises:
            ValueError: If ``raw`` is not three dot-separated non-negative integers
                written without leading zeros.
        """

        text = raw.strip()
        try:
            parsed = Version(text)
        except InvalidVersion as exc:
            raise ValueError(f"invalid ktlint version '{raw}'") from exc
        plain = parsed.epoch == 0 and parsed.pre is None and parsed.post is None and parsed.dev is None
        if not plain or parsed.local is not None or len(parsed.release) != _RELEASE_COMPONENTS:
            raise ValueError(f"invalid ktlint version '{raw}'")
        if not text[:1].isdigit() or any(len(part) > 1 and part.startswith("0") for part in text.split(".")):
            raise ValueError(f"invalid ktlint version '{raw}'")
        major, minor, patch = parsed.release
        return cls(major=major, minor=minor, patch=patch, raw=text)

    def __str__(self) -> str:
        return self.raw or f"{self.major}.{self.minor}.{self.patch}"


CapabilityTable = Mapping[Capability, KtlintVersion]

DEFAULT_CAPABILITIES: Final[CapabilityTable] = MappingProxyType(
    {
        Capability.MINIMUM_SUPPORTED: KtlintVersion.parse("0.22.0"),
        Capability.EXPERIMENTAL_RULES: KtlintVersion.parse("0.31.0"),
        Capability.PINTEREST_COORDINATES: KtlintVersion.parse("0.32.0"),
        Capability.DISABLED_RULES: KtlintVersion.parse("0.34.0"),
    },
)

SHYIKO_GROUP: Final[str] = "com.github.shyiko"
PINTEREST_GROUP: Final[str] = "com.pinterest"
KTLINT_ARTIFACT: Final[str] = "ktlint"


@dataclass(frozen=True, slots=True)
class ArtifactCoordinates:
    """Maven-style coordinates of the ktlint distribution to use."""

    group: str
    artifact: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"


@dataclass(frozen=True, slots=True)
class ResolvedKtlint:
    """Outcome of a successful version resolution."""

    version: KtlintVersion
    coordinates: ArtifactCoordinates
    capabilities: frozenset[Capability]
    experimental_rules: bool = False
    disabled_rules: tuple[str, ...] = ()

    def supports(self, capability: Capability) -> bool:
        """Return whether ``capability`` is available at the resolved version."""

        return capability in self.capabilities


class VersionPolicy:
    """Classify ktlint versions against a capability threshold table."""

    def __init__(self, table: CapabilityTable | None = None) -> None:
        """Create a policy backed by ``table``.

        Args:
            table: Capability thresholds; defaults to :data:`DEFAULT_CAPABILITIES`.
                Every :class:`Capability` member must be present.

        Raises:
            ValueError: If ``table`` does not cover every capability.
        """

        resolved = DEFAULT_CAPABILITIES if table is None else table
        missing = [capability.value for capability in Capability if capability not in resolved]
        if missing:
            raise ValueError(f"capability table is missing: {', '.join(missing)}")
        self._table: CapabilityTable = MappingProxyType(dict(resolved))

    def threshold(self, capability: Capability) -> KtlintVersion:
        """Return the minimum version providing ``capability``."""

        return self._table[capability]

    def coordinates(self, version: KtlintVersion) -> ArtifactCoordinates:
        """Return the distribution coordinates publishing ``version``."""

        pinterest = version >= self.threshold(Capability.PINTEREST_COORDINATES)
        group = PINTEREST_GROUP if pinterest else SHYIKO_GROUP
        return ArtifactCoordinates(group=group, artifact=KTLINT_ARTIFACT, version=str(version))

    def resolve(
        self,
        raw_version: str,
        *,
        experimental_rules: bool = False,
        disabled_rules: Collection[str] = (),
    ) -> ResolvedKtlint:
        """Resolve ``raw_version`` into coordinates and enabled capabilities.

        Args:
            raw_version: Version string from configuration.
            experimental_rules: Whether the caller asked for experimental rules.
            disabled_rules: Rule identifiers the caller asked to disable.

        Returns:
            ResolvedKtlint: Distribution coordinates and capability set.

        Raises:
            UnsupportedVersionError: If the version is unparsable or below the
                minimum supported version.
            UnsupportedCapabilityError: If a requested capability is unavailable.
        """

        minimum = self.threshold(Capability.MINIMUM_SUPPORTED)
        try:
            version = KtlintVersion.parse(raw_version)
        except ValueError as exc:
            raise UnsupportedVersionError(
                f"Unable to parse Ktlint version: {raw_version}.",
                version=raw_version,
            ) from exc
        if version < minimum:
            raise UnsupportedVersionError(
                f"Ktlint versions less than {minimum} are not supported. Detected Ktlint version: {version}.",
                version=raw_version,
            )

        capabilities = frozenset(capability for capability, floor in self._table.items() if version >= floor)
        if experimental_rules and Capability.EXPERIMENTAL_RULES not in capabilities:
            floor = self.threshold(Capability.EXPERIMENTAL_RULES)
            raise UnsupportedCapabilityError(
                f"Experimental rules are supported since {floor} ktlint version.",
                version=raw_version,
                required=str(floor),
            )
        if disabled_rules and Capability.DISABLED_RULES not in capabilities:
            floor = self.threshold(Capability.DISABLED_RULES)
            raise UnsupportedCapabilityError(
                f"Rules disabling is supported since {floor} ktlint version.",
                version=raw_version,
                required=str(floor),
            )

        return ResolvedKtlint(
            version=version,
            coordinates=self.coordinates(version),
            capabilities=capabilities,
            experimental_rules=experimental_rules,
            disabled_rules=tuple(disabled_rules),
        )


__all__ = [
    "ArtifactCoordinates",
    "Capability",
    "CapabilityTable",
    "DEFAULT_CAPABILITIES",
    "KtlintVersion",
    "PINTEREST_GROUP",
    "ResolvedKtlint",
    "SHYIKO_GROUP",
    "VersionPolicy",
]
