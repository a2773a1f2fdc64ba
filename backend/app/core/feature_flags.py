"""Feature Flags — per-environment on/off switches resolved once per process.

Invariants:
    - Lookup is fail-open: a missing feature or environment entry means enabled
    - FeatureFlags is immutable after construction; no module-level mutable table

Design Decisions:
    - Configuration injected from Settings (ADR: testable without env patching)
    - Missing entries are reported back to the caller instead of logged here,
      keeping core free of IO
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from app.core.domain_types import Environment, FeatureName

DEFAULT_FEATURE_FLAGS: dict[str, dict[str, bool]] = {
    feature.value: {env.value: True for env in Environment}
    for feature in FeatureName
}


@dataclass(frozen=True)
class FlagLookup:
    """Result of a flag lookup; `configured` is False when fail-open kicked in."""
    enabled: bool
    configured: bool


@dataclass(frozen=True)
class FeatureFlags:
    """Feature table bound to one environment."""
    environment: Environment
    table: Mapping[str, Mapping[str, bool]] = field(
        default_factory=lambda: MappingProxyType(DEFAULT_FEATURE_FLAGS),
    )

    def lookup(self, feature: FeatureName | str) -> FlagLookup:
        name = feature.value if isinstance(feature, FeatureName) else feature
        per_env = self.table.get(name)
        if per_env is None:
            return FlagLookup(enabled=True, configured=False)
        value = per_env.get(self.environment.value)
        if value is None:
            return FlagLookup(enabled=True, configured=False)
        return FlagLookup(enabled=bool(value), configured=True)

    def is_enabled(self, feature: FeatureName | str) -> bool:
        return self.lookup(feature).enabled
