from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

from parameter_mapping.contracts import MappingError, ParameterMappingType, PersistedMapping


class InvariantId(str, Enum):
    UNIQUE_NAMES = "mapping_unique_names.v1"
    DASHBOARD_TARGET = "dashboard_mapping_target.v1"
    STATIC_VALUE_SCOPE = "static_value_scope.v1"


class Flow(str, Enum):
    CONTINUE = "continue"
    STOP = "stop"


class Validity(str, Enum):
    VALID = "valid"
    DEGRADED = "degraded"
    INVALID = "invalid"


@dataclass(frozen=True)
class InvariantOutcome:
    invariant_id: InvariantId
    passed: bool
    reason: str
    flow: Flow
    validity: Validity
    code: str
    evidence: Sequence[Mapping[str, Any]] = field(default_factory=tuple)
    details: Mapping[str, Any] = field(default_factory=dict)


Checker = Callable[[Sequence[PersistedMapping]], InvariantOutcome]


def _ok(invariant_id: InvariantId, code: str, details: Mapping[str, Any] | None = None) -> InvariantOutcome:
    detail_map = dict(details or {})
    return InvariantOutcome(
        invariant_id=invariant_id,
        passed=True,
        reason=str(detail_map.get("message") or code),
        flow=Flow.CONTINUE,
        validity=Validity.VALID,
        code=code,
        details=detail_map,
    )


def check_unique_names(mappings: Sequence[PersistedMapping]) -> InvariantOutcome:
    counts = Counter(m.name for m in mappings)
    duplicates = sorted(name for name, n in counts.items() if n > 1)
    if not duplicates:
        return _ok(InvariantId.UNIQUE_NAMES, "mapping_names_unique", {"count": len(counts)})

    return InvariantOutcome(
        invariant_id=InvariantId.UNIQUE_NAMES,
        passed=False,
        reason="Each parameter may be mapped at most once.",
        flow=Flow.CONTINUE,
        validity=Validity.DEGRADED,
        code="duplicate_mapping_names",
        evidence=tuple({"kind": "name", "value": name} for name in duplicates),
        details={"message": "Each parameter may be mapped at most once.", "duplicates": duplicates},
    )


def check_dashboard_target(mappings: Sequence[PersistedMapping]) -> InvariantOutcome:
    missing = [
        m.name
        for m in mappings
        if m.type == ParameterMappingType.DASHBOARD_LEVEL and not m.map_to
    ]
    if not missing:
        return _ok(InvariantId.DASHBOARD_TARGET, "dashboard_targets_present")

    return InvariantOutcome(
        invariant_id=InvariantId.DASHBOARD_TARGET,
        passed=False,
        reason="Dashboard-level mappings must name their dashboard parameter.",
        flow=Flow.STOP,
        validity=Validity.INVALID,
        code="dashboard_target_missing",
        evidence=tuple({"kind": "name", "value": name} for name in missing),
        details={"message": "Dashboard-level mappings must name their dashboard parameter.", "names": missing},
    )


def check_static_value_scope(mappings: Sequence[PersistedMapping]) -> InvariantOutcome:
    stray = [
        m.name
        for m in mappings
        if m.type != ParameterMappingType.STATIC_VALUE and m.value is not None
    ]
    if not stray:
        return _ok(InvariantId.STATIC_VALUE_SCOPE, "values_scoped_to_static")

    return InvariantOutcome(
        invariant_id=InvariantId.STATIC_VALUE_SCOPE,
        passed=False,
        reason="Only static-value mappings may carry a value.",
        flow=Flow.CONTINUE,
        validity=Validity.DEGRADED,
        code="value_outside_static_mapping",
        evidence=tuple({"kind": "name", "value": name} for name in stray),
        details={"message": "Only static-value mappings may carry a value.", "names": stray},
    )


REGISTRY: dict[InvariantId, Checker] = {
    InvariantId.UNIQUE_NAMES: check_unique_names,
    InvariantId.DASHBOARD_TARGET: check_dashboard_target,
    InvariantId.STATIC_VALUE_SCOPE: check_static_value_scope,
}


def check_mappings(mappings: Sequence[PersistedMapping]) -> list[InvariantOutcome]:
    return [checker(mappings) for checker in REGISTRY.values()]


class InvariantViolation(MappingError):
    """Raised when an outcome with ``Flow.STOP`` is enforced."""

    def __init__(self, outcome: InvariantOutcome) -> None:
        self.outcome = outcome
        refs = ", ".join(str(item.get("value")) for item in outcome.evidence)
        super().__init__(f"{outcome.invariant_id.value} [{outcome.code}]: {outcome.reason} ({refs})")


def enforce(outcomes: Sequence[InvariantOutcome]) -> list[InvariantOutcome]:
    """Raise on the first failing STOP outcome; return the failures that let the flow continue."""
    failed = [o for o in outcomes if not o.passed]
    for outcome in failed:
        if outcome.flow is Flow.STOP:
            raise InvariantViolation(outcome)
    return failed
