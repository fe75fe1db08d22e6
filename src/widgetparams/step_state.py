from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from parameter_mapping.contracts import EditableMapping, PersistedMapping
from parameter_mapping.parameters import Parameter


@dataclass
class MappingStepState:
    parameters: list[Parameter] = field(default_factory=list)
    persisted: list[PersistedMapping] = field(default_factory=list)
    existing_names: list[str] = field(default_factory=list)
    editable: list[EditableMapping] = field(default_factory=list)
    serialized: dict[str, PersistedMapping] = field(default_factory=dict)
    error: Exception | None = None


def get_mapping_step_state(context: Any) -> MappingStepState:
    state = getattr(context, "_mapping_step_state", None)
    if not isinstance(state, MappingStepState):
        state = MappingStepState()
        setattr(context, "_mapping_step_state", state)
    return state
