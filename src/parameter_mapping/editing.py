# parameter_mapping/editing.py
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from parameter_mapping.contracts import EditableMapping, InvalidMappingType, MappingType
from parameter_mapping.engine import upsert
from parameter_mapping.parameters import Parameter

_LOCKED_FIELDS = frozenset({"name", "param"})
_EDITABLE_FIELDS = frozenset(EditableMapping.model_fields) - _LOCKED_FIELDS


@dataclass(frozen=True)
class MappingTypeChoice:
    type: MappingType
    label: str


_CHOICE_LABELS: dict[MappingType, str] = {
    MappingType.DASHBOARD_ADD_NEW: "Add the parameter to the dashboard",
    MappingType.DASHBOARD_MAP_TO_EXISTING: "Map to existing parameter",
    MappingType.STATIC_VALUE: "Use static value for the parameter",
    MappingType.WIDGET_LEVEL: "Keep the parameter at the widget level",
}


def available_mapping_types(existing_param_names: Sequence[str] = ()) -> list[MappingTypeChoice]:
    """Mapping types offered to the user; map-to-existing needs something to map to."""
    return [
        MappingTypeChoice(type=mapping_type, label=label)
        for mapping_type, label in _CHOICE_LABELS.items()
        if mapping_type != MappingType.DASHBOARD_MAP_TO_EXISTING or len(existing_param_names) > 0
    ]


def update_mapping(mapping: EditableMapping, **updates: Any) -> EditableMapping:
    locked = sorted(_LOCKED_FIELDS.intersection(updates))
    if locked:
        raise ValueError(f"mapping fields cannot be changed: {', '.join(locked)}")
    unknown = sorted(set(updates) - _EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"unknown mapping fields: {', '.join(unknown)}")

    if "type" in updates:
        try:
            updates["type"] = MappingType(updates["type"])
        except ValueError:
            raise InvalidMappingType(updates["type"], name=mapping.name) from None

    # revalidate so edits obey the same field types as freshly classified mappings
    return EditableMapping.model_validate({**mapping.model_dump(), "param": mapping.param, **updates})


def map_to_conflict(mapping: EditableMapping, existing_param_names: Iterable[str]) -> bool:
    """True when an add-new mapping would create a dashboard parameter that already exists."""
    if mapping.type != MappingType.DASHBOARD_ADD_NEW:
        return False
    return mapping.map_to in set(existing_param_names)


def static_input_value(mapping: EditableMapping) -> Any:
    if mapping.value is None:
        return mapping.param.normalized_value
    return mapping.value


def title_editable(mapping: EditableMapping) -> bool:
    return mapping.type != MappingType.STATIC_VALUE


def existing_names_for(
    mapping: EditableMapping,
    existing_params: Iterable[Parameter | Mapping[str, Any]],
) -> list[str]:
    """Names of existing dashboard parameters a mapping may bind to (same type only)."""
    names: list[str] = []
    for item in existing_params:
        if isinstance(item, Parameter):
            name, param_type = item.name, item.type
        else:
            name, param_type = item.get("name"), item.get("type")
        if param_type == mapping.param.type and name:
            names.append(str(name))
    return names


def apply_edit(
    mappings: Sequence[EditableMapping],
    old_mapping: EditableMapping,
    **updates: Any,
) -> list[EditableMapping]:
    return upsert(mappings, old_mapping, update_mapping(old_mapping, **updates))
