# parameter_mapping/engine.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Union

from parameter_mapping.contracts import (
    EditableMapping,
    InvalidMappingType,
    MappingType,
    ParameterMappingType,
    PersistedMapping,
    UnknownParameter,
    default_mapping,
)
from parameter_mapping.invariants import check_mappings, enforce
from parameter_mapping.parameters import Parameter, ParameterCatalog

logger = logging.getLogger(__name__)

MappingLike = Union[PersistedMapping, Mapping[str, Any]]


def _as_catalog(parameters: ParameterCatalog | Iterable[Parameter]) -> ParameterCatalog:
    if isinstance(parameters, ParameterCatalog):
        return parameters
    return ParameterCatalog(parameters)


def ensure_mappings(
    mappings: Iterable[MappingLike],
    parameters: ParameterCatalog | Iterable[Parameter],
) -> list[PersistedMapping]:
    """Return ``mappings`` plus a default mapping for every parameter left unmapped."""
    persisted = [PersistedMapping.from_record(m) for m in mappings]
    mapped = {m.name for m in persisted}
    for param in _as_catalog(parameters):
        if param.name not in mapped:
            persisted.append(default_mapping(param))
    return persisted


def classify(
    mappings: Iterable[MappingLike],
    parameters: ParameterCatalog | Iterable[Parameter],
    existing_param_names: Iterable[str] = (),
) -> list[EditableMapping]:
    """
    Turn persisted mappings into editable ones.

    Dashboard-level mappings split into add-new / map-to-existing depending on
    whether ``map_to`` already names a dashboard parameter. Static-value
    mappings get their own copy of the parameter carrying the persisted value.
    """
    catalog = _as_catalog(parameters)
    existing = frozenset(existing_param_names)
    out: list[EditableMapping] = []

    for raw in mappings:
        mapping = PersistedMapping.from_record(raw)
        param = catalog.get(mapping.name)
        if param is None:
            raise UnknownParameter(mapping.name)

        already_exists = mapping.map_to in existing
        value = None
        if mapping.type == ParameterMappingType.DASHBOARD_LEVEL:
            edit_type = (
                MappingType.DASHBOARD_MAP_TO_EXISTING if already_exists else MappingType.DASHBOARD_ADD_NEW
            )
        elif mapping.type == ParameterMappingType.STATIC_VALUE:
            edit_type = MappingType.STATIC_VALUE
            param = param.with_value(mapping.value)
            value = mapping.value
        elif mapping.type == ParameterMappingType.WIDGET_LEVEL:
            edit_type = MappingType.WIDGET_LEVEL
        else:
            raise InvalidMappingType(mapping.type, name=mapping.name)

        out.append(
            EditableMapping(
                name=mapping.name,
                type=edit_type,
                param=param,
                value=value,
                map_to=mapping.map_to,
            )
        )

    logger.debug("classified %d mapping(s) against %d parameter(s)", len(out), len(catalog))
    return out


def _persist_one(mapping: EditableMapping) -> PersistedMapping:
    value = None
    if mapping.type in (MappingType.DASHBOARD_ADD_NEW, MappingType.DASHBOARD_MAP_TO_EXISTING):
        persisted_type = ParameterMappingType.DASHBOARD_LEVEL
    elif mapping.type == MappingType.STATIC_VALUE:
        persisted_type = ParameterMappingType.STATIC_VALUE
        # read back through the parameter so the stored value is the normalized one
        value = mapping.param.with_value(mapping.value).value
    elif mapping.type == MappingType.WIDGET_LEVEL:
        persisted_type = ParameterMappingType.WIDGET_LEVEL
    else:
        raise InvalidMappingType(mapping.type, name=mapping.name)

    return PersistedMapping(
        name=mapping.name,
        type=persisted_type,
        value=value,
        map_to=mapping.map_to,
    )


def serialize(mappings: Iterable[EditableMapping]) -> dict[str, PersistedMapping]:
    """
    Convert editable mappings back to persisted form, keyed by parameter name.

    Raises ``InvariantViolation`` when the result could not be stored as-is,
    e.g. a dashboard mapping without a target. Duplicate names are logged and
    the last mapping wins.
    """
    persisted = [_persist_one(m) for m in mappings]

    for outcome in enforce(check_mappings(persisted)):
        logger.warning(
            "%s [%s, %s]: %s %s",
            outcome.invariant_id.value,
            outcome.code,
            outcome.validity.value,
            outcome.reason,
            [item.get("value") for item in outcome.evidence],
        )

    return {m.name: m for m in persisted}


def _index_of(mappings: Sequence[EditableMapping], target: EditableMapping) -> int:
    for idx, item in enumerate(mappings):
        if item is target:
            return idx
    for idx, item in enumerate(mappings):
        if item == target:
            return idx
    return -1


def upsert(
    mappings: Sequence[EditableMapping],
    old_mapping: EditableMapping,
    new_mapping: EditableMapping,
) -> list[EditableMapping]:
    """Replace ``old_mapping`` with ``new_mapping`` in a new list, appending when it is absent."""
    out = list(mappings)
    idx = _index_of(out, old_mapping)
    if idx >= 0:
        out[idx] = new_mapping
    else:
        logger.debug("mapping %r not found in list; appending", old_mapping.name)
        out.append(new_mapping)
    return out
