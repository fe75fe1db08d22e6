# parameter_mapping/adapters/persistence.py
from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any, Dict, List, Union

from pydantic import BaseModel

from parameter_mapping.contracts import MappingRecordError, PersistedMapping

JsonObj = Dict[str, Any]
MappingsLike = Union[Mapping[str, PersistedMapping], Iterable[PersistedMapping]]


def _to_jsonable(x: Any) -> Any:
    if x is None:
        return None
    if isinstance(x, BaseModel):
        return x.model_dump(mode="json")
    if isinstance(x, date):
        return x.isoformat()
    if isinstance(x, dict):
        return {str(k): _to_jsonable(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [_to_jsonable(v) for v in x]
    return x


def to_record(mapping: PersistedMapping) -> JsonObj:
    """Wire layout: ``{"name", "type", "value", "mapTo"}`` and nothing else."""
    return _to_jsonable(mapping.to_record())


def records_from_mappings(mappings: MappingsLike) -> List[JsonObj]:
    items = mappings.values() if isinstance(mappings, Mapping) else mappings
    return [to_record(m) for m in items]


def mappings_from_records(records: Iterable[object]) -> List[PersistedMapping]:
    return [PersistedMapping.from_record(r) for r in records]


def dumps_mappings(mappings: MappingsLike) -> str:
    return json.dumps(records_from_mappings(mappings), ensure_ascii=False)


def loads_mappings(text: str) -> List[PersistedMapping]:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MappingRecordError(f"mapping payload is not valid JSON: {exc.msg}") from exc
    if not isinstance(raw, list):
        raise MappingRecordError(f"Expected JSON array of mapping records, got {type(raw).__name__}")
    return mappings_from_records(raw)
