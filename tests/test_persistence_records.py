from __future__ import annotations

import json
from datetime import date

import pytest

from parameter_mapping.adapters.persistence import (
    dumps_mappings,
    loads_mappings,
    mappings_from_records,
    records_from_mappings,
    to_record,
)
from parameter_mapping.contracts import (
    InvalidMappingType,
    MappingRecordError,
    ParameterMappingType,
    PersistedMapping,
)
from parameter_mapping.engine import classify, serialize
from parameter_mapping.parameters import ParameterCatalog


def test_to_record_makes_dates_jsonable() -> None:
    mapping = PersistedMapping(
        name="period",
        type=ParameterMappingType.STATIC_VALUE,
        value=[date(2024, 1, 1), date(2024, 1, 31)],
    )

    assert to_record(mapping) == {
        "name": "period",
        "type": "static-value",
        "value": ["2024-01-01", "2024-01-31"],
        "mapTo": None,
    }


def test_records_from_name_keyed_dict_and_sequence_agree() -> None:
    mapping = PersistedMapping(name="a", type=ParameterMappingType.DASHBOARD_LEVEL, map_to="b")

    assert records_from_mappings({"a": mapping}) == records_from_mappings([mapping])


def test_dumps_then_loads_through_the_engine(catalog: ParameterCatalog) -> None:
    persisted = [
        PersistedMapping(name="day", type=ParameterMappingType.STATIC_VALUE, value=date(2024, 6, 1)),
        PersistedMapping(name="region", type=ParameterMappingType.DASHBOARD_LEVEL, map_to="region"),
    ]

    text = dumps_mappings(serialize(classify(persisted, catalog)))
    assert json.loads(text)[0] == {"name": "day", "type": "static-value", "value": "2024-06-01", "mapTo": None}

    reloaded = serialize(classify(loads_mappings(text), catalog))
    assert reloaded["day"].value == date(2024, 6, 1)
    assert reloaded["region"] == persisted[1]


def test_mappings_from_records_rejects_bad_type() -> None:
    with pytest.raises(InvalidMappingType):
        mappings_from_records([{"name": "a", "type": "nope"}])


@pytest.mark.parametrize("payload", ["{not json", '{"name": "a"}'])
def test_loads_mappings_rejects_malformed_payloads(payload: str) -> None:
    with pytest.raises(MappingRecordError):
        loads_mappings(payload)


def test_loads_mappings_rejects_non_object_rows() -> None:
    with pytest.raises(MappingRecordError):
        loads_mappings("[1]")
