from __future__ import annotations

import pytest

from parameter_mapping.contracts import (
    InvalidMappingType,
    MappingType,
    ParameterMappingType,
    PersistedMapping,
    UnknownParameter,
)
from parameter_mapping.engine import classify, ensure_mappings
from parameter_mapping.parameters import Parameter, ParameterCatalog


def test_dashboard_mapping_to_existing_name_is_map_to_existing(catalog: ParameterCatalog) -> None:
    (edited,) = classify(
        [{"name": "region", "type": "dashboard-level", "mapTo": "x", "value": "ignored"}],
        catalog,
        ["x"],
    )

    assert edited.type is MappingType.DASHBOARD_MAP_TO_EXISTING
    assert edited.map_to == "x"
    assert edited.value is None


def test_dashboard_mapping_to_new_name_is_add_new(catalog: ParameterCatalog) -> None:
    (edited,) = classify([{"name": "region", "type": "dashboard-level", "mapTo": "x"}], catalog, [])

    assert edited.type is MappingType.DASHBOARD_ADD_NEW


def test_existing_names_default_to_empty(catalog: ParameterCatalog) -> None:
    (edited,) = classify([{"name": "region", "type": "dashboard-level", "mapTo": "region"}], catalog)

    assert edited.type is MappingType.DASHBOARD_ADD_NEW


def test_widget_level_drops_value(catalog: ParameterCatalog) -> None:
    (edited,) = classify([{"name": "limit", "type": "widget-level", "value": 3}], catalog)

    assert edited.type is MappingType.WIDGET_LEVEL
    assert edited.value is None
    assert edited.param is catalog.get("limit")


def test_static_value_carries_owned_parameter_copy(catalog: ParameterCatalog) -> None:
    shared = catalog.get("limit")
    assert shared is not None

    (edited,) = classify([{"name": "limit", "type": "static-value", "value": "25"}], catalog)

    assert edited.type is MappingType.STATIC_VALUE
    assert edited.value == "25"
    assert edited.param is not shared
    assert edited.param.value == 25
    assert shared.value == 10


def test_classify_preserves_input_order(parameters: list[Parameter]) -> None:
    persisted = [
        PersistedMapping(name="status", type=ParameterMappingType.WIDGET_LEVEL),
        PersistedMapping(name="region", type=ParameterMappingType.DASHBOARD_LEVEL, map_to="region"),
        PersistedMapping(name="limit", type=ParameterMappingType.STATIC_VALUE, value=1),
    ]

    edited = classify(persisted, parameters, ["region"])

    assert [m.name for m in edited] == ["status", "region", "limit"]
    assert [m.type for m in edited] == [
        MappingType.WIDGET_LEVEL,
        MappingType.DASHBOARD_MAP_TO_EXISTING,
        MappingType.STATIC_VALUE,
    ]


def test_unknown_parameter_fails_at_classification(catalog: ParameterCatalog) -> None:
    with pytest.raises(UnknownParameter) as excinfo:
        classify([{"name": "ghost", "type": "widget-level"}], catalog)

    assert excinfo.value.name == "ghost"


def test_unknown_persisted_type_is_surfaced(catalog: ParameterCatalog) -> None:
    with pytest.raises(InvalidMappingType):
        classify([{"name": "region", "type": "sometimes"}], catalog)


def test_unhandled_type_on_constructed_mapping_is_surfaced(catalog: ParameterCatalog) -> None:
    bogus = PersistedMapping.model_construct(name="region", type="sometimes", value=None, map_to=None)

    with pytest.raises(InvalidMappingType):
        classify([bogus], catalog)


def test_ensure_mappings_defaults_unmapped_parameters(catalog: ParameterCatalog) -> None:
    result = ensure_mappings([{"name": "limit", "type": "widget-level"}], catalog)

    assert [m.name for m in result] == ["limit", "region", "status", "period", "day"]
    assert result[0].type is ParameterMappingType.WIDGET_LEVEL
    assert all(m.type is ParameterMappingType.DASHBOARD_LEVEL for m in result[1:])
    assert all(m.map_to == m.name for m in result[1:])
