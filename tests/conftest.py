from __future__ import annotations

from collections.abc import Callable
from datetime import date

import pytest

from parameter_mapping.contracts import EditableMapping, MappingType
from parameter_mapping.parameters import Parameter, ParameterCatalog, ParameterType


@pytest.fixture
def parameters() -> list[Parameter]:
    return [
        Parameter(name="region", type=ParameterType.TEXT, title="Region", value="emea"),
        Parameter(name="limit", type=ParameterType.NUMBER, title="Row limit", value=10),
        Parameter(
            name="status",
            type=ParameterType.ENUM,
            title="Status",
            enum_options=["open", "closed"],
            value="open",
        ),
        Parameter(
            name="period",
            type=ParameterType.DATE_RANGE,
            title="Period",
            value={"start": "2024-01-01", "end": "2024-01-31"},
        ),
        Parameter(name="day", type=ParameterType.DATE, title="Day", value=date(2024, 3, 5)),
    ]


@pytest.fixture
def catalog(parameters: list[Parameter]) -> ParameterCatalog:
    return ParameterCatalog(parameters)


@pytest.fixture
def make_mapping(catalog: ParameterCatalog) -> Callable[..., EditableMapping]:
    def _make_mapping(
        name: str = "region",
        *,
        type: MappingType = MappingType.WIDGET_LEVEL,
        value: object = None,
        map_to: str | None = None,
        title: str | None = None,
    ) -> EditableMapping:
        param = catalog.get(name)
        assert param is not None
        return EditableMapping(name=name, type=type, param=param, value=value, map_to=map_to, title=title)

    return _make_mapping
