# parameter_mapping/parameters.py
from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import date, datetime, time
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from parameter_mapping._compat import Self, StrEnum

_PARAMETER_CONFIG = ConfigDict(
    extra="forbid",
    frozen=True,
    use_enum_values=False,
)


class ParameterType(StrEnum):
    TEXT = "text"
    NUMBER = "number"
    ENUM = "enum"
    QUERY = "query"
    DATE = "date"
    DATETIME_LOCAL = "datetime-local"
    DATETIME_WITH_SECONDS = "datetime-with-seconds"
    DATE_RANGE = "date-range"
    DATETIME_RANGE = "datetime-range"
    DATETIME_RANGE_WITH_SECONDS = "datetime-range-with-seconds"

    @property
    def is_date(self) -> bool:
        return self in _DATE_TYPES

    @property
    def is_date_range(self) -> bool:
        return self in _DATE_RANGE_TYPES

    @property
    def has_time(self) -> bool:
        return self not in (ParameterType.DATE, ParameterType.DATE_RANGE)


_DATE_TYPES = frozenset(
    {
        ParameterType.DATE,
        ParameterType.DATETIME_LOCAL,
        ParameterType.DATETIME_WITH_SECONDS,
    }
)

_DATE_RANGE_TYPES = frozenset(
    {
        ParameterType.DATE_RANGE,
        ParameterType.DATETIME_RANGE,
        ParameterType.DATETIME_RANGE_WITH_SECONDS,
    }
)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _normalize_number(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # nan/inf never compare equal after a save/load cycle
        return value if math.isfinite(value) else None
    return None


def _normalize_date(value: Any, *, with_time: bool) -> date | None:
    if isinstance(value, datetime):
        return value if with_time else value.date()
    if isinstance(value, date):
        return datetime.combine(value, time()) if with_time else value
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if with_time else parsed.date()
    return None


def _normalize_range(value: Any, *, with_time: bool) -> list[date] | None:
    if isinstance(value, Mapping):
        bounds: Sequence[Any] = (value.get("start"), value.get("end"))
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        bounds = value
    else:
        return None

    start, end = (_normalize_date(item, with_time=with_time) for item in bounds)
    if start is None or end is None:
        return None
    return [start, end]


def _normalize_enum(value: Any, options: Sequence[str] | None) -> Any:
    choices = list(options or [])
    if isinstance(value, (list, tuple)):
        return [item for item in value if item in choices]
    if value in choices:
        return value
    return choices[0] if choices else None


def normalize_value(
    param_type: ParameterType,
    value: Any,
    enum_options: Sequence[str] | None = None,
) -> Any:
    """Coerce a raw input into the canonical representation for ``param_type``."""
    if _is_empty(value):
        return None

    if param_type is ParameterType.TEXT:
        return str(value)
    if param_type is ParameterType.NUMBER:
        return _normalize_number(value)
    if param_type is ParameterType.ENUM:
        return _normalize_enum(value, enum_options)
    if param_type.is_date:
        return _normalize_date(value, with_time=param_type.has_time)
    if param_type.is_date_range:
        return _normalize_range(value, with_time=param_type.has_time)
    return value


class Parameter(BaseModel):
    """
    Query parameter definition as exposed by the parameter catalog.

    Instances are immutable. ``with_value`` is the only way to carry an edited
    value, and it always returns a new instance.
    """

    model_config = _PARAMETER_CONFIG

    name: str = Field(min_length=1)
    type: ParameterType = ParameterType.TEXT
    title: str = ""
    enum_options: list[str] | None = Field(
        default=None, validation_alias=AliasChoices("enum_options", "enumOptions")
    )
    query_id: int | None = Field(default=None, validation_alias=AliasChoices("query_id", "queryId"))
    value: Any = None
    normalized_value: Any = Field(
        default=None, validation_alias=AliasChoices("normalized_value", "normalizedValue")
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_normalized_value(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "normalized_value" in data or "normalizedValue" in data:
            return data

        try:
            param_type = ParameterType(data.get("type", ParameterType.TEXT))
        except ValueError:
            # let field validation report the bad type
            return data
        options = data.get("enum_options", data.get("enumOptions"))
        return {**data, "normalized_value": normalize_value(param_type, data.get("value"), options)}

    def with_value(self, value: Any) -> Self:
        return self.model_copy(
            update={"value": normalize_value(self.type, value, self.enum_options)}
        )

    def clone(self) -> Self:
        return self.model_copy(deep=True)


class ParameterCatalog:
    """Read-only name lookup over an ordered set of parameters."""

    def __init__(self, parameters: Iterable[Parameter | Mapping[str, Any]] = ()) -> None:
        self._by_name: dict[str, Parameter] = {}
        for item in parameters:
            param = item if isinstance(item, Parameter) else Parameter.model_validate(item)
            self._by_name[param.name] = param

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Parameter | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return list(self._by_name)

    def names_of_type(self, param_type: ParameterType) -> list[str]:
        return [p.name for p in self._by_name.values() if p.type == param_type]
