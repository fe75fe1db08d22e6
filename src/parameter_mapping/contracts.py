# parameter_mapping/contracts.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from parameter_mapping._compat import StrEnum
from parameter_mapping.parameters import Parameter


class MappingError(ValueError):
    """Base class for mapping-model failures."""


class InvalidMappingType(MappingError):
    """Raised when a mapping carries a type no branch of the model handles."""

    def __init__(self, mapping_type: object, *, name: str | None = None) -> None:
        self.mapping_type = mapping_type
        self.name = name
        where = f" for parameter {name!r}" if name else ""
        super().__init__(f"unhandled mapping type {mapping_type!r}{where}")


class UnknownParameter(MappingError, LookupError):
    """Raised when a mapping names a parameter the catalog does not define."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"no parameter named {name!r}")


class MappingRecordError(MappingError):
    """Raised when a wire record cannot be decoded into a persisted mapping."""


# ------------------------------------------------------------------------------
# Shared BaseModel config helpers
# ------------------------------------------------------------------------------

_IMMUTABLE_CONTRACT_CONFIG = ConfigDict(
    extra="forbid",
    use_enum_values=False,  # keep enums as enums in Python
    frozen=True,
)

# ------------------------------------------------------------------------------
# Mapping types
# ------------------------------------------------------------------------------


class ParameterMappingType(StrEnum):
    """Persisted granularity."""

    DASHBOARD_LEVEL = "dashboard-level"
    WIDGET_LEVEL = "widget-level"
    STATIC_VALUE = "static-value"


class MappingType(StrEnum):
    """
    Editing granularity. Both dashboard variants collapse to
    ``ParameterMappingType.DASHBOARD_LEVEL`` when persisted.
    """

    DASHBOARD_ADD_NEW = "dashboard-add-new"
    DASHBOARD_MAP_TO_EXISTING = "dashboard-map-to-existing"
    WIDGET_LEVEL = "widget-level"
    STATIC_VALUE = "static-value"

    @property
    def is_dashboard(self) -> bool:
        return self in (MappingType.DASHBOARD_ADD_NEW, MappingType.DASHBOARD_MAP_TO_EXISTING)


# ------------------------------------------------------------------------------
# Mappings
# ------------------------------------------------------------------------------


class PersistedMapping(BaseModel):
    model_config = _IMMUTABLE_CONTRACT_CONFIG

    WIRE_FIELDS: ClassVar[tuple[str, ...]] = ("name", "type", "value", "mapTo")

    name: str = Field(min_length=1)
    type: ParameterMappingType
    value: Any = None
    map_to: str | None = Field(
        default=None,
        validation_alias=AliasChoices("map_to", "mapTo"),
        serialization_alias="mapTo",
    )

    @classmethod
    def from_record(cls, record: object) -> PersistedMapping:
        """Decode one wire record, surfacing an unknown ``type`` as ``InvalidMappingType``."""
        if isinstance(record, cls):
            return record
        if not isinstance(record, Mapping):
            raise MappingRecordError(
                f"mapping record must be a mapping, got {type(record).__name__}"
            )

        raw_type = record.get("type")
        try:
            mapping_type = ParameterMappingType(raw_type)
        except ValueError:
            raise InvalidMappingType(raw_type, name=record.get("name")) from None

        # fields outside the wire layout are not part of the persisted state
        return cls.model_validate(
            {
                "name": record.get("name"),
                "type": mapping_type,
                "value": record.get("value"),
                "map_to": record.get("mapTo", record.get("map_to")),
            }
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "value": self.value,
            "mapTo": self.map_to,
        }


class EditableMapping(BaseModel):
    """
    In-progress form of a mapping.

    ``param`` is attached during classification and is never persisted. For
    static-value mappings it is an owned copy carrying the edited value.
    """

    model_config = _IMMUTABLE_CONTRACT_CONFIG

    name: str = Field(min_length=1)
    type: MappingType
    param: Parameter = Field(exclude=True)
    value: Any = None
    map_to: str | None = Field(default=None, validation_alias=AliasChoices("map_to", "mapTo"))
    title: str | None = None


def default_mapping(parameter: Parameter) -> PersistedMapping:
    """Mapping created when a widget first references an unmapped query parameter."""
    return PersistedMapping(
        name=parameter.name,
        type=ParameterMappingType.DASHBOARD_LEVEL,
        value=None,
        map_to=parameter.name,
    )
