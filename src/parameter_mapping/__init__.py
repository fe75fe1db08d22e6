# parameter_mapping/__init__.py
from parameter_mapping.contracts import (
    EditableMapping,
    InvalidMappingType,
    MappingError,
    MappingRecordError,
    MappingType,
    ParameterMappingType,
    PersistedMapping,
    UnknownParameter,
    default_mapping,
)
from parameter_mapping.engine import classify, ensure_mappings, serialize, upsert
from parameter_mapping.invariants import InvariantViolation
from parameter_mapping.formatting import (
    DEFAULT_FORMAT_SETTINGS,
    FormatSettings,
    default_display_value,
    format_value,
)
from parameter_mapping.parameters import Parameter, ParameterCatalog, ParameterType, normalize_value

__all__ = [
    "EditableMapping",
    "InvalidMappingType",
    "MappingError",
    "MappingRecordError",
    "MappingType",
    "ParameterMappingType",
    "PersistedMapping",
    "UnknownParameter",
    "default_mapping",
    "classify",
    "ensure_mappings",
    "serialize",
    "upsert",
    "InvariantViolation",
    "DEFAULT_FORMAT_SETTINGS",
    "FormatSettings",
    "default_display_value",
    "format_value",
    "Parameter",
    "ParameterCatalog",
    "ParameterType",
    "normalize_value",
]
