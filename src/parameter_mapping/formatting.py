# parameter_mapping/formatting.py
from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from parameter_mapping.contracts import EditableMapping, InvalidMappingType, MappingType


class FormatSettings(BaseModel):
    """Display conventions for previewing parameter values."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    date_format: str = Field(default="%d/%m/%y", min_length=1)
    list_delimiter: str = ", "
    range_delimiter: str = " ~ "


DEFAULT_FORMAT_SETTINGS = FormatSettings()


def format_value(value: Any, settings: FormatSettings | None = None) -> str:
    cfg = settings or DEFAULT_FORMAT_SETTINGS

    # null
    if not value:
        return ""

    # list: a leading date marks a date range
    if isinstance(value, (list, tuple)):
        parts = [format_value(item, cfg) for item in value]
        delimiter = cfg.range_delimiter if isinstance(value[0], date) else cfg.list_delimiter
        return delimiter.join(parts)

    if isinstance(value, date):
        return value.strftime(cfg.date_format)

    return str(value)


def effective_value(mapping: EditableMapping) -> Any:
    """Static override when one is set, otherwise the parameter's canonical default."""
    if mapping.type == MappingType.STATIC_VALUE:
        return mapping.value or mapping.param.normalized_value
    return mapping.param.normalized_value


def default_display_value(mapping: EditableMapping, settings: FormatSettings | None = None) -> str:
    return format_value(effective_value(mapping), settings)


def display_title(mapping: EditableMapping) -> str:
    return mapping.title or mapping.param.title


def keyword(mapping: EditableMapping) -> str:
    return f"{{{{ {mapping.name} }}}}"


def value_source(mapping: EditableMapping) -> str:
    """Human-readable origin of the value a mapped parameter receives."""
    if mapping.type.is_dashboard:
        return f"Dashboard parameter {mapping.map_to or ''}".rstrip()
    if mapping.type == MappingType.WIDGET_LEVEL:
        return "Widget parameter"
    if mapping.type == MappingType.STATIC_VALUE:
        return "Static value"
    raise InvalidMappingType(mapping.type, name=mapping.name)
