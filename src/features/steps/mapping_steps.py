# features/steps/mapping_steps.py
from __future__ import annotations

from behave import given, then, when
from widgetparams.step_state import get_mapping_step_state

from parameter_mapping.contracts import PersistedMapping, UnknownParameter
from parameter_mapping.engine import classify, serialize
from parameter_mapping.parameters import Parameter


@given('a "{param_type}" parameter "{name}" titled "{title}"')
def step_parameter(context, param_type, name, title):
    state = get_mapping_step_state(context)
    state.parameters.append(Parameter(name=name, type=param_type, title=title))


@given('the dashboard already has parameters "{names}"')
def step_existing_names(context, names):
    state = get_mapping_step_state(context)
    state.existing_names = [n.strip() for n in names.split(",") if n.strip()]


@given('a "{mapping_type}" mapping for "{name}" to "{map_to}"')
def step_mapping_to(context, mapping_type, name, map_to):
    state = get_mapping_step_state(context)
    state.persisted.append(PersistedMapping.from_record({"name": name, "type": mapping_type, "mapTo": map_to}))


@given('a "{mapping_type}" mapping for "{name}" with value "{value}"')
def step_mapping_value(context, mapping_type, name, value):
    state = get_mapping_step_state(context)
    state.persisted.append(PersistedMapping.from_record({"name": name, "type": mapping_type, "value": value}))


@given('a "{mapping_type}" mapping for "{name}"')
def step_mapping(context, mapping_type, name):
    state = get_mapping_step_state(context)
    state.persisted.append(PersistedMapping.from_record({"name": name, "type": mapping_type}))


@when("the mappings are classified")
def step_classify(context):
    state = get_mapping_step_state(context)
    try:
        state.editable = classify(state.persisted, state.parameters, state.existing_names)
    except UnknownParameter as exc:
        state.error = exc


@when("the mappings are serialized")
def step_serialize(context):
    state = get_mapping_step_state(context)
    state.serialized = serialize(state.editable)


@then('mapping "{name}" is edited as "{mapping_type}"')
def step_check_edit_type(context, name, mapping_type):
    state = get_mapping_step_state(context)
    by_name = {m.name: m for m in state.editable}
    assert by_name[name].type.value == mapping_type


@then('persisted mapping "{name}" has type "{mapping_type}"')
def step_check_persisted_type(context, name, mapping_type):
    state = get_mapping_step_state(context)
    assert state.serialized[name].type.value == mapping_type


@then('persisted mapping "{name}" has value {value:d}')
def step_check_persisted_value(context, name, value):
    state = get_mapping_step_state(context)
    assert state.serialized[name].value == value


@then("classification fails with an unknown parameter error")
def step_check_unknown(context):
    state = get_mapping_step_state(context)
    assert isinstance(state.error, UnknownParameter)
