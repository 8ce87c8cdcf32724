"""Tests for toTargetEntities."""

import pytest

from graph_schema_testing.graph import RelationshipClass, create_integration_entity, create_mapped_relationship
from graph_schema_testing.matchers import TargetEntitiesOptions, toTargetEntities

from conftest import random_key


TARGET_TYPE = "entity-type"


def _mapped_relationship(target_key):
    return create_mapped_relationship(
        RelationshipClass.HAS,
        source={"_class": "Entity", "_key": random_key(), "_type": ""},
        target={"_type": TARGET_TYPE, "_key": target_key},
    )


def _entity(key):
    return create_integration_entity({"_class": "Entity", "_type": TARGET_TYPE, "_key": key}, source={})


def test_passes_when_relationship_targets_an_entity():
    key = random_key()
    result = toTargetEntities([_mapped_relationship(key)], [_entity(key)])

    assert result.passed is True
    assert result.message() == "Expected mapped relationships not to target entities"


def test_passes_when_relationship_targets_multiple_entities():
    key = random_key()
    target = _entity(key)

    result = toTargetEntities([_mapped_relationship(key)], [target, target])

    assert result.passed is True


def test_fails_on_multiple_targets_when_single_target_enforced():
    key = random_key()
    target = _entity(key)

    result = toTargetEntities([_mapped_relationship(key)], [target, target], {"enforceSingleTarget": True})

    assert result.passed is False
    assert result.message().startswith(
        "Multiple target entities found for mapped relationship, expected exactly one: {"
    )


def test_single_target_enforced_passes_with_one_match():
    key = random_key()
    result = toTargetEntities(
        [_mapped_relationship(key)],
        [_entity(key), _entity(random_key())],
        TargetEntitiesOptions(enforce_single_target=True),
    )

    assert result.passed is True


def test_fails_when_relationship_targets_unknown_entity():
    result = toTargetEntities([_mapped_relationship(random_key())], [_entity(random_key())])

    assert result.passed is False
    assert result.message().startswith("No target entity found for mapped relationship: {")


def test_type_must_match_as_well_as_key():
    key = random_key()
    other = create_integration_entity({"_class": "Entity", "_type": "other-type", "_key": key})

    result = toTargetEntities([_mapped_relationship(key)], [other])

    assert result.passed is False


def test_first_failing_relationship_decides_message():
    known = random_key()
    first_missing = _mapped_relationship(random_key())
    second_missing = _mapped_relationship(random_key())

    result = toTargetEntities(
        [_mapped_relationship(known), first_missing, second_missing],
        [_entity(known)],
    )

    message = result.message()
    assert first_missing["_key"] in message
    assert second_missing["_key"] not in message


def test_reads_top_level_target_descriptor():
    key = random_key()
    relationship = {"_class": "HAS", "_key": "a|has|b", "_type": "a_has_b", "target": {"_type": TARGET_TYPE, "_key": key}}

    assert toTargetEntities([relationship], [_entity(key)]).passed is True


def test_unknown_option_is_a_usage_error():
    with pytest.raises(TypeError):
        toTargetEntities([], [], {"enforceSingleTargets": True})


def test_empty_relationships_pass():
    assert toTargetEntities([], []).passed is True
