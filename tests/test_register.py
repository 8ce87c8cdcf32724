from unittest import mock

from graph_schema_testing import register_matchers
from graph_schema_testing.matchers import (
    MATCHERS,
    toMatchDirectRelationshipSchema,
    toMatchGraphObjectSchema,
    toTargetEntities,
)


def test_registers_all_matchers_in_one_call():
    expect = mock.Mock()

    register_matchers(expect)

    expect.extend.assert_called_once_with(
        {
            "toMatchGraphObjectSchema": toMatchGraphObjectSchema,
            "toMatchDirectRelationshipSchema": toMatchDirectRelationshipSchema,
            "toTargetEntities": toTargetEntities,
        }
    )


def test_registration_does_not_share_the_matcher_table():
    expect = mock.Mock()

    register_matchers(expect)
    supplied = expect.extend.call_args[0][0]
    supplied.clear()

    assert len(MATCHERS) == 3
