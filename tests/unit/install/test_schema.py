from __future__ import annotations

import json

import pytest

from mantl_install.core.exceptions import SchemaParseError
from mantl_install.core.install import ConfigSchemaNode, parse_config_schema


def _schema(document) -> ConfigSchemaNode:
    return parse_config_schema(json.dumps(document).encode(), key="K/kafka/0/config.json")


def test_defaults_are_taken_verbatim() -> None:
    node = _schema({
        "type": "object",
        "properties": {
            "cpus": {"type": "number", "default": 0.5},
            "instances": {"type": "integer", "default": "3"},
            "enabled": {"type": "boolean", "default": False},
            "hosts": {"type": "array", "default": ["a"]},
        },
    })

    # A string default stays a string even for an integer-typed property.
    assert node.default_config() == {"cpus": 0.5, "instances": "3", "enabled": False, "hosts": ["a"]}


def test_null_default_means_no_default() -> None:
    node = _schema({"properties": {"token": {"type": "string", "default": None}}})

    assert node.default_config() == {}


def test_object_without_default_recurses() -> None:
    node = _schema({
        "properties": {
            "marathon": {
                "type": "object",
                "properties": {
                    "mem": {"type": "integer", "default": 512},
                    "uris": {"type": "array"},
                },
            },
            "empty": {"type": "object"},
        },
    })

    assert node.default_config() == {"marathon": {"mem": 512}, "empty": {}}


def test_object_default_wins_over_nested_defaults() -> None:
    node = _schema({
        "properties": {
            "env": {
                "type": "object",
                "default": {"A": "1"},
                "properties": {"B": {"type": "string", "default": "2"}},
            },
        },
    })

    assert node.default_config() == {"env": {"A": "1"}}


def test_properties_without_default_or_object_type_are_skipped() -> None:
    node = _schema({"properties": {"name": {"type": "string", "description": "x"}}})

    assert node.default_config() == {}
    assert node.properties["name"].description == "x"


@pytest.mark.parametrize("raw", [b"", b"  \n", b"null"])
def test_empty_schema_yields_no_defaults(raw: bytes) -> None:
    assert parse_config_schema(raw, key="k").default_config() == {}


def test_invalid_json_raises_with_key() -> None:
    with pytest.raises(SchemaParseError) as excinfo:
        parse_config_schema(b"{oops", key="Z/zk/0/config.json")

    assert excinfo.value.key == "Z/zk/0/config.json"
    assert excinfo.value.context["key"] == "Z/zk/0/config.json"


def test_wrong_shape_is_rejected() -> None:
    with pytest.raises(SchemaParseError, match="properties"):
        _schema({"properties": {"a": {"type": 3}}})
    with pytest.raises(SchemaParseError):
        _schema(["not", "an", "object"])


def test_additional_properties_object_is_accepted() -> None:
    node = _schema({"type": "object", "additionalProperties": {"type": "string"}})

    assert node.additional_properties is True
