import uuid

import pytest

from graph_schema_testing.schema import InMemoryRegistry


GRAPH_OBJECT_SCHEMA = {
    "properties": {
        "_key": {"type": "string"},
        "_type": {"type": "string"},
        "_class": {"type": ["string", "array"]},
    },
    "required": ["_key", "_type", "_class"],
}

ENTITY_SCHEMA = {
    "allOf": [
        {"$ref": "#GraphObject"},
        {
            "properties": {
                "name": {"type": "string"},
                "displayName": {"type": "string"},
            },
            "required": ["name", "displayName"],
        },
    ]
}

ALPHA_SCHEMA = {
    "allOf": [{"$ref": "#Entity"}],
    "properties": {
        "alpha": {"type": "string"},
        "shared": {"type": "string", "format": "email"},
    },
    "required": ["alpha", "shared"],
}

BETA_SCHEMA = {
    "allOf": [{"$ref": "#Entity"}],
    "properties": {
        "beta": {"type": "integer"},
        "shared": {"type": ["null", "string"]},
    },
    "required": ["shared", "beta"],
}


@pytest.fixture
def registry_schemas():
    return {
        "GraphObject": GRAPH_OBJECT_SCHEMA,
        "Entity": ENTITY_SCHEMA,
        "Alpha": ALPHA_SCHEMA,
        "Beta": BETA_SCHEMA,
    }


@pytest.fixture
def registry(registry_schemas):
    return InMemoryRegistry(registry_schemas, version="1.0.0")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("LOG_LEVEL", "JUPITERONE_DISABLE_EVENT_LOGGING", "GRAPH_SCHEMA_DIR", "DATA_MODEL_VERSION"):
        monkeypatch.delenv(name, raising=False)


def make_service_entity(**partial):
    entity = {
        "name": "appengine.googleapis.com",
        "_class": ["Service"],
        "_type": "google_cloud_api_service",
        "_key": "google_cloud_api_service_projects/123/services/appengine.googleapis.com",
        "displayName": "App Engine Admin API",
        "category": ["infrastructure"],
        "description": "Provisions and manages developers' App Engine applications.",
        "state": "ENABLED",
        "enabled": True,
        "usageRequirements": ["serviceusage.googleapis.com/tos/cloud"],
        "function": ["other"],
        "_rawData": [
            {
                "name": "default",
                "rawData": {
                    "name": "projects/123/services/appengine.googleapis.com",
                    "config": {
                        "name": "appengine.googleapis.com",
                        "title": "App Engine Admin API",
                        "quota": {},
                        "usage": {"requirements": ["serviceusage.googleapis.com/tos/cloud"]},
                    },
                    "state": "ENABLED",
                    "parent": "projects/123",
                },
            }
        ],
    }
    entity.update(partial)
    return entity


def make_service_schema(**properties):
    schema = {
        "additionalProperties": False,
        "properties": {
            "_type": {"const": "google_cloud_api_service"},
            "category": {"const": ["infrastructure"]},
            "state": {"type": "string", "enum": ["STATE_UNSPECIFIED", "DISABLED", "ENABLED"]},
            "enabled": {"type": "boolean"},
            "usageRequirements": {"type": "array", "items": {"type": "string"}},
            "_rawData": {"type": "array", "items": {"type": "object"}},
        },
    }
    schema["properties"].update(properties)
    return schema


def make_direct_relationship(**partial):
    relationship = {
        "_class": "HAS",
        "_type": "some_account_has_user",
        "_key": "some-account-has-some-user",
        "_toEntityKey": "to-some-entity",
        "_fromEntityKey": "from-some-entity",
    }
    relationship.update(partial)
    return relationship


def random_key():
    return str(uuid.uuid4())
