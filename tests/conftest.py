"""
Общие данные для тестов генератора
"""

import copy

import pytest

from openapi_clientgen.internal.parser.openapi import parse_document
from openapi_clientgen.internal.types.models import Project

PET_REF = {"$ref": "#/components/schemas/Pet"}
PET_ID_PARAMETER = {
    "name": "petId",
    "in": "path",
    "required": True,
    "schema": {"type": "integer", "format": "int64"},
}

PETSTORE_SPEC = {
    "openapi": "3.0.1",
    "info": {"title": "Pet Store.Api", "version": "1.0"},
    "paths": {
        "/pets": {
            "get": {
                "summary": "List pets",
                "parameters": [
                    {"name": "X-Trace-Id", "in": "header", "schema": {"type": "string"}},
                    {"name": "X-Api-Key", "in": "header", "schema": {"type": "string"}},
                    {"name": "limit", "in": "query", "schema": {"type": "integer"}},
                ],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {
                                "schema": {"type": "array", "items": PET_REF}
                            }
                        },
                    }
                },
            },
            "post": {
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": PET_REF}},
                },
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {"application/json": {"schema": PET_REF}},
                    }
                },
            },
        },
        "/pets/{petId}": {
            "get": {
                "parameters": [PET_ID_PARAMETER],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {"application/json": {"schema": PET_REF}},
                    }
                },
            },
            "delete": {
                "parameters": [PET_ID_PARAMETER],
                "responses": {"200": {"description": "OK"}},
            },
        },
        "/pets/{petId}/photo": {
            "post": {
                "description": "Upload pet photo",
                "parameters": [PET_ID_PARAMETER],
                "requestBody": {
                    "content": {
                        "multipart/form-data": {
                            "schema": {"$ref": "#/components/schemas/PhotoUpload"}
                        }
                    }
                },
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/octet-stream": {
                                "schema": {"type": "string", "format": "binary"}
                            }
                        },
                    }
                },
            }
        },
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "format": "int64"},
                    "name": {"type": "string"},
                    "tag": {"type": ["string", "null"]},
                    "status": {"$ref": "#/components/schemas/PetStatus"},
                    "birthDate": {"type": "string", "format": "date-time"},
                    "owner": {"$ref": "#/components/schemas/Owner"},
                },
            },
            "Owner": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "pets": {"type": "array", "items": PET_REF},
                },
            },
            "PetStatus": {
                "type": "integer",
                "format": "int32",
                "enum": [0, 1, 2],
                "x-enum-varnames": ["Available", "Pending", "Sold"],
            },
            "PhotoUpload": {
                "type": "object",
                "properties": {
                    "description": {"type": "string"},
                    "photo": {"$ref": "#/components/schemas/IFormFile"},
                },
            },
            "IFormFile": {"type": "string", "format": "binary"},
        },
        "securitySchemes": {
            "ApiKey": {"type": "apiKey", "name": "X-Api-Key", "in": "header"}
        },
    },
}


@pytest.fixture
def petstore_spec():
    return copy.deepcopy(PETSTORE_SPEC)


@pytest.fixture
def petstore_document(petstore_spec):
    return parse_document(petstore_spec)


@pytest.fixture
def project():
    return Project(name="test")
