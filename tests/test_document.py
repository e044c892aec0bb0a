"""
Тесты модели OpenAPI документа
"""

import pytest
from pydantic import ValidationError

from openapi_clientgen.internal.parser.openapi import OpenApiParser, parse_document
from openapi_clientgen.internal.types.document import Document, PathItem, Schema


class TestSchemaType:
    """Тесты поля type"""

    def test_string_and_list_decode_equally(self):
        """Тест: строка и массив из одной строки дают одинаковый результат"""
        assert (
            Schema.model_validate({"type": "string"}).types
            == Schema.model_validate({"type": ["string"]}).types
            == ["string"]
        )

    def test_single_type_encodes_as_string(self):
        """Тест обратной записи единственного типа строкой"""
        schema = Schema.model_validate({"type": ["string"], "format": "date-time"})

        assert schema.to_dict() == {"type": "string", "format": "date-time"}

    def test_multiple_types_encode_as_list(self):
        """Тест обратной записи нескольких типов"""
        schema = Schema.model_validate({"type": ["integer", "null"]})

        assert schema.to_dict() == {"type": ["integer", "null"]}
        assert schema.primary_kind == "integer"

    def test_missing_type(self):
        """Тест схемы без type"""
        schema = Schema.model_validate({})

        assert schema.types == []
        assert schema.primary_kind is None

    @pytest.mark.parametrize("value", [[1], ["string", None], 42])
    def test_malformed_type(self, value):
        """Тест некорректного type: ошибка разбора"""
        with pytest.raises(ValidationError):
            Schema.model_validate({"type": value})

    def test_reference_round_trip(self):
        """Тест сохранения $ref при записи"""
        raw = {"$ref": "#/components/schemas/Pet"}

        assert Schema.model_validate(raw).to_dict() == raw

    def test_nested_reference_round_trip(self):
        """Тест записи вложенных схем без type"""
        raw = {
            "type": "object",
            "properties": {
                "owner": {"$ref": "#/components/schemas/Owner"},
                "tags": {"type": "array", "items": {"$ref": "#/components/schemas/Tag"}},
            },
        }

        assert Schema.model_validate(raw).to_dict() == raw

    def test_missing_type_not_written(self):
        """Тест: пустой type не попадает в запись"""
        assert "type" not in Schema.model_validate({"description": "x"}).to_dict()


class TestSchemaEnum:
    """Тесты enum полей схемы"""

    def test_enum_names(self):
        """Тест чтения x-enum-varnames"""
        schema = Schema.model_validate(
            {"type": "integer", "enum": [1, 2], "x-enum-varnames": ["One", "Two"]}
        )

        assert schema.enum_values == [1, 2]
        assert schema.enum_var_names == ["One", "Two"]

    def test_enum_names_alias(self):
        """Тест альтернативного ключа x-enumNames"""
        schema = Schema.model_validate(
            {"type": "integer", "enum": [1], "x-enumNames": ["One"]}
        )

        assert schema.enum_var_names == ["One"]

    def test_length_mismatch(self):
        """Тест несовпадения количества имен и значений"""
        with pytest.raises(ValidationError):
            Schema.model_validate(
                {"type": "integer", "enum": [1, 2], "x-enum-varnames": ["One"]}
            )

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ({"type": "integer"}, True),
            ({"type": "integer", "format": "int16"}, True),
            ({"type": "integer", "format": "int64"}, True),
            ({"type": "integer", "format": "uint8"}, False),
            ({"type": "string", "enum": ["a"]}, False),
            ({"type": "object"}, False),
        ],
    )
    def test_enum_candidate(self, raw, expected):
        """Тест признака enum модели"""
        assert Schema.model_validate(raw).is_enum_candidate is expected


class TestDocument:
    """Тесты документа целиком"""

    def test_parse(self, petstore_document):
        """Тест разбора примера документа"""
        assert petstore_document.title == "Pet Store.Api"
        assert petstore_document.version == "1.0"
        assert set(petstore_document.paths) == {
            "/pets",
            "/pets/{petId}",
            "/pets/{petId}/photo",
        }
        assert len(petstore_document.components.schemas) == 5

    def test_defaults(self):
        """Тест пустого документа"""
        document = Document.model_validate({})

        assert document.title == "Api"
        assert document.paths == {}
        assert document.components.schemas == {}
        assert document.api_key_scheme() is None

    def test_operations_order(self):
        """Тест фиксированного порядка GET, POST, PUT, DELETE"""
        responses = {"responses": {}}
        path_item = PathItem.model_validate(
            {
                "delete": responses,
                "patch": responses,
                "put": responses,
                "get": responses,
                "post": responses,
            }
        )

        assert [verb for verb, _ in path_item.operations()] == [
            "get",
            "post",
            "put",
            "delete",
        ]

    def test_parameter_location(self, petstore_document):
        """Тест разбора параметров"""
        operation = petstore_document.paths["/pets/{petId}"].get
        parameter = operation.parameters[0]

        assert parameter.name == "petId"
        assert parameter.location == "path"
        assert parameter.required is True
        assert parameter.value_schema.format == "int64"

    def test_invalid_parameter_location(self):
        """Тест неизвестного расположения параметра"""
        with pytest.raises(ValidationError):
            parse_document(
                {
                    "paths": {
                        "/x": {
                            "get": {
                                "parameters": [{"name": "a", "in": "body"}],
                                "responses": {},
                            }
                        }
                    }
                }
            )

    def test_api_key_scheme(self, petstore_document):
        """Тест поиска схемы apiKey"""
        scheme = petstore_document.api_key_scheme()

        assert scheme.name == "X-Api-Key"
        assert scheme.location == "header"

    def test_schema_for_reference(self, petstore_document):
        """Тест поиска схемы по ссылке"""
        assert (
            petstore_document.schema_for_reference("#/components/schemas/Owner")
            is petstore_document.components.schemas["Owner"]
        )
        assert petstore_document.schema_for_reference("#/components/schemas/X") is None
        assert petstore_document.schema_for_reference("Owner") is None

    def test_frozen(self, petstore_document):
        """Тест неизменяемости документа"""
        with pytest.raises(ValidationError):
            petstore_document.info.title = "Other"

    def test_parse_json_text(self):
        """Тест разбора JSON строки"""
        document = OpenApiParser('{"info": {"title": "Text"}}').parse()

        assert document.title == "Text"
