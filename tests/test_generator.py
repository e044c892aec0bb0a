"""
Тесты для генератора OpenAPI клиентов
"""

import ast
import json

import pytest

from openapi_clientgen import ApiClientGenerator, GeneratorError, generate_client
from openapi_clientgen.internal.generator.assembler import render_files


class TestOpenApiClientGenerator:
    """Тесты основной функциональности генератора"""

    def test_files(self, petstore_spec):
        """Тест набора сгенерированных файлов"""
        project = ApiClientGenerator(petstore_spec).generate()

        assert {f.file_name for f in project.files} == {
            "__init__.py",
            "client.py",
            "models/__init__.py",
            "models/pet.py",
            "models/owner.py",
            "models/pet_status.py",
            "models/photo_upload.py",
            "models/form_file.py",
        }

    def test_formatted_files_are_valid_python(self, petstore_spec):
        """Тест синтаксиса файлов после форматирования"""
        project = ApiClientGenerator(petstore_spec).generate()

        for file_name, source in render_files(project).items():
            ast.parse(source, filename=file_name)

    def test_package_init(self, petstore_spec):
        """Тест корневого __init__.py"""
        project = ApiClientGenerator(petstore_spec).generate()
        text = str(project.get_file("__init__.py"))

        assert "from .client import PetStoreApiClient, PetStoreApiClientOptions" in text
        assert "from . import models" in text

    def test_without_models(self, petstore_spec):
        """Тест генерации только клиента"""
        project = ApiClientGenerator(petstore_spec, generate_models=False).generate()
        file_names = {f.file_name for f in project.files}

        assert file_names == {"__init__.py", "client.py"}
        # Ссылки разрешаются по зарегистрированным именам и без моделей
        assert "from .models import Pet, PhotoUpload" in str(project.get_file("client.py"))

    def test_without_client(self, petstore_spec):
        """Тест генерации только моделей"""
        project = ApiClientGenerator(petstore_spec, generate_client=False).generate()
        file_names = {f.file_name for f in project.files}

        assert "client.py" not in file_names
        assert "models/pet.py" in file_names
        assert "from .client" not in str(project.get_file("__init__.py"))

    def test_client_options(self, petstore_spec):
        """Тест передачи имени клиента и базового URL"""
        project = ApiClientGenerator(
            petstore_spec, client_name="PetsClient", base_url="http://pets"
        ).generate()
        text = str(project.get_file("client.py"))

        assert "class PetsClient:" in text
        assert "base_url: str = 'http://pets'" in text

    def test_form_file_from_client(self):
        """Тест: FormFile добавляется в модели, если он нужен только клиенту"""
        spec = {
            "paths": {
                "/upload": {
                    "post": {
                        "requestBody": {
                            "content": {
                                "multipart/form-data": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {
                                            "file": {
                                                "$ref": "#/components/schemas/IFormFile"
                                            }
                                        },
                                    }
                                }
                            }
                        },
                        "responses": {},
                    }
                }
            }
        }
        project = ApiClientGenerator(spec).generate()

        assert project.get_file("models/form_file.py") is not None
        assert "from .form_file import FormFile" in str(
            project.get_file("models/__init__.py")
        )

    def test_json_text_input(self, petstore_spec):
        """Тест входного документа в виде JSON строки"""
        project = generate_client(json.dumps(petstore_spec))

        assert project.get_file("client.py") is not None

    def test_empty_document(self):
        """Тест документа без путей и схем"""
        project = ApiClientGenerator({}).generate()

        for file_name, source in render_files(project).items():
            ast.parse(source, filename=file_name)

    @pytest.mark.parametrize(
        "spec",
        [
            {"components": {"schemas": {"Bad": {"type": [1]}}}},
            {
                "components": {
                    "schemas": {
                        "Bad": {"type": "integer", "enum": [1], "x-enum-varnames": []}
                    }
                }
            },
            "{not json",
        ],
    )
    def test_malformed_document(self, spec):
        """Тест ошибки разбора"""
        with pytest.raises(GeneratorError) as error:
            ApiClientGenerator(spec)

        assert error.value.stage == "разбор"

    def test_generation_is_deterministic(self, petstore_spec):
        """Тест одинакового результата при повторной генерации"""
        first = render_files(ApiClientGenerator(petstore_spec).generate())
        second = render_files(ApiClientGenerator(petstore_spec).generate())

        assert first == second
