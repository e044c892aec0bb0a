"""
Главный модуль генератора - чистый интерфейс
"""

import logging
from typing import Any, Dict, Union

from pydantic import ValidationError

from .exceptions import GeneratorError
from .internal.generator.client_generator import ClientGenerator
from .internal.generator.model_generator import ModelGenerator
from .internal.parser.openapi import parse_document
from .internal.types.models import CodeBlock, Project
from .internal.types.schema_resolver import SchemaNameRegistry
from .internal.utils.naming import to_snake_identifier

logger = logging.getLogger(__name__)


class ApiClientGenerator:
    """Чистый интерфейс для генерации API клиентов"""

    def __init__(
        self,
        openapi_spec: Union[Dict[str, Any], str],
        client_name: str = None,
        base_url: str = "https://localhost",
        generate_models: bool = True,
        generate_client: bool = True,
    ):
        try:
            self.document = parse_document(openapi_spec)
        except (ValidationError, ValueError) as e:
            raise GeneratorError(str(e), stage="разбор") from e

        self.client_name = client_name
        self.base_url = base_url
        self.generate_models = generate_models
        self.generate_client = generate_client

    def generate(self) -> Project:
        """Генерация проекта клиента"""
        project = Project(name=to_snake_identifier(self.document.title))

        registry = SchemaNameRegistry()
        model_generator = ModelGenerator(self.document, project, registry)
        model_generator.register_schemas()

        if self.generate_models:
            model_generator.generate()

        client_generator = None
        if self.generate_client:
            client_generator = ClientGenerator(
                self.document,
                project,
                registry,
                client_name=self.client_name,
                base_url=self.base_url,
            )
            client_generator.generate()

            if self.generate_models and client_generator.uses_form_file():
                model_generator.add_form_file()

        if self.generate_models:
            model_generator.generate_init()

        self._generate_package_init(project, client_generator)

        logger.info(
            f"Сгенерировано {len(project.files)} файлов для '{self.document.title}'"
        )
        return project

    def _generate_package_init(self, project: Project, client_generator):
        package_init = project.add_file("__init__.py")
        package_init.imports.append("# Auto-generated client package")

        exports = []
        if client_generator is not None:
            package_init.imports.append(
                f"from .client import {client_generator.client_name}, "
                f"{client_generator.options_name}"
            )
            exports.extend(
                [client_generator.client_name, client_generator.options_name]
            )
        if self.generate_models:
            package_init.imports.append("from . import models")
            exports.append("models")

        package_init.add_code_block(CodeBlock(code=f"__all__ = {exports!r}"))


def generate_client(openapi_spec: Union[Dict[str, Any], str], **kwargs) -> Project:
    """Создание API клиента из OpenAPI спецификации"""
    generator = ApiClientGenerator(openapi_spec, **kwargs)
    return generator.generate()
