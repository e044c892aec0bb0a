"""
Генерация моделей из components/schemas
"""

import keyword
import logging
from enum import Enum
from typing import Dict, List, Set

from ..types.document import SCHEMA_REF_PREFIX, Document, Schema
from ..types.models import CodeBlock, Parameter, Project, TypeKind, Variable
from ..types.schema_resolver import (
    FORM_FILE_CLASS,
    SchemaNameRegistry,
    SchemaResolver,
)
from ..utils.naming import to_class_name, to_module_name, to_snake_identifier
from .templates import templates

logger = logging.getLogger(__name__)

FORM_FILE_SCHEMA = "IFormFile"
FORM_FILE_COLLECTION_SCHEMA = "IFormFileCollection"


class ModelKind(str, Enum):
    """Во что превращается именованная схема"""

    RECORD = "record"
    ENUMERATION = "enumeration"
    BINARY_FILE = "binary_file"
    BINARY_FILE_ARRAY = "binary_file_array"


def classify(name: str, schema: Schema) -> ModelKind:
    """Вид модели определяется один раз, до генерации"""
    if name.lower() == FORM_FILE_SCHEMA.lower():
        return ModelKind.BINARY_FILE
    if name.lower() == FORM_FILE_COLLECTION_SCHEMA.lower():
        return ModelKind.BINARY_FILE_ARRAY
    if schema.is_enum_candidate:
        return ModelKind.ENUMERATION
    return ModelKind.RECORD


def enum_members(schema: Schema) -> List[tuple]:
    """
    Пары (имя, значение) для enum модели.

    Без списка значений получается единственный член Undefined = 0.
    """
    if not schema.enum_values:
        return [("Undefined", 0)]

    names = schema.enum_var_names or [None] * len(schema.enum_values)

    members = []
    for name, value in zip(names, schema.enum_values):
        if name is None:
            name = f"Value{value}".replace("-", "Minus")
        members.append((_enum_member_name(str(name)), value))

    return members


def _enum_member_name(name: str) -> str:
    if not name.isidentifier() or name.startswith("_"):
        name = to_class_name(name)
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def field_names(schema: Schema) -> Dict[str, str]:
    """Ключ свойства -> уникальное имя поля в Python"""
    names: Dict[str, str] = {}
    used: Set[str] = set()

    for field_name in schema.properties or {}:
        python_name = to_snake_identifier(field_name)
        while python_name in used:
            python_name = f"{python_name}_"
        used.add(python_name)
        names[field_name] = python_name

    return names


class ModelGenerator:
    """Генератор Pydantic и enum моделей"""

    def __init__(
        self,
        document: Document,
        project: Project,
        registry: SchemaNameRegistry = None,
    ):
        self.document = document
        self.project = project
        self.registry = registry if registry is not None else SchemaNameRegistry()
        self.resolver = SchemaResolver(self.registry)
        self.models: Dict[str, ModelKind] = {}  # class_name -> kind

    def register_schemas(self):
        """Регистрация имен всех схем до разрешения любых типов"""
        for schema_name in self.document.components.schemas:
            self.registry.register(
                f"{SCHEMA_REF_PREFIX}{schema_name}", self.class_name(schema_name)
            )

    @staticmethod
    def class_name(schema_name: str) -> str:
        if schema_name.lower() == FORM_FILE_SCHEMA.lower():
            return FORM_FILE_CLASS
        return to_class_name(schema_name)

    def generate(self) -> Dict[str, ModelKind]:
        """Генерация всех моделей в отдельные файлы"""
        self.register_schemas()

        for schema_name, schema in self.document.components.schemas.items():
            clean_name = self.registry.lookup(f"{SCHEMA_REF_PREFIX}{schema_name}")
            kind = classify(schema_name, schema)

            if kind == ModelKind.BINARY_FILE:
                self.add_form_file()
            elif kind == ModelKind.BINARY_FILE_ARRAY:
                self._generate_form_file_collection(clean_name)
            elif kind == ModelKind.ENUMERATION:
                self._generate_enum(clean_name, schema)
            else:
                self._generate_record(clean_name, schema)

            self.models[clean_name] = kind

        return self.models

    def add_form_file(self):
        """Модель FormFile, если ее еще нет"""
        if FORM_FILE_CLASS in self.models:
            return

        self.project.add_file(f"models/{to_module_name(FORM_FILE_CLASS)}.py").add_code_block(
            CodeBlock(code=templates.form_file.rstrip("\n"))
        )
        self.models[FORM_FILE_CLASS] = ModelKind.BINARY_FILE

    def _generate_form_file_collection(self, clean_name: str):
        self.add_form_file()
        self.project.add_file(f"models/{to_module_name(clean_name)}.py").add_code_block(
            CodeBlock(code=templates.form_file_collection.format(name=clean_name).rstrip("\n"))
        )

    def _generate_enum(self, clean_name: str, schema: Schema):
        model_file = self.project.add_file(f"models/{to_module_name(clean_name)}.py")
        model_file.imports.extend(templates.enum_imports)

        model_class = model_file.add_class(clean_name, inherits=["IntEnum"])
        if schema.description:
            model_class.description = schema.description

        members = enum_members(schema)
        if not schema.enum_values:
            logger.info(
                f"Схема {clean_name} без значений enum - создан член Undefined = 0"
            )

        for member_name, value in members:
            model_class.parameters.append(
                Parameter(name=member_name, default=Variable(value=repr(value)))
            )

    def _generate_record(self, clean_name: str, schema: Schema):
        model_file = self.project.add_file(f"models/{to_module_name(clean_name)}.py")
        model_file.imports.extend(templates.model_imports)

        model_class = model_file.add_class(clean_name, inherits=["BaseModel"])
        if schema.description:
            model_class.description = schema.description
        model_class.add_code_block(CodeBlock(code=templates.model_config, order=1))

        dependencies: Set[str] = set()
        python_names = field_names(schema)

        for field_name, field_schema in (schema.properties or {}).items():
            field_type = self.field_type(field_schema)
            dependencies.update(self._model_names(field_type))

            # Оригинальный ключ остается в alias
            python_name = python_names[field_name]

            model_class.parameters.append(
                Parameter(
                    name=python_name,
                    var_type=field_type,
                    default=Variable(value=f"Field(default=None, alias={field_name!r})"),
                )
            )

        if FORM_FILE_CLASS in dependencies:
            self.add_form_file()

        type_checking_imports = [
            f"    from .{to_module_name(dep)} import {dep}"
            for dep in sorted(dependencies)
            if dep != clean_name
        ]
        if type_checking_imports:
            model_file.imports.append("")
            model_file.imports.append("if TYPE_CHECKING:")
            model_file.imports.extend(type_checking_imports)

    def field_type(self, field_schema: Schema) -> Variable:
        """
        Аннотация поля записи.

        Все поля записи имеют default=None, поэтому строки и списки
        тоже принимают None; вид типа при этом не меняется.
        """
        field_type = self.resolver.resolve(field_schema)
        if field_type.kind in (TypeKind.TEXT, TypeKind.SEQUENCE):
            return Variable(value=field_type, wrap_name="Optional", kind=field_type.kind)
        return self.resolver.nullable(field_type)

    @staticmethod
    def _model_names(var_type: Variable) -> Set[str]:
        """Имена моделей, на которые ссылается тип"""
        names = set()
        for _ in var_type:
            if _.kind in (TypeKind.REFERENCE, TypeKind.BINARY_FILE):
                names.add(str(_))
        return names

    def generate_init(self):
        """models/__init__.py с импортами и model_rebuild"""
        models_init = self.project.add_file("models/__init__.py")
        models_init.imports.append("# Auto-generated models")

        for class_name in sorted(self.models):
            models_init.imports.append(
                f"from .{to_module_name(class_name)} import {class_name}"
            )

        models_init.add_code_block(
            CodeBlock(code=f"__all__ = {sorted(self.models)!r}", order=1)
        )

        # Разрешение forward references между файлами моделей
        records = [
            name
            for name, kind in sorted(self.models.items())
            if kind == ModelKind.RECORD
        ]
        if records:
            models_init.add_code_block(
                CodeBlock(
                    code="\n".join(f"{name}.model_rebuild()" for name in records),
                    order=0,
                )
            )

