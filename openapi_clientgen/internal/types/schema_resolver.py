from typing import Dict, Optional

from .document import SCHEMA_REF_PREFIX, Schema
from .models import TypeKind, Variable
from ..utils.naming import to_class_name

FORM_FILE_REF = f"{SCHEMA_REF_PREFIX}IFormFile"
FORM_FILE_COLLECTION_REF = f"{SCHEMA_REF_PREFIX}IFormFileCollection"

FORM_FILE_CLASS = "FormFile"


class SchemaNameRegistry:
    """Кэш имен схем: строка $ref -> имя сгенерированного класса"""

    def __init__(self):
        self._schema_registry: Dict[str, str] = {}

    def register(self, reference: str, class_name: str):
        """Регистрация имени схемы"""
        self._schema_registry[reference] = class_name

    def lookup(self, reference: str) -> Optional[str]:
        return self._schema_registry.get(reference)

    def __contains__(self, reference: str) -> bool:
        return reference in self._schema_registry

    def __len__(self) -> int:
        return len(self._schema_registry)


def binary_file_type() -> Variable:
    return Variable(value=FORM_FILE_CLASS, kind=TypeKind.BINARY_FILE)


def binary_file_array_type() -> Variable:
    return Variable(
        value=binary_file_type(), wrap_name="List", kind=TypeKind.BINARY_FILE_ARRAY
    )


def untyped() -> Variable:
    return Variable(value="Any", kind=TypeKind.UNTYPED)


def nothing() -> Variable:
    return Variable(value="None", kind=TypeKind.NONE)


def stream_type() -> Variable:
    return Variable(value="IOBase", kind=TypeKind.STREAM)


def text_type() -> Variable:
    return Variable(value="str", kind=TypeKind.TEXT)


_INTEGER_TYPES = {
    "int64": Variable(value="int", kind=TypeKind.INT64),
}
_NUMBER_TYPES = {
    "float": Variable(value="float", kind=TypeKind.FLOAT),
}
_STRING_TYPES = {
    "date-time": Variable(value="datetime", kind=TypeKind.TIMESTAMP),
    "byte": Variable(value="bytes", kind=TypeKind.BYTES),
    "binary": stream_type(),
}


class SchemaResolver:
    """Разрешение узла схемы в имя типа Python"""

    def __init__(self, registry: SchemaNameRegistry = None):
        self.registry = registry if registry is not None else SchemaNameRegistry()

    def resolve(self, schema: Optional[Schema]) -> Variable:
        """Имя типа для схемы. Никогда не выбрасывает исключений"""
        if schema is None:
            return untyped()

        if not schema.reference and schema.properties:
            # Запись со ссылкой на IFormFile - это загрузка файла
            references = [
                prop.reference for prop in schema.properties.values() if prop
            ]
            if FORM_FILE_REF in references:
                return binary_file_type()
            if FORM_FILE_COLLECTION_REF in references:
                return binary_file_array_type()

        if schema.reference:
            return self.resolve_reference(schema.reference)

        kind = schema.primary_kind

        if kind == "array":
            item_type = self.resolve(schema.items)
            if item_type.kind == TypeKind.BINARY_FILE:
                return binary_file_array_type()
            return Variable(value=item_type, wrap_name="List", kind=TypeKind.SEQUENCE)

        if kind == "integer":
            return _INTEGER_TYPES.get(
                schema.format, Variable(value="int", kind=TypeKind.INT32)
            ).model_copy()

        if kind == "number":
            return _NUMBER_TYPES.get(
                schema.format, Variable(value="float", kind=TypeKind.DOUBLE)
            ).model_copy()

        if kind == "string":
            return _STRING_TYPES.get(schema.format, text_type()).model_copy()

        if kind == "boolean":
            return Variable(value="bool", kind=TypeKind.BOOLEAN)

        return untyped()

    def resolve_reference(self, reference: str) -> Variable:
        if reference == FORM_FILE_REF:
            return binary_file_type()
        if reference == FORM_FILE_COLLECTION_REF:
            return binary_file_array_type()

        class_name = self.registry.lookup(reference)
        if class_name is None:
            # Схема еще не зарегистрирована - имя из последнего сегмента ссылки
            class_name = to_class_name(reference)

        return Variable(value=class_name, kind=TypeKind.REFERENCE)

    def parameter_type(self, schema: Optional[Schema]) -> Variable:
        """Тип параметра: без схемы параметр считается строкой"""
        if schema is None:
            return text_type()
        return self.resolve(schema)

    @staticmethod
    def nullable(var_type: Variable) -> Variable:
        """Optional[...] для всех типов кроме строк и списков"""
        if var_type.kind in (TypeKind.TEXT, TypeKind.SEQUENCE, TypeKind.NULLABLE):
            return var_type
        return Variable(value=var_type, wrap_name="Optional", kind=TypeKind.NULLABLE)
