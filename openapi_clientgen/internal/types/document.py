"""
Типизированное представление OpenAPI документа
"""

from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)

SCHEMA_REF_PREFIX = "#/components/schemas/"

HTTP_VERBS = ("get", "post", "put", "delete")


class DocumentModel(BaseModel):
    """Базовая модель: неизменяемая, лишние поля игнорируются"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Schema(DocumentModel):
    types: List[str] = Field(default_factory=list, alias="type")
    format: Optional[str] = None
    description: Optional[str] = None
    properties: Optional[Dict[str, "Schema"]] = None
    required: Optional[List[str]] = None
    items: Optional["Schema"] = None
    reference: Optional[str] = Field(default=None, alias="$ref")
    enum_values: Optional[List[Any]] = Field(
        default=None,
        validation_alias=AliasChoices("enum", "enum_values"),
        serialization_alias="enum",
    )
    enum_var_names: Optional[List[str]] = Field(
        default=None,
        validation_alias=AliasChoices(
            "x-enum-varnames", "x-enumNames", "enum_var_names"
        ),
        serialization_alias="x-enum-varnames",
    )

    @field_validator("types", mode="before")
    @classmethod
    def decode_types(cls, value):
        # "type" может быть строкой или массивом строк
        if value is None:
            return []

        if isinstance(value, str):
            return [value]

        if isinstance(value, (list, tuple)):
            for item in value:
                if not isinstance(item, str):
                    raise ValueError(
                        f"Элемент массива type должен быть строкой, получено: {item!r}"
                    )
            return list(value)

        raise ValueError(f"Некорректное значение type: {value!r}")

    @field_serializer("types")
    def encode_types(self, types: List[str]):
        if len(types) == 1:
            return types[0]
        return types

    @model_serializer(mode="wrap")
    def drop_missing_type(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        # Схема без type (например, $ref) записывается без ключа type
        if not self.types:
            data.pop("type", None)
            data.pop("types", None)
        return data

    @model_validator(mode="after")
    def check_enum_pairs(self) -> "Schema":
        if (
            self.enum_values is not None
            and self.enum_var_names is not None
            and len(self.enum_values) != len(self.enum_var_names)
        ):
            raise ValueError(
                f"x-enum-varnames ({len(self.enum_var_names)}) и enum "
                f"({len(self.enum_values)}) должны иметь одинаковую длину"
            )
        return self

    @property
    def primary_kind(self) -> Optional[str]:
        """Первый из объявленных типов - единственный учитываемый при разрешении"""
        return self.types[0] if self.types else None

    @property
    def is_enum_candidate(self) -> bool:
        return self.primary_kind == "integer" and self.format in (
            None,
            "int16",
            "int32",
            "int64",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Обратная сериализация в JSON-совместимый словарь"""
        return self.model_dump(by_alias=True, exclude_none=True, exclude_defaults=True)


Schema.model_rebuild()


class MediaType(DocumentModel):
    value_schema: Optional[Schema] = Field(default=None, alias="schema")


class Parameter(DocumentModel):
    name: str
    location: Literal["path", "header", "query", "cookie"] = Field(alias="in")
    required: bool = False
    description: Optional[str] = None
    value_schema: Optional[Schema] = Field(default=None, alias="schema")


class RequestBody(DocumentModel):
    description: Optional[str] = None
    required: bool = False
    content: Dict[str, MediaType] = Field(default_factory=dict)

    def schema_for(self, media_type: str) -> Optional[Schema]:
        media = self.content.get(media_type)
        return media.value_schema if media else None


class Response(DocumentModel):
    description: Optional[str] = None
    content: Dict[str, MediaType] = Field(default_factory=dict)

    def schema_for(self, media_type: str) -> Optional[Schema]:
        media = self.content.get(media_type)
        return media.value_schema if media else None


class Operation(DocumentModel):
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    parameters: List[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = Field(default=None, alias="requestBody")
    responses: Dict[str, Response] = Field(default_factory=dict)


class PathItem(DocumentModel):
    get: Optional[Operation] = None
    post: Optional[Operation] = None
    put: Optional[Operation] = None
    delete: Optional[Operation] = None

    def operations(self) -> Iterator[Tuple[str, Operation]]:
        """Операции пути в порядке GET, POST, PUT, DELETE"""
        for verb in HTTP_VERBS:
            operation = getattr(self, verb)
            if operation is not None:
                yield verb, operation


class SecurityScheme(DocumentModel):
    kind: str = Field(alias="type")
    name: Optional[str] = None
    location: Optional[str] = Field(default=None, alias="in")
    description: Optional[str] = None


class Components(DocumentModel):
    schemas: Dict[str, Schema] = Field(default_factory=dict)
    security_schemes: Dict[str, SecurityScheme] = Field(
        default_factory=dict, alias="securitySchemes"
    )


class Info(DocumentModel):
    title: str = "Api"
    description: Optional[str] = None
    version: Optional[str] = None


class Document(DocumentModel):
    openapi: Optional[str] = None
    info: Info = Field(default_factory=Info)
    paths: Dict[str, PathItem] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)

    @property
    def title(self) -> str:
        return self.info.title

    @property
    def version(self) -> Optional[str]:
        return self.info.version

    def api_key_scheme(self) -> Optional[SecurityScheme]:
        """Первая схема безопасности типа apiKey"""
        for scheme in self.components.security_schemes.values():
            if scheme.kind == "apiKey":
                return scheme
        return None

    def schema_for_reference(self, reference: Optional[str]) -> Optional[Schema]:
        """Поиск именованной схемы по строке $ref"""
        if not reference or not reference.startswith(SCHEMA_REF_PREFIX):
            return None
        return self.components.schemas.get(reference[len(SCHEMA_REF_PREFIX) :])
