import logging
import re
from typing import List, Optional, Set, Tuple

from ..types.document import (
    Document,
    Operation,
    RequestBody,
    SCHEMA_REF_PREFIX,
    SecurityScheme,
)
from ..types.models import (
    Class,
    CodeBlock,
    Function,
    Parameter,
    Project,
    TypeKind,
    Variable,
)
from ..types.schema_resolver import (
    FORM_FILE_CLASS,
    SchemaNameRegistry,
    SchemaResolver,
    nothing,
    stream_type,
    untyped,
)
from ..utils.naming import to_snake_identifier, to_upper_identifier
from .model_generator import ModelKind, classify, field_names
from .templates import templates

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
MULTIPART_MEDIA_TYPE = "multipart/form-data"
OCTET_STREAM_MEDIA_TYPE = "application/octet-stream"

_PATH_PLACEHOLDER = re.compile(r"\{([^}]*)\}")

_FILE_KINDS = (TypeKind.BINARY_FILE, TypeKind.STREAM)

# Имена, занятые в теле метода операции
_METHOD_LOCALS = (
    "self",
    "request_body",
    "request_uri",
    "headers",
    "form",
    "payload",
    "url",
    "response",
    "file",
    "item",
    "aiohttp",
    "io",
    "logger",
    "quote",
)


class ClientGenerator:
    """Генератор async клиента из paths документа"""

    def __init__(
        self,
        document: Document,
        project: Project,
        registry: SchemaNameRegistry = None,
        client_name: str = None,
        base_url: str = "https://localhost",
    ):
        self.document = document
        self.project = project
        self.resolver = SchemaResolver(registry)
        self.client_name = client_name or self.default_client_name(document.title)
        self.base_url = base_url

        self.api_key: Optional[SecurityScheme] = document.api_key_scheme()
        self.referenced_models: Set[str] = set()

        self.client_class: Optional[Class] = None

    @staticmethod
    def default_client_name(title: str) -> str:
        """Имя клиента из заголовка документа"""
        name = to_upper_identifier(title.replace(" ", "").replace(".", ""))
        return f"{name or 'Api'}Client"

    @property
    def options_name(self) -> str:
        return f"{self.client_name}Options"

    def generate(self) -> Set[str]:
        """
        Генерация client.py.

        Returns:
            Имена моделей, на которые ссылается клиент
        """
        client_file = self.project.add_file("client.py")
        client_file.imports.extend(templates.client_imports)

        self._generate_options(client_file)
        self.client_class = self._generate_client_class(client_file)

        for path, path_item in self.document.paths.items():
            for verb, operation in path_item.operations():
                self._generate_operation(path, verb, operation)

        if self.referenced_models:
            client_file.imports.append("")
            client_file.imports.append(
                f"from .models import {', '.join(sorted(self.referenced_models))}"
            )

        client_file.add_code_block(CodeBlock(code=templates.client_helpers, order=2))

        logger.debug(
            f"Клиент {self.client_name}: "
            f"{len(self.client_class.functions) - 2} методов"
        )
        return self.referenced_models

    def _generate_options(self, client_file):
        options = client_file.add_class(
            self.options_name, inherits=["BaseModel"], order=1
        )
        options.description = f"Настройки клиента {self.client_name}"
        options.parameters.append(
            Parameter(
                name="base_url",
                var_type=Variable(value="str"),
                default=Variable(value=repr(self.base_url)),
            )
        )

        if self.api_key:
            options.parameters.append(
                Parameter(
                    name="api_key",
                    var_type=Variable(value="str", wrap_name="Optional"),
                    default=Variable(value="None"),
                )
            )

    def _generate_client_class(self, client_file) -> Class:
        client_class = client_file.add_class(self.client_name, order=0)
        if self.document.info.description:
            client_class.description = self.document.info.description

        client_class.add_function(
            "__init__",
            parameters=[
                Parameter(name="self"),
                Parameter(name="options", var_type=Variable(value=self.options_name)),
                Parameter(
                    name="session", var_type=Variable(value="aiohttp.ClientSession")
                ),
            ],
            code=CodeBlock(code=templates.client_init),
            order=2,
        )
        client_class.add_function(
            "_url",
            parameters=[
                Parameter(name="self"),
                Parameter(name="request_uri", var_type=Variable(value="str")),
            ],
            response="str",
            code=CodeBlock(code=templates.client_url),
            order=1,
        )

        return client_class

    def method_name(self, path: str, verb: str, operation: Operation) -> str:
        """
        Имя метода операции.

        operationId, иначе последний сегмент пути без {...}, иначе <Verb>Api.
        При совпадении добавляется префикс с глаголом, затем числовой суффикс.
        """
        name = None
        if operation.operation_id:
            name = to_upper_identifier(operation.operation_id.replace(" ", "_"))

        if not name:
            for segment in reversed(path.split("/")):
                if segment and not segment.startswith("{"):
                    name = to_upper_identifier(segment)
                    break

        if not name:
            name = f"{to_upper_identifier(verb.lower())}Api"

        if self._is_taken(name):
            name = f"{to_upper_identifier(verb.lower())}{name}"

        candidate, counter = name, 2
        while self._is_taken(candidate):
            candidate = f"{name}{counter}"
            counter += 1

        return candidate

    def _is_taken(self, name: str) -> bool:
        return (
            self.client_class is not None
            and to_snake_identifier(name) in self.client_class.functions
        )

    def _generate_operation(self, path: str, verb: str, operation: Operation):
        name = self.method_name(path, verb, operation)

        parameters = [Parameter(name="self")]
        used_names = set(_METHOD_LOCALS)
        path_names = {}
        headers = []

        for param in operation.parameters:
            if param.location == "path":
                python_name = self._unique(to_snake_identifier(param.name), used_names)
                path_names[param.name] = python_name
                parameters.append(
                    Parameter(
                        name=python_name,
                        var_type=self._reference(
                            self.resolver.parameter_type(param.value_schema)
                        ),
                    )
                )

        for param in operation.parameters:
            if param.location != "header" or self._is_api_key_header(param.name):
                continue

            python_name = self._unique(to_snake_identifier(param.name), used_names)
            headers.append((param.name, python_name))
            param_type = self._reference(
                self.resolver.parameter_type(param.value_schema)
            )
            parameters.append(self._argument(python_name, param_type, param.required))

        body_type = None
        if operation.request_body is not None:
            body_type = self._reference(self.body_type(operation.request_body))
            parameters.append(
                self._argument(
                    "request_body", body_type, operation.request_body.required
                )
            )

        response_type = self._reference(self.response_type(operation))

        lines = [f"request_uri = {self._request_uri(path, path_names)}"]
        lines.extend(self._header_lines(headers))
        payload = None
        if operation.request_body is not None:
            payload, body_lines = self._body_lines(operation.request_body, body_type)
            lines.extend(body_lines)
        lines.extend(
            [
                "url = self._url(request_uri)",
                f'logger.debug(f"Making {verb.upper()} request to {{url}}")',
                "",
                "async with self._session.request(",
                f'\t"{verb.upper()}", url, headers=headers'
                + (f", {payload}" if payload else ""),
                ") as response:",
                "\tresponse.raise_for_status()",
            ]
        )
        lines.extend(f"\t{line}" for line in self._decode_lines(response_type))

        self.client_class.add_function(
            Function(
                name=to_snake_identifier(name),
                parameters=parameters,
                async_def=True,
                response=str(response_type),
                description=operation.summary or operation.description,
                code=CodeBlock(code="\n".join(lines)),
            )
        )

    @staticmethod
    def _unique(name: str, used_names: Set[str]) -> str:
        while name in used_names:
            name = f"{name}_"
        used_names.add(name)
        return name

    @staticmethod
    def _argument(name: str, var_type: Variable, required: bool) -> Parameter:
        if required:
            return Parameter(name=name, var_type=var_type)

        if var_type.kind != TypeKind.NULLABLE:
            var_type = Variable(
                value=var_type, wrap_name="Optional", kind=TypeKind.NULLABLE
            )
        return Parameter(name=name, var_type=var_type, default=Variable(value="None"))

    def _is_api_key_header(self, header_name: str) -> bool:
        return bool(
            self.api_key
            and self.api_key.name
            and self.api_key.name.lower() == header_name.lower()
        )

    def _reference(self, var_type: Variable) -> Variable:
        """Запоминает модели, которые нужно импортировать в client.py"""
        for _ in var_type:
            if _.kind in (TypeKind.REFERENCE, TypeKind.BINARY_FILE):
                self.referenced_models.add(str(_))
        return var_type

    def body_type(self, request_body: RequestBody) -> Variable:
        """Тип тела: JSON схема, затем multipart, иначе Any"""
        for media_type in (JSON_MEDIA_TYPE, MULTIPART_MEDIA_TYPE):
            if media_type in request_body.content:
                return self.resolver.resolve(request_body.schema_for(media_type))
        return untyped()

    def response_type(self, operation: Operation) -> Variable:
        """Тип ответа по коду 200"""
        response = operation.responses.get("200")
        if response is None:
            return nothing()

        if JSON_MEDIA_TYPE in response.content:
            return self.resolver.resolve(response.schema_for(JSON_MEDIA_TYPE))
        if OCTET_STREAM_MEDIA_TYPE in response.content:
            return stream_type()

        return nothing()

    @staticmethod
    def _request_uri(path: str, path_names: dict) -> str:
        def placeholder(match):
            name = match.group(1)
            python_name = path_names.get(name, to_snake_identifier(name))
            # Значение экранируется целиком, "/" и "?" не меняют маршрут
            return "{quote(_form_value(" + python_name + "), safe='')}"

        uri = _PATH_PLACEHOLDER.sub(placeholder, path)
        if uri == path:
            return repr(path)
        return f'f"{uri}"'

    def _header_lines(self, headers: List[Tuple[str, str]]) -> List[str]:
        lines = ["headers = {}"]

        if self.api_key and self.api_key.name:
            lines.extend(
                [
                    "if self._options.api_key:",
                    f"\theaders[{self.api_key.name!r}] = self._options.api_key",
                ]
            )

        for header_name, python_name in headers:
            lines.extend(
                [
                    f"if {python_name} is not None:",
                    f"\theaders[{header_name!r}] = _form_value({python_name})",
                ]
            )

        return lines

    def _body_lines(
        self, request_body: RequestBody, body_type: Variable
    ) -> Tuple[Optional[str], List[str]]:
        """Строки подготовки тела запроса и аргумент для session.request"""
        if MULTIPART_MEDIA_TYPE in request_body.content:
            return "data=form", ["form = aiohttp.FormData()"] + self._form_lines(
                request_body, body_type
            )

        if JSON_MEDIA_TYPE in request_body.content:
            return "json=payload", [
                "payload = to_jsonable_python(",
                '\trequest_body, by_alias=True, exclude_none=True, bytes_mode="base64"',
                ")",
            ]

        return None, []

    def _form_lines(self, request_body: RequestBody, body_type: Variable) -> List[str]:
        # JSON схема имеет приоритет в типе параметра, поля формы берутся из нее
        form_type = body_type
        if JSON_MEDIA_TYPE in request_body.content:
            form_type = self.resolver.resolve(
                request_body.schema_for(MULTIPART_MEDIA_TYPE)
            )

        if form_type.kind in _FILE_KINDS:
            return ['_append_file(form, "file", request_body)']

        if form_type.kind == TypeKind.BINARY_FILE_ARRAY:
            return [
                "for file in request_body or []:",
                '\t_append_file(form, "files", file)',
            ]

        record = self._record_schema(form_type)
        if record is None:
            return ["_append_fields(form, request_body)"]

        lines = ["if request_body is not None:"]
        python_names = field_names(record)
        for field_name, field_schema in (record.properties or {}).items():
            field_type = self.resolver.resolve(field_schema)
            attribute = f"request_body.{python_names[field_name]}"

            if field_type.kind in _FILE_KINDS:
                lines.append(f"\t_append_file(form, {field_name!r}, {attribute})")
            elif field_type.kind == TypeKind.BINARY_FILE_ARRAY:
                lines.append(f"\tfor file in {attribute} or []:")
                lines.append(f"\t\t_append_file(form, {field_name!r}, file)")
            elif field_type.kind == TypeKind.SEQUENCE:
                lines.append(f"\tfor item in {attribute} or []:")
                lines.append(f"\t\t_append_text(form, {field_name!r}, item)")
            else:
                lines.append(f"\t_append_text(form, {field_name!r}, {attribute})")

        if len(lines) == 1:
            return []
        return lines

    def _record_schema(self, var_type: Variable):
        """Схема именованной записи для типа-ссылки"""
        if var_type.kind != TypeKind.REFERENCE:
            return None

        for schema_name, schema in self.document.components.schemas.items():
            if self.resolver.registry.lookup(f"{SCHEMA_REF_PREFIX}{schema_name}") != str(
                var_type
            ):
                continue
            if classify(schema_name, schema) == ModelKind.RECORD:
                return schema
            return None

        return None

    @staticmethod
    def _decode_lines(response_type: Variable) -> List[str]:
        if response_type.kind == TypeKind.NONE:
            return []
        if response_type.kind == TypeKind.STREAM:
            return ["return io.BytesIO(await response.read())"]

        return [
            f"return TypeAdapter({response_type}).validate_python(",
            "\tawait response.json(content_type=None)",
            ")",
        ]

    def uses_form_file(self) -> bool:
        return FORM_FILE_CLASS in self.referenced_models
