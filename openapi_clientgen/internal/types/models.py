from enum import Enum
from typing import Optional, Union, Iterator

from pydantic import BaseModel, field_validator


class TypeKind(str, Enum):
    """Вид разрешенного типа"""

    UNTYPED = "untyped"
    BINARY_FILE = "binary_file"
    BINARY_FILE_ARRAY = "binary_file_array"
    REFERENCE = "reference"
    SEQUENCE = "sequence"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    DOUBLE = "double"
    TIMESTAMP = "timestamp"
    BYTES = "bytes"
    STREAM = "stream"
    TEXT = "text"
    BOOLEAN = "boolean"
    NULLABLE = "nullable"
    NONE = "none"


class Variable(BaseModel):
    value: list[Union["Variable", str]] = []
    wrap_name: Optional[str] = None
    kind: TypeKind = TypeKind.UNTYPED

    @field_validator("value", mode="before")
    def value_check(cls, value):
        _value = value

        if not isinstance(value, list):
            _value = [value]

        return _value

    def __str__(self):
        _value = ", ".join([_.__str__() for _ in self.value])

        if self.wrap_name is None:
            return _value

        return f"{self.wrap_name}[{_value}]"

    def __iter__(self) -> Iterator["Variable"]:
        """Обход самого типа и всех вложенных типов"""
        yield self
        for _ in self.value:
            if isinstance(_, Variable):
                yield from _

    @property
    def inner(self) -> Optional["Variable"]:
        """Вложенный тип для List[...] и Optional[...]"""
        for _ in self.value:
            if isinstance(_, Variable):
                return _
        return None


class Parameter(BaseModel):
    name: str

    default: Optional[Variable] = None
    var_type: Optional[Variable] = None

    order: int = 0

    def __str__(self):
        return (
            self.name
            + (f": {self.var_type}" if self.var_type else "")
            + (f" = {self.default}" if self.default else "")
        )


class CodeBlock(BaseModel):
    order: int = 0
    code: str = "pass"

    def __str__(self):
        return self.code.replace("\t", "    ")


class Reference(BaseModel):
    file: Optional["CodeFile"] = None
    back: Optional["Class"] = None


class Function(BaseModel):
    name: str
    parameters: list[Parameter] = []
    response: str = "None"

    async_def: bool = False
    decorators: list[str] = []

    description: Optional[str] = None

    code: CodeBlock = CodeBlock(order=0, code="pass")

    references: Optional["Reference"] = None
    order: int = 0

    def __str__(self) -> str:
        many_parameters = len(self.parameters) > 1

        # Параметры без значения по умолчанию всегда идут первыми
        parameters = sorted(self.parameters, key=lambda x: bool(x.default))

        signature = (
            f"{'async ' if self.async_def else ''}def {self.name}("
            + (
                ("\n\t" if many_parameters else "")
                + (",\n\t" if many_parameters else ", ").join(map(str, parameters))
                + (",\n" if many_parameters else "")
                if self.parameters
                else ""
            )
            + f") -> {self.response}:"
        )

        docstring = self._generate_docstring()

        return (
            "\n".join(self.decorators + [signature])
            + ("\n\t" + docstring.replace("\n", "\n\t") if docstring else "")
            + "\n\t"
            + str(self.code).replace("\n", "\n\t")  # Отступ тела функции
        ).replace("\t", "    ")

    def _generate_docstring(self) -> str:
        """Генерация docstring из описания операции"""
        if not self.description:
            return ""

        description = (
            self.description.strip().replace("\\", "\\\\").replace('"""', "'''")
        )
        return f'"""{description}"""' if "\n" not in description else (
            f'"""\n{description}\n"""'
        )


class Class(BaseModel):
    name: str

    functions: dict[str, "Function"] = {}
    classes: dict[str, "Class"] = {}

    code_blocks: list["CodeBlock"] = []
    parameters: list[Parameter] = []

    inherits: list[str] = []
    description: Optional[str] = None

    references: Optional["Reference"] = None

    order: int = 0

    def __str__(self) -> str:
        members = sorted(
            self.parameters
            + self.code_blocks
            + list(self.functions.values())
            + list(self.classes.values()),
            key=lambda x: x.order,
            reverse=True,
        )

        body = "\n".join(
            ("\n" if not isinstance(member, Parameter) else "") + str(member)
            for member in members
        )

        if self.description:
            description = (
                self.description.strip().replace("\\", "\\\\").replace('"""', "'''")
            )
            body = f'"""{description}"""\n' + body

        return (
            f"class {self.name}"
            + (f"({', '.join(self.inherits)})" if self.inherits else "")
            + ":\n"
            + (body if body.strip() else "pass")
        ).replace("\n", "\n    ").replace("\t", "    ")  # Отступ для содержимого класса

    def add_function(self, function: Union["Function", str], **kwargs) -> "Function":
        if isinstance(function, str):
            function = Function(name=function, **kwargs)

        function.references = Reference(
            file=self.references.file if self.references else None, back=self
        )
        self.functions[function.name] = function

        return function

    def add_code_block(self, code_block: Union["CodeBlock", str], **kwargs) -> "Class":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block, **kwargs)

        self.code_blocks.append(code_block)
        return self


class CodeFile(BaseModel):
    file_name: str

    imports: list[str] = []
    functions: dict[str, "Function"] = {}
    classes: dict[str, "Class"] = {}
    code_blocks: list["CodeBlock"] = []

    def __str__(self):
        return (
            "\n\n\n".join(
                filter(
                    bool,
                    [
                        ("\n".join(self.imports) if self.imports else ""),
                        "\n\n\n".join(
                            map(
                                str,
                                sorted(
                                    (
                                        self.code_blocks
                                        + list(self.functions.values())
                                        + list(self.classes.values())
                                    ),
                                    key=lambda x: x.order,
                                    reverse=True,
                                ),
                            )
                        ),
                    ],
                )
            )
            + "\n"
        ).replace("\t", "    ")

    def add_class(self, cls: Union["Class", str], **kwargs) -> "Class":
        if isinstance(cls, str):
            cls = Class(name=cls, **kwargs)

        cls.references = Reference(file=self, back=None)
        self.classes[cls.name] = cls

        return cls

    def add_code_block(
        self, code_block: Union["CodeBlock", str], **kwargs
    ) -> "CodeFile":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block, **kwargs)

        self.code_blocks.append(code_block)
        return self


Reference.model_rebuild()
Function.model_rebuild()
Class.model_rebuild()


class Project(BaseModel):
    name: str
    files: list[CodeFile] = []

    def add_file(self, file_name: Union["CodeFile", str], **kwargs) -> "CodeFile":
        if isinstance(file_name, str):
            file_name = CodeFile(file_name=file_name, **kwargs)

        self.files.append(file_name)
        return file_name

    def get_file(self, file_name: str) -> Optional[CodeFile]:
        for code_file in self.files:
            if code_file.file_name == file_name:
                return code_file
        return None
