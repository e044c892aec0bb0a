class Templates:
    """Шаблоны для генерации файлов"""

    model_imports = [
        "from __future__ import annotations",
        "",
        "from datetime import datetime",
        "from io import IOBase",
        "from typing import Any, List, Optional, TYPE_CHECKING",
        "",
        "from pydantic import BaseModel, ConfigDict, Field",
    ]

    model_config = (
        "model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)"
    )

    enum_imports = ["from enum import IntEnum"]

    form_file = """from io import IOBase
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FormFile(BaseModel):
    \"\"\"Файл для отправки в multipart/form-data запросе\"\"\"

    model_config = ConfigDict(arbitrary_types_allowed=True)

    file_stream: Optional[IOBase] = None
    file_name: Optional[str] = None
"""

    form_file_collection = """from typing import List

from .form_file import FormFile

{name} = List[FormFile]
"""

    client_imports = [
        "import io",
        "import logging",
        "from datetime import datetime",
        "from enum import Enum",
        "from io import IOBase",
        "from typing import Any, Dict, List, Optional",
        "from urllib.parse import quote",
        "",
        "import aiohttp",
        "from pydantic import BaseModel, TypeAdapter",
        "from pydantic_core import to_jsonable_python",
    ]

    client_helpers = """logger = logging.getLogger(__name__)


def _form_value(value: Any) -> str:
    \"\"\"Строковое значение для заголовка или текстовой части формы\"\"\"
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _append_text(form: aiohttp.FormData, name: str, value: Any):
    if value is None:
        return
    form.add_field(name, _form_value(value))


def _append_file(form: aiohttp.FormData, name: str, file: Any):
    \"\"\"Добавление FormFile или потока как файловой части\"\"\"
    if file is None:
        return
    if isinstance(file, IOBase):
        stream, file_name = file, getattr(file, "name", None)
    else:
        stream, file_name = file.file_stream, file.file_name
    if stream is None:
        return
    form.add_field(name, stream, filename=str(file_name or name))


def _is_file(value: Any) -> bool:
    return isinstance(value, IOBase) or hasattr(value, "file_stream")


def _append_fields(form: aiohttp.FormData, body: Any):
    \"\"\"Все поля тела запроса как отдельные части формы\"\"\"
    if body is None:
        return
    if isinstance(body, BaseModel):
        items = [
            (field.alias or name, getattr(body, name))
            for name, field in type(body).model_fields.items()
        ]
    else:
        items = list(dict(body).items())

    for name, value in items:
        if isinstance(value, (list, tuple)):
            for item in value:
                if _is_file(item):
                    _append_file(form, name, item)
                else:
                    _append_text(form, name, item)
        elif _is_file(value):
            _append_file(form, name, value)
        else:
            _append_text(form, name, value)"""


    client_init = """if options is None:
    raise ValueError("options не может быть None")
if session is None:
    raise ValueError("session не может быть None")

self._options = options
self._session = session"""

    client_url = """return self._options.base_url.rstrip("/") + request_uri"""


templates = Templates()
