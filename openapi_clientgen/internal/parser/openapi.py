import json
import logging
from typing import Dict, Any, Union

from ..types.document import Document

logger = logging.getLogger(__name__)


class OpenApiParser:
    """Парсер OpenAPI спецификации"""

    def __init__(self, openapi_dict: Union[Dict[str, Any], str]):
        if isinstance(openapi_dict, (str, bytes)):
            openapi_dict = json.loads(openapi_dict)

        self.openapi_dict = openapi_dict

    def parse(self) -> Document:
        """Парсинг OpenAPI в Document структуру"""
        document = Document.model_validate(self.openapi_dict)

        logger.debug(
            f"Разобран документ '{document.title}': "
            f"{len(document.paths)} путей, {len(document.components.schemas)} схем"
        )
        return document


def parse_document(source: Union[Dict[str, Any], str]) -> Document:
    """Разбор сырого JSON или словаря в Document"""
    return OpenApiParser(source).parse()
