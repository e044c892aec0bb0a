"""Генератор async Python клиентов из OpenAPI документов"""

from .exceptions import GeneratorError
from .generator import ApiClientGenerator, generate_client

__all__ = ["ApiClientGenerator", "GeneratorError", "generate_client"]
