"""
Конфигурация для генерации API клиента
"""

import logging
import os
from dataclasses import asdict, dataclass
from typing import Optional

import toml

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "openapi.toml"


@dataclass
class OpenApiConfig:
    """Конфигурация генератора OpenAPI клиента"""

    url: Optional[str] = None
    dirname: Optional[str] = None
    client_name: Optional[str] = None
    base_url: str = "https://localhost"
    generate_models: bool = True
    generate_client: bool = True

    @classmethod
    def from_file(
        cls, config_path: str = CONFIG_FILE_NAME, search_dir: str = None
    ) -> Optional["OpenApiConfig"]:
        """Загрузка конфигурации из файла"""
        # Если указана директория для поиска, ищем конфиг там
        if search_dir and os.path.isdir(search_dir):
            config_in_dir = os.path.join(search_dir, CONFIG_FILE_NAME)
            if os.path.exists(config_in_dir):
                config_path = config_in_dir

        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
        except (toml.TomlDecodeError, OSError) as e:
            logger.warning(f"Не удалось прочитать {config_path}: {e}")
            return None

        return cls(
            url=config_data.get("url"),
            dirname=config_data.get("dirname", "api_client"),
            client_name=config_data.get("client_name") or None,
            base_url=config_data.get("base_url", "https://localhost"),
            generate_models=bool(config_data.get("generate_models", True)),
            generate_client=bool(config_data.get("generate_client", True)),
        )

    def save_to_file(self, config_path: str = CONFIG_FILE_NAME) -> None:
        """Сохранение конфигурации в файл"""
        # toml не умеет записывать None
        config_data = {key: value for key, value in asdict(self).items() if value is not None}

        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(config_data, f)

    def merge_with_args(self, args) -> "OpenApiConfig":
        """Объединение с аргументами командной строки"""
        return OpenApiConfig(
            url=args.url or self.url,
            dirname=args.dirname or self.dirname,
            client_name=getattr(args, "client_name", None) or self.client_name,
            base_url=getattr(args, "base_url", None) or self.base_url,
            generate_models=self.generate_models
            and not getattr(args, "no_models", False),
            generate_client=self.generate_client
            and not getattr(args, "no_client", False),
        )
