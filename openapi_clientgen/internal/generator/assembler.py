"""
Форматирование и запись сгенерированных файлов
"""

import logging
import os
from typing import Callable, Dict, Optional

import black

from ..types.models import Project

logger = logging.getLogger(__name__)

Formatter = Callable[[str], str]


def black_formatter(source: str) -> str:
    return black.format_str(source, mode=black.Mode())


def format_source(source: str, formatter: Optional[Formatter] = None) -> str:
    """
    Форматирование исходного кода.

    При ошибке форматтера возвращается исходный текст без изменений.
    """
    formatter = formatter or black_formatter

    try:
        return formatter(source)
    except Exception as e:
        logger.warning(f"Форматирование не удалось, код записан как есть: {e}")
        return source


def render_files(
    project: Project, formatter: Optional[Formatter] = None
) -> Dict[str, str]:
    """Имя файла -> итоговый текст"""
    rendered = {}

    for code_file in project.files:
        source = str(code_file)
        if code_file.file_name.endswith(".py"):
            source = format_source(source, formatter)
        rendered[code_file.file_name] = source

    return rendered


def save_project(
    project: Project, target_path: str, formatter: Optional[Formatter] = None
) -> Dict[str, str]:
    """Сохранение файлов проекта в target_path"""
    rendered = render_files(project, formatter)

    for file_name, source in rendered.items():
        path = os.path.join(target_path, file_name)
        os.makedirs(os.path.dirname(path), exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            f.write(source)

    logger.debug(f"Записано {len(rendered)} файлов в {target_path}")
    return rendered
