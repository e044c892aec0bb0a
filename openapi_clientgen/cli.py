import argparse
import logging
import os
import sys

import httpx

from openapi_clientgen.config import CONFIG_FILE_NAME, OpenApiConfig
from openapi_clientgen.exceptions import GeneratorError
from openapi_clientgen.generator import ApiClientGenerator
from openapi_clientgen.internal.generator.assembler import save_project
from openapi_clientgen.internal.types.models import Project

logger = logging.getLogger(__name__)


def confirm_choice(message: str) -> bool:
    """Запрос подтверждения у пользователя"""
    while True:
        choice = input(f"{message} (y/n): ").lower().strip()
        if choice in ["y", "yes", "да", ""]:
            return True
        elif choice in ["n", "no", "нет"]:
            return False
        print("Введите y/n")


def load_document(source: str) -> str:
    """Текст OpenAPI документа из URL или локального файла"""
    if source.startswith(("http://", "https://")):
        try:
            response = httpx.get(source, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise GeneratorError(
                f"Не удалось загрузить документ из {source}: {e}", stage="загрузка"
            ) from e
        return response.text

    if not os.path.exists(source):
        raise GeneratorError(
            f"Файл {source} не найден. Проверьте URL или путь к файлу.",
            stage="загрузка",
        )

    try:
        with open(source, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise GeneratorError(
            f"Не удалось прочитать {source}: {e}", stage="загрузка"
        ) from e


def _generate_client_core(config: OpenApiConfig) -> Project:
    """Ядро генерации клиента - только генерация без сохранения"""
    if not config.url:
        raise GeneratorError("URL не указан в конфигурации", stage="загрузка")

    print(f"🚀 Генерация клиента из {config.url}")

    print("📥 Загрузка OpenAPI документа...")
    source = load_document(config.url)

    print("🔎 Разбор документа...")
    generator = ApiClientGenerator(
        source,
        client_name=config.client_name,
        base_url=config.base_url,
        generate_models=config.generate_models,
        generate_client=config.generate_client,
    )

    print("⚙️ Генерация кода...")
    try:
        return generator.generate()
    except GeneratorError:
        raise
    except Exception as e:
        logger.debug("Ошибка генерации", exc_info=True)
        raise GeneratorError(str(e), stage="генерация") from e


def _save_project_files(project: Project, target_path: str):
    """Сохранение файлов проекта"""
    print(f"💾 Сохранение {len(project.files)} файлов...")

    try:
        save_project(project, target_path)
    except OSError as e:
        raise GeneratorError(str(e), stage="запись") from e

    print("✅ Генерация завершена успешно!")
    print(f"📦 Клиент создан в: {os.path.abspath(target_path)}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Генерация Python клиента из OpenAPI")
    parser.add_argument("--url", type=str, help="URL или путь к OpenAPI документу")
    parser.add_argument("--dirname", type=str, help="Директория для генерации клиента")
    parser.add_argument("--client-name", type=str, help="Имя класса клиента")
    parser.add_argument("--base-url", type=str, help="Базовый URL API по умолчанию")
    parser.add_argument(
        "--no-models", action="store_true", help="Не генерировать модели"
    )
    parser.add_argument(
        "--no-client", action="store_true", help="Не генерировать клиент"
    )
    parser.add_argument(
        "--init-config", action="store_true", help="Создать конфиг файл openapi.toml"
    )
    parser.add_argument(
        "--force", action="store_true", help="Генерировать без подтверждения"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Подробный вывод (DEBUG логи)"
    )
    return parser


def _config_from_args(args) -> OpenApiConfig:
    return OpenApiConfig(dirname="api_client").merge_with_args(args)


def generate(argv=None):
    """Универсальная команда генерации OpenAPI клиента"""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Инициализация конфига
    if args.init_config:
        _config_from_args(args).save_to_file()
        print(f"✅ Создан конфиг файл {CONFIG_FILE_NAME}")
        return

    # Загрузка конфига из файла
    file_config = OpenApiConfig.from_file(search_dir=args.dirname)

    if file_config and args.url:
        print(f"🔧 Найден конфиг файл {CONFIG_FILE_NAME}:")
        print(f"   URL: {file_config.url}")
        print(f"   Директория: {file_config.dirname}")
        print()
        print("📝 Переданы аргументы:")
        print(f"   URL: {args.url}")
        print()

        if args.force or confirm_choice("Использовать конфиг из файла?"):
            final_config = file_config
        else:
            final_config = file_config.merge_with_args(args)
    elif file_config:
        print(f"📋 Используется конфиг из {CONFIG_FILE_NAME}")
        final_config = file_config.merge_with_args(args)
    elif args.url:
        final_config = _config_from_args(args)
    else:
        print("❌ Ошибка: Укажите --url или создайте конфиг с --init-config")
        sys.exit(1)

    # Найденный в указанной директории конфиг означает генерацию прямо в нее
    if args.dirname and file_config:
        work_path = args.dirname
        print(f"📁 Генерация в существующую папку: {work_path}")
    else:
        work_path = final_config.dirname or "api_client"
        print(f"📁 Создание новой папки: {work_path}")

    try:
        project = _generate_client_core(final_config)
        _save_project_files(project, work_path)
    except GeneratorError as e:
        print(f"❌ Ошибка на этапе '{e.stage}': {e.message}")
        sys.exit(1)

    if not file_config and (
        args.force or confirm_choice(f"Сохранить настройки в {CONFIG_FILE_NAME}?")
    ):
        config_path = os.path.join(work_path, CONFIG_FILE_NAME)
        final_config.save_to_file(config_path)
        print(f"💾 Конфиг сохранен в {config_path}")


if __name__ == "__main__":
    generate()
