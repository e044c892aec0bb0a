class GeneratorError(Exception):
    """Ошибка генерации с указанием этапа, на котором она произошла"""

    def __init__(self, message: str, stage: str):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self):
        return f"[{self.stage}] {self.message}"
