class QuestionNotFoundError(ValueError):
    def __init__(self, question_id: int):
        super().__init__(f"Question with id {question_id} not found")
        self.question_id = question_id


class CsvFormatError(ValueError):
    """Raised when an uploaded CSV cannot be read as a question grid at all."""


class UnknownRoundCodeError(ValueError):
    def __init__(self, code: str):
        super().__init__(f"Unknown round code '{code}'")
        self.code = code


class ResetKeyError(PermissionError):
    pass


class DocumentGenerationError(RuntimeError):
    """Base class for failures while producing round documents."""


class MarkupBuildError(DocumentGenerationError):
    """The LaTeX source could not be assembled or written."""


class CompilerError(DocumentGenerationError):
    """The external LaTeX compiler failed, timed out or produced no PDF."""
