from .question_model import QuestionModel

__all__ = ["QuestionModel"]
