from .analise import interpretar_analise
from .quiz import interpretar_quiz
from .texto import ErroParsing
from .topico import interpretar_topico

__all__ = ["ErroParsing", "interpretar_analise", "interpretar_quiz", "interpretar_topico"]
