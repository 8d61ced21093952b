from typing import Any, List, Optional

MIN_OPTIONS = 2
MAX_OPTIONS = 6


class QuestionRuleError(Exception):
    """Excepción para preguntas con opciones o respuesta correcta inválidas"""
    pass


def validate_options(options: Any) -> List[str]:
    """
    Valida la lista de opciones de una pregunta.

    Reglas:
    - debe ser una lista de entre 2 y 6 elementos
    - ninguna opción puede quedar vacía tras hacer trim
    - no puede haber duplicados (comparando las opciones ya recortadas)

    Raises:
        QuestionRuleError: si alguna regla no se cumple
    """
    if not isinstance(options, list):
        raise QuestionRuleError("`options` must be an array")
    if len(options) < MIN_OPTIONS or len(options) > MAX_OPTIONS:
        raise QuestionRuleError(f"Options must be between {MIN_OPTIONS} and {MAX_OPTIONS}")

    trimmed = [str(o if o is not None else "").strip() for o in options]
    if any(not o for o in trimmed):
        raise QuestionRuleError("All options must be non-empty")
    if len(set(trimmed)) != len(trimmed):
        raise QuestionRuleError("Options must be unique (no duplicates)")
    return options


def validate_correct_answer(options: List[str], correct_answer: Optional[str]) -> str:
    if not correct_answer or correct_answer not in options:
        raise QuestionRuleError("correct_answer must be one of the options")
    return correct_answer


def validate_question(options: Any, correct_answer: Optional[str]) -> None:
    """
    Valida opciones y respuesta correcta juntas. Se usa tanto al crear como al
    actualizar (con los valores nuevos mezclados con los existentes).
    """
    validate_options(options)
    validate_correct_answer(options, correct_answer)
