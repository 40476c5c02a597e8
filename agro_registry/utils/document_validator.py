# agro_registry/utils/document_validator.py
# Normalização e validação de dígitos verificadores de CPF e CNPJ.

import re
from typing import Union

from agro_registry.domain.document_type import DocumentType

_NON_DIGITS = re.compile(r'\D')
_REPEATED_DIGIT = re.compile(r'^(\d)\1+$')


def normalize(raw: str) -> str:
    """Remove todo caractere que não seja dígito ('123.456.789-09' -> '12345678909')."""
    if raw is None:
        return ''
    return _NON_DIGITS.sub('', str(raw))


def _cpf_check_digit(digits: str, length: int) -> int:
    # Pesos decrescentes de (length + 1) até 2 sobre os primeiros `length` dígitos.
    total = sum(int(digits[i - 1]) * (length + 2 - i) for i in range(1, length + 1))
    rest = (total * 10) % 11
    return 0 if rest in (10, 11) else rest


def validate_cpf(digits: str) -> bool:
    """
    Valida um CPF já normalizado.

    Exige exatamente 11 dígitos, rejeita sequências de um único dígito repetido
    e confere os dois dígitos verificadores (posições 9 e 10).
    """
    if not digits or len(digits) != 11 or not digits.isdigit():
        return False
    if _REPEATED_DIGIT.match(digits):
        return False

    if _cpf_check_digit(digits, 9) != int(digits[9]):
        return False
    return _cpf_check_digit(digits, 10) == int(digits[10])


def _cnpj_check_digit(digits: str, position: int) -> int:
    # Ciclo de pesos 2..9 aplicado da direita para a esquerda sobre os dígitos anteriores.
    total = 0
    weight = 2
    for index in range(position - 1, -1, -1):
        total += int(digits[index]) * weight
        weight = 2 if weight == 9 else weight + 1
    result = total % 11
    return 0 if result < 2 else 11 - result


def validate_cnpj(digits: str) -> bool:
    """
    Valida um CNPJ já normalizado.

    Exige exatamente 14 dígitos, rejeita sequências de um único dígito repetido
    e confere os dígitos verificadores das posições 12 e 13.
    """
    if not digits or len(digits) != 14 or not digits.isdigit():
        return False
    if _REPEATED_DIGIT.match(digits):
        return False

    return (
        _cnpj_check_digit(digits, 12) == int(digits[12])
        and _cnpj_check_digit(digits, 13) == int(digits[13])
    )


def validate_document(document_type: Union[DocumentType, str], digits: str) -> bool:
    """Despacha para o validador do tipo de documento informado."""
    doc_type = DocumentType.parse(document_type)
    if doc_type is DocumentType.CPF:
        return validate_cpf(digits)
    return validate_cnpj(digits)
