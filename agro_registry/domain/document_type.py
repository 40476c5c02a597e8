# agro_registry/domain/document_type.py
# Tipos de documento aceitos para produtores.

from enum import Enum
from typing import Union


class DocumentType(str, Enum):
    CPF = 'CPF'   # Pessoa física
    CNPJ = 'CNPJ' # Pessoa jurídica

    @classmethod
    def parse(cls, value: Union["DocumentType", str]) -> "DocumentType":
        """Converte uma string (case-insensitive) para DocumentType, levantando ValueError se inválida."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Tipo de documento inválido: {value!r}")
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Tipo de documento inválido: {value!r}") from None
