# agro_registry/utils/__init__.py
# Makes 'utils' a package.

from .logger import logger, configure_logger
from .document_validator import normalize, validate_cpf, validate_cnpj, validate_document

__all__ = [
    "logger",
    "configure_logger",
    "normalize",
    "validate_cpf",
    "validate_cnpj",
    "validate_document",
]
