"""doc-redactor: sensitive identifier detection and redaction for document text."""

from .patterns import detect
from .redactor import Redactor, RedactorConfig
from .config import create_redactor, load_config, load_from_yaml
from .types import RedactionResult, SensitiveMatch, SensitiveType
from .validators import is_valid_iban, luhn_check

__all__ = [
    "detect",
    "Redactor", "RedactorConfig",
    "create_redactor", "load_config", "load_from_yaml",
    "RedactionResult", "SensitiveMatch", "SensitiveType",
    "is_valid_iban", "luhn_check",
]
__version__ = "0.1.0"
