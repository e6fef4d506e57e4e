"""anonimizador — placeholder redaction of Brazilian identifiers and names
before legal text is sent to an LLM."""

from .config import AnonymizationConfig, ConfigError, load_config, load_from_file, load_from_yaml
from .engine import anonymize, anonymize_detailed, anonymize_messages
from .middleware import AnonymizeMiddleware
from .names import NameIndexer
from .patterns import CATEGORIES, PLACEHOLDERS
from .ranges import RangeTracker
from .redactor import StructuredRedactor
from .types import AnonymizationResult, Match

__all__ = [
    "anonymize", "anonymize_detailed", "anonymize_messages",
    "AnonymizationConfig", "ConfigError",
    "load_config", "load_from_file", "load_from_yaml",
    "AnonymizeMiddleware",
    "StructuredRedactor", "NameIndexer", "RangeTracker",
    "CATEGORIES", "PLACEHOLDERS",
    "AnonymizationResult", "Match",
]
__version__ = "0.1.0"
