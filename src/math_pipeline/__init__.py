"""Gateway for LaTeX to MathML conversion, comparison, translation and search."""

__version__ = "0.1.0"

from .config import AppConfig, ConversionConfig, load_config
from .core import MathService
from .models import ConversionResult, SimilarityResult, TranslationResult

__all__ = [
    "AppConfig",
    "ConversionConfig",
    "ConversionResult",
    "MathService",
    "SimilarityResult",
    "TranslationResult",
    "__version__",
    "load_config",
]
