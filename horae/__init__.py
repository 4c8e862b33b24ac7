"""Bilingual liturgical-hour markup normalization and sentence alignment."""

from .config import Config, OutputConfig, TransformConfig
from .errors import CollectorStateError, MalformedMarkupError
from .languages import LanguageCatalog
from .models import BreakPoint, FragmentView, LineKind, RowBlock, TransformResult
from .pipeline import HorasPipeline, transform
from .reference import ReferenceCollector

__version__ = "0.1.0"

__all__ = [
    "Config",
    "OutputConfig",
    "TransformConfig",
    "CollectorStateError",
    "MalformedMarkupError",
    "LanguageCatalog",
    "BreakPoint",
    "FragmentView",
    "LineKind",
    "RowBlock",
    "TransformResult",
    "HorasPipeline",
    "transform",
    "ReferenceCollector",
]
