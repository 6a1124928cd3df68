"""Preprocessing chain: modifiers, constraints and business validators."""

from api_validation.preprocessing.base import PreprocessingChain, Preprocessor
from api_validation.preprocessing.chain import default_chain
from api_validation.preprocessing.config import PreprocessingConfig, PreprocessingResult
from api_validation.preprocessing.modifiers import (
    FIELD_MODIFIER_CACHE,
    FieldModifierCache,
    Modifier,
    ModifierRegistry,
    ModifiersPreprocessor,
    modifiers,
)
from api_validation.preprocessing.schema import ConstraintPreprocessor, SchemaRegistry
from api_validation.preprocessing.trim import Trim, TrimModifier
from api_validation.preprocessing.validation import ValidationPreprocessor

__all__ = [
    "ConstraintPreprocessor",
    "FIELD_MODIFIER_CACHE",
    "FieldModifierCache",
    "Modifier",
    "ModifierRegistry",
    "ModifiersPreprocessor",
    "PreprocessingChain",
    "PreprocessingConfig",
    "PreprocessingResult",
    "Preprocessor",
    "SchemaRegistry",
    "Trim",
    "TrimModifier",
    "ValidationPreprocessor",
    "default_chain",
    "modifiers",
]
