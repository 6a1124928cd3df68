"""Canonical preprocessing chain."""

from typing import Optional, Sequence

from api_validation.constraints import ConstraintConverter, ConstraintValidator
from api_validation.preprocessing.base import PreprocessingChain
from api_validation.preprocessing.modifiers import ModifierRegistry, ModifiersPreprocessor
from api_validation.preprocessing.schema import ConstraintPreprocessor, SchemaRegistry
from api_validation.preprocessing.validation import ValidationPreprocessor


def default_chain(
    converter: ConstraintConverter,
    schemas: Optional[SchemaRegistry] = None,
    modifiers: Optional[ModifierRegistry] = None,
    constraints: Sequence[ConstraintValidator] = (),
) -> PreprocessingChain:
    """Build the chain applying modifiers, then constraints, then business validators.

    Args:
        converter: Resolves error codes and location types of constraint violations
        schemas: JSON schemas of the processed classes
        modifiers: Modifiers to apply (defaults to trimming)
        constraints: Custom constraint keywords

    Returns:
        The preprocessing chain
    """
    return PreprocessingChain(
        ModifiersPreprocessor(modifiers),
        ConstraintPreprocessor(converter, schemas, constraints),
        ValidationPreprocessor(),
    )
