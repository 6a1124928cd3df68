"""Business validation stage."""

import logging
from typing import TYPE_CHECKING, Any

from api_validation.preprocessing.base import Preprocessor
from api_validation.validators import as_validator

if TYPE_CHECKING:
    from api_validation.preprocessing.config import PreprocessingConfig

logger = logging.getLogger(__name__)


class ValidationPreprocessor(Preprocessor):
    """Runs the validators of the configuration, in order, on the processed object."""

    def process(self, obj: Any, config: "PreprocessingConfig") -> bool:
        context = config.validation_context
        for validator in config.validators:
            validator = as_validator(validator)
            logger.debug(f"Running {validator!r}")
            validator.collect_errors(obj, context)
        return True
