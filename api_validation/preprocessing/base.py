"""Preprocessor interface and preprocessing chain."""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, List

if TYPE_CHECKING:
    from api_validation.preprocessing.config import PreprocessingConfig

logger = logging.getLogger(__name__)


class Preprocessor(ABC):
    """Process applied to an object before it is used by business operations.

    Modifying values and validating them are implemented as preprocessors.
    """

    @abstractmethod
    def process(self, obj: Any, config: "PreprocessingConfig") -> bool:
        """Process an object.

        Args:
            obj: The object to process
            config: Configuration shared by the preprocessors of a run

        Returns:
            True if processing was successful. Validation errors added to the
            context do not make processing unsuccessful.
        """
        pass


class PreprocessingChain(Preprocessor):
    """Ordered preprocessors run one after the other.

    The chain stops at the first preprocessor returning False. Exceptions
    raised by a preprocessor propagate to the caller.
    """

    def __init__(self, *preprocessors: Preprocessor):
        self._preprocessors: List[Preprocessor] = []
        for preprocessor in preprocessors:
            self.add(preprocessor)

    def add(self, preprocessor: Preprocessor) -> "PreprocessingChain":
        """Add a preprocessor at the end of the chain."""
        self._preprocessors.append(preprocessor)
        return self

    @property
    def preprocessors(self) -> List[Preprocessor]:
        return list(self._preprocessors)

    def process(self, obj: Any, config: "PreprocessingConfig") -> bool:
        for preprocessor in self._preprocessors:
            if not preprocessor.process(obj, config):
                logger.debug(
                    f"Preprocessing stopped by {type(preprocessor).__name__}"
                )
                return False
        return True
