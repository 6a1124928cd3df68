"""Trim modifier."""

import logging
import re
from dataclasses import dataclass
from typing import Any

from api_validation.preprocessing.modifiers import Modifier

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Trim:
    """Removes leading and trailing whitespace of a field value.

    Any whitespace sequence inside the value (spaces, tabs, new lines, etc.) is
    also replaced with one space unless ``collapse_whitespace`` is False.
    """

    collapse_whitespace: bool = True


def trim_value(value: str, collapse_whitespace: bool = True) -> str:
    value = value.strip()
    if collapse_whitespace:
        value = _WHITESPACE.sub(" ", value)
    return value


class TrimModifier(Modifier[Trim]):
    """Modifier implementation for :class:`Trim`. None values are left as is."""

    def __init__(self) -> None:
        super().__init__(Trim)

    def process(self, obj: Any, field_name: str, tag: Trim) -> None:
        value = getattr(obj, field_name)
        if value is None:
            return

        setattr(obj, field_name, trim_value(str(value), tag.collapse_whitespace))
        logger.debug(f"Trimmed field {field_name}")
