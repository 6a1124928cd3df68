"""JSON Pointer used to track locations inside a JSON document."""

import re
from typing import Iterable, List, Optional, Tuple, Union

from api_validation.errors import ConfigurationError

Fragment = Union[str, int]

# "~" must always be followed by "0" or "1" in an escaped fragment
_INVALID_ESCAPE = re.compile(r"~(?![01])")


def escape_fragment(fragment: str) -> str:
    """Escape the JSON Pointer reserved characters "~" and "/"."""
    return fragment.replace("~", "~0").replace("/", "~1")


def unescape_fragment(fragment: str) -> str:
    """Reverse :func:`escape_fragment`."""
    return fragment.replace("~1", "/").replace("~0", "~")


class JsonPointer:
    """JSON Pointer identifying a value within a JSON document (RFC 6901).

    The pointer is mutable and is used as a cursor while validating nested
    structures. Fragments are added with :meth:`push` (raw values, escaped) or
    :meth:`push_many` (already escaped paths) and removed with the ``pop``
    methods. All mutators return the pointer so calls can be chained::

        pointer = JsonPointer()
        str(pointer)                        # ""
        str(pointer.push("name"))           # "/name"
        pointer.pop()
        str(pointer.push("children").push(0))   # "/children/0"
        str(pointer.pop().push(1))          # "/children/1"
        str(pointer.reset())                # ""
    """

    def __init__(self, fragments: Iterable[Fragment] = ()):
        self._fragments: List[str] = []
        for fragment in fragments:
            self.push(fragment)

    @classmethod
    def parse(cls, pointer: str) -> "JsonPointer":
        """Create a pointer from an escaped pointer string such as "/a/b~1c"."""
        parsed = cls()
        parsed.push_many(pointer)
        return parsed

    def push(self, fragment: Fragment) -> "JsonPointer":
        """Add a path fragment.

        Strings are escaped; integers are array indices.
        """
        if isinstance(fragment, int):
            self._fragments.append(str(fragment))
        else:
            self._fragments.append(escape_fragment(fragment))
        return self

    def push_many(self, fragments: Optional[str]) -> int:
        """Add the path fragments contained in an escaped pointer string.

        No escaping is performed. A leading slash is optional, so both
        ``"/foo/bar"`` and ``"foo/bar"`` add the two fragments ``foo`` and
        ``bar``. ``None`` and ``""`` add nothing.

        Args:
            fragments: The escaped path fragments to add

        Returns:
            The number of fragments added

        Raises:
            ConfigurationError: If a fragment contains an invalid "~" escape
        """
        if not fragments:
            return 0

        split = fragments[1:] if fragments.startswith("/") else fragments
        new_fragments = split.split("/")
        for fragment in new_fragments:
            if _INVALID_ESCAPE.search(fragment):
                raise ConfigurationError(
                    f"Invalid JSON Pointer escape in fragment {fragment!r} of {fragments!r}"
                )

        self._fragments.extend(new_fragments)
        return len(new_fragments)

    def pop(self) -> "JsonPointer":
        """Remove the last fragment. Does nothing at the root."""
        if self._fragments:
            self._fragments.pop()
        return self

    def pop_n(self, n: int) -> "JsonPointer":
        """Remove the last ``n`` fragments, stopping at the root."""
        while n >= 1 and self._fragments:
            self._fragments.pop()
            n -= 1
        return self

    def pop_first(self) -> "JsonPointer":
        """Remove the first fragment. Does nothing at the root.

        Used to unwrap the location of values inside an envelope object.
        """
        if self._fragments:
            del self._fragments[0]
        return self

    def reset(self) -> "JsonPointer":
        """Remove all fragments so that the pointer points to the root."""
        self._fragments.clear()
        return self

    def is_root(self) -> bool:
        return not self._fragments

    def fragment_at(self, index: int) -> str:
        """Return the escaped fragment at the specified zero-based index.

        Raises:
            IndexError: If the index is outside of the current fragments
        """
        if not 0 <= index < len(self._fragments):
            raise IndexError(
                f"Fragment index {index} out of range for pointer {str(self)!r} "
                f"with {len(self._fragments)} fragment(s)"
            )
        return self._fragments[index]

    @property
    def fragments(self) -> Tuple[str, ...]:
        """The escaped fragments of this pointer."""
        return tuple(self._fragments)

    def unescaped_fragments(self) -> Tuple[str, ...]:
        return tuple(unescape_fragment(fragment) for fragment in self._fragments)

    def copy(self) -> "JsonPointer":
        copied = JsonPointer()
        copied._fragments = list(self._fragments)
        return copied

    def __len__(self) -> int:
        return len(self._fragments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonPointer):
            return NotImplemented
        return self._fragments == other._fragments

    def __str__(self) -> str:
        return "".join(f"/{fragment}" for fragment in self._fragments)

    def __repr__(self) -> str:
        return f"JsonPointer({str(self)!r})"
