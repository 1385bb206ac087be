"""Canonical paths: immutable locations inside a JSON document.

A ``Path`` is an ordered tuple of segments:

- ``str``    -> an object key,       rendered ``a.b`` (no leading dot at root)
- ``int``    -> an array index,      rendered ``a[0]``
- ``Member`` -> a scalar set member, rendered ``tags[="red"]``

``Path`` is a frozen value: ``child()`` returns a new path instead of pushing
onto a shared stack, so every recursive call owns its own location and
comparisons can run in parallel without aliasing.

Rendering is not injective -- a key containing ``.`` or ``[`` renders the same
as a nested location.  Consumers keyed by the rendered string (``DiffSet``)
treat such collisions as "first write wins".
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Union

from json_contract_diff.errors import PathError

__all__ = ["ROOT", "Member", "Path", "Segment"]


@dataclass(frozen=True, slots=True)
class Member:
    """A scalar element of an array compared as an unordered set.

    Attributes:
        text: Compact JSON text of the element.  Strings keep their quotes,
            so ``"1"`` and ``1`` are distinct members (``[="1"]`` vs ``[=1]``).
    """

    text: str

    @classmethod
    def of(cls, value: Any) -> Member:
        """Member segment identifying ``value`` inside its array."""
        return cls(json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


Segment = Union[str, int, Member]

# One segment at a time: [=member], [index], .key or a leading bare key.
_SEGMENT = re.compile(r"\[=(?P<member>[^\]]*)\]|\[(?P<index>\d+)\]|\.?(?P<key>[^.\[]+)")


@dataclass(frozen=True, slots=True)
class Path:
    """An immutable sequence of path segments.

    Example::

        p = Path().child("a").child(0).child("x")
        str(p)                    # "a[0].x"
        Path.parse("a[0].x") == p  # True
    """

    segments: tuple[Segment, ...] = ()

    def child(self, segment: Segment) -> Path:
        """Return a new path one level deeper."""
        return Path((*self.segments, segment))

    @property
    def parent(self) -> Path:
        return Path(self.segments[:-1])

    @property
    def last(self) -> Segment | None:
        return self.segments[-1] if self.segments else None

    def __len__(self) -> int:
        return len(self.segments)

    def __bool__(self) -> bool:
        return bool(self.segments)

    def __str__(self) -> str:
        parts: list[str] = []
        for segment in self.segments:
            if isinstance(segment, Member):
                parts.append(f"[={segment.text}]")
            elif isinstance(segment, int):
                parts.append(f"[{segment}]")
            elif parts:
                parts.append(f".{segment}")
            else:
                parts.append(segment)
        return "".join(parts)

    def to_json(self) -> list[str | int]:
        """Segments as plain JSON values (members become their JSON text)."""
        return [s.text if isinstance(s, Member) else s for s in self.segments]

    @classmethod
    def parse(cls, text: str) -> Path:
        """Parse a rendered canonical path back into segments.

        Raises:
            PathError: If ``text`` is not a well-formed canonical path.
        """
        segments: list[Segment] = []
        pos = 0
        while pos < len(text):
            match = _SEGMENT.match(text, pos)
            # A leading "." or a bare key after the first segment is malformed
            if match is None or (match.group("key") is not None and (
                (pos == 0 and text[0] == ".") or (pos > 0 and text[pos] != ".")
            )):
                raise PathError(text, f"malformed path at offset {pos}")
            if match.group("member") is not None:
                segments.append(Member(match.group("member")))
            elif match.group("index") is not None:
                segments.append(int(match.group("index")))
            else:
                segments.append(match.group("key"))
            pos = match.end()
        return cls(tuple(segments))


ROOT = Path()
