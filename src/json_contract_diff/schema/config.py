"""InferenceConfig and MergePolicy for schema inference and merging.

InferenceConfig is a frozen (immutable) dataclass holding the builder and
merge parameters.  MergePolicy selects what a nested kind conflict does to
the rest of the merge.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

DEFAULT_DIALECT = "https://json-schema.org/draft/2020-12/schema"


class MergePolicy(StrEnum):
    """What happens when merging hits a ``TypeConflictError``.

    - FAIL_FAST:   Raise on the first conflict.  The merge is transactional,
                   the accumulated document is left exactly as it was.
    - BEST_EFFORT: Keep the accumulated shape of the conflicting field,
                   continue with its siblings, and return every conflict.
    """

    FAIL_FAST = auto()
    BEST_EFFORT = auto()


@dataclass(frozen=True, slots=True)
class InferenceConfig:
    """Immutable configuration for schema inference and merging.

    Attributes:
        dialect: ``$schema`` URI stamped on freshly built documents.
        with_examples: Record literal sample values in ``examples``.
        max_example_length: Strings of this length or longer are not kept as
            examples.  Default 20.
        max_examples: Cap on the accumulated ``examples`` list of one node.
        merge_policy: Conflict handling, see ``MergePolicy``.
        widen_integer_to_number: When True, ``integer`` merged with
            ``number`` widens to ``number`` instead of conflicting.
            Default False.
        max_depth: Deepest nesting level a sample may reach below its root.
            Deeper samples are rejected with ``NestingDepthError``.
            Default 100.
    """

    dialect: str = DEFAULT_DIALECT
    with_examples: bool = True
    max_example_length: int = 20
    max_examples: int = 10
    merge_policy: MergePolicy = MergePolicy.FAIL_FAST
    widen_integer_to_number: bool = False
    max_depth: int = 100

    def __post_init__(self) -> None:
        if not self.dialect:
            msg = "dialect must be a non-empty URI"
            raise ValueError(msg)
        if self.max_example_length < 0:
            msg = f"max_example_length must be >= 0, got {self.max_example_length}"
            raise ValueError(msg)
        if self.max_examples < 0:
            msg = f"max_examples must be >= 0, got {self.max_examples}"
            raise ValueError(msg)
        if self.max_depth < 1:
            msg = f"max_depth must be >= 1, got {self.max_depth}"
            raise ValueError(msg)
