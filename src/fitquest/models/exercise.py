"""Exercise reference data."""

from typing import Any, FrozenSet, Iterable, List, Optional, Union

from pydantic import Field, PrivateAttr

from .base import CamelModel


def parse_muscle_tokens(value: Union[str, Iterable[str], None]) -> FrozenSet[str]:
    """Normalise a muscle field into a set of lowercase, trimmed names.

    Exercise documents store muscles as comma-joined strings, and
    ``secondaryMuscles`` may also be a list whose items are themselves
    comma-joined. Empty tokens are dropped.
    """
    if not value:
        return frozenset()
    if isinstance(value, str):
        chunks: List[str] = [value]
    else:
        chunks = [item for item in value if isinstance(item, str)]
    tokens = set()
    for chunk in chunks:
        for part in chunk.split(","):
            name = part.strip().lower()
            if name:
                tokens.add(name)
    return frozenset(tokens)


class ExerciseMetadata(CamelModel):
    """Exercise library item (read-only reference data)."""

    id: str = Field(..., description="Exercise identifier")
    name: Optional[str] = Field(None, description="Display name")
    target: Optional[str] = Field(default="", description="Comma-joined primary muscles")
    secondary_muscles: Optional[Union[str, List[str]]] = Field(
        default=None, description="Secondary muscles, string or list"
    )
    category: Optional[str] = Field(None, description="strength, cardio, compound, isolation, core...")
    equipment: Optional[str] = Field(None, description="Equipment used")

    _target_muscles: FrozenSet[str] = PrivateAttr(default=frozenset())
    _secondary_muscles: FrozenSet[str] = PrivateAttr(default=frozenset())

    def model_post_init(self, __context: Any) -> None:
        self._target_muscles = parse_muscle_tokens(self.target)
        self._secondary_muscles = parse_muscle_tokens(self.secondary_muscles)

    @property
    def target_muscles(self) -> FrozenSet[str]:
        """Normalised primary muscles."""
        return self._target_muscles

    @property
    def secondary_muscle_set(self) -> FrozenSet[str]:
        """Normalised secondary muscles."""
        return self._secondary_muscles

    @property
    def muscles(self) -> FrozenSet[str]:
        """Every muscle the exercise touches, each listed once."""
        return self._target_muscles | self._secondary_muscles

    @property
    def normalized_category(self) -> str:
        return (self.category or "").strip().lower()
