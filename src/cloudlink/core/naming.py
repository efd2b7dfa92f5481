"""Default database name generation."""

from __future__ import annotations

import random
from typing import Callable, Collection

from cloudlink.core.errors import GenerationExhaustedError

NAME_GENERATION_MAX_ATTEMPTS = 100

_ADJECTIVES = (
    "amber", "ancient", "autumn", "billowing", "bitter", "bold", "brave",
    "calm", "crimson", "curly", "damp", "dawn", "eager", "fancy", "fragrant",
    "frosty", "gentle", "glowing", "hidden", "icy", "jolly", "lively",
    "misty", "nimble", "patient", "plucky", "polished", "proud", "quiet",
    "rapid", "restless", "shy", "silent", "snowy", "solitary", "sparkling",
    "spring", "steady", "still", "summer", "swift", "tidy", "twilight",
    "wandering", "wild", "winter", "wispy", "young",
)

_NOUNS = (
    "badger", "bird", "breeze", "brook", "bush", "butterfly", "cherry",
    "cloud", "darkness", "dew", "dream", "dust", "feather", "field", "fire",
    "firefly", "flower", "fog", "forest", "frog", "glade", "glitter",
    "grass", "haze", "hill", "lake", "leaf", "meadow", "moon", "morning",
    "mountain", "night", "otter", "paper", "pine", "pond", "rain",
    "resonance", "river", "sea", "shadow", "sky", "smoke", "snow", "sound",
    "star", "sun", "sunset", "surf", "thunder", "tree", "violet", "voice",
    "water", "waterfall", "wave", "wildflower", "wind", "wood",
)


class RandomNameGenerator:
    """Produces `adjective-noun` names such as `misty-otter`."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def generate(self) -> str:
        return f"{self._rng.choice(_ADJECTIVES)}-{self._rng.choice(_NOUNS)}"

    def generate_unique(
        self,
        existing_names: Collection[str],
        max_attempts: int = NAME_GENERATION_MAX_ATTEMPTS,
    ) -> str:
        """Return a generated name that is not in `existing_names`."""
        return generate_unique(self.generate, existing_names, max_attempts)


def generate_unique(
    generate: Callable[[], str],
    existing_names: Collection[str],
    max_attempts: int = NAME_GENERATION_MAX_ATTEMPTS,
) -> str:
    """
    Draw candidate names until one is absent from `existing_names`.

    Args:
        generate: Zero-argument callable producing a candidate name.
        existing_names: Names that are already taken.
        max_attempts: Upper bound on the number of candidates drawn.

    Returns:
        A candidate name that is not a member of `existing_names`.

    Raises:
        GenerationExhaustedError: If every candidate within the bound was taken.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    taken = set(existing_names)
    for _ in range(max_attempts):
        candidate = generate()
        if candidate not in taken:
            return candidate
    raise GenerationExhaustedError(
        f"Could not generate a unique database name after {max_attempts} attempts"
    )
