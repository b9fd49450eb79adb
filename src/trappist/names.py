"""Random task names like ``SleepyFox42``."""

from __future__ import annotations

import random
import re
from typing import Optional

ADJECTIVES = ("Quick", "Lazy", "Sleepy", "Noisy", "Hungry")
NOUNS = ("Fox", "Dog", "Cat", "Mouse", "Bear")
MAX_NUMBER = 1000

NAME_PATTERN = re.compile(
    rf"^({'|'.join(ADJECTIVES)})({'|'.join(NOUNS)})(0|[1-9][0-9]{{0,2}})$"
)


def generate_name(rng: Optional[random.Random] = None) -> str:
    """Generate a task name: adjective + noun + number in [0, 1000).

    Names are not unique; collisions between ticks are expected.
    """
    source = rng or random
    adjective = source.choice(ADJECTIVES)
    noun = source.choice(NOUNS)
    number = source.randrange(MAX_NUMBER)
    return f"{adjective}{noun}{number}"
