import random
from dataclasses import dataclass, field


@dataclass
class Backoff:
    """
    Exponential backoff schedule with optional jitter.

    Each call to duration() returns the wait before the next attempt and
    advances the attempt counter. Without jitter the waits are
    min, min*factor, min*factor**2, ... capped at max. With jitter each wait
    is drawn uniformly between min and the computed value.
    """

    min_seconds: float = 0.1
    max_seconds: float = 10.0
    factor: float = 2.0
    jitter: bool = True
    attempt: int = 0
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def duration(self) -> float:
        computed = self.min_seconds * (self.factor ** self.attempt)
        self.attempt += 1

        if self.jitter:
            computed = self.rng.random() * (computed - self.min_seconds) + self.min_seconds

        if computed < self.min_seconds:
            return self.min_seconds
        if computed > self.max_seconds:
            return self.max_seconds
        return computed
