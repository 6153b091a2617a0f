"""
Startup stabilization gate.
"""

from dataclasses import dataclass
from typing import Tuple

from ..math.constants import STABILIZATION_FRAMES

@dataclass(frozen=True)
class StabilizationGate:
    """
    Countdown that discards the first frames after construction or reset.

    The previous reading of each encoder starts at zero, so the first frames
    would otherwise produce a large spurious delta. While ``remaining`` is
    above zero the gate is warming; once it reaches zero it stays ready until
    a new gate is created.
    """

    remaining: int = STABILIZATION_FRAMES

    @property
    def ready(self) -> bool:
        return self.remaining <= 0

    def step(self) -> Tuple['StabilizationGate', bool]:
        """
        Advance the gate by one processing call.

        Returns:
            (next gate, whether this frame should be processed)
        """
        if self.remaining > 0:
            return StabilizationGate(self.remaining - 1), False
        return self, True
