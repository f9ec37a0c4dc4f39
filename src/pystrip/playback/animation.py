from dataclasses import dataclass


@dataclass
class AnimationCycle:
    """
    Progress counter of one scroll cycle.

    A cycle starts when a batch is applied and ends after ``cycle_length``
    ticks, at which point the window has scrolled by one slot.
    """

    cycle_length: int
    active: bool = False
    count: int = 0

    def __post_init__(self) -> None:
        if self.cycle_length < 1:
            raise ValueError(f"cycle_length must be >= 1, got {self.cycle_length}")

    def start(self) -> None:
        self.active = True
        self.count = 0

    def advance(self) -> bool:
        """
        Count one tick of an active cycle.

        Returns
        -------
        bool
            True if this tick finished the cycle. The counter is reset and the
            cycle marked idle in that case.
        """
        if not self.active:
            return False
        self.count += 1
        if self.count >= self.cycle_length:
            self.count = 0
            self.active = False
            return True
        return False

    def offset(self, slot_width: float) -> float:
        """Interpolated scroll offset in render-surface pixels."""
        return slot_width / self.cycle_length * self.count
