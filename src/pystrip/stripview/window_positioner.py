from dataclasses import dataclass

from loguru import logger


@dataclass(frozen=True)
class RevealRange:
    """Half-open store index range ``[start, stop)`` uncovered by a window move."""

    start: int
    stop: int

    def __len__(self) -> int:
        return max(0, self.stop - self.start)


class WindowPositioner:
    """
    Tracks the store index of the window's left edge.

    The index is derived from the store length and the window size; it is
    recomputed wholesale on init and zoom rather than trusted incrementally.
    """

    def __init__(self, total_length: int = 0, view_size: int = 1):
        self.view_start_index = 0
        self.recompute(total_length, view_size)

    def recompute(self, total_length: int, view_size: int) -> int:
        """Position the window so that it ends at the newest point."""
        self.view_start_index = max(0, total_length - view_size - 1)
        logger.debug(
            f"View start index recomputed: {self.view_start_index} "
            f"(total={total_length}, view_size={view_size})"
        )
        return self.view_start_index

    def move_forward(self, num_moves: int, view_size: int, total_length: int) -> RevealRange:
        """
        Advance the window by ``num_moves`` points.

        The window keeps one lookahead point beyond ``view_size``, so the
        points to reveal start two past the old right edge.

        Returns
        -------
        RevealRange
            Store range to reveal. It may extend past the available data.
        """
        old_index = self.view_start_index
        self.view_start_index = max(0, min(old_index + num_moves, total_length - 1))
        start = old_index + view_size + 2
        reveal = RevealRange(start, start + num_moves)
        logger.debug(
            f"Moved forward {old_index} -> {self.view_start_index}, reveal [{reveal.start}, {reveal.stop})"
        )
        return reveal

    def move_back(self, num_moves: int) -> RevealRange:
        """Move the window back by ``num_moves`` points, stopping at index 0."""
        old_index = self.view_start_index
        self.view_start_index = max(old_index - num_moves, 0)
        reveal = RevealRange(self.view_start_index, old_index)
        logger.debug(
            f"Moved back {old_index} -> {self.view_start_index}, reveal [{reveal.start}, {reveal.stop})"
        )
        return reveal

    def shift(self, offset: int) -> None:
        """Shift the index after points were inserted in front of the store."""
        self.view_start_index = max(0, self.view_start_index + offset)
