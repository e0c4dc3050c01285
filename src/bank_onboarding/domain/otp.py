"""
Per-digit verification code input.

Models the six single-character cells of the verification form: typing
advances focus, backspace on an empty cell moves focus back.
"""

from .validation import VERIFICATION_CODE_LENGTH


class OtpInput:
    """Cells and focus position of the verification code input."""

    def __init__(self, length: int = VERIFICATION_CODE_LENGTH) -> None:
        self.cells = [""] * length
        self.focus = 0

    @property
    def last_index(self) -> int:
        return len(self.cells) - 1

    @property
    def value(self) -> str:
        return "".join(self.cells)

    @property
    def is_complete(self) -> bool:
        return all(self.cells)

    def enter(self, index: int, value: str) -> bool:
        """
        Set cell `index` to `value`.

        Input longer than one character, or for an index outside the cells,
        is ignored.

        Returns:
            True when the last cell was just filled, i.e. the code should be
            submitted
        """
        if not self._in_range(index) or len(value) > 1:
            return False
        self.cells[index] = value
        if value and index < self.last_index:
            self.focus = index + 1
        return index == self.last_index and bool(value)

    def backspace(self, index: int) -> None:
        if not self._in_range(index):
            return
        if self.cells[index]:
            self.cells[index] = ""
        elif index > 0:
            self.focus = index - 1

    def clear(self) -> None:
        self.cells = [""] * len(self.cells)
        self.focus = 0

    def _in_range(self, index: int) -> bool:
        return 0 <= index <= self.last_index
