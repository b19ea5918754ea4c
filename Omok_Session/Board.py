"""Board state container and five-in-a-row line extraction."""

from .models import Stone

# horizontal, vertical, diagonal, anti-diagonal
DIRECTIONS = [(0, 1), (1, 0), (1, 1), (1, -1)]
WIN_LENGTH = 5
MIN_SIZE = 5
MAX_SIZE = 100


class Board:
    def __init__(self, size=15):
        if not isinstance(size, int) or not MIN_SIZE <= size <= MAX_SIZE:
            raise ValueError(f"board size must be an integer in [{MIN_SIZE}, {MAX_SIZE}]")
        # Store cells as -1 (black), 0 (empty), 1 (white), indexed [row][col]
        self.size = size
        self.cells = [[Stone.EMPTY] * size for _ in range(size)]
        self.stone_count = 0

    def in_bounds(self, row, col):
        return 0 <= row < self.size and 0 <= col < self.size

    def is_empty(self, row, col):
        return self.in_bounds(row, col) and self.cells[row][col] == Stone.EMPTY

    def is_full(self):
        return self.stone_count >= self.size * self.size

    def get(self, row, col):
        """Return the occupant of (row, col), or None when off the board."""
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]

    def place(self, row, col, player):
        """Place a stone; raise if out of bounds or occupied."""
        if player not in (Stone.BLACK, Stone.WHITE):
            raise ValueError("player must be Stone.BLACK or Stone.WHITE")
        if not self.in_bounds(row, col):
            raise ValueError("move out of bounds")
        if self.cells[row][col] != Stone.EMPTY:
            raise ValueError("cell already occupied")
        self.cells[row][col] = Stone(player)
        self.stone_count += 1

    def remove(self, row, col):
        """Clear an occupied cell back to empty."""
        if not self.in_bounds(row, col) or self.cells[row][col] == Stone.EMPTY:
            raise ValueError("no stone to remove")
        self.cells[row][col] = Stone.EMPTY
        self.stone_count -= 1

    def rows(self):
        """Immutable copy of the grid."""
        return tuple(tuple(row) for row in self.cells)

    def five_line(self, row, col):
        """
        Return the 5 coordinates credited for a win through (row, col), or None.

        Runs longer than five also win. The credited window is the first five
        cells of the run, walking from its backward end, that still contain
        (row, col).
        """
        player = self.get(row, col)
        if player not in (Stone.BLACK, Stone.WHITE):
            return None

        for dr, dc in DIRECTIONS:
            forward = self._count_dir(row, col, dr, dc, player)
            backward = self._count_dir(row, col, -dr, -dc, player)
            if 1 + forward + backward < WIN_LENGTH:
                continue
            # offset of the window start relative to the placed cell, in steps
            start = -min(backward, WIN_LENGTH - 1)
            return [(row + dr * k, col + dc * k) for k in range(start, start + WIN_LENGTH)]
        return None

    def _count_dir(self, row, col, dr, dc, player):
        """Count contiguous stones of player from (row, col) (exclusive) in (dr, dc)."""
        count = 0
        r, c = row + dr, col + dc
        while self.in_bounds(r, c) and self.cells[r][c] == player:
            count += 1
            r += dr
            c += dc
        return count
