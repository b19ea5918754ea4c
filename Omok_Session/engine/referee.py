"""Placement validation: bounds, occupancy and terminal-state checks."""

from ..models import Rejection


def check_move(board, row, col, game_over=False):
    """
    Return the Rejection for placing at (row, col), or None when the move is legal.
    A finished game rejects every placement regardless of the target cell.
    """
    if game_over:
        return Rejection.GAME_OVER
    if not board.in_bounds(row, col):
        return Rejection.OUT_OF_BOUNDS
    if not board.is_empty(row, col):
        return Rejection.OCCUPIED
    return None
