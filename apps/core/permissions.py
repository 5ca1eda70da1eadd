# apps/core/permissions.py

from functools import wraps

from django.core.exceptions import PermissionDenied

from .exceptions import NotFound
from .models import Board, BoardMember


class BoardPermissions:
    """
    Role gates of Groove Board

    owner: everything on the board
    editor: cards, assignees, column names and collapsing
    """

    @staticmethod
    def role(user, board):
        """Role of the user on the board, None for non-members"""
        return board.role_for(user)

    @staticmethod
    def is_member(user, board):
        return BoardPermissions.role(user, board) is not None

    @staticmethod
    def is_owner(user, board):
        return BoardPermissions.role(user, board) == BoardMember.ROLE_OWNER

    @staticmethod
    def can_edit(user, board):
        """Owner or editor"""
        return BoardPermissions.role(user, board) in (BoardMember.ROLE_OWNER, BoardMember.ROLE_EDITOR)

    # === BOARD ===

    @staticmethod
    def can_manage_board(user, board):
        """Rename, recolor, delete the board and manage members"""
        return BoardPermissions.is_owner(user, board)

    # === COLUMNS ===

    @staticmethod
    def can_manage_columns(user, board):
        """Create, delete, move columns and change color or shortcut"""
        return BoardPermissions.is_owner(user, board)

    @staticmethod
    def can_rename_column(user, board):
        return BoardPermissions.can_edit(user, board)

    # === CARDS ===

    @staticmethod
    def can_edit_items(user, board):
        """Create, update and move cards, change assignees"""
        return BoardPermissions.can_edit(user, board)

    @staticmethod
    def can_delete_item(user, item):
        board = item.board
        if BoardPermissions.is_owner(user, board):
            return True
        # Editors may only delete their own cards
        return BoardPermissions.can_edit(user, board) and item.created_by_id == user.pk


def require(allowed, message='You do not have permission for this action'):
    """Raises PermissionDenied unless `allowed` is truthy"""
    if not allowed:
        raise PermissionDenied(message)


def get_board_for(user, board_id):
    """
    Loads a board the user belongs to

    Non-members get the same NotFound as a missing board.
    """
    try:
        board = Board.objects.select_related('owner').get(pk=board_id)
    except Board.DoesNotExist:
        raise NotFound('Board not found')

    if not BoardPermissions.is_member(user, board):
        raise NotFound('Board not found')
    return board


# Decorators for views

def requires_board_access(view_func):
    """
    Checks membership of the board named by `board_id`
    Adds the board to the request for use in the view
    """

    @wraps(view_func)
    def wrapped_view(request, board_id, *args, **kwargs):
        request.board = get_board_for(request.user, board_id)
        return view_func(request, board_id, *args, **kwargs)

    return wrapped_view
