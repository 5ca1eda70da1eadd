# apps/board/views.py

from apps.core.api import api_view, provided, validate
from apps.core.exceptions import InvalidInput, NotFound
from apps.core.forms import (
    AssignForm,
    AssigneeForm,
    BoardForm,
    BoardUpdateForm,
    ColumnForm,
    ColumnUpdateForm,
    CommentForm,
    InvitationForm,
    ItemForm,
    ItemUpdateForm,
    MoveForm,
    SearchForm,
)
from apps.core.permissions import BoardPermissions, requires_board_access

from . import services
from .payloads import (
    activity_payload,
    assignee_payload,
    board_payload,
    column_payload,
    comment_payload,
    invitation_payload,
    item_payload,
    member_payload,
)


# === BOARDS ===

@api_view(methods=('GET', 'POST'))
def boards(request):
    """
    GET: boards of the current user
    POST: new board from a template
    """
    if request.method == 'GET':
        return {'boards': [board_payload(board, role) for board, role in services.list_boards(request.user)]}

    data = validate(BoardForm, request.data)
    board = services.create_board(request.user, data['name'], data['color'], data['template'])
    return {'board': board_payload(board, role='owner')}, 201


@api_view(methods=('GET', 'PATCH', 'DELETE'))
@requires_board_access
def board_detail(request, board_id):
    board = request.board  # Injected by the decorator

    if request.method == 'PATCH':
        data = validate(BoardUpdateForm, request.data)
        board = services.update_board(request.user, board, provided(data, request.data))
        return {'board': board_payload(board)}

    if request.method == 'DELETE':
        services.delete_board(request.user, board)
        return None, 204

    detail = services.board_detail(request.user, board)
    return {
        'board': board_payload(board, role=detail['role']),
        'columns': detail['columns'],
        'members': detail['members'],
    }


# === MEMBERS ===

@api_view(methods=('GET',))
@requires_board_access
def members(request, board_id):
    return {'members': [member_payload(member) for member in services.list_members(request.board)]}


@api_view(methods=('DELETE',))
@requires_board_access
def member_detail(request, board_id, member_id):
    services.remove_member(request.user, request.board, member_id)
    return None, 204


# === INVITATIONS ===

@api_view(methods=('GET', 'POST'))
@requires_board_access
def board_invitations(request, board_id):
    if request.method == 'GET':
        return {'invitations': [invitation_payload(i) for i in services.board_invitations(request.board)]}

    data = validate(InvitationForm, request.data)
    invitation = services.create_invitation(request.user, request.board, data['email'])
    return {'invitation': invitation_payload(invitation)}, 201


@api_view(methods=('GET', 'DELETE'), login_required=False)
def invitation_detail(request, invitation_id):
    """Public details for the invitation page, DELETE cancels it"""
    if request.method == 'GET':
        return {'invitation': invitation_payload(services.get_invitation(invitation_id))}

    if not request.user.is_authenticated:
        return {'error': 'Authentication required'}, 401
    services.cancel_invitation(request.user, invitation_id)
    return None, 204


@api_view(methods=('POST',))
def accept_invitation(request, invitation_id):
    board = services.accept_invitation(request.user, invitation_id)
    return {'board': board_payload(board, role=BoardPermissions.role(request.user, board))}


@api_view(methods=('POST',))
def decline_invitation(request, invitation_id):
    invitation = services.decline_invitation(request.user, invitation_id)
    return {'invitation': invitation_payload(invitation)}


# === COLUMNS ===

@api_view(methods=('POST',))
@requires_board_access
def columns(request, board_id):
    data = validate(ColumnForm, request.data)
    column = services.create_column(request.user, request.board, data['name'], data['color'])
    return {'column': column_payload(column, [])}, 201


@api_view(methods=('PATCH', 'DELETE'))
@requires_board_access
def column_detail(request, board_id, column_id):
    if request.method == 'DELETE':
        target, moved = services.delete_column(request.user, request.board, column_id)
        return {'movedTo': target.pk, 'itemIds': moved}

    data = validate(ColumnUpdateForm, request.data)
    column = services.update_column(request.user, request.board, column_id, provided(data, request.data))
    return {'column': column_payload(column)}


@api_view(methods=('POST',))
@requires_board_access
def move_column(request, board_id, column_id):
    """
    Drag-and-drop of a column inside its board
    Body: {afterSiblingId, expectedRevision}
    """
    data = validate(MoveForm, request.data)
    if data['target_container_id'] and data['target_container_id'] != board_id:
        raise NotFound('Board not found')

    column = services.move_column(
        request.user,
        request.board,
        column_id,
        after_sibling_id=data['after_sibling_id'],
        expected_revision=data['expected_revision'],
    )
    return {'column': column}


# === CARDS ===

@api_view(methods=('POST',))
@requires_board_access
def items(request, board_id):
    """New card: {columnId, title, content, assigneeId}"""
    data = validate(ItemForm, request.data)
    item = services.create_item(
        request.user,
        request.board,
        data['column_id'],
        data['title'],
        content=data['content'],
        assignee_id=data['assignee_id'] or None,
    )
    return {'item': item_payload(item)}, 201


@api_view(methods=('GET',))
@requires_board_access
def search(request, board_id):
    data = validate(SearchForm, request.GET)
    found = services.search_items(request.board, data['q'])
    return {'items': [item_payload(item) for item in found]}


@api_view(methods=('GET', 'PATCH', 'DELETE'))
def item_detail(request, item_id):
    item = services.get_item_for(request.user, item_id)

    if request.method == 'PATCH':
        data = validate(ItemUpdateForm, request.data)
        item = services.update_item(request.user, item, provided(data, request.data))
        return {'item': item_payload(item)}

    if request.method == 'DELETE':
        services.delete_item(request.user, item)
        return None, 204

    return {
        'item': item_payload(item),
        'column': column_payload(item.column),
        'board': board_payload(item.board, role=BoardPermissions.role(request.user, item.board)),
        'comments': [comment_payload(comment) for comment in services.list_comments(item)],
        'activity': [activity_payload(activity) for activity in services.item_activity(item)],
    }


@api_view(methods=('POST',))
def move_item(request, item_id):
    """
    Drag-and-drop of a card
    Body: {currentContainerId, targetContainerId, afterSiblingId, expectedRevision}
    afterSiblingId null drops at the top, "end" at the bottom
    """
    data = validate(MoveForm, request.data)
    if not data['target_container_id']:
        raise InvalidInput('targetContainerId is required')

    item = services.get_item_for(request.user, item_id)
    moved = services.move_item(
        request.user,
        item,
        data['target_container_id'],
        after_sibling_id=data['after_sibling_id'],
        current_column_id=data['current_container_id'],
        expected_revision=data['expected_revision'],
    )
    return {'item': moved}


@api_view(methods=('PUT',))
def item_assignee(request, item_id):
    """Body: {assigneeId}, null clears"""
    data = validate(AssignForm, request.data)
    item = services.get_item_for(request.user, item_id)
    item = services.set_item_assignee(request.user, item, data['assignee_id'] or None)
    return {'item': item_payload(item)}


# === ASSIGNEES ===

@api_view(methods=('GET', 'POST'))
@requires_board_access
def assignees(request, board_id):
    if request.method == 'GET':
        return {'assignees': [assignee_payload(a) for a in services.list_assignees(request.board)]}

    data = validate(AssigneeForm, request.data)
    assignee, created = services.create_assignee(request.user, request.board, data['name'])
    return {'assignee': assignee_payload(assignee), 'created': created}, 201 if created else 200


# === COMMENTS ===

@api_view(methods=('GET', 'POST'))
def comments(request, item_id):
    item = services.get_item_for(request.user, item_id)

    if request.method == 'GET':
        return {'comments': [comment_payload(comment) for comment in services.list_comments(item)]}

    data = validate(CommentForm, request.data)
    comment = services.create_comment(request.user, item, data['content'])
    return {'comment': comment_payload(comment)}, 201


@api_view(methods=('PATCH', 'DELETE'))
def comment_detail(request, comment_id):
    if request.method == 'DELETE':
        services.delete_comment(request.user, comment_id)
        return None, 204

    data = validate(CommentForm, request.data)
    comment = services.update_comment(request.user, comment_id, data['content'])
    return {'comment': comment_payload(comment)}
