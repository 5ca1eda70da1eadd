# apps/board/payloads.py

"""
JSON shapes returned by the API and pushed over WebSockets (camelCase keys)
"""

from apps.core.utils import display_name, initials, user_color


def _iso(value):
    return value.isoformat() if value else None


def account_payload(account):
    if account is None:
        return None
    name = display_name(account)
    return {
        'id': account.pk,
        'email': account.email,
        'firstName': account.first_name,
        'lastName': account.last_name,
        'name': name,
        'initials': initials(name),
        'color': user_color(account.email),
    }


def board_payload(board, role=None):
    payload = {
        'id': board.pk,
        'name': board.name,
        'color': board.color,
        'ownerId': board.owner_id,
        'revision': board.revision,
        'createdAt': _iso(board.created_at),
        'updatedAt': _iso(board.updated_at),
    }
    if role is not None:
        payload['role'] = role
    # Counts are present when the queryset was annotated
    if hasattr(board, 'item_count'):
        payload['itemCount'] = board.item_count
    if hasattr(board, 'member_count'):
        payload['memberCount'] = board.member_count
    return payload


def column_payload(column, items=None):
    payload = {
        'id': column.pk,
        'boardId': column.board_id,
        'name': column.name,
        'color': column.color,
        'position': column.position,
        'isDefault': column.is_default,
        'isExpanded': column.is_expanded,
        'shortcut': column.shortcut,
        'revision': column.revision,
    }
    if items is not None:
        payload['items'] = [item_payload(item) for item in items]
    return payload


def assignee_payload(assignee):
    if assignee is None:
        return None
    return {
        'id': assignee.pk,
        'name': assignee.name,
        'accountId': assignee.account_id,
        'initials': initials(assignee.name),
    }


def item_payload(item):
    payload = {
        'id': item.pk,
        'boardId': item.board_id,
        'columnId': item.column_id,
        'title': item.title,
        'content': item.content,
        'position': item.position,
        'createdBy': item.created_by_id,
        'assignee': assignee_payload(item.assignee) if item.assignee_id else None,
        'createdAt': _iso(item.created_at),
        'updatedAt': _iso(item.updated_at),
        'lastActiveAt': _iso(item.last_active_at),
    }
    if hasattr(item, 'comment_count'):
        payload['commentCount'] = item.comment_count
    return payload


def placement_payload(item, placement):
    """Item after a move, with the container revision for client reconciliation"""
    payload = item_payload(item)
    payload.update({
        'containerId': placement.container_id,
        'previousContainerId': placement.previous_container_id,
        'revision': placement.revision,
        'rebalanced': placement.rebalanced,
    })
    return payload


def comment_payload(comment):
    return {
        'id': comment.pk,
        'itemId': comment.item_id,
        'content': comment.content,
        'createdAt': _iso(comment.created_at),
        'updatedAt': _iso(comment.updated_at),
        'author': account_payload(comment.account),
    }


def activity_payload(activity):
    return {
        'id': activity.pk,
        'boardId': activity.board_id,
        'itemId': activity.item_id,
        'type': activity.type,
        'content': activity.content,
        'createdAt': _iso(activity.created_at),
        'account': account_payload(activity.account),
    }


def member_payload(member):
    payload = account_payload(member.account)
    payload.update({
        'memberId': member.pk,
        'accountId': member.account_id,
        'role': member.role,
        'joinedAt': _iso(member.created_at),
    })
    return payload


def invitation_payload(invitation):
    return {
        'id': invitation.pk,
        'boardId': invitation.board_id,
        'boardName': invitation.board.name,
        'email': invitation.email,
        'role': invitation.role,
        'status': invitation.status,
        'invitedBy': account_payload(invitation.invited_by),
        'createdAt': _iso(invitation.created_at),
        'expiresAt': _iso(invitation.expires_at),
        'expired': invitation.is_expired(),
    }
