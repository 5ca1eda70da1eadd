# apps/board/services.py

"""
Board operations

Every function takes the acting account first, checks its role on the board
and raises domain exceptions (NotFound, Conflict, PermissionDenied). Writes
that change what other clients see are broadcast after commit.
"""

import logging
from smtplib import SMTPException

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from apps.core.exceptions import Conflict, NotFound
from apps.core.models import (
    Activity,
    Assignee,
    Board,
    BoardInvitation,
    BoardMember,
    Column,
    Comment,
    Item,
)
from apps.core.permissions import BoardPermissions, get_board_for, require
from apps.core.utils import display_name, truncate

from . import reorder
from .ordering import evenly_spaced
from .payloads import (
    column_payload,
    comment_payload,
    item_payload,
    member_payload,
    placement_payload,
)
from .realtime import broadcast
from .reorder import StaleOrder

logger = logging.getLogger(__name__)

# name, color, is_default, shortcut, is_expanded
BOARD_TEMPLATES = {
    'classic': [
        ('Not Now', '#475569', False, '', True),
        ('May be?', '#ec4899', True, 'c', True),
        ('Done', '#0891b2', False, '', False),
    ],
    'kanban': [
        ('Todo', '#94a3b8', True, 't', True),
        ('In Progress', '#3b82f6', False, 'p', True),
        ('Done', '#10b981', False, 'd', False),
    ],
    'scrum': [
        ('Backlog', '#94a3b8', True, 'b', True),
        ('Sprint', '#6366f1', False, 's', True),
        ('In Progress', '#3b82f6', False, 'p', True),
        ('Review', '#f59e0b', False, 'r', True),
        ('Done', '#10b981', False, 'd', False),
    ],
}
DEFAULT_TEMPLATE = 'classic'
SEARCH_LIMIT = 50


def with_reorder_retries(operation, expected_revision=None):
    """
    Runs a reorder, retrying when another reorder won the race

    A client that pinned a revision gets the conflict right away.
    """
    attempts = 1 if expected_revision is not None else settings.GROOVE_REORDER_MAX_RETRIES
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except StaleOrder:
            if attempt >= attempts:
                raise
            logger.info(f"🔁 Reorder conflict, retrying ({attempt}/{attempts})")


# === BOARDS ===

def list_boards(user):
    """Boards the user belongs to, newest first, with counts and role"""
    roles = dict(BoardMember.objects.filter(account=user).values_list('board_id', 'role'))
    boards = (
        Board.objects.filter(pk__in=roles.keys())
        .annotate(
            item_count=Count('items', distinct=True),
            member_count=Count('members', distinct=True),
        )
        .order_by('-created_at')
    )
    return [(board, roles[board.pk]) for board in boards]


def create_board(user, name, color=None, template=None):
    columns = BOARD_TEMPLATES[template or DEFAULT_TEMPLATE]

    with transaction.atomic():
        board = Board.objects.create(name=name, color=color or '#3b82f6', owner=user)
        BoardMember.objects.create(board=board, account=user, role=BoardMember.ROLE_OWNER)

        positions = evenly_spaced(len(columns))
        Column.objects.bulk_create([
            Column(
                board=board,
                name=column_name,
                color=column_color,
                is_default=is_default,
                shortcut=shortcut,
                is_expanded=is_expanded,
                position=position,
            )
            for (column_name, column_color, is_default, shortcut, is_expanded), position in zip(columns, positions)
        ])
        Activity.record(board, Activity.BOARD_CREATED, account=user, content=f'Created board "{name}"')

    logger.info(f"📋 Board {board.pk} created by {user.email} ({template or DEFAULT_TEMPLATE})")
    return board


def board_detail(user, board):
    """Board with ordered columns and cards, members and the caller's role"""
    items = (
        Item.objects.filter(board=board)
        .select_related('assignee')
        .annotate(comment_count=Count('comments'))
        .order_by('position', 'pk')
    )
    by_column = {}
    for item in items:
        by_column.setdefault(item.column_id, []).append(item)

    columns = board.columns.order_by('position', 'pk')
    members = board.members.select_related('account')
    return {
        'columns': [column_payload(column, by_column.get(column.pk, [])) for column in columns],
        'members': [member_payload(member) for member in members],
        'role': BoardPermissions.role(user, board),
    }


def update_board(user, board, changes):
    require(BoardPermissions.can_manage_board(user, board), 'Only the board owner can change the board')

    for field in ('name', 'color'):
        if changes.get(field):
            setattr(board, field, changes[field])
    board.save(update_fields=['name', 'color', 'updated_at'])

    broadcast(board.pk, 'board_updated', {'id': board.pk, 'name': board.name, 'color': board.color}, actor=user)
    return board


def delete_board(user, board):
    require(BoardPermissions.can_manage_board(user, board), 'Only the board owner can delete the board')

    board_id = board.pk
    board.delete()
    broadcast(board_id, 'board_deleted', {'id': board_id}, actor=user)
    logger.info(f"🗑️ Board {board_id} deleted by {user.email}")


# === MEMBERS ===

def list_members(board):
    return list(board.members.select_related('account'))


def remove_member(user, board, member_id):
    require(BoardPermissions.can_manage_board(user, board), 'Only the board owner can remove members')

    try:
        member = board.members.select_related('account').get(pk=member_id)
    except BoardMember.DoesNotExist:
        raise NotFound('Member not found')

    if member.role == BoardMember.ROLE_OWNER or member.account_id == board.owner_id:
        raise Conflict('The board owner cannot be removed')

    with transaction.atomic():
        member.delete()
        Activity.record(
            board, Activity.MEMBER_REMOVED, account=user,
            content=f"{display_name(member.account)} was removed from the board",
        )

    broadcast(board.pk, 'member_removed', {'accountId': member.account_id}, actor=user)


# === INVITATIONS ===

def create_invitation(user, board, email):
    require(BoardPermissions.can_manage_board(user, board), 'Only the board owner can invite members')

    if board.members.filter(account__email__iexact=email).exists():
        raise Conflict('This person is already a member of the board')

    pending = board.invitations.filter(email__iexact=email, status=BoardInvitation.STATUS_PENDING)
    if any(not invitation.is_expired() for invitation in pending):
        raise Conflict('An invitation for this email is already pending')

    invitation = BoardInvitation.objects.create(
        board=board,
        email=email,
        invited_by=user,
        expires_at=BoardInvitation.expiry_from_now(settings.GROOVE_INVITATION_TTL_DAYS),
    )
    transaction.on_commit(lambda: _send_invitation_email(invitation))
    logger.info(f"✉️ {user.email} invited {email} to board {board.pk}")
    return invitation


def board_invitations(board):
    return list(
        board.invitations.filter(status=BoardInvitation.STATUS_PENDING).select_related('board', 'invited_by')
    )


def get_invitation(invitation_id):
    try:
        return BoardInvitation.objects.select_related('board', 'invited_by').get(pk=invitation_id)
    except BoardInvitation.DoesNotExist:
        raise NotFound('Invitation not found')


def my_invitations(user):
    invitations = BoardInvitation.objects.filter(
        email__iexact=user.email,
        status=BoardInvitation.STATUS_PENDING,
    ).select_related('board', 'invited_by')
    return [invitation for invitation in invitations if not invitation.is_expired()]


def _get_pending_invitation_for(user, invitation_id):
    try:
        invitation = (
            BoardInvitation.objects.select_for_update()
            .select_related('board')
            .get(pk=invitation_id)
        )
    except BoardInvitation.DoesNotExist:
        raise NotFound('Invitation not found')

    if invitation.email.lower() != user.email.lower():
        require(False, 'This invitation was sent to another email address')
    if invitation.status != BoardInvitation.STATUS_PENDING:
        raise Conflict(f'This invitation was already {invitation.status}')
    if invitation.is_expired():
        raise Conflict('This invitation has expired')
    return invitation


def accept_invitation(user, invitation_id):
    with transaction.atomic():
        invitation = _get_pending_invitation_for(user, invitation_id)
        board = invitation.board

        invitation.status = BoardInvitation.STATUS_ACCEPTED
        invitation.save(update_fields=['status'])

        member, created = BoardMember.objects.get_or_create(
            board=board,
            account=user,
            defaults={'role': invitation.role},
        )
        if created:
            Activity.record(
                board, Activity.MEMBER_JOINED, account=user,
                content=f"{display_name(user)} joined the board",
            )
            broadcast(board.pk, 'member_joined', member_payload(member), actor=user)

    logger.info(f"🤝 {user.email} accepted invitation {invitation_id}")
    return board


def decline_invitation(user, invitation_id):
    with transaction.atomic():
        invitation = _get_pending_invitation_for(user, invitation_id)
        invitation.status = BoardInvitation.STATUS_DECLINED
        invitation.save(update_fields=['status'])
    return invitation


def cancel_invitation(user, invitation_id):
    """The board owner or the inviter may withdraw a pending invitation"""
    invitation = get_invitation(invitation_id)
    board = invitation.board

    if not BoardPermissions.is_member(user, board):
        raise NotFound('Invitation not found')
    require(
        BoardPermissions.is_owner(user, board) or invitation.invited_by_id == user.pk,
        'Only the board owner or the inviter can cancel this invitation',
    )
    if invitation.status != BoardInvitation.STATUS_PENDING:
        raise Conflict(f'This invitation was already {invitation.status}')

    invitation.delete()


def _send_invitation_email(invitation):
    link = f"{settings.GROOVE_APP_URL}/invite?id={invitation.pk}"
    message = f"""
Hi,

{display_name(invitation.invited_by)} invited you to the board "{invitation.board.name}" on Groove Board.

Accept the invitation:
{link}

This invitation expires in {settings.GROOVE_INVITATION_TTL_DAYS} days.
"""
    try:
        send_mail(
            subject=f'You were invited to "{invitation.board.name}"',
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[invitation.email],
            fail_silently=False,
        )
    except (SMTPException, OSError) as e:
        logger.warning(f"⚠️ Could not send invitation email to {invitation.email}: {e}")


# === COLUMNS ===

def _get_column(board, column_id):
    try:
        return board.columns.get(pk=column_id)
    except Column.DoesNotExist:
        raise NotFound('Column not found')


def create_column(user, board, name, color=None):
    require(BoardPermissions.can_manage_columns(user, board), 'Only the board owner can add columns')

    with transaction.atomic():
        column = Column.objects.create(
            board=board,
            name=name,
            color=color or '#94a3b8',
            position=reorder.columns.next_position(board.pk),
        )
        reorder.columns.bump_revision(board.pk)

    broadcast(board.pk, 'column_created', column_payload(column, []), actor=user)
    return column


def update_column(user, board, column_id, changes):
    """
    Partial update of a column

    name and is_expanded: owner or editor; color and shortcut: owner only
    """
    column = _get_column(board, column_id)

    if {'name', 'is_expanded'} & changes.keys():
        require(BoardPermissions.can_rename_column(user, board), 'You cannot edit this column')
    if {'color', 'shortcut'} & changes.keys():
        require(BoardPermissions.can_manage_columns(user, board), 'Only the board owner can change this setting')

    # Only the edited fields are written; position and revision belong to the coordinator
    dirty = []
    if changes.get('name'):
        column.name = changes['name']
        dirty.append('name')
    if changes.get('is_expanded') is not None:
        column.is_expanded = changes['is_expanded']
        dirty.append('is_expanded')
    if changes.get('color'):
        column.color = changes['color']
        dirty.append('color')
    if 'shortcut' in changes:
        column.shortcut = (changes['shortcut'] or '').lower()
        dirty.append('shortcut')
    if dirty:
        column.save(update_fields=dirty)
    column.refresh_from_db(fields=['position', 'revision'])

    broadcast(board.pk, 'column_updated', column_payload(column), actor=user)
    return column


def move_column(user, board, column_id, after_sibling_id=None, expected_revision=None):
    require(BoardPermissions.can_manage_columns(user, board), 'Only the board owner can move columns')

    placement = with_reorder_retries(
        lambda: reorder.columns.move(
            column_id,
            board.pk,
            after_sibling_id=after_sibling_id,
            expected_revision=expected_revision,
        ),
        expected_revision,
    )
    column = Column.objects.get(pk=placement.item_id)
    payload = column_payload(column)
    payload['boardRevision'] = placement.revision
    broadcast(board.pk, 'column_moved', payload, actor=user)
    return payload


def delete_column(user, board, column_id):
    """Deletes a column, moving its cards to the end of the default column"""
    require(BoardPermissions.can_manage_columns(user, board), 'Only the board owner can delete columns')
    column = _get_column(board, column_id)
    if column.is_default:
        raise Conflict('The default column cannot be deleted')

    with transaction.atomic():
        target = board.columns.filter(is_default=True).exclude(pk=column.pk).first()
        if target is None:
            raise Conflict('The board has no default column to receive the cards')

        start = reorder.cards.next_position(target.pk)
        now = timezone.now()
        moved = list(column.items.order_by('position', 'pk').values_list('pk', flat=True))
        for offset, item_id in enumerate(moved):
            Item.objects.filter(pk=item_id).update(
                column=target, position=start + offset, updated_at=now, last_active_at=now,
            )
        if moved:
            reorder.cards.bump_revision(target.pk)

        Activity.record(
            board, Activity.COLUMN_DELETED, account=user,
            content=f'Deleted column "{column.name}", {len(moved)} card(s) moved to "{target.name}"',
        )
        column.delete()
        reorder.columns.bump_revision(board.pk)

    broadcast(board.pk, 'column_deleted', {'id': column_id, 'movedTo': target.pk, 'itemIds': moved}, actor=user)
    return target, moved


# === CARDS ===

def get_item_for(user, item_id):
    """Card the user can see; non-members get NotFound"""
    try:
        item = Item.objects.select_related('board', 'column', 'assignee', 'created_by').get(pk=item_id)
    except Item.DoesNotExist:
        raise NotFound('Card not found')
    if not BoardPermissions.is_member(user, item.board):
        raise NotFound('Card not found')
    return item


def _get_assignee(board, assignee_id):
    try:
        return board.assignees.get(pk=assignee_id)
    except Assignee.DoesNotExist:
        raise NotFound('Assignee not found')


def create_item(user, board, column_id, title, content='', assignee_id=None):
    require(BoardPermissions.can_edit_items(user, board), 'You cannot add cards to this board')
    column = _get_column(board, column_id)
    assignee = _get_assignee(board, assignee_id) if assignee_id else None

    with transaction.atomic():
        item = Item.objects.create(
            board=board,
            column=column,
            title=title,
            content=content or '',
            assignee=assignee,
            created_by=user,
            position=reorder.cards.next_position(column.pk),
        )
        reorder.cards.bump_revision(column.pk)
        Activity.record(board, Activity.ITEM_CREATED, account=user, item=item, content=f'Created "{title}"')

    broadcast(board.pk, 'item_created', item_payload(item), actor=user)
    return item


def update_item(user, item, changes):
    board = item.board
    require(BoardPermissions.can_edit_items(user, board), 'You cannot edit cards on this board')

    messages = []
    if changes.get('title') and changes['title'] != item.title:
        item.title = changes['title']
        messages.append(f'Title changed to "{item.title}"')
    if 'content' in changes and (changes['content'] or '') != item.content:
        item.content = changes['content'] or ''
        messages.append('Description updated')

    if not messages:
        return item

    with transaction.atomic():
        item.touch()
        item.save(update_fields=['title', 'content', 'updated_at', 'last_active_at'])
        for message in messages:
            Activity.record(board, Activity.ITEM_UPDATED, account=user, item=item, content=message)

    broadcast(board.pk, 'item_updated', item_payload(item), actor=user)
    return item


def move_item(user, item, target_column_id, after_sibling_id=None,
              current_column_id=None, expected_revision=None):
    """
    Drag-and-drop of a card

    The "moved from X to Y" activity is written in the same transaction as
    the placement.
    """
    board = item.board
    require(BoardPermissions.can_edit_items(user, board), 'You cannot move cards on this board')

    def attempt():
        with transaction.atomic():
            placement = reorder.cards.move(
                item.pk,
                target_column_id,
                after_sibling_id=after_sibling_id,
                current_container_id=current_column_id,
                expected_revision=expected_revision,
            )
            if placement.changed_container:
                names = dict(
                    Column.objects.filter(
                        pk__in=[placement.previous_container_id, placement.container_id]
                    ).values_list('pk', 'name')
                )
                Activity.record(
                    board, Activity.ITEM_MOVED, account=user, item=item,
                    content=f'Moved from "{names.get(placement.previous_container_id)}" '
                            f'to "{names.get(placement.container_id)}"',
                )
            return placement

    placement = with_reorder_retries(attempt, expected_revision)
    moved = Item.objects.select_related('assignee').get(pk=item.pk)
    payload = placement_payload(moved, placement)
    broadcast(board.pk, 'item_moved', payload, actor=user)
    return payload


def delete_item(user, item):
    board = item.board
    require(BoardPermissions.can_delete_item(user, item), 'You can only delete your own cards')

    item_id, column_id = item.pk, item.column_id
    with transaction.atomic():
        Activity.record(board, Activity.ITEM_DELETED, account=user, content=f'Deleted "{item.title}"')
        item.delete()
        reorder.cards.bump_revision(column_id)

    broadcast(board.pk, 'item_deleted', {'id': item_id, 'columnId': column_id}, actor=user)


def set_item_assignee(user, item, assignee_id):
    board = item.board
    require(BoardPermissions.can_edit_items(user, board), 'You cannot assign cards on this board')

    assignee = _get_assignee(board, assignee_id) if assignee_id else None
    if assignee is None and item.assignee_id is None:
        return item
    if assignee is not None and assignee.pk == item.assignee_id:
        return item

    with transaction.atomic():
        item.assignee = assignee
        item.touch()
        item.save(update_fields=['assignee', 'updated_at', 'last_active_at'])
        content = f'Assigned to {assignee.name}' if assignee else 'Assignee removed'
        Activity.record(board, Activity.ITEM_UPDATED, account=user, item=item, content=content)

    broadcast(board.pk, 'item_updated', item_payload(item), actor=user)
    return item


def search_items(board, query):
    return list(
        Item.objects.filter(board=board)
        .filter(Q(title__icontains=query) | Q(content__icontains=query))
        .select_related('assignee')
        .order_by('-last_active_at')[:SEARCH_LIMIT]
    )


def assigned_items(user):
    """Cards assigned to the user across all boards they belong to"""
    return list(
        Item.objects.filter(
            assignee__account=user,
            board__members__account=user,
        )
        .select_related('board', 'column', 'assignee')
        .order_by('-last_active_at')
        .distinct()
    )


# === ASSIGNEES ===

def list_assignees(board):
    """Members and free-standing assignees of a board, one entry per person"""
    for member in board.members.select_related('account'):
        Assignee.ensure_for_account(board.pk, member.account)
    return list(board.assignees.order_by('name', 'pk'))


def create_assignee(user, board, name):
    """Returns (assignee, created); names are matched case-insensitively"""
    require(BoardPermissions.can_edit_items(user, board), 'You cannot add assignees to this board')

    existing = board.assignees.filter(name__iexact=name.strip()).first()
    if existing:
        return existing, False
    return Assignee.objects.create(board=board, name=name.strip()), True


# === COMMENTS ===

def _get_comment_for(user, comment_id):
    try:
        comment = Comment.objects.select_related('item__board', 'account').get(pk=comment_id)
    except Comment.DoesNotExist:
        raise NotFound('Comment not found')
    if not BoardPermissions.is_member(user, comment.item.board):
        raise NotFound('Comment not found')
    return comment


def _require_comment_author(user, comment):
    window = settings.GROOVE_COMMENT_EDIT_WINDOW_MINUTES
    require(
        comment.is_editable_by(user, window),
        f'Comments can only be changed by their author within {window} minutes',
    )


def list_comments(item):
    return list(item.comments.select_related('account').order_by('-created_at', '-pk'))


def create_comment(user, item, content):
    board = item.board
    require(BoardPermissions.is_member(user, board), 'You cannot comment on this card')

    with transaction.atomic():
        comment = Comment.objects.create(item=item, account=user, content=content)
        item.touch()
        item.save(update_fields=['updated_at', 'last_active_at'])
        Activity.record(board, Activity.COMMENT_ADDED, account=user, item=item, content=truncate(content, 50))

    broadcast(board.pk, 'comment_added', comment_payload(comment), actor=user)
    return comment


def update_comment(user, comment_id, content):
    comment = _get_comment_for(user, comment_id)
    _require_comment_author(user, comment)

    comment.content = content
    comment.save(update_fields=['content', 'updated_at'])
    broadcast(comment.item.board_id, 'comment_updated', comment_payload(comment), actor=user)
    return comment


def delete_comment(user, comment_id):
    comment = _get_comment_for(user, comment_id)
    _require_comment_author(user, comment)
    item = comment.item

    with transaction.atomic():
        Activity.record(
            item.board, Activity.COMMENT_DELETED, account=user, item=item,
            content=truncate(comment.content, 50),
        )
        comment.delete()

    broadcast(item.board_id, 'comment_deleted', {'id': comment_id, 'itemId': item.pk}, actor=user)


# === ACTIVITY ===

def activity_feed(user, limit, offset=0, board_id=None, type=None):
    """Activity of every board the user belongs to, newest first"""
    activities = Activity.objects.filter(board__members__account=user)
    if board_id:
        get_board_for(user, board_id)
        activities = activities.filter(board_id=board_id)
    if type:
        activities = activities.filter(type=type)

    total = activities.count()
    page = list(
        activities.select_related('account', 'board').order_by('-created_at', '-pk')[offset:offset + limit]
    )
    return page, total


def item_activity(item):
    return list(item.activities.select_related('account').order_by('-created_at', '-pk'))

