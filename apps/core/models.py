# apps/core/models.py

from datetime import timedelta

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils import timezone

from .utils import display_name, generate_id


def short_id_field():
    return models.CharField(primary_key=True, max_length=9, default=generate_id, editable=False)


class AccountManager(BaseUserManager):
    """Accounts are identified by email, there is no username"""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')
        email = self.normalize_email(email).lower()
        account = self.model(email=email, **extra_fields)
        account.set_password(password)
        account.save(using=self._db)
        return account

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(email, password, **extra_fields)


class Account(AbstractUser):
    """
    Groove Board account

    Login by email; the password is hashed by Django's PBKDF2 hasher.
    """

    id = short_id_field()
    username = None
    email = models.EmailField('email address', unique=True)

    objects = AccountManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'account'

    def __str__(self):
        return self.get_full_name() or self.email


class Board(models.Model):
    """
    Kanban board

    `revision` is the ordering revision of the board's columns. It is bumped
    every time a column is created, moved or deleted.
    """

    id = short_id_field()
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=7, default='#3b82f6')
    owner = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name='boards_owned'
    )
    revision = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'board'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def role_for(self, account):
        """Returns 'owner', 'editor' or None"""
        if not account or not account.is_authenticated:
            return None
        if self.owner_id == account.pk:
            return BoardMember.ROLE_OWNER
        membership = self.members.filter(account=account).only('role').first()
        return membership.role if membership else None

    def default_column(self):
        return self.columns.filter(is_default=True).first()


class BoardMember(models.Model):
    """Membership of an account in a board"""

    ROLE_OWNER = 'owner'
    ROLE_EDITOR = 'editor'
    ROLE_CHOICES = [
        (ROLE_OWNER, 'Owner'),
        (ROLE_EDITOR, 'Editor'),
    ]

    id = short_id_field()
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='members')
    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_EDITOR)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'board_member'
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(fields=['board', 'account'], name='unique_board_member'),
        ]

    def __str__(self):
        return f"{self.account} @ {self.board} ({self.role})"


class BoardInvitation(models.Model):
    """Invitation of an email address to join a board"""

    STATUS_PENDING = 'pending'
    STATUS_ACCEPTED = 'accepted'
    STATUS_DECLINED = 'declined'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACCEPTED, 'Accepted'),
        (STATUS_DECLINED, 'Declined'),
    ]

    id = short_id_field()
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='invitations')
    email = models.EmailField()
    invited_by = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name='invitations_sent'
    )
    role = models.CharField(max_length=10, choices=BoardMember.ROLE_CHOICES, default=BoardMember.ROLE_EDITOR)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()

    class Meta:
        db_table = 'board_invitation'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['email', 'status'], name='invitation_email_status_idx'),
        ]

    def __str__(self):
        return f"{self.email} -> {self.board} ({self.status})"

    @staticmethod
    def expiry_from_now(days):
        return timezone.now() + timedelta(days=days)

    def is_expired(self):
        return timezone.now() > self.expires_at


class Column(models.Model):
    """
    Board column

    Columns are ordered inside their board by (position, id). `revision` is the
    ordering revision of the column's cards.
    """

    id = short_id_field()
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='columns')
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=7, default='#94a3b8')
    position = models.FloatField(default=0)
    is_default = models.BooleanField(default=False)
    is_expanded = models.BooleanField(default=True)
    shortcut = models.CharField(max_length=1, blank=True)
    revision = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'board_column'
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.name} - {self.board.name}"


class Assignee(models.Model):
    """
    Person a card can be assigned to

    Scoped to one board. Linked to an account for board members, free-standing
    ("virtual") otherwise.
    """

    id = short_id_field()
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='assignees')
    name = models.CharField(max_length=100)
    account = models.ForeignKey(
        Account,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assignee_profiles'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'assignee'
        ordering = ['name']

    def __str__(self):
        return self.name

    @classmethod
    def ensure_for_account(cls, board_id, account):
        """
        Assignee row of a board member, created on first use
        An unlinked assignee with the same name is claimed instead of duplicated
        """
        assignee = cls.objects.filter(board_id=board_id, account=account).first()
        if assignee:
            return assignee

        name = display_name(account)
        assignee = cls.objects.filter(board_id=board_id, account__isnull=True, name__iexact=name).first()
        if assignee:
            assignee.account = account
            assignee.save(update_fields=['account'])
            return assignee
        return cls.objects.create(board_id=board_id, account=account, name=name)


class Item(models.Model):
    """Card on a board, ordered inside its column by (position, id)"""

    id = short_id_field()
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='items')
    column = models.ForeignKey(Column, on_delete=models.CASCADE, related_name='items')
    title = models.CharField(max_length=500)
    content = models.TextField(blank=True)
    position = models.FloatField(default=0)
    created_by = models.ForeignKey(
        Account,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='items_created'
    )
    assignee = models.ForeignKey(
        Assignee,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='items'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(default=timezone.now)
    last_active_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'item'
        ordering = ['position', 'id']
        indexes = [
            models.Index(fields=['column', 'position'], name='item_column_position_idx'),
        ]

    def __str__(self):
        return self.title

    def touch(self):
        """Marks the card as updated and active"""
        now = timezone.now()
        self.updated_at = now
        self.last_active_at = now


class Comment(models.Model):
    """Comment on a card"""

    id = short_id_field()
    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name='comments')
    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name='comments')
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'comment'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.account} - {self.content[:30]}"

    def is_editable_by(self, account, window_minutes):
        """Only the author may edit, and only inside the edit window"""
        if self.account_id != account.pk:
            return False
        return timezone.now() - self.created_at <= timedelta(minutes=window_minutes)


class Activity(models.Model):
    """Entry of a board's activity feed"""

    BOARD_CREATED = 'board_created'
    ITEM_CREATED = 'item_created'
    ITEM_UPDATED = 'item_updated'
    ITEM_MOVED = 'item_moved'
    ITEM_DELETED = 'item_deleted'
    COMMENT_ADDED = 'comment_added'
    COMMENT_DELETED = 'comment_deleted'
    COLUMN_DELETED = 'column_deleted'
    MEMBER_JOINED = 'member_joined'
    MEMBER_REMOVED = 'member_removed'

    TYPE_CHOICES = [
        (BOARD_CREATED, 'Board created'),
        (ITEM_CREATED, 'Card created'),
        (ITEM_UPDATED, 'Card updated'),
        (ITEM_MOVED, 'Card moved'),
        (ITEM_DELETED, 'Card deleted'),
        (COMMENT_ADDED, 'Comment added'),
        (COMMENT_DELETED, 'Comment deleted'),
        (COLUMN_DELETED, 'Column deleted'),
        (MEMBER_JOINED, 'Member joined'),
        (MEMBER_REMOVED, 'Member removed'),
    ]

    id = short_id_field()
    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='activities')
    item = models.ForeignKey(
        Item,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='activities'
    )
    account = models.ForeignKey(
        Account,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='activities'
    )
    type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    content = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'activity'
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'activities'

    def __str__(self):
        return f"{self.type}: {self.content[:40]}"

    @classmethod
    def record(cls, board, type, account=None, item=None, content=''):
        return cls.objects.create(
            board=board,
            type=type,
            account=account,
            item=item,
            content=content,
        )
