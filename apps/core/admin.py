# apps/core/admin.py

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import (
    Account, Activity, Assignee, Board, BoardInvitation, BoardMember,
    Column, Comment, Item,
)


def color_swatch(color):
    return format_html(
        '<div style="width: 20px; height: 20px; background-color: {}; '
        'border: 1px solid #ccc; border-radius: 3px;"></div>',
        color
    )


@admin.register(Account)
class AccountAdmin(BaseUserAdmin):
    """Email-based accounts, no username"""

    list_display = ['email', 'get_full_name', 'is_staff', 'is_active', 'date_joined']
    list_filter = ['is_staff', 'is_active', 'date_joined']
    search_fields = ['email', 'first_name', 'last_name']
    ordering = ['email']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('first_name', 'last_name')}),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',)
        }),
        ('Dates', {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2'),
        }),
    )


class BoardMemberInline(admin.TabularInline):
    model = BoardMember
    extra = 0
    fields = ['account', 'role', 'created_at']
    readonly_fields = ['created_at']


class ColumnInline(admin.TabularInline):
    model = Column
    extra = 0
    fields = ['name', 'color', 'position', 'is_default', 'is_expanded', 'shortcut']
    ordering = ['position']


@admin.register(Board)
class BoardAdmin(admin.ModelAdmin):
    """Boards with their columns and members"""

    list_display = ['name', 'owner', 'color_preview', 'columns_count', 'items_count', 'revision', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'owner__email']
    readonly_fields = ['revision', 'created_at', 'updated_at']
    inlines = [ColumnInline, BoardMemberInline]
    actions = ['rebalance_columns']

    def color_preview(self, obj):
        return color_swatch(obj.color)

    color_preview.short_description = 'Color'

    def columns_count(self, obj):
        return obj.columns.count()

    columns_count.short_description = 'Columns'

    def items_count(self, obj):
        return obj.items.count()

    items_count.short_description = 'Cards'

    @admin.action(description='Renumber column positions')
    def rebalance_columns(self, request, queryset):
        from apps.board import reorder

        for board in queryset:
            reorder.columns.rebalance(board.pk)
        self.message_user(request, f"{queryset.count()} board(s) rebalanced", messages.SUCCESS)


@admin.register(BoardInvitation)
class BoardInvitationAdmin(admin.ModelAdmin):
    list_display = ['email', 'board', 'invited_by', 'status', 'expires_at', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['email', 'board__name']
    readonly_fields = ['created_at']


class ItemInline(admin.TabularInline):
    model = Item
    fk_name = 'column'
    extra = 0
    fields = ['title', 'assignee', 'position']
    ordering = ['position']


@admin.register(Column)
class ColumnAdmin(admin.ModelAdmin):
    """Board columns and their cards"""

    list_display = ['name', 'board', 'position', 'is_default', 'items_count', 'color_preview']
    list_filter = ['is_default', 'board']
    search_fields = ['name', 'board__name']
    ordering = ['board', 'position']
    readonly_fields = ['revision']
    inlines = [ItemInline]
    actions = ['rebalance_items']

    def items_count(self, obj):
        return obj.items.count()

    items_count.short_description = 'Cards'

    def color_preview(self, obj):
        return color_swatch(obj.color)

    color_preview.short_description = 'Color'

    @admin.action(description='Renumber card positions')
    def rebalance_items(self, request, queryset):
        from apps.board import reorder

        for column in queryset:
            reorder.cards.rebalance(column.pk)
        self.message_user(request, f"{queryset.count()} column(s) rebalanced", messages.SUCCESS)


@admin.register(Assignee)
class AssigneeAdmin(admin.ModelAdmin):
    list_display = ['name', 'board', 'account', 'created_at']
    search_fields = ['name', 'board__name', 'account__email']


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    fields = ['account', 'content', 'created_at']
    readonly_fields = ['created_at']

    def has_add_permission(self, request, obj=None):
        """Read only in the admin"""
        return False


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    """Cards"""

    list_display = ['title', 'board', 'column', 'assignee', 'position', 'updated_at']
    list_filter = ['board', 'created_at']
    search_fields = ['title', 'content']
    date_hierarchy = 'created_at'
    readonly_fields = ['created_by', 'created_at', 'updated_at', 'last_active_at']

    fieldsets = (
        ('Card', {
            'fields': ('title', 'content', 'board', 'column', 'assignee')
        }),
        ('Metadata', {
            'fields': ('position', 'created_by', 'created_at', 'updated_at', 'last_active_at'),
            'classes': ('collapse',)
        })
    )

    inlines = [CommentInline]


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ['type', 'board', 'account', 'short_content', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['content', 'board__name']
    date_hierarchy = 'created_at'

    def short_content(self, obj):
        return obj.content[:60]

    short_content.short_description = 'Content'

    def has_add_permission(self, request):
        return False
