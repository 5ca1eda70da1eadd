# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Boards
    path('boards/', views.boards, name='boards'),
    path('boards/<str:board_id>/', views.board_detail, name='board_detail'),

    # Members and invitations
    path('boards/<str:board_id>/members/', views.members, name='members'),
    path('boards/<str:board_id>/members/<str:member_id>/', views.member_detail, name='member_detail'),
    path('boards/<str:board_id>/invitations/', views.board_invitations, name='board_invitations'),
    path('invitations/<str:invitation_id>/', views.invitation_detail, name='invitation_detail'),
    path('invitations/<str:invitation_id>/accept/', views.accept_invitation, name='accept_invitation'),
    path('invitations/<str:invitation_id>/decline/', views.decline_invitation, name='decline_invitation'),

    # Columns
    path('boards/<str:board_id>/columns/', views.columns, name='columns'),
    path('boards/<str:board_id>/columns/<str:column_id>/', views.column_detail, name='column_detail'),
    path('boards/<str:board_id>/columns/<str:column_id>/move/', views.move_column, name='move_column'),

    # Cards
    path('boards/<str:board_id>/items/', views.items, name='items'),
    path('boards/<str:board_id>/search/', views.search, name='search'),
    path('items/<str:item_id>/', views.item_detail, name='item_detail'),
    path('items/<str:item_id>/move/', views.move_item, name='move_item'),
    path('items/<str:item_id>/assignee/', views.item_assignee, name='item_assignee'),

    # Assignees
    path('boards/<str:board_id>/assignees/', views.assignees, name='assignees'),

    # Comments
    path('items/<str:item_id>/comments/', views.comments, name='comments'),
    path('comments/<str:comment_id>/', views.comment_detail, name='comment_detail'),
]
