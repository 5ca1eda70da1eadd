# apps/board/__init__.py

"""
Board - kanban app of Groove Board

Features:
- Boards, columns, cards, comments, assignees and invitations
- Fractional drag-and-drop ordering with per-container revisions
- WebSockets for live updates
"""
