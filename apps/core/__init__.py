# apps/core/__init__.py

"""
Core - main app of Groove Board

Contains:
- Models (Account, Board, Column, Item, Comment, Activity, ...)
- Board role permissions
- JSON API plumbing and domain exceptions
- Authentication views and service
- seed / rebalance_positions management commands
"""
