# apps/__init__.py

"""
Groove Board - Django apps

This package holds every app of the system:
- core: accounts, models, permissions and JSON API plumbing
- board: boards, columns, cards, drag-and-drop ordering and WebSockets
"""

__version__ = '0.1.0'
