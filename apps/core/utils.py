# apps/core/utils.py

import hashlib
import secrets
from typing import Optional

# Short ids: no 0/1/l to stay readable when typed by hand
ID_ALPHABET = '23456789abcdefghijkmnopqrstuvwxyz'
ID_GROUP_LENGTH = 4


def generate_id() -> str:
    """
    Short identifier in the xxxx-xxxx format
    Used as the primary key of every model
    """
    groups = [
        ''.join(secrets.choice(ID_ALPHABET) for _ in range(ID_GROUP_LENGTH))
        for _ in range(2)
    ]
    return '-'.join(groups)


def user_color(seed: str) -> str:
    """
    Stable avatar color derived from an email or name
    """
    digest = hashlib.md5(seed.lower().encode()).hexdigest()
    return f"#{digest[:6]}"


def display_name(account) -> str:
    """Name shown on cards, comments and the activity feed"""
    if account is None:
        return 'Unknown'
    full_name = account.get_full_name()
    return full_name or account.email


def initials(name: Optional[str]) -> str:
    if not name:
        return '?'
    parts = [part for part in name.replace('@', ' ').split() if part]
    if len(parts) == 1:
        return parts[0][:2].upper()
    return (parts[0][0] + parts[-1][0]).upper()


def truncate(text: str, limit: int = 50) -> str:
    """
    Cuts the text at the limit and appends an ellipsis
    Ex: long comment -> "First 50 characters..."
    """
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


def to_snake_case(name: str) -> str:
    """assigneeId -> assignee_id"""
    chars = []
    for char in name:
        if char.isupper():
            chars.append('_')
            chars.append(char.lower())
        else:
            chars.append(char)
    return ''.join(chars)
