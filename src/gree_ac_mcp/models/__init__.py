"""Data models for the session and the alias table."""

from .aliases import AliasTable, DEFAULT_ALIASES, DEFAULT_FLAGS
from .session import Session
