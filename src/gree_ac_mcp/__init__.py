"""Local-network client and MCP server for Gree air conditioners."""

from .client import GreeClient
from .models import AliasTable, Session

__version__ = "0.1.0"
