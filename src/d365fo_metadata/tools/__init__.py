"""
MCP tool registration for the D365FO metadata server
"""

from .registry import ToolRegistry

__all__ = ["ToolRegistry"]
