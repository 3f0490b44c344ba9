"""Type definitions for tool functions."""

from typing import Any, Dict, Optional

# Common return type for all tool functions
ToolResponse = Dict[str, Any]


def get_option(options: Optional[Dict[str, Any]], name: str, alias: str, default: Any) -> Any:
    """Read a tool option given in snake_case (``max_rows``) or camelCase (``maxRows``)."""
    options = options or {}
    if name in options and options[name] is not None:
        return options[name]
    if alias in options and options[alias] is not None:
        return options[alias]
    return default
