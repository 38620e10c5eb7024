"""Shared type definitions for warble."""

from collections.abc import Callable
from typing import Any, Literal

# HTTP verb inferred from an action name
type Verb = Literal["get", "post", "put", "patch", "delete"]

# Synthesized URL path (e.g., "/user/user/:userId")
type RoutePath = str

# Controller action; receives the dispatch context first, then path values
type ActionFunc = Callable[..., Any]

# Optional flash-message capability: category -> messages
type FlashReader = Callable[[str], Any]

# View renderer collaborator: (view path, data) -> response value
type Renderer = Callable[[str, dict[str, Any]], Any]
