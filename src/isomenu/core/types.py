"""Core type definitions."""

from typing import NewType

# Destination identifier used for routing (e.g., "dashboard", "settings-group-org")
RouteId = NewType("RouteId", str)

# Opaque access tag granted to a viewer (e.g., "admin", "user")
Role = NewType("Role", str)
