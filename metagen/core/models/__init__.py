"""
Domain models — Pydantic types for metagen configuration.

    from metagen.core.models import AgentConfig, MetadataPlugin
"""

from metagen.core.models.plugin import AgentConfig, MetadataPlugin

__all__ = [
    "AgentConfig",
    "MetadataPlugin",
]
