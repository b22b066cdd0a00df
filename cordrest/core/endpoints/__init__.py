"""Endpoint catalog (representative subset).

Each function computes a resource path and a body shape, then hands both to
the shared dispatcher via `cordrest.core.dispatcher.request`.
"""

from cordrest.core.endpoints import channels, messages, oauth2, users

__all__ = ["channels", "messages", "oauth2", "users"]
