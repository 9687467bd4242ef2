"""API route handlers."""

from api.routes import certificates, health, issuers, verify

__all__ = ["certificates", "health", "issuers", "verify"]
