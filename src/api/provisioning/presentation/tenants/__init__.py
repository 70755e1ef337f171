"""Tenant lifecycle routes and models."""

from provisioning.presentation.tenants.routes import router

__all__ = ["router"]
