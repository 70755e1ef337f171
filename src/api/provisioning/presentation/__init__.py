"""Provisioning presentation layer - aggregate-based organization."""

from __future__ import annotations

from fastapi import APIRouter

from provisioning.presentation import tenants

router = APIRouter(prefix="/api")

router.include_router(tenants.router)

__all__ = ["router"]
