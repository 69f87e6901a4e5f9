"""Reglas de acceso compartidas por los use cases de usuarios."""

from __future__ import annotations

from uuid import UUID

from ....identity.users import Principal

# R: campos que solo un admin puede modificar.
ADMIN_ONLY_FIELDS: frozenset[str] = frozenset({"roles", "tenant_id", "is_active"})
SELF_SERVICE_FIELDS: frozenset[str] = frozenset({"email", "first_name", "last_name"})


def can_manage(actor: Principal | None, user_id: UUID) -> bool:
    """El propio usuario o un admin."""
    if actor is None:
        return False
    return actor.is_admin or actor.user_id == str(user_id)
