ADMIN_ROLE = "ADMIN"


def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource."""
    return actor_id is not None and str(actor_id) == str(owner_id)


def is_admin(*, role) -> bool:
    """Return True for the administrator role (enum member or raw value)."""
    return str(getattr(role, "value", role)) == ADMIN_ROLE
