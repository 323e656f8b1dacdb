"""
Organization role catalog.

A static mapping from each organization role to the capabilities it grants.
The catalog is built once at application startup and handed to the
authorization guard through a dependency.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from fastapi import Request

from projectservice_shared.schemas.common import Capability, Role


@dataclass(frozen=True)
class RoleDefinition:
    id: int
    role: Role
    name: str
    description: str
    capabilities: frozenset[Capability]


DEFAULT_ROLES: tuple[RoleDefinition, ...] = (
    RoleDefinition(
        id=1,
        role=Role.ADMIN,
        name="Admin",
        description="Organization admin role",
        capabilities=frozenset(
            {
                Capability.READ_MEMBERS,
                Capability.WRITE_MEMBERS,
                Capability.WRITE_ORGANIZATION,
                Capability.WRITE_PROJECT,
            }
        ),
    ),
    RoleDefinition(
        id=2,
        role=Role.MEMBER,
        name="Member",
        description="Organization member role",
        capabilities=frozenset({Capability.READ_MEMBERS}),
    ),
)


class RoleCatalog:
    """Immutable lookup of role definitions."""

    def __init__(self, definitions: Iterable[RoleDefinition]):
        self._by_role: dict[Role, RoleDefinition] = {}
        self._by_id: dict[int, RoleDefinition] = {}
        for definition in definitions:
            self._by_role[definition.role] = definition
            self._by_id[definition.id] = definition

    def __iter__(self):
        return iter(self._by_role.values())

    def __len__(self) -> int:
        return len(self._by_role)

    def get(self, role: Role | str) -> RoleDefinition:
        return self._by_role[Role(role)]

    def capabilities_of(self, role: Role | str) -> frozenset[Capability]:
        return self.get(role).capabilities

    def from_id(self, role_id: int) -> Optional[Role]:
        definition = self._by_id.get(role_id)
        return definition.role if definition else None


def default_role_catalog() -> RoleCatalog:
    return RoleCatalog(DEFAULT_ROLES)


def get_role_catalog(request: Request) -> RoleCatalog:
    """FastAPI dependency: the catalog created by ``create_app``."""
    return request.app.state.role_catalog
