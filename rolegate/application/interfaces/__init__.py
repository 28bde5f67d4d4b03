"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from rolegate.infrastructure or rolegate.api.
"""

from rolegate.application.interfaces.repositories import (
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
    IUserRoleRepository,
)
from rolegate.application.interfaces.services import (
    IPermissionResolver,
    ISecurityService,
)

__all__ = [
    "IPermissionRepository",
    "IPermissionResolver",
    "IRolePermissionRepository",
    "IRoleRepository",
    "ISecurityService",
    "IUserRepository",
    "IUserRoleRepository",
]
