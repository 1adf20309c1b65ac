from .assignment import (
    InMemoryRoleStore,
    RoleAssignmentStore,
    RoleRef,
    attach_role,
    attach_roles,
    detach_role,
    detach_roles,
    to_role_id,
)
from .config import LogLevel, RoleGraphConfig, load_config_from_env
from .exceptions import (
    ConfigurationError,
    InvalidConfigurationError,
    InvalidRoleReferenceError,
    RoleGraphError,
    RoleNotFoundError,
    StorageError,
)
from .logging import (
    RoleGraphFormatter,
    SubjectLoggerAdapter,
    get_subject_logger,
    safe_preview,
    setup_logging,
)
from .models import Permission, PermissionLike, Role, RoleLike, SubjectLike
from .permissions import (
    AbilityOptions,
    ReturnType,
    RoleSet,
    ability,
    collect_permission_ids,
    expand_roles,
    has_permission,
    has_permission_by_id,
    has_role,
    resolve_effective_roles,
    resolve_inherited_roles,
    role_key,
    split_names,
)
from .subject import HasRoles, Subject

__version__ = "0.3.0"

__all__ = [
    'AbilityOptions',
    'ConfigurationError',
    'HasRoles',
    'InMemoryRoleStore',
    'InvalidConfigurationError',
    'InvalidRoleReferenceError',
    'LogLevel',
    'Permission',
    'PermissionLike',
    'ReturnType',
    'Role',
    'RoleAssignmentStore',
    'RoleGraphConfig',
    'RoleGraphError',
    'RoleGraphFormatter',
    'RoleLike',
    'RoleNotFoundError',
    'RoleRef',
    'RoleSet',
    'StorageError',
    'Subject',
    'SubjectLike',
    'SubjectLoggerAdapter',
    'ability',
    'attach_role',
    'attach_roles',
    'collect_permission_ids',
    'detach_role',
    'detach_roles',
    'expand_roles',
    'get_subject_logger',
    'has_permission',
    'has_permission_by_id',
    'has_role',
    'load_config_from_env',
    'resolve_effective_roles',
    'resolve_inherited_roles',
    'role_key',
    'safe_preview',
    'setup_logging',
    'split_names',
    'to_role_id',
]
