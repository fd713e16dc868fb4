from .config import AclConfig, LogLevel, load_config_from_env
from .context import AclContext
from .exceptions import (
    AclError,
    BackendUnavailableError,
    ConfigurationError,
    DataIntegrityError,
    InvalidPathError,
    UnknownPathTypeError,
)
from .levels import EffectivePermission, PermissionLevel, format_permission, parse_permission_level
from .logging import (
    AclLogFormatter,
    AclLoggerAdapter,
    get_acl_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .permissions import (
    Grant,
    MoveCase,
    effective_permission,
    fix_owners,
    fix_perms,
    is_inheriting,
    is_readable,
    is_writeable,
    list_grants,
    max_permission_up_to,
    owns,
    permission_for,
    reconcile_owners,
)
from .store import GrantStore, InMemoryGrantStore, ObjectType

__all__ = [
    'AclConfig',
    'AclContext',
    'AclError',
    'AclLogFormatter',
    'AclLoggerAdapter',
    'BackendUnavailableError',
    'ConfigurationError',
    'DataIntegrityError',
    'EffectivePermission',
    'Grant',
    'GrantStore',
    'InMemoryGrantStore',
    'InvalidPathError',
    'LogLevel',
    'MoveCase',
    'ObjectType',
    'PermissionLevel',
    'UnknownPathTypeError',
    'effective_permission',
    'fix_owners',
    'fix_perms',
    'format_permission',
    'get_acl_logger',
    'is_inheriting',
    'is_readable',
    'is_writeable',
    'list_grants',
    'load_config_from_env',
    'max_permission_up_to',
    'owns',
    'permission_for',
    'reconcile_owners',
    'redact_secrets',
    'safe_log_value',
    'safe_preview',
    'setup_logging',
]
