from .access import AccessControl, PolicyLike
from .builders import PolicyBuilder, StatementBuilder, StatementLike, ValidationResult
from .config import DEFAULT_POLICY_VERSION, LogLevel, SharedConfig, load_shared_config_from_env
from .exceptions import (
    AccessDeniedError,
    ConfigurationError,
    NotFoundError,
    PolicyCoreError,
    StorageError,
    ValidationError,
)
from .interfaces import BaseRepository
from .logging import (
    AccessLoggerAdapter,
    PolicyLogFormatter,
    get_access_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .models import ConditionValue, Effect, Policy, PolicyDocument, Role, Statement, User
from .policy import (
    Decision,
    evaluate,
    evaluate_condition,
    explain,
    is_statement_active,
    matches,
    parse_timestamp,
)

__all__ = [
    'AccessControl',
    'PolicyLike',
    'PolicyBuilder',
    'StatementBuilder',
    'StatementLike',
    'ValidationResult',
    'DEFAULT_POLICY_VERSION',
    'LogLevel',
    'SharedConfig',
    'load_shared_config_from_env',
    'AccessDeniedError',
    'ConfigurationError',
    'NotFoundError',
    'PolicyCoreError',
    'StorageError',
    'ValidationError',
    'BaseRepository',
    'AccessLoggerAdapter',
    'PolicyLogFormatter',
    'get_access_logger',
    'redact_secrets',
    'safe_log_value',
    'safe_preview',
    'setup_logging',
    'ConditionValue',
    'Effect',
    'Policy',
    'PolicyDocument',
    'Role',
    'Statement',
    'User',
    'Decision',
    'evaluate',
    'evaluate_condition',
    'explain',
    'is_statement_active',
    'matches',
    'parse_timestamp',
]
