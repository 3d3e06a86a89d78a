"""Configuration settings and constants for secretvault.

Application code imports from `secretvault.config.settings`; this package re-exports the
same names so `from secretvault.config import DEFAULT_ITERATIONS` keeps working.
"""

from secretvault.config.settings import (
	DEFAULT_ITERATIONS, SALT_LENGTH, KEY_LENGTH, IV_LENGTH, AUTH_TAG_LENGTH,
	RECORD_VERSION, CONTAINER_VERSION, SECRETS_FILE_ENV, DEFAULT_SECRETS_FILE,
	MASTER_PASSWORD_ENV, BACKUP_SUFFIX, DEFAULT_GENERATED_LENGTH,
	LOG_LEVEL_ENV, LOG_LEVEL, secrets_file_path, log_level,
)

__all__ = [
	'DEFAULT_ITERATIONS', 'SALT_LENGTH', 'KEY_LENGTH', 'IV_LENGTH', 'AUTH_TAG_LENGTH',
	'RECORD_VERSION', 'CONTAINER_VERSION', 'SECRETS_FILE_ENV', 'DEFAULT_SECRETS_FILE',
	'MASTER_PASSWORD_ENV', 'BACKUP_SUFFIX', 'DEFAULT_GENERATED_LENGTH',
	'LOG_LEVEL_ENV', 'LOG_LEVEL', 'secrets_file_path', 'log_level',
]
