"""Project configuration settings.

Constants shared by the vault code base. Paths that depend on the environment
are resolved at call time so tests can point them at temporary files.
"""

from pathlib import Path
import os
import logging

# Security / crypto
DEFAULT_ITERATIONS = 100_000  # PBKDF2-HMAC-SHA512
SALT_LENGTH = 32
KEY_LENGTH = 32  # AES-256
IV_LENGTH = 16
AUTH_TAG_LENGTH = 16  # GCM tag length
RECORD_VERSION = 1
CONTAINER_VERSION = 1

# Vault file
SECRETS_FILE_ENV = "SECRETS_FILE"
DEFAULT_SECRETS_FILE = "secrets.encrypted.json"
MASTER_PASSWORD_ENV = "SECRETS_MASTER_PASSWORD"

# Backup extensions
BACKUP_SUFFIX = ".backup"

# Generated secrets
DEFAULT_GENERATED_LENGTH = 64

# Logging
LOG_LEVEL_ENV = "SECRETVAULT_LOG_LEVEL"
LOG_LEVEL = "WARNING"


def secrets_file_path() -> Path:
	"""Vault file location, honouring SECRETS_FILE."""
	return Path(os.environ.get(SECRETS_FILE_ENV) or DEFAULT_SECRETS_FILE)


def log_level() -> str:
	"""Level name from SECRETVAULT_LOG_LEVEL; unknown names fall back to LOG_LEVEL."""
	name = os.environ.get(LOG_LEVEL_ENV, LOG_LEVEL).upper()
	if not isinstance(logging.getLevelName(name), int):
		return LOG_LEVEL
	return name


__all__ = [
	'DEFAULT_ITERATIONS','SALT_LENGTH','KEY_LENGTH','IV_LENGTH','AUTH_TAG_LENGTH',
	'RECORD_VERSION','CONTAINER_VERSION','SECRETS_FILE_ENV','DEFAULT_SECRETS_FILE',
	'MASTER_PASSWORD_ENV','BACKUP_SUFFIX','DEFAULT_GENERATED_LENGTH',
	'LOG_LEVEL_ENV','LOG_LEVEL','secrets_file_path','log_level'
]
