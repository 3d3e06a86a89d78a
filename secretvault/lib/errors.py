"""Exception types raised by the vault."""
from __future__ import annotations


class VaultError(Exception):
	"""Base class for vault failures."""


class ConfigurationError(VaultError):
	"""No master password available for an operation that needs one."""


class AuthenticationError(VaultError):
	"""Ciphertext failed to authenticate (wrong password or tampered data)."""


class StorageError(VaultError):
	"""Vault file could not be written."""
