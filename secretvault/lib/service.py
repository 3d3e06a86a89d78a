"""Vault service: the API callers use to store and read secrets.

Never log plaintext values or passwords; only secret names.
"""
from __future__ import annotations
import os, logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional
from secretvault.config.settings import MASTER_PASSWORD_ENV, DEFAULT_GENERATED_LENGTH, secrets_file_path
from .crypto import VaultCrypto, generate_secure_secret
from .errors import AuthenticationError, ConfigurationError, VaultError
from .store import VaultContainer, VaultStore

log = logging.getLogger(__name__)


def env_master_password() -> Optional[str]:
	return os.environ.get(MASTER_PASSWORD_ENV)


@dataclass
class VaultConfig:
	path: Path
	master_password_provider: Callable[[], Optional[str]] = env_master_password

	@classmethod
	def from_env(cls) -> 'VaultConfig':
		return cls(path=secrets_file_path())


@dataclass
class SecretResult:
	"""Outcome of reading one secret. `value` is None when absent or failed."""
	value: Optional[str] = None
	error: Optional[VaultError] = None

	@property
	def ok(self) -> bool:
		return self.error is None


@dataclass
class BatchResult:
	values: Dict[str, str] = field(default_factory=dict)
	failures: Dict[str, VaultError] = field(default_factory=dict)


def shell_quote(value: str) -> str:
	"""Single-quote for POSIX shells, escaping embedded quotes as '\\''."""
	return "'" + value.replace("'", "'\\''") + "'"


class VaultService:
	def __init__(self, config: VaultConfig | None = None, crypto: VaultCrypto | None = None):
		self.config = config or VaultConfig.from_env()
		self.store = VaultStore(self.config.path)
		self.crypto = crypto or VaultCrypto()

	def resolve_password(self, password: Optional[str] = None) -> str:
		"""Explicit password, else the configured provider; ConfigurationError if neither."""
		resolved = password or self.config.master_password_provider()
		if not resolved:
			raise ConfigurationError(f"{MASTER_PASSWORD_ENV} environment variable is not set")
		return resolved

	# -- single secrets --

	def set_secret(self, name: str, value: str, password: Optional[str] = None) -> None:
		if not name:
			raise ValueError("Secret name cannot be empty")
		pw = self.resolve_password(password)
		container = self.store.init_if_missing()
		container.secrets[name] = self.crypto.encrypt(value, pw)
		self.store.write(container)
		log.info("Stored secret %s", name)

	def set_secrets(self, values: Mapping[str, str], password: Optional[str] = None) -> List[str]:
		"""Store several secrets in one write. Empty values are skipped."""
		pw = self.resolve_password(password)
		stored = [k for k, v in values.items() if k and v]
		if not stored:
			return []
		container = self.store.init_if_missing()
		for name in stored:
			container.secrets[name] = self.crypto.encrypt(str(values[name]), pw)
		self.store.write(container)
		log.info("Stored %d secrets", len(stored))
		return stored

	def get_secret_result(self, name: str, password: Optional[str] = None) -> SecretResult:
		pw = self.resolve_password(password)
		container = self.store.read()
		if container is None or name not in container.secrets:
			return SecretResult()
		try:
			return SecretResult(value=self.crypto.decrypt(container.secrets[name], pw))
		except AuthenticationError as e:
			log.error("Failed to decrypt secret %s", name)
			return SecretResult(error=e)

	def get_secret(self, name: str, password: Optional[str] = None) -> Optional[str]:
		return self.get_secret_result(name, password).value

	def has_secret(self, name: str) -> bool:
		container = self.store.read()
		return container is not None and name in container.secrets

	def delete_secret(self, name: str) -> bool:
		container = self.store.read()
		if container is None or name not in container.secrets:
			return False
		del container.secrets[name]
		self.store.write(container)
		log.info("Deleted secret %s", name)
		return True

	def list_secret_names(self) -> List[str]:
		container = self.store.read()
		return list(container.secrets) if container is not None else []

	# -- whole vault --

	def get_all_secrets_result(self, password: Optional[str] = None) -> BatchResult:
		pw = self.resolve_password(password)
		result = BatchResult()
		container = self.store.read()
		if container is None:
			return result
		for name, record in container.secrets.items():
			try:
				result.values[name] = self.crypto.decrypt(record, pw)
			except AuthenticationError as e:
				log.error("Failed to decrypt secret %s", name)
				result.failures[name] = e
		return result

	def get_all_secrets(self, password: Optional[str] = None) -> Dict[str, str]:
		return self.get_all_secrets_result(password).values

	def verify_master_password(self, password: str) -> bool:
		"""Check a password against the first stored secret only.

		An empty or missing vault accepts any password, since there is nothing
		to check it against yet.
		"""
		container = self.store.read()
		if container is None or not container.secrets:
			return True
		first = next(iter(container.secrets.values()))
		try:
			self.crypto.decrypt(first, password)
			return True
		except AuthenticationError:
			return False

	def change_master_password(self, old_password: str, new_password: str, backup: bool = False) -> bool:
		"""Re-encrypt every secret under `new_password`.

		All secrets are decrypted before anything is written; if any of them
		fails, nothing is written and False is returned.
		"""
		if not new_password:
			raise ConfigurationError("New master password cannot be empty")
		container = self.store.read()
		if container is None:
			return True
		plain: Dict[str, str] = {}
		for name, record in container.secrets.items():
			try:
				plain[name] = self.crypto.decrypt(record, old_password)
			except AuthenticationError:
				log.error("Failed to decrypt secret %s with current password", name)
				return False
		rotated = VaultContainer(
			version=container.version, created_at=container.created_at,
			secrets={name: self.crypto.encrypt(value, new_password) for name, value in plain.items()},
		)
		if backup:
			dest = self.store.backup()
			log.warning("Pre-rotation copy written to %s; it still opens with the old password", dest)
		self.store.write(rotated)
		log.info("Master password changed (%d secrets re-encrypted)", len(plain))
		return True

	def export_secrets_for_production(self, password: Optional[str] = None) -> str:
		values = self.get_all_secrets(password)
		return "\n".join(f"export {name}={shell_quote(value)}" for name, value in values.items())

	@staticmethod
	def generate_secure_secret(length: int = DEFAULT_GENERATED_LENGTH) -> str:
		return generate_secure_secret(length)
