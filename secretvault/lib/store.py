"""Storage layer: the single JSON vault file.

The file is always read and rewritten as a whole. Writes go through a
temporary file in the same directory followed by `os.replace`, so readers see
either the old or the new container, never a truncated one.
"""
from __future__ import annotations
import json, os, shutil, logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from secretvault.config.settings import CONTAINER_VERSION, BACKUP_SUFFIX
from .crypto import EncryptedSecretRecord
from .errors import StorageError

log = logging.getLogger(__name__)


def utc_now() -> str:
	"""ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T12:00:00.000Z"""
	return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class VaultContainer:
	version: int = CONTAINER_VERSION
	created_at: str = field(default_factory=utc_now)
	updated_at: str = field(default_factory=utc_now)
	secrets: Dict[str, EncryptedSecretRecord] = field(default_factory=dict)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"version": self.version,
			"createdAt": self.created_at,
			"updatedAt": self.updated_at,
			"secrets": {name: rec.to_dict() for name, rec in self.secrets.items()},
		}

	@classmethod
	def from_dict(cls, raw: Dict[str, Any]) -> 'VaultContainer':
		if not isinstance(raw, dict):
			raise ValueError("Vault root must be an object")
		secrets = raw.get('secrets', {})
		if not isinstance(secrets, dict):
			raise ValueError("'secrets' must be an object")
		now = utc_now()
		return cls(
			version=int(raw.get('version', CONTAINER_VERSION)),
			created_at=raw.get('createdAt') or now,
			updated_at=raw.get('updatedAt') or now,
			secrets={name: EncryptedSecretRecord.from_dict(rec) for name, rec in secrets.items()},
		)


class VaultStore:
	"""Reads and writes the encrypted container file."""

	def __init__(self, path: Path | str):
		self.path = Path(path)

	def exists(self) -> bool:
		return self.path.exists()

	def read(self) -> Optional[VaultContainer]:
		"""Return the container, or None if missing or unreadable.

		Read failures are logged rather than raised so callers can keep going
		(and re-initialise the file if they need to).
		"""
		if not self.path.exists():
			return None
		try:
			raw = json.loads(self.path.read_text(encoding='utf-8'))
			return VaultContainer.from_dict(raw)
		except (OSError, ValueError, KeyError, TypeError) as e:
			log.error("Failed to read secrets file %s: %s", self.path, e)
			return None

	def write(self, container: VaultContainer) -> None:
		container.updated_at = utc_now()
		payload = json.dumps(container.to_dict(), indent=2)
		tmp = self.path.with_name(self.path.name + '.tmp')
		try:
			self.path.parent.mkdir(parents=True, exist_ok=True)
			tmp.write_text(payload, encoding='utf-8')
			os.replace(tmp, self.path)
		except OSError as e:
			if tmp.exists():
				tmp.unlink()
			raise StorageError(f"Failed to write secrets file {self.path}: {e}") from e
		log.debug("Wrote secrets file %s (%d secrets)", self.path, len(container.secrets))

	def init_if_missing(self) -> VaultContainer:
		container = self.read()
		if container is None:
			container = VaultContainer()
			self.write(container)
			log.info("Initialised secrets file %s", self.path)
		return container

	def backup(self, dest: Path | None = None) -> Path:
		"""Copy the current vault file; defaults to `<file>.backup` next to it."""
		if dest is None:
			dest = self.path.with_name(self.path.name + BACKUP_SUFFIX)
		try:
			dest.parent.mkdir(parents=True, exist_ok=True)
			shutil.copy2(self.path, dest)
		except OSError as e:
			raise StorageError(f"Failed to back up {self.path}: {e}") from e
		return dest
