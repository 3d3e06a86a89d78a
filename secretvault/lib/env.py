"""Startup loader: copy decrypted secrets into the process environment."""
from __future__ import annotations
import os, logging
from typing import MutableMapping, Optional
from .service import VaultService

log = logging.getLogger(__name__)


def load_secrets_to_env(
	service: Optional[VaultService] = None,
	password: Optional[str] = None,
	environ: Optional[MutableMapping[str, str]] = None,
) -> int:
	"""Set every vault secret into `environ` unless it already holds a value.

	Values supplied by the environment always win over the vault. Never raises:
	a missing password or unreadable vault is logged and boot continues.
	Returns the number of variables set.
	"""
	target = os.environ if environ is None else environ
	loaded = 0
	try:
		svc = service or VaultService()
		for key, value in svc.get_all_secrets(password).items():
			if not target.get(key):
				target[key] = value
				loaded += 1
	except Exception as e:
		log.warning("Could not load encrypted secrets: %s", e)
		return loaded
	log.info("Loaded %d secrets into environment", loaded)
	return loaded
