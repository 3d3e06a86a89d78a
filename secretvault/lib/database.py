"""DATABASE_URL lookup with vault fallback, plus display masking."""
from __future__ import annotations
import os, logging
from typing import MutableMapping, Optional
from urllib.parse import urlsplit, urlunsplit
from .service import VaultService

log = logging.getLogger(__name__)

DATABASE_URL_KEY = "DATABASE_URL"
MASK = "********"


def resolve_database_url(
	service: Optional[VaultService] = None,
	environ: Optional[MutableMapping[str, str]] = None,
) -> Optional[str]:
	"""DATABASE_URL from the environment, else from the vault.

	A value found in the vault is cached back into the environment for the rest
	of the process.
	"""
	env = os.environ if environ is None else environ
	url = env.get(DATABASE_URL_KEY)
	if url:
		return url
	svc = service or VaultService()
	url = svc.get_secret(DATABASE_URL_KEY)
	if url:
		env[DATABASE_URL_KEY] = url
		log.info("Using %s from encrypted secrets", DATABASE_URL_KEY)
	return url


def mask_database_url(url: str) -> str:
	"""Hide the password part of a connection URL for display."""
	if not url:
		return ""
	try:
		parts = urlsplit(url)
		if parts.scheme and parts.hostname:
			if parts.password is None:
				return url
			userinfo, _, hostinfo = parts.netloc.rpartition('@')
			user = userinfo.split(':', 1)[0]
			return urlunsplit(parts._replace(netloc=f"{user}:{MASK}@{hostinfo}"))
	except ValueError:
		pass
	at = url.find('@')
	if at > 0:
		colon = url.rfind(':', 0, at)
		if colon > 0:
			return url[:colon + 1] + MASK + url[at:]
	return "[invalid URL format]"
