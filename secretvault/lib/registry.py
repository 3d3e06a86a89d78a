"""Catalogue of the secrets the application knows about.

Only names and descriptions live here; nothing in this module ever touches
ciphertext or needs the master password.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional
from .store import VaultStore

SECRET_CATEGORIES = ("auth", "oauth", "email", "api", "database", "other")


@dataclass(frozen=True)
class SecretDefinition:
	key: str
	description: str
	category: str
	required: bool = False

	def __post_init__(self):
		if self.category not in SECRET_CATEGORIES:
			raise ValueError(f"Invalid secret category: {self.category}")


SECRET_DEFINITIONS: Dict[str, SecretDefinition] = {d.key: d for d in (
	# NextAuth
	SecretDefinition("NEXTAUTH_SECRET", "Secret key for NextAuth.js session encryption", "auth", True),
	# Gmail OAuth
	SecretDefinition("GMAIL_OAUTH_CLIENT_ID", "Google OAuth Client ID for Gmail integration", "oauth"),
	SecretDefinition("GMAIL_OAUTH_CLIENT_SECRET", "Google OAuth Client Secret for Gmail integration", "oauth"),
	# SMTP
	SecretDefinition("SMTP_HOST", "SMTP server hostname (e.g., smtp.gmail.com)", "email"),
	SecretDefinition("SMTP_PORT", "SMTP server port (e.g., 465 for SSL)", "email"),
	SecretDefinition("SMTP_USER", "SMTP username/email address", "email"),
	SecretDefinition("SMTP_PASS", "SMTP password or app-specific password", "email"),
	SecretDefinition("SMTP_FROM", 'Default "From" address for emails', "email"),
	# External APIs
	SecretDefinition("IMGBB_API_KEY", "ImgBB image hosting API key", "api"),
	SecretDefinition("EMAIL_API_KEY", "Resend or SendGrid API key (if using API-based email)", "api"),
	# Database
	SecretDefinition("DATABASE_URL", "Database connection URL used by the application", "database"),
	SecretDefinition("DIRECT_DATABASE_URL", "Direct (non-pooled) database URL for migrations", "database"),
	SecretDefinition("DATABASE_URL_PROD", "Production database connection URL", "database"),
)}


def definitions() -> List[SecretDefinition]:
	return list(SECRET_DEFINITIONS.values())


def get_definition(key: str) -> Optional[SecretDefinition]:
	return SECRET_DEFINITIONS.get(key)


def metadata_list(store: VaultStore) -> List[Dict[str, Any]]:
	"""Every known secret with a `hasValue` flag, computed by key presence only."""
	container = store.read()
	stored = container.secrets if container is not None else {}
	return [dict(asdict(d), hasValue=d.key in stored) for d in definitions()]
