"""Cryptographic primitives (key derivation + AES-256-GCM records)."""
from __future__ import annotations
import base64, binascii, secrets
from dataclasses import dataclass, asdict
from typing import Any, Dict
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.backends import default_backend
from secretvault.config.settings import (
	DEFAULT_ITERATIONS, SALT_LENGTH, KEY_LENGTH, IV_LENGTH, AUTH_TAG_LENGTH,
	RECORD_VERSION, DEFAULT_GENERATED_LENGTH
)
from .errors import AuthenticationError


def _b64(raw: bytes) -> str:
	return base64.b64encode(raw).decode('ascii')


def _unb64(text: str) -> bytes:
	return base64.b64decode(text.encode('ascii'), validate=True)


@dataclass
class EncryptedSecretRecord:
	"""One encrypted value as stored in the vault file (all fields base64)."""
	salt: str
	iv: str
	tag: str
	data: str
	version: int = RECORD_VERSION

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	@classmethod
	def from_dict(cls, raw: Dict[str, Any]) -> 'EncryptedSecretRecord':
		if not isinstance(raw, dict) or not all(isinstance(raw.get(k), str) for k in ('salt', 'iv', 'tag', 'data')):
			raise ValueError("Encrypted record is missing base64 fields")
		return cls(
			salt=raw['salt'], iv=raw['iv'], tag=raw['tag'], data=raw['data'],
			version=int(raw.get('version', RECORD_VERSION))
		)


class VaultCrypto:
	"""Password based encryption of single secret values.

	Every call to `encrypt` draws a new salt and IV, so the same value stored
	twice under the same password never produces the same record.
	"""

	def __init__(self, iterations: int = DEFAULT_ITERATIONS):
		self._backend = default_backend()
		self.iterations = iterations

	def generate_salt(self) -> bytes:
		return secrets.token_bytes(SALT_LENGTH)

	def generate_iv(self) -> bytes:
		return secrets.token_bytes(IV_LENGTH)

	def derive_key(self, password: str, salt: bytes) -> bytes:
		"""PBKDF2-HMAC-SHA512 -> 32 byte key. Deliberately slow; never cached."""
		if not salt:
			raise ValueError("Salt must not be empty")
		kdf = PBKDF2HMAC(algorithm=hashes.SHA512(), length=KEY_LENGTH, salt=salt, iterations=self.iterations, backend=self._backend)
		return kdf.derive(password.encode('utf-8'))

	def encrypt(self, plaintext: str, password: str) -> EncryptedSecretRecord:
		salt = self.generate_salt()
		iv = self.generate_iv()
		key = self.derive_key(password, salt)
		cipher = Cipher(algorithms.AES(key), modes.GCM(iv), backend=self._backend)
		enc = cipher.encryptor()
		ct = enc.update(plaintext.encode('utf-8')) + enc.finalize()
		return EncryptedSecretRecord(
			salt=_b64(salt), iv=_b64(iv), tag=_b64(enc.tag), data=_b64(ct),
			version=RECORD_VERSION
		)

	def decrypt(self, record: EncryptedSecretRecord, password: str) -> str:
		"""Decrypt a record.

		Raises AuthenticationError for a wrong password and for corrupted or
		tampered records alike; the two cases are not told apart.
		"""
		try:
			salt = _unb64(record.salt)
			iv = _unb64(record.iv)
			tag = _unb64(record.tag)
			ct = _unb64(record.data)
			if len(tag) != AUTH_TAG_LENGTH:
				raise ValueError("Bad tag length")
			key = self.derive_key(password, salt)
			cipher = Cipher(algorithms.AES(key), modes.GCM(iv, tag), backend=self._backend)
			dec = cipher.decryptor()
			plain = dec.update(ct) + dec.finalize()
			return plain.decode('utf-8')
		except (InvalidTag, ValueError, binascii.Error) as e:
			raise AuthenticationError("Unable to decrypt secret") from e


def generate_secure_secret(length: int = DEFAULT_GENERATED_LENGTH) -> str:
	"""`length` random bytes, base64url encoded without padding."""
	if length <= 0:
		raise ValueError("Length must be positive")
	return secrets.token_urlsafe(length)
