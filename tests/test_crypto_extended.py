import base64
import pytest
from secretvault.lib.crypto import VaultCrypto, EncryptedSecretRecord, generate_secure_secret
from secretvault.lib.errors import AuthenticationError

def test_derive_key_consistency():
    c = VaultCrypto()
    salt = c.generate_salt()
    k1 = c.derive_key('secret', salt)
    k2 = c.derive_key('secret', salt)
    assert k1 == k2 and len(k1) == 32
    assert c.derive_key('secret', c.generate_salt()) != k1

def test_derive_key_rejects_empty_salt():
    with pytest.raises(ValueError):
        VaultCrypto().derive_key('pw', b'')

def test_encrypt_decrypt_various_sizes():
    c = VaultCrypto()
    for payload in ['', 'a', 'hello world', 'x'*1024, 'sekrit: \U0001f511 emoji-key']:
        rec = c.encrypt(payload, 'pw')
        assert c.decrypt(rec, 'pw') == payload

def test_record_layout():
    rec = VaultCrypto().encrypt('value', 'pw')
    assert rec.version == 1
    assert len(base64.b64decode(rec.salt)) == 32
    assert len(base64.b64decode(rec.iv)) == 16
    assert len(base64.b64decode(rec.tag)) == 16
    assert set(rec.to_dict()) == {'salt', 'iv', 'tag', 'data', 'version'}

def test_same_plaintext_encrypts_differently():
    c = VaultCrypto()
    a = c.encrypt('same', 'pw'); b = c.encrypt('same', 'pw')
    assert a.salt != b.salt
    assert a.iv != b.iv
    assert a.data != b.data or a.tag != b.tag

def test_decrypt_wrong_password():
    c = VaultCrypto()
    rec = c.encrypt('data', 'pw1')
    with pytest.raises(AuthenticationError):
        c.decrypt(rec, 'pw2')

def test_decrypt_tampered_data():
    c = VaultCrypto()
    rec = c.encrypt('some data', 'pw')
    raw = bytearray(base64.b64decode(rec.data)); raw[0] ^= 0x01
    tampered = EncryptedSecretRecord(rec.salt, rec.iv, rec.tag, base64.b64encode(bytes(raw)).decode())
    with pytest.raises(AuthenticationError):
        c.decrypt(tampered, 'pw')

@pytest.mark.parametrize('field,value', [
    ('tag', base64.b64encode(b'short').decode()),
    ('iv', 'not base64!!'),
    ('salt', ''),
])
def test_decrypt_malformed_record(field, value):
    c = VaultCrypto()
    raw = c.encrypt('data', 'pw').to_dict(); raw[field] = value
    with pytest.raises(AuthenticationError):
        c.decrypt(EncryptedSecretRecord.from_dict(raw), 'pw')

def test_generate_secure_secret():
    s = generate_secure_secret()
    assert len(s) == 86  # 64 bytes, unpadded base64url
    assert '=' not in s and '+' not in s and '/' not in s
    assert generate_secure_secret(16) != generate_secure_secret(16)
    with pytest.raises(ValueError):
        generate_secure_secret(0)
