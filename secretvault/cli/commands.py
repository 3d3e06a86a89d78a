"""CLI commands implemented with click.

Operator entry point for the encrypted secrets vault. The master password is
taken from --password where offered, else from SECRETS_MASTER_PASSWORD.
"""
from __future__ import annotations
import os, logging, click
from pathlib import Path
from secretvault.config.settings import log_level, DEFAULT_GENERATED_LENGTH
from secretvault.lib.errors import ConfigurationError, StorageError
from secretvault.lib.registry import metadata_list, SECRET_DEFINITIONS
from secretvault.lib.service import VaultConfig, VaultService
from secretvault.lib.database import DATABASE_URL_KEY, mask_database_url


def _fail(message: str):
	click.echo(f'Error: {message}', err=True)
	raise SystemExit(1)


def _checked_password(svc: VaultService, password):
	"""Resolve the master password and reject it if the vault does not accept it."""
	try:
		pw = svc.resolve_password(password)
	except ConfigurationError as e:
		_fail(str(e))
	if not svc.verify_master_password(pw):
		_fail('Invalid master password')
	return pw


def _password_option(**kw):
	return click.option('--password', '-p', default=None, hide_input=True, help='Master password (defaults to SECRETS_MASTER_PASSWORD).', **kw)


@click.group()
@click.option('--file', 'vault_file', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Vault file (defaults to SECRETS_FILE or secrets.encrypted.json).')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging.')
@click.pass_context
def cli(ctx, vault_file, verbose):
	"""secretvault: encrypted secrets committed alongside your code."""
	logging.basicConfig(level=logging.DEBUG if verbose else log_level(), format='%(levelname)s %(name)s: %(message)s')
	config = VaultConfig.from_env()
	if vault_file is not None:
		config.path = vault_file
	ctx.obj = VaultService(config)


@cli.command('set')
@click.argument('name')
@click.argument('value', required=False)
@_password_option()
@click.pass_obj
def set_cmd(svc: VaultService, name, value, password):
	"""Encrypt and store a secret, then read it back to verify."""
	pw = _checked_password(svc, password)
	if value is None:
		value = click.prompt('Value', hide_input=True)
	try:
		svc.set_secret(name, value, pw)
		if svc.get_secret(name, pw) != value:
			_fail(f'{name} was written but did not read back correctly')
	except (ConfigurationError, StorageError, ValueError) as e:
		_fail(str(e))
	click.echo(f'Stored {name} (verified).')


@cli.command('get')
@click.argument('name')
@_password_option()
@click.pass_obj
def get_cmd(svc: VaultService, name, password):
	"""Print a decrypted secret."""
	try:
		result = svc.get_secret_result(name, password)
	except ConfigurationError as e:
		_fail(str(e))
	if not result.ok:
		_fail(f'Could not decrypt {name} (wrong password or corrupted vault)')
	if result.value is None:
		_fail(f'{name} not found')
	click.echo(result.value)


@cli.command('has')
@click.argument('name')
@click.pass_obj
def has_cmd(svc: VaultService, name):
	"""Check whether a secret is stored (no password needed)."""
	if svc.has_secret(name):
		click.echo(f'{name}: configured')
	else:
		click.echo(f'{name}: not configured')
		raise SystemExit(1)


@cli.command('delete')
@click.argument('name')
@click.pass_obj
def delete_cmd(svc: VaultService, name):
	try:
		removed = svc.delete_secret(name)
	except StorageError as e:
		_fail(str(e))
	click.echo(f'Deleted {name}.' if removed else f'{name} not found.')


@cli.command('list')
@click.pass_obj
def list_cmd(svc: VaultService):
	"""Show the known secrets and whether each one is configured."""
	for meta in metadata_list(svc.store):
		mark = 'x' if meta['hasValue'] else ' '
		req = ' (required)' if meta['required'] else ''
		click.echo(f"[{mark}] {meta['key']} [{meta['category']}]{req} - {meta['description']}")
	extra = [n for n in svc.list_secret_names() if n not in SECRET_DEFINITIONS]
	for name in extra:
		click.echo(f'[x] {name} [other]')


@cli.command('verify')
@click.option('--password', '-p', prompt=True, hide_input=True)
@click.pass_obj
def verify_cmd(svc: VaultService, password):
	"""Check a master password against the vault."""
	if svc.verify_master_password(password):
		click.echo('Master password OK.')
	else:
		_fail('Invalid master password')


@cli.command('change-password')
@click.option('--old-password', prompt='Current password', hide_input=True)
@click.option('--new-password', prompt='New password', hide_input=True, confirmation_prompt=True)
@click.option('--backup', is_flag=True, help='Keep a copy of the vault as it was before rotation.')
@click.pass_obj
def change_password_cmd(svc: VaultService, old_password, new_password, backup):
	"""Re-encrypt every secret under a new master password."""
	if svc.store.exists() and svc.store.read() is None:
		_fail(f'Vault file {svc.store.path} could not be read; nothing was changed')
	try:
		changed = svc.change_master_password(old_password, new_password, backup=backup)
	except (ConfigurationError, StorageError) as e:
		_fail(str(e))
	if not changed:
		_fail('Current password is incorrect; nothing was changed')
	click.echo('Master password changed.')


@cli.command('export')
@_password_option()
@click.pass_obj
def export_cmd(svc: VaultService, password):
	"""Print `export NAME='value'` lines for a deployment shell."""
	pw = _checked_password(svc, password)
	try:
		click.echo(svc.export_secrets_for_production(pw))
	except (ConfigurationError, StorageError) as e:
		_fail(str(e))


@cli.command('generate')
@click.option('--length', default=DEFAULT_GENERATED_LENGTH, show_default=True, type=click.IntRange(min=1), help='Number of random bytes.')
def generate_cmd(length):
	"""Print a random base64url secret."""
	click.echo(VaultService.generate_secure_secret(length))


@cli.command('seed-database-url')
@_password_option()
@click.option('--force', is_flag=True, help='Overwrite an existing DATABASE_URL secret.')
@click.pass_obj
def seed_database_url_cmd(svc: VaultService, password, force):
	"""Store DATABASE_URL from the current environment in the vault."""
	url = os.environ.get(DATABASE_URL_KEY)
	if not url:
		_fail(f'{DATABASE_URL_KEY} is not set in the environment')
	if svc.has_secret(DATABASE_URL_KEY) and not force:
		click.echo(f'{DATABASE_URL_KEY} already stored; use --force to overwrite.')
		return
	pw = _checked_password(svc, password)
	try:
		svc.set_secret(DATABASE_URL_KEY, url, pw)
		stored = svc.get_secret(DATABASE_URL_KEY, pw)
	except (ConfigurationError, StorageError) as e:
		_fail(str(e))
	if stored != url:
		_fail(f'{DATABASE_URL_KEY} was written but did not read back correctly')
	click.echo(f'Stored {DATABASE_URL_KEY} = {mask_database_url(url)} (verified).')
