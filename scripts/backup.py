"""Copy the encrypted secrets file to a timestamped backup.

Usage (from repo root):
  python -m scripts.backup --dest backups/
"""
from __future__ import annotations
from datetime import datetime
from pathlib import Path
import click
from secretvault.config import settings
from secretvault.lib.errors import StorageError
from secretvault.lib.store import VaultStore

@click.command()
@click.option('--dest', type=click.Path(file_okay=False, path_type=Path), default=Path('backups'), help='Destination directory for backups.')
@click.option('--file', 'vault_file', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Vault file to back up.')
def main(dest: Path, vault_file: Path | None):
	store = VaultStore(vault_file or settings.secrets_file_path())
	if not store.exists():
		click.echo(f"No vault at {store.path}; nothing to backup.")
		raise SystemExit(1)
	stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
	try:
		target = store.backup(dest / f"{store.path.stem}_{stamp}{store.path.suffix}")
	except StorageError as e:
		click.echo(f"Error: {e}")
		raise SystemExit(1)
	click.echo(f"Backup written: {target}")

if __name__ == '__main__':  # pragma: no cover
	main()
