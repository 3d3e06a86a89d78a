from click.testing import CliRunner
from scripts.backup import main as backup_main
from secretvault.cli.commands import cli

def test_concrete_scenario_through_cli(monkeypatch, tmp_path):
	monkeypatch.setenv('SECRETS_FILE', str(tmp_path / 'secrets.encrypted.json'))
	monkeypatch.delenv('SECRETS_MASTER_PASSWORD', raising=False)
	runner = CliRunner()
	assert runner.invoke(cli, ['set', 'API_KEY', "abc'123", '-p', 'pw1']).exit_code == 0
	assert runner.invoke(cli, ['get', 'API_KEY', '-p', 'pw1']).output.strip() == "abc'123"
	assert runner.invoke(cli, ['get', 'API_KEY', '-p', 'wrong']).exit_code == 1
	assert runner.invoke(cli, ['change-password'], input='pw1\npw2\npw2\n').exit_code == 0
	assert runner.invoke(cli, ['get', 'API_KEY', '-p', 'pw1']).exit_code == 1
	assert runner.invoke(cli, ['get', 'API_KEY', '-p', 'pw2']).output.strip() == "abc'123"
	out = runner.invoke(cli, ['export', '-p', 'pw2']).output
	assert "export API_KEY='abc'\\''123'" in out


def test_backup_script(monkeypatch, tmp_path):
	vault = tmp_path / 'secrets.encrypted.json'
	monkeypatch.setenv('SECRETS_FILE', str(vault))
	runner = CliRunner()
	r = runner.invoke(backup_main, ['--dest', str(tmp_path / 'backups')])
	assert r.exit_code == 1 and 'nothing to backup' in r.output
	runner.invoke(cli, ['set', 'A', '1', '-p', 'pw'])
	r = runner.invoke(backup_main, ['--dest', str(tmp_path / 'backups')])
	assert r.exit_code == 0
	copies = list((tmp_path / 'backups').glob('secrets.encrypted_*.json'))
	assert len(copies) == 1 and copies[0].read_bytes() == vault.read_bytes()
