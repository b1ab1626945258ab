import json
from pathlib import Path

import pytest

from kakuinstall.lib.args import KakuConfig, KakuConfigHandler, load_config
from kakuinstall.lib.exceptions import KakuInstallError


def test_defaults() -> None:
	handler = KakuConfigHandler([])

	assert handler.args.rebuild is False
	assert handler.args.dry_run is False
	assert handler.args.mountpoint == Path('/mnt')
	assert handler.config == KakuConfig()


def test_rebuild_flag() -> None:
	assert KakuConfigHandler(['--rebuild']).args.rebuild is True


def test_unknown_arguments_do_not_trigger_rebuild(capsys: pytest.CaptureFixture[str]) -> None:
	handler = KakuConfigHandler(['rebuild'])

	assert handler.args.rebuild is False
	assert 'Ignoring unrecognized arguments: rebuild' in capsys.readouterr().out


def test_options() -> None:
	args = KakuConfigHandler(['--dry-run', '--no-reboot', '--mountpoint', '/target', '--debug']).args

	assert args.dry_run is True
	assert args.no_reboot is True
	assert args.mountpoint == Path('/target')
	assert args.debug is True


def test_default_profiles() -> None:
	config = KakuConfig()

	assert config.repository == 'https://github.com/linuxmobile/kaku'
	assert config.host_dir == Path('/etc/nixos/hosts/aesthetic')
	assert config.system_flake == '.#aesthetic'
	assert config.home_profile == 'github:linuxmobile/kaku#linudev@aesthetic'


def test_config_file(tmp_path: Path) -> None:
	path = tmp_path / 'kaku.json'
	path.write_text(json.dumps({'host': 'laptop', 'nix_shell_packages': ['git']}))

	handler = KakuConfigHandler(['--config', str(path)])

	assert handler.config.host == 'laptop'
	assert handler.config.home_profile == 'github:linuxmobile/kaku#linudev@laptop'
	assert handler.config.nix_shell_packages == ('git',)
	assert handler.config.repository == KakuConfig().repository


def test_config_file_with_unknown_key(tmp_path: Path) -> None:
	path = tmp_path / 'kaku.json'
	path.write_text(json.dumps({'hostname': 'laptop'}))

	with pytest.raises(KakuInstallError):
		load_config(path)


def test_missing_config_file(tmp_path: Path) -> None:
	with pytest.raises(KakuInstallError):
		load_config(tmp_path / 'missing.json')


@pytest.mark.parametrize('flag', ['--reb', '--rebu', '--r'])
def test_abbreviated_rebuild_flag_is_ignored(flag: str, capsys: pytest.CaptureFixture[str]) -> None:
	assert KakuConfigHandler([flag]).args.rebuild is False
	assert f'Ignoring unrecognized arguments: {flag}' in capsys.readouterr().out


def test_abbreviated_flags_do_not_select_modes() -> None:
	args = KakuConfigHandler(['--dry', '--no']).args

	assert args.dry_run is False
	assert args.no_reboot is False


def test_relative_clone_dir(tmp_path: Path) -> None:
	path = tmp_path / 'kaku.json'
	path.write_text(json.dumps({'clone_dir': 'etc/nixos'}))

	with pytest.raises(KakuInstallError, match='absolute'):
		load_config(path)
