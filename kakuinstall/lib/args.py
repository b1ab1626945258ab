import argparse
from argparse import ArgumentParser
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

from pydantic import ConfigDict, TypeAdapter, ValidationError, field_validator
from pydantic.dataclasses import dataclass as p_dataclass

from .exceptions import KakuInstallError
from .output import logger, warn


@p_dataclass
class Arguments:
	rebuild: bool = False
	config: Path | None = None
	dry_run: bool = False
	no_reboot: bool = False
	mountpoint: Path = Path('/mnt')
	debug: bool = False


@p_dataclass(frozen=True, config=ConfigDict(extra='forbid'))
class KakuConfig:
	"""
	The fixed identifiers the installation works with. The defaults are the
	kaku dotfiles; a JSON file passed with ``--config`` may override any of them.
	"""

	repository: str = 'https://github.com/linuxmobile/kaku'
	clone_dir: Path = Path('/etc/nixos')
	host: str = 'aesthetic'
	home_flake: str = 'github:linuxmobile/kaku'
	home_user: str = 'linudev'
	login_user: str = 'nixos'
	nix_shell_packages: tuple[str, ...] = ('nixVersions.stable', 'git')

	@field_validator('clone_dir')
	@classmethod
	def _absolute_clone_dir(cls, value: Path) -> Path:
		# joined onto the mountpoint of the new system
		if not value.is_absolute():
			raise ValueError(f'clone_dir must be an absolute path, not {value}')
		return value

	@property
	def host_dir(self) -> Path:
		return self.clone_dir / 'hosts' / self.host

	@property
	def system_flake(self) -> str:
		return f'.#{self.host}'

	@property
	def home_profile(self) -> str:
		return f'{self.home_flake}#{self.home_user}@{self.host}'


_config_adapter = TypeAdapter(KakuConfig)


def load_config(path: Path) -> KakuConfig:
	if not path.exists():
		raise KakuInstallError(f'Could not find file {path}')

	try:
		return _config_adapter.validate_json(path.read_text())
	except ValidationError as err:
		raise KakuInstallError(f'Invalid configuration in {path}:\n{err}') from err


class KakuConfigHandler:
	def __init__(self, argv: Sequence[str] | None = None) -> None:
		self._parser: ArgumentParser = self._define_arguments()
		self._args: Arguments = self._parse_args(argv)
		self._config: KakuConfig | None = None

	@property
	def config(self) -> KakuConfig:
		if self._config is None:
			self._config = load_config(self._args.config) if self._args.config else KakuConfig()
		return self._config

	@property
	def args(self) -> Arguments:
		return self._args

	def print_help(self) -> None:
		self._parser.print_help()

	def _get_version(self) -> str:
		try:
			return version('kakuinstall')
		except PackageNotFoundError:
			return 'kakuinstall version not found'

	def _define_arguments(self) -> ArgumentParser:
		parser = ArgumentParser(
			prog='kakuinstall',
			description='Install NixOS with the kaku dotfiles on a selected disk',
			formatter_class=argparse.ArgumentDefaultsHelpFormatter,
			allow_abbrev=False,
		)
		parser.add_argument(
			'-v',
			'--version',
			action='version',
			default=False,
			version='%(prog)s ' + self._get_version(),
		)
		parser.add_argument(
			'--rebuild',
			action='store_true',
			default=False,
			help='Apply the dotfiles configuration with nixos-rebuild and home-manager (run after rebooting into the new system)',
		)
		parser.add_argument(
			'--config',
			type=Path,
			nargs='?',
			default=None,
			help='JSON file overriding the repository, host and profile names',
		)
		parser.add_argument(
			'--dry-run',
			'--dry_run',
			action='store_true',
			default=False,
			help='Validate the selected disk and print the commands instead of running them',
		)
		parser.add_argument(
			'--no-reboot',
			action='store_true',
			default=False,
			help='Do not reboot after nixos-install finished',
		)
		parser.add_argument(
			'--mountpoint',
			type=Path,
			nargs='?',
			default=Path('/mnt'),
			help='Define an alternate mount point for installation',
		)
		parser.add_argument(
			'--debug',
			action='store_true',
			default=False,
			help='Print debug messages to the terminal as well as the log',
		)

		return parser

	def _parse_args(self, argv: Sequence[str] | None) -> Arguments:
		namespace, unknown = self._parser.parse_known_args(argv)
		argparse_args: dict[str, Any] = vars(namespace)
		argparse_args.pop('version', None)
		args = Arguments(**argparse_args)

		if unknown:
			warn(f'Ignoring unrecognized arguments: {" ".join(unknown)}')

		if args.debug:
			logger.enable_debug()

		if args.rebuild and args.dry_run:
			warn('--dry-run only prints the rebuild commands, the running system is left untouched')

		return args
