import shlex
from collections.abc import Sequence
from pathlib import Path
from types import TracebackType

from .args import KakuConfig
from .general import CommandRunner
from .output import debug, log, logger, warn


class Installer:
	def __init__(
		self,
		target: Path,
		config: KakuConfig,
		runner: CommandRunner,
	):
		"""
		`Installer()` bootstraps NixOS onto the partitions mounted at ``target``,
		using the dotfiles repository from ``config``.
		"""
		self.target = target
		self._config = config
		self._runner = runner

	def __enter__(self) -> 'Installer':
		return self

	def __exit__(self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None) -> bool | None:
		if exc_type is not None:
			# the failure itself is reported by the caller
			warn(f'[!] A log file has been created here: {logger.path}')
			# Return None to propagate the exception
			return None

		log('Installation completed!', fg='green')
		return None

	def _in_target(self, path: Path) -> Path:
		return self.target / path.relative_to('/')

	@property
	def clone_dir(self) -> Path:
		return self._in_target(self._config.clone_dir)

	@property
	def host_dir(self) -> Path:
		return self._in_target(self._config.host_dir)

	def nix_shell(self, cmd: Sequence[str | Path]) -> None:
		"""
		Runs ``cmd`` in a nix-shell providing nix and git, which the
		installation medium does not necessarily ship.
		"""
		packages: list[str | Path] = []
		for pkg in self._config.nix_shell_packages:
			packages += ['-p', pkg]

		self._runner.run(['nix-shell', *packages, '--run', shlex.join(str(c) for c in cmd)])

	def clone_dotfiles(self) -> None:
		log('Step 7: Cloning the dotfiles', fg='green')
		self.nix_shell(['git', 'clone', '--depth', '1', self._config.repository, self.clone_dir])

	def generate_hardware_config(self) -> None:
		log('Step 8: Generating hardware configuration', fg='green')
		self._runner.run(['mkdir', '-p', self.host_dir])
		self.nix_shell(['nixos-generate-config', '--dir', self.host_dir, '--force'])

		# the flake brings its own configuration.nix, only hardware-configuration.nix is kept
		self._runner.run(['rm', '-rf', self.host_dir / 'configuration.nix'])

	def install(self) -> None:
		log('Step 9: Installing NixOS', fg='green')
		self.nix_shell(['nixos-install', '--root', self.target])

	def reboot(self) -> None:
		log('Step 10: Rebooting into the new system', fg='green')
		self._runner.run(['reboot'])

	def print_post_install_notice(self) -> None:
		warn('====================== IMPORTANT ======================')
		warn(f'Log in as "{self._config.login_user}" with the password set by the configuration.')
		warn("After rebooting, log in and re-run this script with the '--rebuild' flag to apply the dotfiles configuration.")
		warn('=======================================================')

	def minimal_installation(self, reboot: bool = True) -> None:
		log('Step 6: Setting up Nix environment', fg='green')
		debug(f'nix-shell packages: {", ".join(self._config.nix_shell_packages)}')

		self.clone_dotfiles()
		self.generate_hardware_config()
		self.install()
		self.print_post_install_notice()

		if reboot:
			self.reboot()
		else:
			log('Skipping reboot, reboot manually when ready.', fg='yellow')
