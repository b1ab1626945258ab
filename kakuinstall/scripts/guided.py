from pathlib import Path

from kakuinstall.lib.args import KakuConfig, KakuConfigHandler
from kakuinstall.lib.disk.filesystem import FilesystemHandler
from kakuinstall.lib.disk.selection import DiskSelector, TerminalInput, check_privileges
from kakuinstall.lib.general import CommandRunner
from kakuinstall.lib.installer import Installer
from kakuinstall.lib.models.device_model import TargetDisk
from kakuinstall.lib.output import info, log
from kakuinstall.lib.rebuild import apply_configuration, print_password_notice
from kakuinstall.lib.workflow import Err, Pipeline, Step


def _print_banner() -> None:
	log('======================================================', fg='blue')
	log('       Kaku Dotfiles NixOS Installation Script        ', fg='blue')
	log('======================================================', fg='blue')


def _prepare_disk(target: TargetDisk, runner: CommandRunner, mountpoint: Path) -> TargetDisk:
	fs_handler = FilesystemHandler(target, runner)
	fs_handler.perform_filesystem_operations()
	fs_handler.mount_layout(mountpoint)
	return target


def _install_system(target: TargetDisk, config: KakuConfig, runner: CommandRunner, mountpoint: Path, reboot: bool) -> TargetDisk:
	with Installer(mountpoint, config, runner) as installation:
		installation.minimal_installation(reboot=reboot)
	return target


def install_pipeline(
	config: KakuConfig,
	runner: CommandRunner,
	selector: DiskSelector,
	mountpoint: Path = Path('/mnt'),
	reboot: bool = True,
) -> Pipeline:
	return Pipeline([
		Step('Disk selection', lambda _: selector.select()),
		Step('Disk preparation', lambda target: _prepare_disk(target, runner, mountpoint)),
		Step('NixOS installation', lambda target: _install_system(target, config, runner, mountpoint, reboot)),
	])


def rebuild_pipeline(config: KakuConfig, runner: CommandRunner) -> Pipeline:
	return Pipeline([
		Step('Privilege check', lambda _: check_privileges()),
		Step('Dotfiles configuration', lambda _: apply_configuration(config, runner)),
	])


def run(
	handler: KakuConfigHandler,
	selector: DiskSelector | None = None,
	runner: CommandRunner | None = None,
) -> int:
	args = handler.args
	config = handler.config
	runner = runner or CommandRunner(dry_run=args.dry_run)

	_print_banner()

	if args.dry_run:
		info('Running in dry-run mode, no commands will be executed')

	if args.rebuild:
		pipeline = rebuild_pipeline(config, runner)
	else:
		selector = selector or DiskSelector(TerminalInput())
		pipeline = install_pipeline(config, runner, selector, args.mountpoint, reboot=not args.no_reboot)

	match pipeline.run():
		case Err() as failure:
			return failure.exit_code

	if args.rebuild:
		print_password_notice(config)

	return 0
