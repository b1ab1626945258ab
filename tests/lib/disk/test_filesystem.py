from pathlib import Path
from typing import Any

import pytest

from kakuinstall.lib.disk.filesystem import FilesystemHandler
from kakuinstall.lib.exceptions import SysCallError
from kakuinstall.lib.general import CommandRunner
from kakuinstall.lib.models.device_model import TargetDisk, gdisk_script


class FailingRunner(CommandRunner):
	"""Dry-run runner that fails the first command starting with ``program``."""

	def __init__(self, program: str, worker_log: bytes = b'') -> None:
		super().__init__(dry_run=True)
		self.program = program
		self.worker_log = worker_log
		self.inputs: dict[str, bytes | None] = {}

	def run(self, cmd: Any, input_data: bytes | None = None, working_directory: Path | None = None, peek_output: bool = False) -> None:
		super().run(cmd, input_data, working_directory, peek_output)
		self.inputs[str(cmd[0])] = input_data

		if str(cmd[0]) == self.program:
			raise SysCallError(f'{self.program} failed', 1, worker_log=self.worker_log)


def test_sata_command_order(runner: CommandRunner) -> None:
	handler = FilesystemHandler(TargetDisk.from_name('sda'), runner)
	handler.perform_filesystem_operations()
	handler.mount_layout(Path('/mnt'))

	assert runner.history == [
		['dd', 'if=/dev/zero', 'of=/dev/sda', 'bs=1M', 'status=progress'],
		['wipefs', '-a', '/dev/sda'],
		['gdisk', '/dev/sda'],
		['mkfs.fat', '-F', '32', '-n', 'EFI', '/dev/sda1'],
		['mkfs.xfs', '-f', '-L', 'NIXOS', '/dev/sda2'],
		['mount', '/dev/disk/by-label/NIXOS', '/mnt'],
		['mkdir', '-p', '/mnt/boot'],
		['mount', '/dev/disk/by-label/EFI', '/mnt/boot'],
	]


def test_nvme_partitions(runner: CommandRunner) -> None:
	FilesystemHandler(TargetDisk.from_name('nvme0n1'), runner).format_partitions()

	assert runner.history == [
		['mkfs.fat', '-F', '32', '-n', 'EFI', '/dev/nvme0n1p1'],
		['mkfs.xfs', '-f', '-L', 'NIXOS', '/dev/nvme0n1p2'],
	]


def test_alternate_mountpoint(runner: CommandRunner) -> None:
	FilesystemHandler(TargetDisk.from_name('sda'), runner).mount_layout(Path('/target'))

	assert runner.history == [
		['mount', '/dev/disk/by-label/NIXOS', '/target'],
		['mkdir', '-p', '/target/boot'],
		['mount', '/dev/disk/by-label/EFI', '/target/boot'],
	]


def test_gdisk_receives_script() -> None:
	runner = FailingRunner('none')
	FilesystemHandler(TargetDisk.from_name('sda'), runner).partition()

	assert runner.inputs['gdisk'] == gdisk_script()


def test_dd_running_out_of_space_is_not_an_error() -> None:
	runner = FailingRunner('dd', worker_log=b"dd: error writing '/dev/sda': No space left on device\n")
	FilesystemHandler(TargetDisk.from_name('sda'), runner).perform_filesystem_operations()

	assert [cmd[0] for cmd in runner.history] == ['dd', 'wipefs', 'gdisk', 'mkfs.fat', 'mkfs.xfs']


def test_dd_failure_stops_everything() -> None:
	runner = FailingRunner('dd', worker_log=b"dd: failed to open '/dev/sda': Permission denied\n")

	with pytest.raises(SysCallError):
		FilesystemHandler(TargetDisk.from_name('sda'), runner).perform_filesystem_operations()

	assert [cmd[0] for cmd in runner.history] == ['dd']


def test_failing_step_stops_later_steps() -> None:
	runner = FailingRunner('gdisk')

	with pytest.raises(SysCallError):
		FilesystemHandler(TargetDisk.from_name('sda'), runner).perform_filesystem_operations()

	assert [cmd[0] for cmd in runner.history] == ['dd', 'wipefs', 'gdisk']
