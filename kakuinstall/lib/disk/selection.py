import os
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from ..exceptions import ConfirmationMismatchError, DeviceNotFoundError, PrivilegeError
from ..models.device_model import DEV_ROOT, TargetDisk
from ..output import FormattedOutput, debug, error, info, log, warn
from .utils import LsblkInfo, get_disks, is_block_device


class InputSource(Protocol):
	def pause(self, message: str) -> None: ...

	def read_line(self, message: str = '') -> str: ...


class TerminalInput:
	def pause(self, message: str) -> None:
		try:
			input(message)
		except EOFError:
			pass

	def read_line(self, message: str = '') -> str:
		try:
			return input(message).strip()
		except EOFError:
			return ''


def check_privileges(geteuid: Callable[[], int] | None = None) -> None:
	if (geteuid or os.geteuid)() != 0:
		raise PrivilegeError('Please run this script as root (use sudo -i first)')


class DiskSelector:
	def __init__(
		self,
		input_source: InputSource,
		block_device_check: Callable[[Path], bool] = is_block_device,
		list_disks: Callable[[], list[LsblkInfo]] = get_disks,
		geteuid: Callable[[], int] | None = None,
	):
		"""
		Asks the operator for the disk to install to and makes them type
		its name twice. Nothing is written to any device here; the
		returned :class:`TargetDisk` is what the destructive steps work on.
		"""
		self._input = input_source
		self._block_device_check = block_device_check
		self._list_disks = list_disks
		self._geteuid = geteuid

	def select(self) -> TargetDisk:
		check_privileges(self._geteuid)

		warn('WARNING: This script will ERASE ALL DATA on the selected disk.')
		warn('Make sure you have backups of any important data before proceeding.')
		self._input.pause('Press Enter to continue or Ctrl+C to abort...')

		self._show_disks()

		warn('Enter the disk you want to install to (e.g., nvme0n1 or sda):')
		warn('DO NOT include the /dev/ prefix')
		disk_name = self._input.read_line()

		device = self.validate_disk_name(disk_name)

		error(f'WARNING! This will erase ALL DATA on {device}!')
		error('Type the disk name again to confirm (e.g., nvme0n1 or sda):')
		confirmation = self._input.read_line()

		if disk_name != confirmation:
			raise ConfirmationMismatchError(disk_name, confirmation)

		target = TargetDisk.from_name(disk_name)
		debug(f'Selected {target.dev_path} using {target.scheme.name} partition naming')

		return target

	def validate_disk_name(self, disk_name: str) -> Path:
		if not disk_name or '/' in disk_name:
			raise DeviceNotFoundError(str(DEV_ROOT / disk_name))

		device = DEV_ROOT / disk_name

		if not self._block_device_check(device):
			raise DeviceNotFoundError(str(device))

		return device

	def _show_disks(self) -> None:
		log('Available disks:', fg='green')
		info(FormattedOutput.as_table(self._list_disks(), ['name', 'size', 'model', 'serial', 'type']))
