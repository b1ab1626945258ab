from pathlib import Path

from ..exceptions import SysCallError
from ..general import CommandRunner
from ..models.device_model import DEFAULT_LAYOUT, PartitionSpec, TargetDisk, gdisk_script
from ..output import debug, log

# dd writes until the device is full and then fails with this message
_DEVICE_FULL = b'No space left on device'


class FilesystemHandler:
	def __init__(
		self,
		target: TargetDisk,
		runner: CommandRunner,
		layout: tuple[PartitionSpec, ...] = DEFAULT_LAYOUT,
	):
		self._target = target
		self._runner = runner
		self._layout = layout

	def perform_filesystem_operations(self) -> None:
		"""
		Wipes the target disk and recreates the partition layout on it.
		Each step raises :class:`SysCallError` on failure, after which
		the disk is in an undefined state.
		"""
		device = self._target.dev_path

		log(f'Step 1: Wiping the entire disk {device} safely', fg='green')
		self.zero_disk()

		log(f'Step 2: Wiping disk signatures from {device}', fg='green')
		self._runner.run(['wipefs', '-a', device])

		log('Step 3: Creating partitions', fg='green')
		self.partition()

		log('Step 4: Formatting partitions', fg='green')
		# give the kernel time to pick up the new partition table
		self._runner.settle(1)
		self.format_partitions()

	def zero_disk(self) -> None:
		device = self._target.dev_path

		try:
			self._runner.run(['dd', 'if=/dev/zero', f'of={device}', 'bs=1M', 'status=progress'], peek_output=True)
		except SysCallError as err:
			if _DEVICE_FULL not in err.worker_log:
				raise
			debug(f'dd reached the end of {device}')

	def partition(self) -> None:
		self._runner.run(['gdisk', self._target.dev_path], input_data=gdisk_script(self._layout))

	def format_partitions(self) -> None:
		for part in self._layout:
			dev_path = self._target.partition_path(part.number)
			debug(f'Formatting {dev_path} as {part.fs_type.value} labeled {part.label}')
			self._runner.run(part.fs_type.mkfs_command(dev_path, part.label))

	def mount_layout(self, mountpoint: Path) -> None:
		log('Step 5: Mounting partitions', fg='green')

		# parents before children, / first
		for part in sorted(self._layout, key=lambda p: len(p.mountpoint.parts)):
			target = mountpoint / part.mountpoint.relative_to('/')

			if part.mountpoint != Path('/'):
				self._runner.run(['mkdir', '-p', target])

			self._runner.run(['mount', part.by_label, target])
