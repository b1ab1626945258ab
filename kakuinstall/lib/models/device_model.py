from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic.dataclasses import dataclass as p_dataclass

DEV_ROOT = Path('/dev')
BY_LABEL = DEV_ROOT / 'disk' / 'by-label'


class PartitionScheme(Enum):
	"""
	How partition device nodes are named for a disk.
	The value is the separator placed between the disk name and the partition number.
	"""

	NVMe = 'p'
	SATA = ''

	@property
	def separator(self) -> str:
		return self.value

	@classmethod
	def from_disk_name(cls, name: str) -> PartitionScheme:
		if name.startswith('nvme'):
			return cls.NVMe
		return cls.SATA


class FilesystemType(Enum):
	Fat32 = 'fat32'
	Xfs = 'xfs'

	def mkfs_command(self, device: Path, label: str) -> list[str]:
		match self:
			case FilesystemType.Fat32:
				return ['mkfs.fat', '-F', '32', '-n', label, str(device)]
			case FilesystemType.Xfs:
				return ['mkfs.xfs', '-f', '-L', label, str(device)]


class PartitionType(Enum):
	# gdisk type codes
	EfiSystem = 'ef00'
	LinuxFilesystem = '8300'


@dataclass(frozen=True)
class PartitionSpec:
	number: int
	# gdisk "last sector" answer, None uses the rest of the disk
	size: str | None
	type: PartitionType
	fs_type: FilesystemType
	label: str
	mountpoint: Path

	@property
	def by_label(self) -> Path:
		return BY_LABEL / self.label


EFI_PARTITION = PartitionSpec(1, '+1G', PartitionType.EfiSystem, FilesystemType.Fat32, 'EFI', Path('/boot'))
ROOT_PARTITION = PartitionSpec(2, None, PartitionType.LinuxFilesystem, FilesystemType.Xfs, 'NIXOS', Path('/'))

DEFAULT_LAYOUT: tuple[PartitionSpec, ...] = (EFI_PARTITION, ROOT_PARTITION)


def gdisk_script(layout: tuple[PartitionSpec, ...] = DEFAULT_LAYOUT) -> bytes:
	# o/y: new empty GPT, then per partition: n, default number, default first sector, last sector, type
	answers = ['o', 'y']

	for part in layout:
		answers += ['n', '', '', part.size or '', part.type.value]

	answers += ['w', 'y']

	return ('\n'.join(answers) + '\n').encode()


@p_dataclass(frozen=True)
class TargetDisk:
	name: str
	scheme: PartitionScheme

	@classmethod
	def from_name(cls, name: str) -> TargetDisk:
		return cls(name=name, scheme=PartitionScheme.from_disk_name(name))

	@property
	def dev_path(self) -> Path:
		return DEV_ROOT / self.name

	def partition_path(self, number: int) -> Path:
		return DEV_ROOT / f'{self.name}{self.scheme.separator}{number}'

	@property
	def efi_partition(self) -> Path:
		return self.partition_path(EFI_PARTITION.number)

	@property
	def root_partition(self) -> Path:
		return self.partition_path(ROOT_PARTITION.number)
