from .device_model import (
	DEFAULT_LAYOUT,
	EFI_PARTITION,
	ROOT_PARTITION,
	FilesystemType,
	PartitionScheme,
	PartitionSpec,
	PartitionType,
	TargetDisk,
)

__all__ = [
	'DEFAULT_LAYOUT',
	'EFI_PARTITION',
	'ROOT_PARTITION',
	'FilesystemType',
	'PartitionScheme',
	'PartitionSpec',
	'PartitionType',
	'TargetDisk',
]
