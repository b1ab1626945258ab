class KakuInstallError(Exception):
	pass


class PrivilegeError(KakuInstallError):
	pass


class DeviceNotFoundError(KakuInstallError):
	def __init__(self, device: str) -> None:
		self.device = device
		super().__init__(f'Disk {device} does not exist!')


class ConfirmationMismatchError(KakuInstallError):
	def __init__(self, disk_name: str, confirmation: str) -> None:
		self.disk_name = disk_name
		self.confirmation = confirmation
		super().__init__('Disk names do not match. Aborting for safety.')


class SysCallError(KakuInstallError):
	def __init__(self, message: str, exit_code: int | None = None, worker_log: bytes = b'') -> None:
		super().__init__(message)
		self.message = message
		self.exit_code = exit_code
		self.worker_log = worker_log
