from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from ..exceptions import SysCallError
from ..general import run
from ..output import debug

_LSBLK_COLUMNS = ['NAME', 'SIZE', 'MODEL', 'SERIAL', 'TYPE']


class LsblkInfo(BaseModel):
	name: str
	size: str | None = None
	model: str | None = None
	serial: str | None = None
	type: str


class _LsblkOutput(BaseModel):
	blockdevices: list[LsblkInfo] = Field(default_factory=list)


def parse_lsblk_output(raw: str) -> list[LsblkInfo]:
	try:
		return _LsblkOutput.model_validate_json(raw).blockdevices
	except ValidationError as err:
		raise SysCallError(f'Could not parse lsblk output: {err}') from err


def get_lsblk_info() -> list[LsblkInfo]:
	# read-only, so this bypasses the dry-run aware CommandRunner
	cmd = ['lsblk', '--json', '--nodeps', '-o', ','.join(_LSBLK_COLUMNS)]

	try:
		result = run(cmd)
	except (FileNotFoundError, PermissionError) as err:
		raise SysCallError(f'lsblk could not be executed: {err}') from err

	if result.returncode != 0:
		raise SysCallError(f'lsblk exited with exit code {result.returncode}', result.returncode, worker_log=result.stdout)

	return parse_lsblk_output(result.stdout.decode('utf-8', errors='replace'))


def get_disks() -> list[LsblkInfo]:
	disks = [dev for dev in get_lsblk_info() if dev.type == 'disk']
	debug(f'Detected disks: {[d.name for d in disks]}')
	return disks


def is_block_device(path: Path) -> bool:
	try:
		return path.is_block_device()
	except OSError:
		return False
