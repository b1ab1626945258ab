import shlex
import subprocess
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from .exceptions import SysCallError
from .output import debug, info


def run(
	cmd: Sequence[str],
	input_data: bytes | None = None,
	working_directory: Path | None = None,
) -> subprocess.CompletedProcess[bytes]:
	return subprocess.run(
		list(cmd),
		input=input_data,
		cwd=working_directory,
		stdout=subprocess.PIPE,
		stderr=subprocess.STDOUT,
		check=False,
	)


class SysCommand:
	"""
	Runs an external command to completion and raises :class:`SysCallError`
	when it cannot be started or exits non-zero.

	With ``peek_output`` the combined stdout/stderr is copied to the
	terminal while the command runs (used for long running tools such as
	``dd status=progress``); it is captured either way.
	"""

	def __init__(
		self,
		cmd: str | Sequence[str],
		input_data: bytes | None = None,
		working_directory: Path | None = None,
		peek_output: bool = False,
	):
		if isinstance(cmd, str):
			cmd = shlex.split(cmd)

		self.cmd: list[str] = [str(c) for c in cmd]
		self.input_data = input_data
		self.working_directory = working_directory
		self.peek_output = peek_output

		self.exit_code: int | None = None
		self._output = b''

		self._run()

	def __str__(self) -> str:
		return self.decode()

	def __repr__(self) -> str:
		return f'SysCommand({shlex.join(self.cmd)!r}, exit_code={self.exit_code})'

	def _run(self) -> None:
		debug(f'Executing: {shlex.join(self.cmd)}')

		try:
			if self.peek_output:
				self.exit_code, self._output = self._run_peeking()
			else:
				result = run(self.cmd, self.input_data, self.working_directory)
				self.exit_code, self._output = result.returncode, result.stdout
		except (FileNotFoundError, PermissionError) as err:
			raise SysCallError(f'{self.cmd[0]} could not be executed: {err}') from err

		if self.exit_code != 0:
			raise SysCallError(
				f'{shlex.join(self.cmd)} exited with exit code {self.exit_code}: {self.decode().strip()[-500:]}',
				self.exit_code,
				worker_log=self._output,
			)

	def _run_peeking(self) -> tuple[int, bytes]:
		buffer = bytearray()

		with subprocess.Popen(
			self.cmd,
			stdin=subprocess.PIPE if self.input_data is not None else None,
			stdout=subprocess.PIPE,
			stderr=subprocess.STDOUT,
			cwd=self.working_directory,
		) as proc:
			if self.input_data is not None and proc.stdin:
				proc.stdin.write(self.input_data)
				proc.stdin.close()

			assert proc.stdout is not None
			while chunk := proc.stdout.read1(4096):
				buffer.extend(chunk)
				sys.stdout.write(chunk.decode('utf-8', errors='replace'))
				sys.stdout.flush()

			return proc.wait(), bytes(buffer)

	def decode(self, encoding: str = 'utf-8') -> str:
		return self._output.decode(encoding, errors='replace')


class CommandRunner:
	"""
	Entry point for every external command the installer issues.
	In dry-run mode the commands are only announced, and they are
	recorded in ``history`` in both modes.
	"""

	def __init__(self, dry_run: bool = False) -> None:
		self.dry_run = dry_run
		self.history: list[list[str]] = []

	def run(
		self,
		cmd: Sequence[str],
		input_data: bytes | None = None,
		working_directory: Path | None = None,
		peek_output: bool = False,
	) -> SysCommand | None:
		cmd = [str(c) for c in cmd]
		self.history.append(cmd)

		if self.dry_run:
			where = f' (in {working_directory})' if working_directory else ''
			info(f'Would run: {shlex.join(cmd)}{where}', fg='cyan')
			return None

		return SysCommand(cmd, input_data=input_data, working_directory=working_directory, peek_output=peek_output)

	def settle(self, seconds: float) -> None:
		if not self.dry_run:
			time.sleep(seconds)
