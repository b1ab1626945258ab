from collections.abc import Iterator
from pathlib import Path

import pytest

from kakuinstall.lib.general import CommandRunner
from kakuinstall.lib.output import logger


class ScriptedInput:
	"""Stands in for the terminal, answering prompts from a fixed list of lines."""

	def __init__(self, *lines: str) -> None:
		self.lines = list(lines)
		self.pauses = 0
		self.reads = 0

	def pause(self, message: str) -> None:
		self.pauses += 1

	def read_line(self, message: str = '') -> str:
		self.reads += 1
		return self.lines.pop(0)


@pytest.fixture(autouse=True)
def log_directory(tmp_path: Path) -> Iterator[Path]:
	directory = tmp_path / 'log'
	logger.set_directory(directory)
	logger.debug_enabled = False
	yield directory
	logger.set_directory(directory)


@pytest.fixture
def runner() -> CommandRunner:
	return CommandRunner(dry_run=True)


@pytest.fixture
def scripted_input() -> type[ScriptedInput]:
	return ScriptedInput
