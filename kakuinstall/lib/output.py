import logging
import os
import sys
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

_journal = logging.getLogger('kakuinstall')


class Font(Enum):
	bold = '1'
	italic = '3'
	underscore = '4'
	blink = '5'
	reverse = '7'


_FOREGROUND = {
	'black': '30',
	'red': '31',
	'green': '32',
	'yellow': '33',
	'blue': '34',
	'magenta': '35',
	'cyan': '36',
	'white': '37',
}

_BACKGROUND = {name: str(int(code) + 10) for name, code in _FOREGROUND.items()}


class Logger:
	def __init__(self, path: Path = Path('/var/log/kakuinstall')) -> None:
		self._path = path
		self._handler: logging.FileHandler | None = None
		self.debug_enabled = False

	@property
	def directory(self) -> Path:
		return self._path

	@property
	def path(self) -> Path:
		return self.directory / 'install.log'

	def set_directory(self, path: Path) -> None:
		self._close()
		self._path = path

	def enable_debug(self) -> None:
		self.debug_enabled = True

	def _check_permissions(self) -> None:
		try:
			self._path.mkdir(parents=True, exist_ok=True)
			self.path.touch(exist_ok=True)
		except OSError:
			# --help and tests run without root, log next to the caller
			self._path = Path.cwd()
			print(f'Not enough permission to place log file at {self.path}, creating it in {self._path} instead')

	def _setup(self) -> None:
		if self._handler is not None:
			return

		self._check_permissions()

		self._handler = logging.FileHandler(self.path, encoding='utf-8')
		self._handler.setFormatter(logging.Formatter('[%(asctime)s] - %(levelname)s: %(message)s'))

		_journal.addHandler(self._handler)
		_journal.setLevel(logging.DEBUG)
		_journal.propagate = False

	def _close(self) -> None:
		if self._handler is not None:
			_journal.removeHandler(self._handler)
			self._handler.close()
			self._handler = None

	def log(self, level: int, content: str) -> None:
		self._setup()
		_journal.log(level, content)


logger = Logger()


def _supports_color() -> bool:
	if os.environ.get('NO_COLOR'):
		return False
	return sys.stdout.isatty()


def stylize_output(
	text: str,
	fg: str = 'white',
	bg: str | None = None,
	reset: bool = False,
	font: Sequence[Font] = (),
) -> str:
	"""
	Wraps text in ANSI escape sequences, e.g. ``\\e[31mtext\\e[0m`` for red.
	Unknown colors are ignored, and nothing is added when stdout
	is not a terminal.
	"""
	if not _supports_color():
		return text

	codes = [f.value for f in font]

	if fg in _FOREGROUND:
		codes.append(_FOREGROUND[fg])
	if bg in _BACKGROUND:
		codes.append(_BACKGROUND[bg])
	if reset:
		codes.insert(0, '0')

	if not codes:
		return text

	return f'\033[{";".join(codes)}m{text}\033[0m'


def log(
	*msgs: str,
	level: int = logging.INFO,
	fg: str = 'white',
	bg: str | None = None,
	reset: bool = False,
	font: Sequence[Font] = (),
) -> None:
	text = ' '.join(str(x) for x in msgs)

	logger.log(level, text)

	if level == logging.DEBUG and not logger.debug_enabled:
		return

	print(stylize_output(text, fg, bg, reset, font), flush=True)


def info(*msgs: str, level: int = logging.INFO, fg: str = 'white', bg: str | None = None, reset: bool = False, font: Sequence[Font] = ()) -> None:
	log(*msgs, level=level, fg=fg, bg=bg, reset=reset, font=font)


def debug(*msgs: str, level: int = logging.DEBUG, fg: str = 'white', bg: str | None = None, reset: bool = False, font: Sequence[Font] = ()) -> None:
	log(*msgs, level=level, fg=fg, bg=bg, reset=reset, font=font)


def error(*msgs: str, level: int = logging.ERROR, fg: str = 'red', bg: str | None = None, reset: bool = False, font: Sequence[Font] = ()) -> None:
	log(*msgs, level=level, fg=fg, bg=bg, reset=reset, font=font)


def warn(*msgs: str, level: int = logging.WARNING, fg: str = 'yellow', bg: str | None = None, reset: bool = False, font: Sequence[Font] = ()) -> None:
	log(*msgs, level=level, fg=fg, bg=bg, reset=reset, font=font)


class FormattedOutput:
	@staticmethod
	def as_table(entries: Sequence[BaseModel], columns: Sequence[str] | None = None) -> str:
		"""
		Render a list of models as a plain text table, one row per entry.
		The header is taken from the field names (or ``columns`` when given).
		"""
		if not entries:
			return ''

		if columns is None:
			columns = list(type(entries[0]).model_fields.keys())

		rows = [[str(getattr(entry, col) or '') for col in columns] for entry in entries]
		header = [col.upper() for col in columns]
		widths = [max(len(r[i]) for r in [header, *rows]) for i in range(len(columns))]

		lines = ['  '.join(val.ljust(widths[i]) for i, val in enumerate(header)).rstrip()]
		lines.append('-' * len(lines[0]))
		for row in rows:
			lines.append('  '.join(val.ljust(widths[i]) for i, val in enumerate(row)).rstrip())

		return '\n'.join(lines)
