"""NixOS installer for the kaku dotfiles"""

import os
import sys
import traceback
from collections.abc import Sequence

from .lib.args import KakuConfigHandler
from .lib.exceptions import KakuInstallError
from .lib.general import CommandRunner, SysCommand
from .lib.output import FormattedOutput, debug, error, info, log, logger, warn


def main(argv: Sequence[str] | None = None) -> int:
	"""
	This can either be run as the installed console script: kakuinstall
	OR straight as a module: python -m kakuinstall
	"""
	handler = KakuConfigHandler(argv)

	if os.geteuid() != 0:
		error('Please run this script as root (use sudo -i first)')
		return 1

	debug(f'Arguments: {handler.args}')
	debug(f'Configuration: {handler.config}')

	from .scripts import guided

	return guided.run(handler)


def run_as_a_module() -> None:
	rc = 0

	try:
		rc = main()
	except KeyboardInterrupt:
		error('Operation cancelled by user')
		rc = 130
	except KakuInstallError as e:
		error(str(e))
		rc = 1
	except Exception as e:
		err = ''.join(traceback.format_exception(e))
		error(err)
		warn(f'kakuinstall experienced the above error. The log file is at "{logger.path}".')
		rc = 1

	sys.exit(rc)


__all__ = [
	'CommandRunner',
	'FormattedOutput',
	'SysCommand',
	'debug',
	'error',
	'info',
	'log',
	'main',
	'warn',
]
