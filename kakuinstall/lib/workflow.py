from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeAlias, TypeVar

from .exceptions import KakuInstallError
from .output import debug, error

T = TypeVar('T')


@dataclass(frozen=True)
class Ok(Generic[T]):
	value: T


@dataclass(frozen=True)
class Err:
	step: str
	error: KakuInstallError

	@property
	def exit_code(self) -> int:
		return 1


StepResult: TypeAlias = Ok[T] | Err


@dataclass(frozen=True)
class Step:
	name: str
	# receives the value returned by the previous step
	action: Callable[[Any], Any]

	def run(self, value: Any) -> StepResult[Any]:
		debug(f'Running step: {self.name}')

		try:
			return Ok(self.action(value))
		except KakuInstallError as err:
			return Err(self.name, err)


@dataclass
class Pipeline:
	"""
	Runs its steps in order, handing each step's return value to the next one.
	The first step returning :class:`Err` ends the run, later steps never start.
	"""

	steps: Sequence[Step]
	completed: list[str] = field(default_factory=list)

	def run(self, value: Any = None) -> StepResult[Any]:
		for step in self.steps:
			match step.run(value):
				case Err() as failure:
					error(f'{step.name} failed: {failure.error}')
					return failure
				case Ok(value=result):
					self.completed.append(step.name)
					value = result

		return Ok(value)
