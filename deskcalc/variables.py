import logging
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional

from deskcalc.builtins import BUILTIN_CONSTANTS
from deskcalc.errors import CalcError

logger = logging.getLogger("deskcalc.variables")


@dataclass
class UndefinedVariable(CalcError):
    name: str

    def __str__(self) -> str:
        return f"Undefined variable {self.name!r}"


@dataclass
class DuplicateDeclaration(CalcError):
    name: str

    def __str__(self) -> str:
        return f"Variable {self.name!r} is declared twice"


@dataclass(frozen=True)
class Variable:
    name: str
    value: float


class VariableTable:
    """Named values of one session, unique by name and kept in declaration order.

    Variables are only ever added (by declare) or changed (by update), never removed.
    """

    def __init__(self, initial: Optional[Mapping[str, float]] = None, with_builtins: bool = True) -> None:
        self._values: dict[str, float] = dict()
        if with_builtins:
            for name, value in BUILTIN_CONSTANTS.items():
                self.declare(name, value)
        for name, value in (initial or {}).items():
            self.declare(name, value)

    def lookup(self, name: str) -> float:
        try:
            return self._values[name]
        except KeyError:
            raise UndefinedVariable(name) from None

    def update(self, name: str, value: float) -> None:
        if name not in self._values:
            raise UndefinedVariable(name)
        self._values[name] = value

    def declare(self, name: str, value: float) -> float:
        if name in self._values:
            raise DuplicateDeclaration(name)
        self._values[name] = value
        logger.debug("Declared %s = %s", name, value)
        return value

    def is_declared(self, name: str) -> bool:
        return name in self._values

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Variable]:
        for name, value in self._values.items():
            yield Variable(name=name, value=value)
