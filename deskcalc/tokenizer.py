import collections
import enum
import io
from dataclasses import dataclass
from typing import ClassVar, TextIO

from deskcalc.errors import CalcError, CalcInternalError


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


class TokenKind(PrintableEnum):
    NUMBER = enum.auto()
    IDENTIFIER = enum.auto()
    KEYWORD = enum.auto()
    SYMBOL = enum.auto()
    END = enum.auto()


PRINT = ";"
QUIT = "q"
LET = "let"

SYMBOLS = frozenset([PRINT, QUIT, "(", ")", "+", "-", "*", "/", "%", "="])
KEYWORDS = frozenset([LET])
DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class Number:
    value: float
    kind: ClassVar[TokenKind] = TokenKind.NUMBER

    @property
    def lexeme(self) -> str:
        return f"{self.value:g}"

    def __str__(self) -> str:
        return f"<{self.kind}>{self.lexeme}"


@dataclass(frozen=True)
class Identifier:
    name: str
    kind: ClassVar[TokenKind] = TokenKind.IDENTIFIER

    @property
    def lexeme(self) -> str:
        return self.name

    def __str__(self) -> str:
        return f"<{self.kind}>{self.lexeme}"


@dataclass(frozen=True)
class Keyword:
    word: str
    kind: ClassVar[TokenKind] = TokenKind.KEYWORD

    @property
    def lexeme(self) -> str:
        return self.word

    def __str__(self) -> str:
        return f"<{self.kind}>{self.lexeme}"


@dataclass(frozen=True)
class Symbol:
    char: str
    kind: ClassVar[TokenKind] = TokenKind.SYMBOL

    @property
    def lexeme(self) -> str:
        return self.char

    def __str__(self) -> str:
        return f"<{self.kind}>{self.lexeme}"


@dataclass(frozen=True)
class EndOfInput:
    kind: ClassVar[TokenKind] = TokenKind.END

    @property
    def lexeme(self) -> str:
        return ""

    def __str__(self) -> str:
        return f"<{self.kind}>"


Token = Number | Identifier | Keyword | Symbol | EndOfInput


@dataclass
class BadToken(CalcError):
    char: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"Bad token {self.char!r} at line {self.line}, column {self.column}"


@dataclass
class PutbackOverflow(CalcInternalError):
    pending: Token
    rejected: Token

    def __str__(self) -> str:
        return f"putback() into a full buffer: {self.rejected} while {self.pending} is pending"


class CharStream:
    """Reads a text source one character at a time, with character pushback.

    Characters must be pushed back in the reverse order they were read.
    Line and column (both 1-based) of the last character read are kept so
    that errors can point at the offending input.
    """

    HISTORY_SIZE = 16

    def __init__(self, source: TextIO | str) -> None:
        self._source = io.StringIO(source) if isinstance(source, str) else source
        self._pushed: list[tuple[str, int, int]] = []
        self._history: collections.deque[tuple[str, int, int]] = collections.deque(maxlen=self.HISTORY_SIZE)
        self._line = 1
        self._column = 1

    def read(self) -> str:
        """Next character, or "" once the source is exhausted"""
        if self._pushed:
            entry = self._pushed.pop()
        else:
            ch = self._source.read(1)
            if not ch:
                return ""
            entry = (ch, self._line, self._column)
            if ch == "\n":
                self._line += 1
                self._column = 1
            else:
                self._column += 1
        self._history.append(entry)
        return entry[0]

    def unread(self, ch: str) -> None:
        if not ch:
            return
        if not self._history or self._history[-1][0] != ch:
            raise CalcInternalError(f"Cannot push back {ch!r}: it is not the last character read")
        self._pushed.append(self._history.pop())

    @property
    def position(self) -> tuple[int, int]:
        if self._history:
            _, line, column = self._history[-1]
            return line, column
        return self._line, self._column


class TokenStream:
    """Produces tokens on get() and takes at most one back with putback()"""

    def __init__(self, source: TextIO | str | CharStream) -> None:
        self._chars = source if isinstance(source, CharStream) else CharStream(source)
        self._pending: Token | None = None

    @property
    def full(self) -> bool:
        return self._pending is not None

    def get(self) -> Token:
        if self._pending is not None:
            token, self._pending = self._pending, None
            return token

        ch = self._chars.read()
        while ch.isspace():
            ch = self._chars.read()

        if not ch:
            return EndOfInput()
        elif ch in SYMBOLS:
            return Symbol(ch)
        elif ch in DIGITS or ch == ".":
            self._chars.unread(ch)
            return Number(self._scan_number())
        elif ch.isalpha():
            name = ch
            ch = self._chars.read()
            while ch.isalnum():
                name += ch
                ch = self._chars.read()
            self._chars.unread(ch)
            if name in KEYWORDS:
                return Keyword(name)
            return Identifier(name)
        else:
            line, column = self._chars.position
            raise BadToken(char=ch, line=line, column=column)

    def putback(self, token: Token) -> None:
        if self._pending is not None:
            raise PutbackOverflow(pending=self._pending, rejected=token)
        self._pending = token

    def ignore(self, char: str) -> None:
        """Discard input up to and including the next `char` symbol"""
        if self._pending is not None:
            pending, self._pending = self._pending, None
            if pending == Symbol(char):
                return

        ch = self._chars.read()
        while ch and ch != char:
            ch = self._chars.read()

    def _scan_number(self) -> float:
        literal = ""
        ch = self._chars.read()
        while ch in DIGITS:
            literal += ch
            ch = self._chars.read()
        if ch == ".":
            literal += ch
            ch = self._chars.read()
            while ch in DIGITS:
                literal += ch
                ch = self._chars.read()

        if literal == ".":
            self._chars.unread(ch)
            line, column = self._chars.position
            raise BadToken(char=".", line=line, column=column)

        # exponent is only taken when at least one digit follows it
        if ch in ("e", "E"):
            exponent = [ch]
            ch = self._chars.read()
            if ch in ("+", "-"):
                exponent.append(ch)
                ch = self._chars.read()
            if ch in DIGITS:
                while ch in DIGITS:
                    exponent.append(ch)
                    ch = self._chars.read()
                literal += "".join(exponent)
            else:
                self._chars.unread(ch)
                for exponent_char in reversed(exponent[1:]):
                    self._chars.unread(exponent_char)
                ch = exponent[0]

        self._chars.unread(ch)
        return float(literal)
