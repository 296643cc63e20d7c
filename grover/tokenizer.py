import enum
import string
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from grover.utils import PrintableEnum


class Associativity(PrintableEnum):
    LEFT = enum.auto()
    RIGHT = enum.auto()


@dataclass(frozen=True)
class OperatorInfo:
    symbol: str
    precedence: int  # lower binds tighter
    associativity: Associativity


class Operator(PrintableEnum):
    POW = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    REM = enum.auto()
    ADD = enum.auto()
    SUB = enum.auto()
    ASSIGN = enum.auto()
    ADD_ASSIGN = enum.auto()
    SUB_ASSIGN = enum.auto()
    MUL_ASSIGN = enum.auto()
    DIV_ASSIGN = enum.auto()
    REM_ASSIGN = enum.auto()

    @property
    def symbol(self) -> str:
        return OPERATOR_TABLE[self].symbol

    @property
    def precedence(self) -> int:
        return OPERATOR_TABLE[self].precedence

    @property
    def associativity(self) -> Associativity:
        return OPERATOR_TABLE[self].associativity

    @property
    def is_assignment(self) -> bool:
        return self.precedence == ASSIGNMENT_PRECEDENCE


ASSIGNMENT_PRECEDENCE = 3

OPERATOR_TABLE: Mapping[Operator, OperatorInfo] = MappingProxyType(
    {
        Operator.POW: OperatorInfo("^", 0, Associativity.RIGHT),
        Operator.MUL: OperatorInfo("*", 1, Associativity.LEFT),
        Operator.DIV: OperatorInfo("/", 1, Associativity.LEFT),
        Operator.REM: OperatorInfo("%", 1, Associativity.LEFT),
        Operator.ADD: OperatorInfo("+", 2, Associativity.LEFT),
        Operator.SUB: OperatorInfo("-", 2, Associativity.LEFT),
        Operator.ASSIGN: OperatorInfo("=", ASSIGNMENT_PRECEDENCE, Associativity.RIGHT),
        Operator.ADD_ASSIGN: OperatorInfo("+=", ASSIGNMENT_PRECEDENCE, Associativity.RIGHT),
        Operator.SUB_ASSIGN: OperatorInfo("-=", ASSIGNMENT_PRECEDENCE, Associativity.RIGHT),
        Operator.MUL_ASSIGN: OperatorInfo("*=", ASSIGNMENT_PRECEDENCE, Associativity.RIGHT),
        Operator.DIV_ASSIGN: OperatorInfo("/=", ASSIGNMENT_PRECEDENCE, Associativity.RIGHT),
        Operator.REM_ASSIGN: OperatorInfo("%=", ASSIGNMENT_PRECEDENCE, Associativity.RIGHT),
    }
)


@dataclass(frozen=True)
class Identifier:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Number:
    value: float

    def __str__(self) -> str:
        if self.value.is_integer():
            return str(int(self.value))
        return repr(self.value)


@dataclass(frozen=True)
class OperatorToken:
    operator: Operator

    def __str__(self) -> str:
        return self.operator.symbol


@dataclass(frozen=True)
class LeftParenthesis:
    def __str__(self) -> str:
        return "("


@dataclass(frozen=True)
class RightParenthesis:
    def __str__(self) -> str:
        return ")"


Token = Identifier | Number | OperatorToken | LeftParenthesis | RightParenthesis
TokenSequence = list[Token]


def render(tokens: TokenSequence) -> str:
    return " ".join(str(t) for t in tokens)


ARITHMETIC_OPERATORS = {
    "+": Operator.ADD,
    "-": Operator.SUB,
    "*": Operator.MUL,
    "/": Operator.DIV,
    "%": Operator.REM,
    "^": Operator.POW,
}

# no "^=": "^" never combines with "="
COMPOUND_ASSIGNMENT_OPERATORS = {
    "+": Operator.ADD_ASSIGN,
    "-": Operator.SUB_ASSIGN,
    "*": Operator.MUL_ASSIGN,
    "/": Operator.DIV_ASSIGN,
    "%": Operator.REM_ASSIGN,
}

MIN_RADIX = 2
MAX_RADIX = 36

_I64_MAX = 2**63 - 1


def _digit_value(c: str) -> Optional[int]:
    if c in string.digits:
        return ord(c) - ord("0")
    if c in string.ascii_letters:
        return ord(c.lower()) - ord("a") + 10
    return None


def _is_digit(c: str, radix: int) -> bool:
    value = _digit_value(c)
    return value is not None and value < radix


def _is_valid_in_identifier(c: str) -> bool:
    return c.isalnum() or c == "_"


class LexerState(enum.Flag):
    GOOD = enum.auto()
    BAD = enum.auto()
    END = enum.auto()


class Lexer:
    """Lazy token stream over source text.

    Iterating yields tokens until the input is exhausted or a malformed
    character sequence is found. In the latter case the lexer turns `bad`,
    stops yielding and keeps the message in `error`; the consumer is expected
    to check it once the stream is drained. A lexer can not be restarted.
    """

    def __init__(self, source: str, radix: int = 10) -> None:
        if not MIN_RADIX <= radix <= MAX_RADIX:
            raise ValueError(f"Radix must be in [{MIN_RADIX}, {MAX_RADIX}], got {radix}")
        self.source = source
        self.radix = radix
        self.state = LexerState.GOOD
        self.error_idx: Optional[int] = None
        self.token_start = 0
        self._error = ""
        self._i = 0

    @property
    def good(self) -> bool:
        return LexerState.GOOD in self.state

    @property
    def bad(self) -> bool:
        return LexerState.BAD in self.state

    @property
    def end(self) -> bool:
        return LexerState.END in self.state

    @property
    def error(self) -> Optional[str]:
        if self.bad:
            return self._error
        return None

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        if not self.good:
            raise StopIteration
        token = self._scan()
        if token is None:
            raise StopIteration
        return token

    def _fail(self, errmsg: str, idx: int) -> None:
        self.state = (self.state & ~LexerState.GOOD) | LexerState.BAD
        self._error = errmsg
        self.error_idx = idx
        return None

    def _peek(self) -> Optional[str]:
        if self._i < len(self.source):
            return self.source[self._i]
        return None

    def _scan(self) -> Optional[Token]:
        code = self.source
        while self._i < len(code) and code[self._i] == " ":
            self._i += 1
        if self._i >= len(code):
            self.state = (self.state & ~LexerState.GOOD) | LexerState.END
            return None

        self.token_start = start = self._i
        c = code[start]
        self._i += 1

        if c == "$":
            first = self._peek()
            if first is None:
                return self._fail("Variable name must be at least one character long.", start)
            if not (first.isalpha() or first == "_"):
                return self._fail(f"Variable name must start with a letter or underscore. Found '{first}'.", self._i)
            self._i += 1
            while self._i < len(code) and _is_valid_in_identifier(code[self._i]):
                self._i += 1
            return Identifier(code[start : self._i])
        elif c == "(":
            return LeftParenthesis()
        elif c == ")":
            return RightParenthesis()
        elif c == "=":
            return OperatorToken(Operator.ASSIGN)
        elif c in ARITHMETIC_OPERATORS:
            if self._peek() == "=" and c in COMPOUND_ASSIGNMENT_OPERATORS:
                self._i += 1
                return OperatorToken(COMPOUND_ASSIGNMENT_OPERATORS[c])
            return OperatorToken(ARITHMETIC_OPERATORS[c])
        elif self._is_valid_in_number(c):
            while self._i < len(code) and self._is_valid_in_number(code[self._i]):
                self._i += 1
            return self._number(code[start : self._i], start)
        else:
            return self._fail(f"Invalid character '{c}'.", start)

    def _is_valid_in_number(self, c: str) -> bool:
        return _is_digit(c, self.radix) or (self.radix == 10 and c == ".")

    def _number(self, text: str, start: int) -> Optional[Number]:
        try:
            if self.radix == 10:
                return Number(float(text))
            value = int(text, self.radix)
        except ValueError:
            return self._fail(f"Could not parse '{text}' to f64.", start)
        if value > _I64_MAX:
            return self._fail(f"Could not parse '{text}' to f64.", start)
        return Number(float(value))
