import logging
import math
from typing import Callable

from grover.errors import ErrorCode, GroverError
from grover.tokenizer import Identifier, Number, Operator, OperatorToken, Token, TokenSequence

logger = logging.getLogger(__name__)


ArithmeticImpl = Callable[[float, float], float]


def _is_odd_integer(x: float) -> bool:
    return x.is_integer() and x % 2 == 1


def _power(a: float, b: float) -> float:
    """IEEE pow: math.pow raises where it would give an infinity or NaN"""
    try:
        return math.pow(a, b)
    except OverflowError:
        return -math.inf if a < 0 and _is_odd_integer(b) else math.inf
    except ValueError:
        if a == 0.0:
            # negative exponent; -0.0 keeps its sign for odd integer exponents
            return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
        return math.nan


def _remainder(a: float, b: float) -> float:
    try:
        return math.fmod(a, b)
    except ValueError:
        # infinite dividend
        return math.nan


arithmetic_impls: dict[Operator, ArithmeticImpl] = {
    Operator.ADD: lambda a, b: a + b,
    Operator.SUB: lambda a, b: a - b,
    Operator.MUL: lambda a, b: a * b,
    Operator.DIV: lambda a, b: a / b,
    Operator.REM: _remainder,
    Operator.POW: _power,
}

compound_assignments: dict[Operator, Operator] = {
    Operator.ADD_ASSIGN: Operator.ADD,
    Operator.SUB_ASSIGN: Operator.SUB,
    Operator.MUL_ASSIGN: Operator.MUL,
    Operator.DIV_ASSIGN: Operator.DIV,
    Operator.REM_ASSIGN: Operator.REM,
}

zero_divisor_errors = {
    Operator.DIV: "Division by zero.",
    Operator.REM: "Remainder by zero.",
}


def eval_arithmetic(operator: Operator, a: float, b: float) -> float:
    if operator in zero_divisor_errors and b == 0.0:
        raise GroverError(ErrorCode.ARITHMETIC_ERROR, zero_divisor_errors[operator])
    impl = arithmetic_impls.get(operator)
    if impl is None:
        raise GroverError(ErrorCode.EVALUATOR_ERROR, f"Unexpected arithmetic operator: {operator}")
    return impl(a, b)


class Evaluator:
    """Postfix stack machine with a variable environment that outlives a single evaluation.

    Every identifier the evaluator sees is bound, to 0.0 if it was never
    assigned, so repeated `evaluate` calls on one instance form a session.
    """

    def __init__(self) -> None:
        self.variables: dict[str, float] = dict()
        self.constants: set[str] = set()
        self._value_stack: list[Token] = []

    def is_constant(self, name: str) -> bool:
        return name in self.constants

    def declare_constant(self, name: str, value: float) -> None:
        """Bind name to value and write-protect it; no syntax of the language does this"""
        if self.is_constant(name):
            raise GroverError(ErrorCode.REASSIGN_CONSTANT, f"Cannot reassign constant {name!r}.")
        self.variables[name] = value
        self.constants.add(name)

    def evaluate(self, tokens: TokenSequence) -> float:
        self._value_stack = []
        for token in tokens:
            if isinstance(token, Number):
                self._value_stack.append(token)
            elif isinstance(token, Identifier):
                self.variables.setdefault(token.name, 0.0)
                self._value_stack.append(token)
            elif isinstance(token, OperatorToken):
                self._value_stack.append(Number(self._apply(token.operator)))
            else:
                raise GroverError(ErrorCode.EVALUATOR_ERROR, f"Unexpected token in postfix sequence: {token}")

        if len(self._value_stack) != 1:
            raise GroverError(
                ErrorCode.EVALUATOR_ERROR,
                f"Expected exactly one value after evaluation, found {len(self._value_stack)}.",
            )
        return self._resolve(self._value_stack.pop())

    def _apply(self, operator: Operator) -> float:
        if len(self._value_stack) < 2:
            raise GroverError(ErrorCode.EVALUATOR_ERROR, f"Not enough operands for {operator.symbol!r}.")
        rhs = self._resolve(self._value_stack.pop())
        lhs = self._value_stack.pop()

        if not operator.is_assignment:
            return eval_arithmetic(operator, self._resolve(lhs), rhs)

        if not isinstance(lhs, Identifier):
            raise GroverError(
                ErrorCode.EVALUATOR_ERROR, f"Left operand of {operator.symbol!r} must be a variable, found {lhs}."
            )
        if self.is_constant(lhs.name):
            raise GroverError(ErrorCode.REASSIGN_CONSTANT, f"Cannot reassign constant {lhs.name!r}.")

        if operator is Operator.ASSIGN:
            value = rhs
        else:
            value = eval_arithmetic(compound_assignments[operator], self._resolve(lhs), rhs)
        self.variables[lhs.name] = value
        logger.debug("%s %s %r -> %r", lhs.name, operator.symbol, rhs, value)
        return value

    def _resolve(self, token: Token) -> float:
        if isinstance(token, Number):
            return token.value
        elif isinstance(token, Identifier):
            if token.name not in self.variables:
                raise GroverError(ErrorCode.EVALUATOR_ERROR, f"Reference to undefined variable {token.name!r}.")
            return self.variables[token.name]
        else:
            raise GroverError(ErrorCode.EVALUATOR_ERROR, f"Expected a value on the stack, found {token}.")
