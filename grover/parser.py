import enum
import logging
from typing import NoReturn

from grover.errors import ErrorCode, GroverError
from grover.tokenizer import (
    Associativity,
    Identifier,
    LeftParenthesis,
    Lexer,
    Number,
    Operator,
    OperatorToken,
    RightParenthesis,
    Token,
    TokenSequence,
    render,
)

logger = logging.getLogger(__name__)


class Expect(enum.Flag):
    IDENTIFIER = 1
    NUMBER = 2
    UNARY_PLUS = 4
    UNARY_MINUS = 8
    LEFT_PARENTHESIS = 16
    ASSIGNMENT_OPERATOR = 32
    ARITHMETIC_OPERATOR = 64
    RIGHT_PARENTHESIS = 128

    VALUE_START = IDENTIFIER | NUMBER | UNARY_PLUS | UNARY_MINUS | LEFT_PARENTHESIS
    AFTER_VALUE = ASSIGNMENT_OPERATOR | ARITHMETIC_OPERATOR | RIGHT_PARENTHESIS


UNARY_OPERATORS = {
    Operator.ADD: (Expect.UNARY_PLUS, Number(1.0)),
    Operator.SUB: (Expect.UNARY_MINUS, Number(-1.0)),
}


def _describe(token: Token) -> str:
    if isinstance(token, Identifier):
        return f"identifier {token.name!r}"
    elif isinstance(token, Number):
        return f"number {str(token)!r}"
    elif isinstance(token, OperatorToken):
        return f"operator {token.operator.symbol!r}"
    else:
        return f"parenthesis {str(token)!r}"


class Parser:
    """Reorders the lexer's infix token stream into postfix (shunting-yard).

    Unary plus and minus are rewritten as multiplication by +1 / -1, so the
    postfix output only ever contains binary operators.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer

    def intermediate(self) -> TokenSequence:
        output: TokenSequence = []
        stack: list[Token] = []
        depth = 0
        expected = Expect.VALUE_START

        for token in self.lexer:
            if isinstance(token, (Identifier, Number)):
                self._check(expected, Expect.IDENTIFIER if isinstance(token, Identifier) else Expect.NUMBER, token)
                output.append(token)
                expected = Expect.AFTER_VALUE
            elif isinstance(token, OperatorToken):
                operator = token.operator
                if operator in UNARY_OPERATORS:
                    unary_class, factor = UNARY_OPERATORS[operator]
                    self._check(expected, unary_class | Expect.ARITHMETIC_OPERATOR, token)
                    if unary_class in expected:
                        output.append(factor)
                        stack.append(OperatorToken(Operator.MUL))
                        expected = Expect.VALUE_START
                        continue
                elif operator.is_assignment:
                    self._check(expected, Expect.ASSIGNMENT_OPERATOR, token)
                else:
                    self._check(expected, Expect.ARITHMETIC_OPERATOR, token)
                expected = Expect.VALUE_START
                self._resolve_precedence(operator, stack, output)
                stack.append(token)
            elif isinstance(token, LeftParenthesis):
                self._check(expected, Expect.LEFT_PARENTHESIS, token)
                depth += 1
                stack.append(token)
                expected = Expect.VALUE_START
            elif isinstance(token, RightParenthesis):
                if depth == 0:
                    self._fail(ErrorCode.MALFORMED_EXPRESSION, "Dangling right parenthesis.")
                self._check(expected, Expect.RIGHT_PARENTHESIS, token)
                depth -= 1
                while stack and not isinstance(stack[-1], LeftParenthesis):
                    output.append(self._pop_operator(stack))
                if not stack:
                    self._fail(ErrorCode.PARSER_ERROR, "Left parenthesis missing from the operator stack.")
                stack.pop()
            else:
                self._fail(ErrorCode.PARSER_ERROR, f"Unknown token {token!r}.")

        if self.lexer.bad:
            raise GroverError(
                ErrorCode.LEXER_ERROR, self.lexer.error or "", source=self.lexer.source, error_idx=self.lexer.error_idx
            )
        if expected != Expect.AFTER_VALUE:
            raise GroverError(
                ErrorCode.MALFORMED_EXPRESSION,
                "Unexpected end of expression.",
                source=self.lexer.source,
                error_idx=len(self.lexer.source),
            )
        if depth != 0:
            raise GroverError(
                ErrorCode.MALFORMED_EXPRESSION,
                "Unclosed left parenthesis.",
                source=self.lexer.source,
                error_idx=len(self.lexer.source),
            )

        while stack:
            output.append(self._pop_operator(stack))

        logger.debug("Postfix: %s", render(output))
        return output

    def _check(self, expected: Expect, accepted: Expect, token: Token) -> None:
        if not expected & accepted:
            self._fail(ErrorCode.MALFORMED_EXPRESSION, f"Unexpected {_describe(token)}.")

    def _resolve_precedence(self, incoming: Operator, stack: list[Token], output: TokenSequence) -> None:
        while stack:
            top = stack[-1]
            if isinstance(top, LeftParenthesis):
                break
            if not isinstance(top, OperatorToken):
                self._fail(ErrorCode.PARSER_ERROR, f"Expected an operator on the operator stack, found {top!r}.")
            if top.operator.precedence < incoming.precedence or (
                top.operator.precedence == incoming.precedence and incoming.associativity is Associativity.LEFT
            ):
                output.append(stack.pop())
            else:
                break

    def _pop_operator(self, stack: list[Token]) -> Token:
        token = stack.pop()
        if not isinstance(token, OperatorToken):
            self._fail(ErrorCode.PARSER_ERROR, f"Expected an operator on the operator stack, found {token!r}.")
        return token

    def _fail(self, code: ErrorCode, errmsg: str) -> NoReturn:
        raise GroverError(code, errmsg, source=self.lexer.source, error_idx=self.lexer.token_start)
