import pytest

from grover.errors import ErrorCode, GroverError
from grover.parser import Parser
from grover.tokenizer import Lexer, Number, Operator, OperatorToken, render


@pytest.mark.parametrize(
    "code, expected_postfix",
    [
        pytest.param("(5 + 4) * 2", "5 4 + 2 *", id="scenario-a"),
        pytest.param("(1 + (1 * 1))^(1 + 1)", "1 1 1 * + 1 1 + ^", id="scenario-b"),
        pytest.param("$age = 5", "$age 5 =", id="scenario-c"),
        pytest.param("1 + 2 * 3", "1 2 3 * +"),
        pytest.param("1 * 2 + 3", "1 2 * 3 +"),
        pytest.param("1 - 2 - 3", "1 2 - 3 -"),
        pytest.param("8 / 4 % 3", "8 4 / 3 %"),
        pytest.param("2 ^ 3 ^ 2", "2 3 2 ^ ^"),
        pytest.param("$a = $b = 1", "$a $b 1 = ="),
        pytest.param("$a += 1 + 2", "$a 1 2 + +="),
        pytest.param("$a %= $b ^ 2", "$a $b 2 ^ %="),
        pytest.param("-5", "-1 5 *"),
        pytest.param("+5", "1 5 *"),
        pytest.param("--5", "-1 -1 5 * *"),
        pytest.param("2 * -3", "2 -1 3 * *"),
        pytest.param("-2 ^ 2", "-1 2 2 ^ *"),
        pytest.param("-3 + 4", "-1 3 * 4 +"),
        pytest.param("-(1 + 2)", "-1 1 2 + *"),
        pytest.param("1.5 % 2", "1.5 2 %"),
        pytest.param("(((1)))", "1"),
    ],
)
def test_postfix(code: str, expected_postfix: str) -> None:
    assert render(Parser(Lexer(code)).intermediate()) == expected_postfix


def test_unary_minus_desugars_to_multiplication() -> None:
    assert Parser(Lexer("-$x")).intermediate()[0] == Number(-1.0)
    assert Parser(Lexer("-$x")).intermediate()[-1] == OperatorToken(Operator.MUL)


@pytest.mark.parametrize(
    "code, expected_code, expected_errmsg",
    [
        pytest.param(")", ErrorCode.MALFORMED_EXPRESSION, "Dangling right parenthesis."),
        pytest.param("5 + 6)", ErrorCode.MALFORMED_EXPRESSION, "Dangling right parenthesis."),
        pytest.param("(1)) + (2", ErrorCode.MALFORMED_EXPRESSION, "Dangling right parenthesis."),
        pytest.param("(5 + 6", ErrorCode.MALFORMED_EXPRESSION, "Unclosed left parenthesis.", id="scenario-e"),
        pytest.param("((5)", ErrorCode.MALFORMED_EXPRESSION, "Unclosed left parenthesis."),
        pytest.param("", ErrorCode.MALFORMED_EXPRESSION, "Unexpected end of expression."),
        pytest.param("5 +", ErrorCode.MALFORMED_EXPRESSION, "Unexpected end of expression."),
        pytest.param("$x =", ErrorCode.MALFORMED_EXPRESSION, "Unexpected end of expression."),
        pytest.param("(", ErrorCode.MALFORMED_EXPRESSION, "Unexpected end of expression."),
        pytest.param("5 5", ErrorCode.MALFORMED_EXPRESSION, "Unexpected number '5'."),
        pytest.param("$a $b", ErrorCode.MALFORMED_EXPRESSION, "Unexpected identifier '$b'."),
        pytest.param("()", ErrorCode.MALFORMED_EXPRESSION, "Unexpected parenthesis ')'."),
        pytest.param("(1 +)", ErrorCode.MALFORMED_EXPRESSION, "Unexpected parenthesis ')'."),
        pytest.param("5 (", ErrorCode.MALFORMED_EXPRESSION, "Unexpected parenthesis '('."),
        pytest.param("* 5", ErrorCode.MALFORMED_EXPRESSION, "Unexpected operator '*'."),
        pytest.param("= 5", ErrorCode.MALFORMED_EXPRESSION, "Unexpected operator '='."),
        pytest.param("5 + * 5", ErrorCode.MALFORMED_EXPRESSION, "Unexpected operator '*'."),
        pytest.param("2 ^= 3", ErrorCode.MALFORMED_EXPRESSION, "Unexpected operator '='."),
        pytest.param("1 + #", ErrorCode.LEXER_ERROR, "Invalid character '#'."),
        pytest.param("$1 + 1", ErrorCode.LEXER_ERROR, "Variable name must start with a letter or underscore. Found '1'."),
    ],
)
def test_parse_error(code: str, expected_code: ErrorCode, expected_errmsg: str) -> None:
    with pytest.raises(GroverError) as exc_info:
        Parser(Lexer(code)).intermediate()
    assert exc_info.value.code is expected_code
    assert exc_info.value.errmsg == expected_errmsg


def test_parse_error_points_at_token() -> None:
    with pytest.raises(GroverError) as exc_info:
        Parser(Lexer("5 5")).intermediate()
    assert str(exc_info.value) == "\n".join(["[MALFORMED_EXPRESSION] Unexpected number '5'.", "5 5", "  ^"])


def test_lexer_error_points_at_character() -> None:
    code = "$value = 12345 + 678 # 9"
    with pytest.raises(GroverError) as exc_info:
        Parser(Lexer(code)).intermediate()
    assert exc_info.value.error_idx == code.index("#")
    assert str(exc_info.value) == "\n".join(
        ["[LEXER_ERROR] Invalid character '#'.", "...345 + 678 # 9", " " * 13 + "^"]
    )


def test_second_parse_sees_drained_lexer() -> None:
    parser = Parser(Lexer("1 + 2"))
    assert render(parser.intermediate()) == "1 2 +"
    with pytest.raises(GroverError) as exc_info:
        parser.intermediate()
    assert exc_info.value.code is ErrorCode.MALFORMED_EXPRESSION
