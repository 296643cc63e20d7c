from grover.errors import GroverError
from grover.parser import Parser
from grover.runtime import Evaluator
from grover.tokenizer import Lexer, render

for code in [
    "5",
    "-1",
    "1 + 1",
    "-1 + 1",
    "1 + -1",
    "4 + 6 * 3",
    "(5 + 4) * 2",
    "(1 + (1 * 1))^(1 + 1)",
    "80225/+2",
    "7/6/2000",
    "2^3^2",
    "7 % 3",
    "$age = 5",
    "$a = $b = 10",
    "$var = (1 + 14 * (54^2))",
    "$x += 2",
    "5 / 0",
    "(5 + 6",
    "5 + 6)",
    "$1",
    "3 # 4",
]:
    print("=" * 10)
    print(f"code: {code!r}")

    print(f"tokens: {' '.join(repr(t) for t in Lexer(code))}")

    try:
        postfix = Parser(Lexer(code)).intermediate()
    except GroverError as e:
        print(e)
        continue
    print(f"postfix: {render(postfix)}")

    evaluator = Evaluator()
    try:
        result = evaluator.evaluate(postfix)
    except GroverError as e:
        print(e)
        continue
    print(f"result: {result}")
    print(f"variables: {evaluator.variables}")

print("=" * 10)
print("radix 16: 'ff + 1' ->", Evaluator().evaluate(Parser(Lexer("ff + 1", 16)).intermediate()))
