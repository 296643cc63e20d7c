import argparse
import logging

from grover.errors import GroverError
from grover.parser import Parser
from grover.runtime import Evaluator
from grover.tokenizer import MAX_RADIX, MIN_RADIX, Lexer, render


def build_arg_parser() -> argparse.ArgumentParser:
    arg_parser = argparse.ArgumentParser(description="Interactive grover expression evaluator")
    arg_parser.add_argument(
        "--radix",
        type=int,
        default=10,
        choices=range(MIN_RADIX, MAX_RADIX + 1),
        metavar=f"{{{MIN_RADIX}..{MAX_RADIX}}}",
        help="radix of numeric literals",
    )
    arg_parser.add_argument("--postfix", action="store_true", help="print postfix form instead of evaluating")
    arg_parser.add_argument("-v", "--verbose", action="store_true")
    return arg_parser


if __name__ == "__main__":
    args = build_arg_parser().parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(name)s: %(message)s")

    evaluator = Evaluator()

    while True:
        try:
            code = input("> ")
        except EOFError:
            break

        try:
            tokens = Parser(Lexer(code, args.radix)).intermediate()
        except GroverError as e:
            print(e)
            continue

        if args.postfix:
            print(render(tokens))
            continue

        try:
            result = evaluator.evaluate(tokens)
        except GroverError as e:
            print(e)
            continue

        print(result)
