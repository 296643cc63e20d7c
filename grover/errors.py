import enum
from dataclasses import dataclass
from typing import Optional

from grover.utils import PrintableEnum, point_at


class ErrorCode(PrintableEnum):
    MALFORMED_EXPRESSION = enum.auto()
    LEXER_ERROR = enum.auto()
    PARSER_ERROR = enum.auto()
    EVALUATOR_ERROR = enum.auto()
    ARITHMETIC_ERROR = enum.auto()
    REASSIGN_CONSTANT = enum.auto()


@dataclass
class GroverError(Exception):
    code: ErrorCode
    errmsg: str
    source: Optional[str] = None
    error_idx: Optional[int] = None

    def __str__(self) -> str:
        lines = [f"[{self.code}] {self.errmsg}"]
        if self.source is not None and self.error_idx is not None:
            lines.extend(point_at(self.source, self.error_idx))
        return "\n".join(lines)
