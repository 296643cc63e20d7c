import enum


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


def point_at(source: str, idx: int, context: int = 10) -> list[str]:
    """Two lines: a window of source around idx (with ellipses if cut) and a caret under idx"""
    start_idx = max(0, idx - context)
    ellipsis_pre = start_idx > 0
    end_idx = min(len(source), idx + context)
    ellipsis_post = end_idx < len(source)
    return [
        ("..." if ellipsis_pre else "") + source[start_idx:end_idx] + ("..." if ellipsis_post else ""),
        " " * (idx - start_idx + (3 if ellipsis_pre else 0)) + "^",
    ]
