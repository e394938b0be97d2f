from typing import Sequence


def concat_with_and(texts: Sequence[str]) -> str:
    """``a and b`` for two items, ``a, b, and c`` for more."""
    texts = list(texts)
    if len(texts) <= 2:
        return " and ".join(texts)
    return f"{', '.join(texts[:-1])}, and {texts[-1]}"
