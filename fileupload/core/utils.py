from typing import Iterable, Optional

LIST_SEPARATOR = ', '


def machine_string(items: Iterable[str]) -> str:
    """Join items with commas, e.g. 'jpg,png'."""
    return ','.join(items)


def human_string(items: Iterable[str], last_separator: Optional[str] = None) -> str:
    """
    Join items for display, e.g. 'jpg, png and gif'.

    Args:
        items: Items to join
        last_separator: Replaces the final ', ' when given

    Returns:
        Joined string
    """
    text = LIST_SEPARATOR.join(items)
    if last_separator is not None:
        head, sep, tail = text.rpartition(LIST_SEPARATOR)
        if sep:
            text = f"{head}{last_separator}{tail}"
    return text
