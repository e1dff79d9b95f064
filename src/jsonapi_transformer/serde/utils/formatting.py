import typing


def english_enumerate(items: typing.Iterable[str], conj: str = ", and ") -> str:
    """
    Joins ``items`` the way a sentence would list them.

    .. code-block:: python

       english_enumerate(["a", "b", "c"])  # "a, b, and c"
       english_enumerate(["a", "b"], " or ")  # "a or b"
    """
    _items = list(items)
    if len(_items) <= 1:
        return "".join(_items)
    return ", ".join(_items[:-1]) + conj + _items[-1]
