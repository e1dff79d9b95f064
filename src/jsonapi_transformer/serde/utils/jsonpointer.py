import typing


def _escape(component: str) -> str:
    return component.replace("~", "~0").replace("/", "~1")


class JSONPointer:
    """
    An immutable `JSON Pointer <https://tools.ietf.org/html/rfc6901>`_ used to
    locate a node within a document being rendered.

    .. code-block:: python

       ptr = JSONPointer() / "data" / "attributes"
       str(ptr[0])  # "/data/attributes/0"
    """

    components: typing.Tuple[str, ...]

    def __truediv__(self, component: str) -> "JSONPointer":
        return JSONPointer(self.components + (component,))

    def __getitem__(self, index: int) -> "JSONPointer":
        return JSONPointer(self.components + (str(index),))

    def __str__(self) -> str:
        return "".join("/" + _escape(c) for c in self.components)

    def __repr__(self) -> str:
        return f"JSONPointer({str(self)!r})"

    def __eq__(self, other: typing.Any) -> bool:
        if not isinstance(other, JSONPointer):
            return NotImplemented
        return self.components == other.components

    def __hash__(self) -> int:
        return hash(self.components)

    def __init__(self, components: typing.Iterable[str] = ()):
        self.components = tuple(components)
