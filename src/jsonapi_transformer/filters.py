import typing
from collections import OrderedDict

from .naming import normalize_name


def _split(value: typing.Union[str, typing.Iterable[str]]) -> typing.List[str]:
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    else:
        return [v.strip() for v in value if v.strip()]


class FieldFilter:
    """
    :py:class:`FieldFilter` represents sparse fieldsets, the set of fields requested per resource type.

    .. code-block:: python

       fields = FieldFilter({"post": "title,body"})
       fields.allows("post", "title")  # True
       fields.allows("post", "author")  # False
       fields.allows("user", "name")  # True, as no field is given for "user"
    """

    _fields: "OrderedDict[str, typing.List[str]]"

    def add_field(self, type_name: str, field_name: str) -> None:
        fields = self._fields.setdefault(normalize_name(type_name), [])
        field_name = normalize_name(field_name)
        if field_name not in fields:
            fields.append(field_name)

    def fields_for(self, type_name: str) -> typing.Sequence[str]:
        return tuple(self._fields.get(normalize_name(type_name), ()))

    def allows(self, type_name: str, name: str) -> bool:
        fields = self._fields.get(normalize_name(type_name))
        if fields is None:
            return True
        return normalize_name(name) in fields

    def __bool__(self) -> bool:
        return bool(self._fields)

    def __init__(
        self,
        fields: typing.Optional[
            typing.Mapping[str, typing.Union[str, typing.Iterable[str]]]
        ] = None,
    ):
        self._fields = OrderedDict()
        if fields is not None:
            for type_name, field_names in fields.items():
                for field_name in _split(field_names):
                    self.add_field(type_name, field_name)


class IncludeFilter:
    """
    :py:class:`IncludeFilter` tells which related resources go to the ``included`` section.

    Each path is a dot-separated list of names. A path selects a related resource when either

    * the names of the relationships followed from the primary resource to it form a prefix of the path (``comments.user`` selects comments and their users), or
    * the first name is the type of the resource and the remaining names are the types of its nearest ancestors (``user.post`` selects users related to a post).
    """

    _paths: typing.List[typing.Tuple[str, ...]]

    @property
    def paths(self) -> typing.Sequence[str]:
        return tuple(".".join(p) for p in self._paths)

    def add(self, path: str) -> None:
        segments = tuple(normalize_name(s) for s in path.split(".") if s)
        if segments and segments not in self._paths:
            self._paths.append(segments)

    def matches(
        self,
        type_name: str,
        relationship_chain: typing.Sequence[str],
        ancestor_types: typing.Sequence[str],
    ) -> bool:
        """
        :param str type_name: the wire type of the related resource.
        :param Sequence[str] relationship_chain: the names of the relationships followed from the primary resource, the last one leading to the related resource.
        :param Sequence[str] ancestor_types: the wire types of the resources on the way, nearest first.
        """
        chain = tuple(relationship_chain)
        for segments in self._paths:
            if chain and segments[: len(chain)] == chain:
                return True
            if (
                segments[0] == type_name
                and tuple(ancestor_types[: len(segments) - 1]) == segments[1:]
            ):
                return True
        return False

    def __bool__(self) -> bool:
        return bool(self._paths)

    def __init__(self, paths: typing.Union[str, typing.Iterable[str]] = ()):
        self._paths = []
        for path in _split(paths):
            self.add(path)
