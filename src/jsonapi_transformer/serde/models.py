"""
Classes in :py:mod:`jsonapi_transformer.serde.models` are abstract representation of JSON:API document elements.
"""

import collections.abc
import dataclasses
import datetime
import decimal
import typing
from collections import OrderedDict

JSONAPI_VERSION = "1.0"


@dataclasses.dataclass
class Repr:
    """
    The base class for any model objects.
    """


@dataclasses.dataclass
class LinkRepr(Repr):
    """
    :py:class:`LinkRepr` represents a single `Link object <https://jsonapi.org/format/1.0/#document-links>`_,
    rendered as ``{"href": ...}``.
    """

    href: str
    meta: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(init=False)
class LinksRepr(Repr):
    """
    :py:class:`LinksRepr` class represents a ``links`` node of JSON:API.
    Links keep the order in which they were added.

    Ref.

    * `Document Links <https://jsonapi.org/format/1.0/#document-links>`_
    * `Related Resource Links <https://jsonapi.org/format/1.0/#document-resource-object-related-resource-links>`_
    """

    links: "OrderedDict[str, LinkRepr]" = dataclasses.field(default_factory=OrderedDict)

    @property
    def self_(self) -> typing.Optional[LinkRepr]:
        return self.links.get("self")

    @property
    def related(self) -> typing.Optional[LinkRepr]:
        return self.links.get("related")

    def __getitem__(self, name: str) -> LinkRepr:
        return self.links[name]

    def __contains__(self, name: str) -> bool:
        return name in self.links

    def __len__(self) -> int:
        return len(self.links)

    def items(self) -> typing.ItemsView[str, LinkRepr]:
        return self.links.items()

    def merge(self, other: "LinksRepr") -> "LinksRepr":
        return LinksRepr(list(self.links.items()) + list(other.links.items()))

    def __init__(
        self,
        links: typing.Union[
            typing.Iterable[typing.Tuple[str, LinkRepr]], typing.Mapping[str, LinkRepr]
        ] = (),
        **kwargs: str,
    ):
        """
        :param links: pairs of a link name and a :py:class:`LinkRepr`.
        :param kwargs: shorthand for links given as plain URLs, ``self_`` standing for ``self``.
        """
        if isinstance(links, collections.abc.Mapping):
            links = links.items()
        self.links = OrderedDict(links)
        for k, v in kwargs.items():
            self.links[k.rstrip("_")] = LinkRepr(href=v)


@dataclasses.dataclass(init=False)
class MetaContainerRepr(Repr):
    """
    :py:class:`MetaContainerRepr` is an abstract base for classes containing ``meta`` node.
    """

    meta: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)

    def __init__(self, *, meta: typing.Optional[typing.Dict[str, typing.Any]] = None):
        """
        :param Optional[Dict[str. Any]] meta: a dictionary containing user-defined information.
        """
        self.meta = meta if meta is not None else {}


@dataclasses.dataclass(init=False)
class NodeRepr(MetaContainerRepr):
    """
    :py:class:`NodeRepr` is an abstract base for classes containing ``links`` node.
    """

    links: typing.Optional[LinksRepr] = None

    def __init__(
        self,
        *,
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        """
        :param Optional[LinksRepr] links: a :py:class:`LinksRepr` instance.
        :param Optional[Dict[str, Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(meta=meta)
        self.links = links


@dataclasses.dataclass(init=False)
class ResourceIdRepr(MetaContainerRepr):
    """
    Instances of :py:class:`ResourceIdRepr` represent `Resource Identifier Objects <https://jsonapi.org/format/1.0/#document-resource-identifier-objects>`_
    """

    type: str  # type: ignore
    id: str  # type: ignore

    @property
    def identity(self) -> typing.Tuple[str, str]:
        return (self.type, self.id)

    def __init__(
        self,
        *,
        type: str,
        id: str,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        """
        :param str type: a value for ``type`` property.
        :param str id: a value for ``id`` property.
        :param Optional[Dict[str. Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(meta=meta)
        self.type = type
        self.id = id


@dataclasses.dataclass(init=False)
class LinkageRepr(NodeRepr):
    """
    :py:class:`LinkageRepr` represents a `Resource Linkage <https://jsonapi.org/format/1.0/#document-resource-object-linkage>`_
    """

    data: typing.Union[None, ResourceIdRepr, typing.Sequence[ResourceIdRepr]] = None

    def __init__(
        self,
        *,
        data: typing.Union[None, ResourceIdRepr, typing.Sequence[ResourceIdRepr]],
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        """
        :param Union[None, ResourceIdRepr, Sequence[ResourceIdRepr]] data: a value for ``data`` property.
        :param Optional[LinksRepr] links: a value for ``links`` property.
        :param Optional[Dict[str. Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(links=links, meta=meta)
        self.data = data


AttributeScalar = typing.Union[
    datetime.datetime, datetime.date, decimal.Decimal, str, int, float, bytes, None
]
AttributeValue = typing.Union[
    typing.Sequence[typing.Any],
    typing.Mapping[str, typing.Any],
    AttributeScalar,
]


@dataclasses.dataclass(init=False)
class ResourceRepr(NodeRepr):
    """
    :py:class:`ResourceRepr` class represents a `Resource Object <https://jsonapi.org/format/1.0/#document-resource-objects>`_.
    """

    type: str  # type: ignore
    id: str  # type: ignore
    attributes: typing.Mapping[str, AttributeValue] = dataclasses.field(default_factory=OrderedDict)  # type: ignore
    relationships: typing.Mapping[str, LinkageRepr] = dataclasses.field(default_factory=OrderedDict)  # type: ignore

    def __getitem__(self, name):
        return self.attributes[name]

    @property
    def identity(self) -> typing.Tuple[str, str]:
        return (self.type, self.id)

    def __init__(
        self,
        *,
        type: str,
        id: str,
        attributes: typing.Iterable[typing.Tuple[str, AttributeValue]] = (),
        relationships: typing.Iterable[typing.Tuple[str, LinkageRepr]] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        """
        :param str type: a value for ``type`` property.
        :param str id: a value for ``id`` property.
        :param Iterable[Tuple[str, AttributeValue]] attributes: a sequence of tuples each of which represents a key-value pair of an attribute.
        :param Iterable[Tuple[str, LinkageRepr]] relationships: a sequence of tuples each of which represent a key-value pair of a relationship.
        :param Optional[LinksRepr] links: a value for ``links`` property.
        :param Optional[Dict[str. Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(links=links, meta=meta)
        self.type = type
        self.id = id
        self.attributes = OrderedDict(attributes)
        self.relationships = OrderedDict(relationships)


@dataclasses.dataclass(init=False)
class DocumentReprBase(NodeRepr):
    jsonapi: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)
    included: typing.Sequence[ResourceRepr] = ()

    def __init__(
        self,
        *,
        jsonapi: typing.Optional[typing.Dict[str, typing.Any]] = None,
        included: typing.Sequence[ResourceRepr] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        """
        :param Optional[Dict[str, Any]] jsonapi: a value for ``jsonapi`` property, defaults to ``{"version": "1.0"}``.
        :param Sequence[ResourceRepr] included: a sequence of :py:class:`ResourceRepr`.
        :param Optional[LinksRepr] links: a value for ``links`` property.
        :param Optional[Dict[str, Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(links=links, meta=meta)
        self.jsonapi = jsonapi if jsonapi is not None else {"version": JSONAPI_VERSION}
        self.included = included


@dataclasses.dataclass(init=False)
class SingletonDocumentRepr(DocumentReprBase):
    data: typing.Optional[ResourceRepr] = None

    def __init__(
        self,
        *,
        data: typing.Optional[ResourceRepr],
        jsonapi: typing.Optional[typing.Dict[str, typing.Any]] = None,
        included: typing.Sequence[ResourceRepr] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        super().__init__(jsonapi=jsonapi, included=included, links=links, meta=meta)
        self.data = data


@dataclasses.dataclass(init=False)
class CollectionDocumentRepr(DocumentReprBase):
    data: typing.Sequence[ResourceRepr] = ()

    def __init__(
        self,
        *,
        data: typing.Sequence[ResourceRepr],
        jsonapi: typing.Optional[typing.Dict[str, typing.Any]] = None,
        included: typing.Sequence[ResourceRepr] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
    ):
        super().__init__(jsonapi=jsonapi, included=included, links=links, meta=meta)
        self.data = data
