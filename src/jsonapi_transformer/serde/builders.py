import abc
import typing
from collections import OrderedDict

from .models import (
    AttributeValue,
    CollectionDocumentRepr,
    LinkageRepr,
    LinksRepr,
    Repr,
    ResourceIdRepr,
    ResourceRepr,
    SingletonDocumentRepr,
)


class ReprBuilder(metaclass=abc.ABCMeta):
    meta: typing.Dict[str, typing.Any]

    @abc.abstractmethod
    def __call__(self) -> Repr:
        ...  # pragma: nocover

    def __init__(self):
        self.meta = {}


class NodeReprBuilder(ReprBuilder):
    links: typing.Optional[LinksRepr] = None

    def __init__(self):
        super().__init__()
        self.links = None


class LinkageReprBuilder(NodeReprBuilder, metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def __call__(self) -> LinkageRepr:
        ...  # pragma: nocover


class ResourceIdReprBuilder(NodeReprBuilder):
    type: typing.Optional[str] = None
    id: typing.Optional[str] = None

    def __call__(self) -> ResourceIdRepr:
        assert self.type is not None
        assert self.id is not None
        return ResourceIdRepr(
            type=self.type,
            id=self.id,
            meta=self.meta,
        )

    def __init__(
        self,
        type: typing.Optional[str] = None,
        id: typing.Optional[str] = None,
    ):
        super().__init__()
        self.type = type
        self.id = id


class ToManyRelReprBuilder(LinkageReprBuilder):
    data: typing.List[ResourceIdReprBuilder]

    def next(self) -> ResourceIdReprBuilder:
        builder = ResourceIdReprBuilder()
        self.data.append(builder)
        return builder

    def __call__(self) -> LinkageRepr:
        return LinkageRepr(
            data=tuple(b() for b in self.data),
            links=self.links,
            meta=self.meta,
        )

    def __init__(self):
        super().__init__()
        self.data = []


class ToOneRelReprBuilder(LinkageReprBuilder):
    data: typing.Optional[ResourceIdReprBuilder]

    def set(self) -> ResourceIdReprBuilder:
        self.data = builder = ResourceIdReprBuilder()
        return builder

    def nullify(self) -> None:
        self.data = None

    def __call__(self) -> LinkageRepr:
        return LinkageRepr(
            data=self.data() if self.data is not None else None,
            links=self.links,
            meta=self.meta,
        )

    def __init__(self):
        super().__init__()
        self.data = None


class ResourceReprBuilder(NodeReprBuilder):
    type: typing.Optional[str] = None
    id: typing.Optional[str] = None
    attributes: "OrderedDict[str, AttributeValue]"
    relationships: "OrderedDict[str, LinkageReprBuilder]"

    def add_attribute(self, name: str, value: AttributeValue) -> None:
        self.attributes[name] = value

    def next_to_many_relationship(self, name: str) -> ToManyRelReprBuilder:
        rel = self.relationships.get(name)
        if rel is not None:
            if not isinstance(rel, ToManyRelReprBuilder):
                raise TypeError("specified relationship is not a to-many relationship")
        else:
            self.relationships[name] = rel = ToManyRelReprBuilder()
        return typing.cast(ToManyRelReprBuilder, rel)

    def next_to_one_relationship(self, name: str) -> ToOneRelReprBuilder:
        rel = self.relationships.get(name)
        if rel is not None:
            if not isinstance(rel, ToOneRelReprBuilder):
                raise TypeError("specified relationship is not a to-one relationship")
        else:
            self.relationships[name] = rel = ToOneRelReprBuilder()
        return typing.cast(ToOneRelReprBuilder, rel)

    def __call__(self) -> ResourceRepr:
        assert self.type is not None
        assert self.id is not None
        return ResourceRepr(
            type=self.type,
            id=self.id,
            links=self.links,
            meta=self.meta,
            attributes=tuple((k, v) for k, v in self.attributes.items()),
            relationships=tuple((k, v()) for k, v in self.relationships.items()),
        )

    def __init__(self):
        super().__init__()
        self.attributes = OrderedDict()
        self.relationships = OrderedDict()


class DocumentBuilder(NodeReprBuilder, metaclass=abc.ABCMeta):
    """
    A :py:class:`DocumentBuilder` accumulates the primary data and the
    secondary (``included``) resources of a document.

    Included resources are appended in the order :py:meth:`add_included`
    is called, which is the order they appear in the rendered ``included`` array.
    """

    jsonapi: typing.Dict[str, typing.Any]
    included: typing.List[ResourceReprBuilder]

    def new_included(self) -> ResourceReprBuilder:
        return ResourceReprBuilder()

    def add_included(self, builder: ResourceReprBuilder) -> None:
        self.included.append(builder)

    def __init__(self):
        super().__init__()
        self.jsonapi = {}
        self.included = []


class CollectionDocumentBuilder(DocumentBuilder):
    data: typing.List[ResourceReprBuilder]

    def next(self) -> ResourceReprBuilder:
        builder = ResourceReprBuilder()
        self.data.append(builder)
        return builder

    def __call__(self) -> CollectionDocumentRepr:
        return CollectionDocumentRepr(
            data=tuple(b() for b in self.data),
            jsonapi=self.jsonapi or None,
            links=self.links,
            meta=self.meta,
            included=tuple(r() for r in self.included),
        )

    def __init__(self):
        super().__init__()
        self.data = []


class SingletonDocumentBuilder(DocumentBuilder):
    data: ResourceReprBuilder

    def __call__(self) -> SingletonDocumentRepr:
        return SingletonDocumentRepr(
            data=self.data(),
            jsonapi=self.jsonapi or None,
            links=self.links,
            meta=self.meta,
            included=tuple(r() for r in self.included),
        )

    def __init__(self):
        super().__init__()
        self.data = ResourceReprBuilder()
