"""
:py:mod:`jsonapi_transformer.transformer` turns object graphs into JSON:API documents.

Synopsis
--------

.. code-block:: python

   from jsonapi_transformer import JsonApiTransformer, Mapping, MappingRegistry

   registry = MappingRegistry(
       [
           Mapping(Post, "/posts/{post_id}", id_property_names=["post_id"]),
           Mapping(User, "/users/{user_id}", id_property_names=["user_id"]),
       ]
   )
   transformer = JsonApiTransformer(registry)
   doc = transformer.serialize(post, fields={"post": "title,author"}, includes=["author"])

"""

import collections.abc
import datetime
import decimal
import enum
import logging
import typing
import uuid
from collections import OrderedDict

from .defaults import DefaultNativeInspectorImpl
from .exceptions import InvalidIdentifierError, InvalidStructureError, MappingNotFoundError
from .filters import FieldFilter, IncludeFilter
from .interfaces import NativeInspector
from .links import LinkBuilder
from .models import Mapping
from .naming import normalize_name
from .registry import MappingRegistry
from .serde.builders import (
    CollectionDocumentBuilder,
    DocumentBuilder,
    ResourceIdReprBuilder,
    ResourceReprBuilder,
    SingletonDocumentBuilder,
)
from .serde.models import (
    AttributeValue,
    CollectionDocumentRepr,
    LinkRepr,
    LinksRepr,
    SingletonDocumentRepr,
)
from .serde.renderer import ReprRenderer
from .serde.types import MutableJSONObject

logger = logging.getLogger(__name__)

FieldsSpec = typing.Union[
    FieldFilter, typing.Mapping[str, typing.Union[str, typing.Iterable[str]]]
]
IncludesSpec = typing.Union[IncludeFilter, str, typing.Iterable[str]]
LinksSpec = typing.Union[LinksRepr, typing.Mapping[str, typing.Union[str, LinkRepr]]]

_scalar_types = (
    str,
    bytes,
    bool,
    int,
    float,
    decimal.Decimal,
    datetime.date,
    datetime.time,
    enum.Enum,
    uuid.UUID,
)


class RelationshipType(enum.Enum):
    TO_ONE = "to_one"
    TO_MANY = "to_many"


def _is_sequence(value: typing.Any) -> bool:
    return isinstance(value, (collections.abc.Sequence, collections.abc.Set)) and not isinstance(
        value, (str, bytes, bytearray)
    )


def _to_links_repr(links: LinksSpec) -> LinksRepr:
    if isinstance(links, LinksRepr):
        return links
    return LinksRepr(
        (k, v if isinstance(v, LinkRepr) else LinkRepr(href=v)) for k, v in links.items()
    )


class JsonApiTransformer:
    """
    :py:class:`JsonApiTransformer` builds JSON:API documents out of objects whose classes
    are described in a :py:class:`MappingRegistry`.

    The transformer holds no state specific to a call, and can be shared between threads
    as long as the registry is no longer modified.

    :param MappingRegistry registry: the registry the mappings are looked up in.
    :param Optional[ReprRenderer] renderer: the renderer producing dictionaries out of the document representation.
    :param Optional[NativeInspector] inspector: the inspector used to read properties of the objects.
    :param Optional[LinkBuilder] link_builder: the builder of the links.
    """

    registry: MappingRegistry
    renderer: ReprRenderer
    inspector: NativeInspector
    link_builder: LinkBuilder

    class _ToSerdeContext:
        outer_ctx: "JsonApiTransformer"
        doc_builder: DocumentBuilder
        fields: FieldFilter
        include_filter: typing.Optional[IncludeFilter]
        _known: typing.Set[typing.Tuple[str, str]]

        def identify(self, mapping: Mapping, native: typing.Any) -> typing.Tuple[str, str]:
            name = mapping.id_property_name
            value = self.outer_ctx.inspector.fetch_value(mapping, native, name)
            if value is None:
                raise InvalidIdentifierError(
                    f"{type(native).__name__} has no value for its id property {name}"
                )
            return mapping.type_name, str(value)

        def ordered(self, natives: typing.Iterable[typing.Any]) -> typing.List[typing.Any]:
            if isinstance(natives, collections.abc.Sequence):
                return list(natives)
            # unordered collections are emitted by identity
            registry = self.outer_ctx.registry
            return sorted(natives, key=lambda n: self.identify(registry.lookup(type(n)), n))

        def mark_known(self, identity: typing.Tuple[str, str]) -> bool:
            if identity in self._known:
                return False
            self._known.add(identity)
            return True

        def classify(
            self, mapping: Mapping, name: str, value: typing.Any
        ) -> typing.Optional[RelationshipType]:
            registry = self.outer_ctx.registry
            declared = mapping.is_relationship(name)
            if value is None:
                return RelationshipType.TO_ONE if declared else None
            if registry.is_mapped(value):
                return RelationshipType.TO_ONE
            if _is_sequence(value):
                unmapped = [item for item in value if not registry.is_mapped(item)]
                if not unmapped:
                    return RelationshipType.TO_MANY if (declared or len(value) > 0) else None
                if declared or len(unmapped) < len(value):
                    raise MappingNotFoundError(type(unmapped[0]))
                return None
            if declared:
                raise MappingNotFoundError(type(value))
            return None

        def flatten(
            self, value: typing.Any, _seen: typing.FrozenSet[int] = frozenset()
        ) -> AttributeValue:
            if value is None or isinstance(value, _scalar_types):
                return value
            if id(value) in _seen:
                raise InvalidStructureError(
                    f"{type(value).__name__} object contains a reference to itself"
                )
            seen = _seen | {id(value)}
            if isinstance(value, collections.abc.Mapping):
                return OrderedDict(
                    (normalize_name(str(k)), self.flatten(v, seen)) for k, v in value.items()
                )
            elif _is_sequence(value):
                return [self.flatten(v, seen) for v in value]
            elif hasattr(value, "__dict__") or hasattr(value, "__slots__"):
                return OrderedDict(
                    (normalize_name(k), self.flatten(v, seen))
                    for k, v in self.outer_ctx.inspector.public_properties(value)
                )
            else:
                # left to the renderer, which rejects unsupported values
                return value

        def build_resource(
            self,
            builder: ResourceReprBuilder,
            mapping: Mapping,
            native: typing.Any,
            primary: bool,
            chain: typing.Tuple[str, ...] = (),
            ancestors: typing.Tuple[str, ...] = (),
        ) -> None:
            """
            Fills ``builder`` with the resource object built out of ``native``.

            :param ResourceReprBuilder builder: the builder to fill.
            :param Mapping mapping: the mapping ``native`` is governed by.
            :param Any native: the object to transform.
            :param bool primary: :py:const:`True` if the resource goes to the primary data.
            :param Tuple[str, ...] chain: the names of the relationships followed from the primary resource to ``native``.
            :param Tuple[str, ...] ancestors: the types of the resources on the way to ``native``, nearest first.
            """
            outer_ctx = self.outer_ctx
            builder.type, builder.id = type_name, id_value = self.identify(mapping, native)
            href = outer_ctx.link_builder.build_href(mapping, id_value, type_name)
            builder.links = outer_ctx.link_builder.build_resource_links(
                mapping, href, id_value, type_name
            )
            sub_ancestors = (type_name,) + ancestors

            for name in outer_ctx.inspector.property_names(mapping, native):
                value = outer_ctx.inspector.fetch_value(mapping, native, name)
                alias = mapping.alias_for(name)
                wire_name = normalize_name(alias)
                rel_type = self.classify(mapping, name, value)
                if rel_type is None:
                    if not mapping.accepts_attribute(name, alias):
                        continue
                    if primary and not self.fields.allows(type_name, wire_name):
                        continue
                    builder.add_attribute(wire_name, self.flatten(value))
                    continue

                if primary and not self.fields.allows(type_name, wire_name):
                    continue
                sub_chain = chain + (wire_name,)
                if rel_type is RelationshipType.TO_ONE:
                    to_one = builder.next_to_one_relationship(wire_name)
                    if value is None:
                        to_one.nullify()
                    else:
                        self.visit_related(to_one.set(), value, sub_chain, sub_ancestors)
                    rel: typing.Any = to_one
                else:
                    to_many = builder.next_to_many_relationship(wire_name)
                    for item in self.ordered(value):
                        self.visit_related(to_many.next(), item, sub_chain, sub_ancestors)
                    rel = to_many
                if primary and mapping.wants_relationship_links(name, wire_name):
                    rel.links = outer_ctx.link_builder.build_relationship_links(
                        mapping, href, id_value, type_name, name, wire_name
                    )

        def visit_related(
            self,
            builder: ResourceIdReprBuilder,
            native: typing.Any,
            chain: typing.Tuple[str, ...],
            ancestors: typing.Tuple[str, ...],
        ) -> None:
            mapping = self.outer_ctx.registry.lookup(type(native))
            builder.type, builder.id = identity = self.identify(mapping, native)
            if identity in self._known:
                return
            if self.include_filter is not None and not self.include_filter.matches(
                builder.type, chain, ancestors
            ):
                logger.debug("%s/%s not included (%s)", builder.type, builder.id, ".".join(chain))
                return
            self.mark_known(identity)
            included = self.doc_builder.new_included()
            self.build_resource(included, mapping, native, False, chain, ancestors)
            # children precede their parent in the included section
            self.doc_builder.add_included(included)

        def __init__(
            self,
            outer_ctx: "JsonApiTransformer",
            doc_builder: DocumentBuilder,
            fields: FieldFilter,
            include_filter: typing.Optional[IncludeFilter],
        ):
            self.outer_ctx = outer_ctx
            self.doc_builder = doc_builder
            self.fields = fields
            self.include_filter = include_filter
            self._known = set()

    def create_to_serde_context(
        self,
        builder: DocumentBuilder,
        fields: typing.Optional[FieldsSpec] = None,
        includes: typing.Optional[IncludesSpec] = None,
    ) -> "JsonApiTransformer._ToSerdeContext":
        if fields is None:
            fields = FieldFilter()
        elif not isinstance(fields, FieldFilter):
            fields = FieldFilter(fields)
        if includes is not None and not isinstance(includes, IncludeFilter):
            includes = IncludeFilter(includes)
        return self._ToSerdeContext(
            outer_ctx=self,
            doc_builder=builder,
            fields=fields,
            include_filter=includes,
        )

    def build_document(
        self,
        value: typing.Any,
        fields: typing.Optional[FieldsSpec] = None,
        includes: typing.Optional[IncludesSpec] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        links: typing.Optional[LinksSpec] = None,
    ) -> typing.Union[SingletonDocumentRepr, CollectionDocumentRepr]:
        """
        Builds the representation of the document for ``value``, which is either a single object
        or a sequence of objects.

        :param Any value: the object(s) to transform.
        :param fields: sparse fieldsets, given as a :py:class:`FieldFilter` or a mapping of a type name to field names.
        :param includes: the include paths, given as an :py:class:`IncludeFilter`, a comma-separated string or a sequence of paths. Every related resource is included when :py:const:`None`.
        :param meta: the ``meta`` of the document.
        :param links: the links added to the top-level ``links``.
        :raises EmptyRegistryError: when the registry holds no mapping.
        :raises MappingNotFoundError: when an object met on the way has no mapping.
        """
        self.registry.require_non_empty()

        doc_builder: DocumentBuilder
        if _is_sequence(value):
            collection_builder = doc_builder = CollectionDocumentBuilder()
            ctx = self.create_to_serde_context(doc_builder, fields, includes)
            natives = ctx.ordered(value)
            mappings = [self.registry.lookup(type(native)) for native in natives]
            # primary resources never show up in the included section
            for mapping, native in zip(mappings, natives):
                ctx.mark_known(ctx.identify(mapping, native))
            for mapping, native in zip(mappings, natives):
                ctx.build_resource(collection_builder.next(), mapping, native, True)
        else:
            mapping = self.registry.lookup(type(value))
            singleton_builder = doc_builder = SingletonDocumentBuilder()
            ctx = self.create_to_serde_context(doc_builder, fields, includes)
            ctx.mark_known(ctx.identify(mapping, value))
            ctx.build_resource(singleton_builder.data, mapping, value, True)
            if singleton_builder.data.links is not None:
                doc_builder.links = LinksRepr(singleton_builder.data.links.items())

        if links:
            extra_links = _to_links_repr(links)
            doc_builder.links = (
                doc_builder.links.merge(extra_links)
                if doc_builder.links is not None
                else extra_links
            )
        if meta:
            doc_builder.meta = dict(meta)

        logger.debug(
            "built a document with %d included resource(s)", len(doc_builder.included)
        )
        return doc_builder()

    def serialize(
        self,
        value: typing.Any,
        fields: typing.Optional[FieldsSpec] = None,
        includes: typing.Optional[IncludesSpec] = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        links: typing.Optional[LinksSpec] = None,
    ) -> MutableJSONObject:
        """
        Transforms ``value`` into a JSON:API document made of dictionaries, lists and JSON scalars.
        Takes the same arguments as :py:meth:`build_document`.
        """
        return self.renderer(self.build_document(value, fields, includes, meta, links))

    def __init__(
        self,
        registry: MappingRegistry,
        renderer: typing.Optional[ReprRenderer] = None,
        inspector: typing.Optional[NativeInspector] = None,
        link_builder: typing.Optional[LinkBuilder] = None,
    ):
        self.registry = registry
        self.renderer = renderer if renderer is not None else ReprRenderer()
        self.inspector = inspector if inspector is not None else DefaultNativeInspectorImpl()
        self.link_builder = link_builder if link_builder is not None else LinkBuilder()
