"""
:py:mod:`jsonapi_transformer.declarative` builds :py:class:`Mapping` objects out of declarations
that live next to the mapped classes.

Synopsis
--------

.. code-block:: python

   from jsonapi_transformer.declarative import Declarative

   decl = Declarative()

   @decl
   @dataclasses.dataclass
   class Post:
       post_id: int
       title: str
       author: "User"

       class Meta:
           url_template = "/posts/{post_id}"
           id_properties = ["post_id"]
           related_links = ["comments"]

   decl.configure()
   transformer = JsonApiTransformer(decl.registry)

"""

import collections.abc
import dataclasses
import logging
import typing

from .exceptions import InvalidDeclarationError
from .models import Accessor, Mapping
from .registry import MappingRegistry
from .serde.utils import english_enumerate

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Meta:
    url_template: typing.Optional[str] = None
    id_properties: typing.Sequence[str] = ()
    properties: typing.Sequence[str] = ()
    property_aliases: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)
    hidden_properties: typing.Iterable[str] = ()
    type_alias: typing.Optional[str] = None
    attribute_filter: typing.Iterable[str] = ()
    relationships: typing.Iterable[str] = ()
    related_links: typing.Sequence[str] = ()
    relationship_links: typing.Optional[typing.Iterable[str]] = None
    related_link_templates: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)
    relationship_link_templates: typing.Mapping[str, typing.Mapping[str, str]] = dataclasses.field(
        default_factory=dict
    )
    accessors: typing.Mapping[str, Accessor] = dataclasses.field(default_factory=dict)


_meta_fields = frozenset(f.name for f in dataclasses.fields(Meta))


def handle_meta(meta: typing.Type) -> Meta:
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    unknowns = sorted(set(attrs) - _meta_fields)
    if unknowns:
        raise InvalidDeclarationError(
            f"unknown declaration(s) in {meta.__qualname__}: {english_enumerate(unknowns)}"
        )
    return Meta(**attrs)


def build_mapping(
    meta: Meta, class_: type, default_url_template: typing.Optional[str] = None
) -> Mapping:
    url_template = meta.url_template or default_url_template
    if not url_template:
        raise InvalidDeclarationError(f"url_template is not declared for {class_.__name__}")
    return Mapping(
        class_=class_,
        url_template=url_template,
        id_property_names=tuple(meta.id_properties) or ("id",),
        properties=meta.properties,
        property_aliases=meta.property_aliases,
        hidden_properties=frozenset(meta.hidden_properties),
        type_alias=meta.type_alias,
        attribute_filter=frozenset(meta.attribute_filter),
        relationships=frozenset(meta.relationships),
        related_links=meta.related_links,
        relationship_links=(
            frozenset(meta.relationship_links) if meta.relationship_links is not None else None
        ),
        related_link_templates=meta.related_link_templates,
        relationship_link_templates=meta.relationship_link_templates,
        accessors=meta.accessors,
    )


def _string_list(config: typing.Mapping[str, typing.Any], key: str) -> typing.List[str]:
    value = config.get(key, ())
    if isinstance(value, str) or not isinstance(value, collections.abc.Iterable):
        raise InvalidDeclarationError(f"{key} must be a list of names")
    return list(value)


def mapping_from_dict(config: typing.Mapping[str, typing.Any]) -> Mapping:
    """
    Builds a :py:class:`Mapping` out of a plain dictionary, such as one loaded from a configuration file.

    .. code-block:: python

       mapping_from_dict(
           {
               "class": Post,
               "alias": "Message",
               "aliased_properties": {"title": "headline"},
               "hide_properties": ["author_id"],
               "id_properties": ["post_id"],
               "urls": {
                   "self": "/posts/{post_id}",
                   "comments": "/posts/{post_id}/comments",
               },
               "relationships": {
                   "author": {
                       "related": "/posts/{post_id}/author",
                       "self": "/posts/{post_id}/relationships/author",
                   },
               },
               "properties": ["post_id", "title", "author"],
               "filter_keys": ["title"],
           }
       )

    Names in ``urls`` other than ``self`` become related links of the resource, expanded from
    their own templates. Only the relationships named in ``relationships`` carry links, whose
    ``self`` and ``related`` templates may be given there.

    :param Mapping[str, Any] config: the configuration.
    :raises InvalidDeclarationError: when the configuration is malformed.
    """
    class_ = config.get("class")
    if not isinstance(class_, type):
        raise InvalidDeclarationError(f"class must be given as a class: {class_!r}")

    urls = config.get("urls", {})
    if not isinstance(urls, collections.abc.Mapping) or "self" not in urls:
        raise InvalidDeclarationError(f"urls.self is not configured for {class_.__name__}")

    aliases = config.get("aliased_properties", {})
    if not isinstance(aliases, collections.abc.Mapping):
        raise InvalidDeclarationError("aliased_properties must be a dictionary")

    relationships = config.get("relationships", {})
    if isinstance(relationships, str) or not isinstance(relationships, collections.abc.Iterable):
        raise InvalidDeclarationError("relationships must be a list of names")
    relationship_link_templates: typing.Dict[str, typing.Mapping[str, str]] = {}
    if isinstance(relationships, collections.abc.Mapping):
        for name, templates in relationships.items():
            templates = templates or {}
            if not isinstance(templates, collections.abc.Mapping) or set(templates) - {
                "self",
                "related",
            }:
                raise InvalidDeclarationError(
                    f"links of relationship {name} must be given as a dictionary of self and related"
                )
            relationship_link_templates[name] = templates

    return Mapping(
        class_=class_,
        url_template=urls["self"],
        id_property_names=_string_list(config, "id_properties") or ("id",),
        properties=_string_list(config, "properties"),
        property_aliases=aliases,
        hidden_properties=frozenset(_string_list(config, "hide_properties")),
        type_alias=config.get("alias"),
        attribute_filter=frozenset(_string_list(config, "filter_keys")),
        related_links=[name for name in urls if name != "self"],
        related_link_templates={name: url for name, url in urls.items() if name != "self"},
        relationship_links=frozenset(relationships),
        relationship_link_templates=relationship_link_templates,
    )


class Declarative:
    """
    The facade collecting classes that carry a nested ``Meta`` declaration, registered with
    :py:meth:`__call__` typically used as a class decorator.
    The mappings are built and added to :py:attr:`registry` on :py:meth:`configure`.
    """

    registry: MappingRegistry
    _declared_classes: typing.List[type]

    def build_mapping_for_class(self, class_: type) -> Mapping:
        meta_class = getattr(class_, "Meta", None)
        meta = handle_meta(meta_class) if meta_class is not None else Meta()
        return build_mapping(meta, class_)

    def configure(self) -> None:
        for class_ in self._declared_classes:
            if class_ in self.registry:
                continue
            self.registry.add(self.build_mapping_for_class(class_))
        logger.debug("%d class(es) configured", len(self.registry))

    T = typing.TypeVar("T")

    def __call__(self, class_: typing.Type[T]) -> typing.Type[T]:
        self._declared_classes.append(class_)
        return class_

    def __init__(self, registry: typing.Optional[MappingRegistry] = None):
        self.registry = registry if registry is not None else MappingRegistry()
        self._declared_classes = []
