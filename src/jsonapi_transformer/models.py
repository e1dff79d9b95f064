import dataclasses
import types
import typing

from .exceptions import InvalidDeclarationError, UnsupportedIdentifierError
from .naming import normalize_name, type_name_for_class

Accessor = typing.Callable[[typing.Any], typing.Any]


@dataclasses.dataclass(frozen=True, eq=False)
class Mapping:
    """
    :py:class:`Mapping` describes how instances of a single class are turned into resource objects.

    Instances are immutable once created and are meant to be shared by every serialization.

    :param type class_: the class being mapped. Subclasses are covered too unless mapped on their own.
    :param str url_template: the template of the ``self`` link, such as ``/posts/{postId}``.
    :param Sequence[str] id_property_names: the properties identifying a resource. Only a single property is supported at serialization time.
    :param Sequence[str] properties: the properties to consider, in order. Every public property is considered when empty.
    :param Mapping[str, str] property_aliases: renames properties before they are normalized.
    :param AbstractSet[str] hidden_properties: the properties never emitted.
    :param Optional[str] type_alias: the name the resource type is derived from instead of the class name.
    :param AbstractSet[str] attribute_filter: when non-empty, only these attributes are emitted for every resource of this mapping.
    :param AbstractSet[str] relationships: the properties always treated as relationships, even when empty or null.
    :param Sequence[str] related_links: the names of extra links ``{self}/{name}`` put on every resource.
    :param Optional[AbstractSet[str]] relationship_links: the relationships of a primary resource that carry links. All of them do when :py:const:`None`.
    :param Mapping[str, str] related_link_templates: URL templates of related links, by link name, used in place of ``{self}/{name}``.
    :param Mapping[str, Mapping[str, str]] relationship_link_templates: URL templates of the ``self`` and ``related`` links of relationships, by relationship name.
    :param Mapping[str, Callable] accessors: functions used in place of attribute access to read a property.
    """

    class_: type
    url_template: str
    id_property_names: typing.Sequence[str] = ("id",)
    properties: typing.Sequence[str] = ()
    property_aliases: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)
    hidden_properties: typing.AbstractSet[str] = frozenset()
    type_alias: typing.Optional[str] = None
    attribute_filter: typing.AbstractSet[str] = frozenset()
    relationships: typing.AbstractSet[str] = frozenset()
    related_links: typing.Sequence[str] = ()
    relationship_links: typing.Optional[typing.AbstractSet[str]] = None
    related_link_templates: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)
    relationship_link_templates: typing.Mapping[str, typing.Mapping[str, str]] = dataclasses.field(
        default_factory=dict
    )
    accessors: typing.Mapping[str, Accessor] = dataclasses.field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.class_, type):
            raise InvalidDeclarationError(f"{self.class_!r} is not a class")
        if not self.url_template:
            raise InvalidDeclarationError(f"no url template given for {self.class_.__name__}")
        if isinstance(self.id_property_names, str):
            raise InvalidDeclarationError(
                f"id properties of {self.class_.__name__} must be given as a sequence"
            )
        if not self.id_property_names:
            raise InvalidDeclarationError(f"no id properties given for {self.class_.__name__}")

        # normalize the collections so that the instance is fully read-only
        _set = object.__setattr__
        _set(self, "id_property_names", tuple(self.id_property_names))
        _set(self, "properties", tuple(self.properties))
        _set(self, "property_aliases", types.MappingProxyType(dict(self.property_aliases)))
        _set(self, "hidden_properties", frozenset(self.hidden_properties))
        _set(self, "attribute_filter", frozenset(self.attribute_filter))
        _set(self, "relationships", frozenset(self.relationships))
        _set(self, "related_links", tuple(self.related_links))
        if self.relationship_links is not None:
            _set(self, "relationship_links", frozenset(self.relationship_links))
        _set(self, "accessors", types.MappingProxyType(dict(self.accessors)))
        _set(
            self,
            "related_link_templates",
            types.MappingProxyType(dict(self.related_link_templates)),
        )
        _set(
            self,
            "relationship_link_templates",
            types.MappingProxyType(
                {k: types.MappingProxyType(dict(v)) for k, v in self.relationship_link_templates.items()}
            ),
        )

    @property
    def type_name(self) -> str:
        return type_name_for_class(self.class_, self.type_alias)

    @property
    def id_property_name(self) -> str:
        if len(self.id_property_names) != 1:
            raise UnsupportedIdentifierError(self.class_, self.id_property_names)
        return self.id_property_names[0]

    def is_hidden(self, name: str) -> bool:
        return name in self.hidden_properties

    def is_relationship(self, name: str) -> bool:
        return name in self.relationships

    def alias_for(self, name: str) -> str:
        return self.property_aliases.get(name, name)

    def accepts_attribute(self, *names: str) -> bool:
        """
        Tells if an attribute known by any of ``names`` is let through the attribute filter.
        Names are compared in their normalized form.
        """
        if not self.attribute_filter:
            return True
        filter_ = {normalize_name(n) for n in self.attribute_filter}
        return any(normalize_name(name) in filter_ for name in names)

    def wants_relationship_links(self, *names: str) -> bool:
        if self.relationship_links is None:
            return True
        return any(name in self.relationship_links for name in names)

    def get_value(self, obj: typing.Any, name: str) -> typing.Any:
        accessor = self.accessors.get(name)
        if accessor is not None:
            return accessor(obj)
        try:
            return getattr(obj, name)
        except AttributeError as e:
            raise InvalidDeclarationError(
                f"{type(obj).__name__} has no property {name} declared in the mapping of {self.class_.__name__}"
            ) from e
