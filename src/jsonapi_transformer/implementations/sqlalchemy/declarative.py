"""
jsonapi_transformer.implementations.sqlalchemy.declarative module contains a
facade implementation that is handy for use with SQLAlchemy.

Synopsis
--------

.. code-block:: python

   import sqlalchemy as sa
   from sqlalchemy import orm
   from jsonapi_transformer import JsonApiTransformer
   from jsonapi_transformer.implementations.sqlalchemy import declarative_with_defaults

   Base = orm.declarative_base()
   decl = declarative_with_defaults()

   @decl
   class Post(Base):
       __tablename__ = "posts"

       class Meta:
           url_template = "http://example.com/posts/{id}"

       id = sa.Column(sa.Integer(), primary_key=True, nullable=False)
       title = sa.Column(sa.String(), nullable=False)
       author_id = sa.Column(sa.Integer(), sa.ForeignKey("users.id"), nullable=False)
       author = orm.relationship("User")

   decl.configure()

   transformer = JsonApiTransformer(decl.registry)
   doc = transformer.serialize(session.query(Post).all())

"""
import typing

from sqlalchemy import orm  # type: ignore

from ...declarative import Declarative, Meta, handle_meta
from ...exceptions import InvalidDeclarationError
from ...models import Mapping
from ...registry import MappingRegistry
from .defaults import default_extract_properties, id_property_names_for_mapper, type_alias_for_mapper

ExtractPropertiesFn = typing.Callable[[orm.Mapper], typing.Iterable[orm.interfaces.MapperProperty]]


def build_mapping_for_class(
    class_: type,
    meta: typing.Optional[Meta] = None,
    extract_properties_fn: ExtractPropertiesFn = default_extract_properties,
) -> Mapping:
    """
    Builds a :py:class:`Mapping` for an SQLAlchemy-instrumented class.

    The primary key gives the id property, the mapped properties give the properties and
    the relationships, and the table name gives the resource type. Anything declared
    in ``meta`` takes precedence.

    :param type class_: an SQLAlchemy-instrumented class.
    :param Optional[Meta] meta: the declaration for the class.
    :param callable extract_properties_fn: a function that enumerates the mapped properties to expose.
    """
    if meta is None:
        meta = Meta()
    sa_mapper = orm.class_mapper(class_)
    sa_props = list(extract_properties_fn(sa_mapper))
    id_property_names = list(meta.id_properties) or id_property_names_for_mapper(sa_mapper)
    if len(id_property_names) != 1 and not meta.id_properties:
        raise InvalidDeclarationError(
            f"{class_.__name__} has a composite primary key, which needs the id property to be declared"
        )
    type_alias = meta.type_alias or type_alias_for_mapper(sa_mapper)
    url_template = meta.url_template or f"/{type_alias}/{{{id_property_names[0]}}}"
    relationships = set(meta.relationships) | {
        prop.key for prop in sa_props if isinstance(prop, orm.RelationshipProperty)
    }
    return Mapping(
        class_=class_,
        url_template=url_template,
        id_property_names=id_property_names,
        properties=list(meta.properties) or [prop.key for prop in sa_props],
        property_aliases=meta.property_aliases,
        hidden_properties=frozenset(meta.hidden_properties),
        type_alias=type_alias,
        attribute_filter=frozenset(meta.attribute_filter),
        relationships=frozenset(relationships),
        related_links=meta.related_links,
        relationship_links=(
            frozenset(meta.relationship_links) if meta.relationship_links is not None else None
        ),
        related_link_templates=meta.related_link_templates,
        relationship_link_templates=meta.relationship_link_templates,
        accessors=meta.accessors,
    )


class SQLADeclarative(Declarative):
    """
    The facade that derives mappings of SQLAlchemy-instrumented classes from the ORM configuration.
    """

    _extract_properties_fn: ExtractPropertiesFn

    def build_mapping_for_class(self, class_: type) -> Mapping:
        meta_class = getattr(class_, "Meta", None)
        return build_mapping_for_class(
            class_,
            handle_meta(meta_class) if meta_class is not None else None,
            self._extract_properties_fn,
        )

    def configure(self, skip_configure_mappers: bool = False) -> None:
        if not skip_configure_mappers:
            orm.configure_mappers()
        super().configure()

    def __init__(
        self,
        registry: typing.Optional[MappingRegistry] = None,
        extract_properties_fn: ExtractPropertiesFn = default_extract_properties,
    ):
        super().__init__(registry)
        self._extract_properties_fn = extract_properties_fn


def declarative_with_defaults(
    registry: typing.Optional[MappingRegistry] = None,
    extract_properties_fn: typing.Optional[ExtractPropertiesFn] = None,
) -> SQLADeclarative:
    return SQLADeclarative(
        registry=registry,
        extract_properties_fn=(extract_properties_fn or default_extract_properties),
    )
