import re
import typing

from .exceptions import InvalidDeclarationError
from .models import Mapping
from .serde.models import LinkRepr, LinksRepr
from .serde.utils import english_enumerate

_placeholder = re.compile(r"\{([^{}]+)\}")


class LinkBuilder:
    """
    :py:class:`LinkBuilder` expands the URL templates of a :py:class:`Mapping` into the links of a resource.

    A template placeholder is filled with the resource id when it is named after the id property,
    after the resource type, or when it is the only placeholder of the template.

    .. code-block:: python

       builder = LinkBuilder()
       builder.build_href(post_mapping, "9", "post")  # "/posts/9" for "/posts/{postId}"
    """

    def expand(self, mapping: Mapping, template: str, id_value: str, type_name: str) -> str:
        names = _placeholder.findall(template)
        if not names:
            return template

        candidates = [mapping.id_property_name, type_name]
        for name in candidates:
            if name in names:
                return template.replace("{" + name + "}", id_value)

        if len(set(names)) == 1:
            return template.replace("{" + names[0] + "}", id_value)

        raise InvalidDeclarationError(
            f"cannot tell which of {english_enumerate(names, ' or ')} in {template} stands for the id of {mapping.class_.__name__}"
        )

    def build_href(self, mapping: Mapping, id_value: str, type_name: str) -> str:
        return self.expand(mapping, mapping.url_template, id_value, type_name)

    def build_self_link(self, mapping: Mapping, id_value: str, type_name: str) -> LinkRepr:
        return LinkRepr(href=self.build_href(mapping, id_value, type_name))

    def build_resource_links(
        self, mapping: Mapping, href: str, id_value: str, type_name: str
    ) -> LinksRepr:
        links = [("self", LinkRepr(href=href))]
        for name in mapping.related_links:
            template = mapping.related_link_templates.get(name)
            links.append(
                (
                    name,
                    LinkRepr(
                        href=(
                            self.expand(mapping, template, id_value, type_name)
                            if template is not None
                            else f"{href}/{name}"
                        )
                    ),
                )
            )
        return LinksRepr(links)

    def build_relationship_links(
        self,
        mapping: Mapping,
        href: str,
        id_value: str,
        type_name: str,
        name: str,
        wire_name: str,
    ) -> LinksRepr:
        """
        :param str name: the name of the relationship property.
        :param str wire_name: the name the relationship is emitted under.
        """
        templates = mapping.relationship_link_templates.get(name, {})
        defaults = {
            "self": f"{href}/relationships/{wire_name}",
            "related": f"{href}/{wire_name}",
        }
        return LinksRepr(
            (
                kind,
                LinkRepr(
                    href=(
                        self.expand(mapping, templates[kind], id_value, type_name)
                        if kind in templates
                        else default
                    )
                ),
            )
            for kind, default in defaults.items()
        )
