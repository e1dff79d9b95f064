import pytest

from .testing import Comment, Post, User, complex_mappings


@pytest.fixture
def target():
    from ..registry import MappingRegistry

    return MappingRegistry(complex_mappings())


def test_lookup(target):
    assert target.lookup(Post).class_ is Post
    assert target.lookup(User).type_name == "user"
    assert target.lookup_by_type_name("comment").class_ is Comment
    assert len(target) == 3
    assert [m.class_ for m in target] == [Post, User, Comment]
    assert Post in target
    assert str not in target


def test_lookup_subclass(target):
    class Admin(User):
        pass

    assert target.lookup(Admin).class_ is User
    assert Admin not in target


def test_lookup_failure(target):
    from ..exceptions import MappingNotFoundError

    with pytest.raises(MappingNotFoundError) as e:
        target.lookup(dict)
    assert e.value.class_ is dict
    assert str(e.value) == "no mapping found for builtins.dict"
    with pytest.raises(KeyError):
        target.lookup_by_type_name("message")


def test_is_mapped(target):
    assert target.is_mapped(User(1, "a"))
    assert not target.is_mapped(User)
    assert not target.is_mapped(None)
    assert not target.is_mapped("user")


def test_duplicate(target):
    from ..exceptions import InvalidDeclarationError
    from ..models import Mapping

    with pytest.raises(InvalidDeclarationError):
        target.add(Mapping(User, "/users/{user_id}", id_property_names=["user_id"]))


def test_require_non_empty():
    from ..exceptions import EmptyRegistryError
    from ..registry import MappingRegistry

    target = MappingRegistry()
    with pytest.raises(EmptyRegistryError):
        target.require_non_empty()
    target.add(complex_mappings()[0])
    target.require_non_empty()
