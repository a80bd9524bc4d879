from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

import pytest

from autotest_commons.tools.resource import ResourceNotFound
from autotest_commons.tools.yaml_data import YamlData
from autotest_commons.util.decorators import from_resource


@dataclass
class Address:
    city: str = ""
    zip: str = ""


@from_resource("com/example/user.yml")
@dataclass
class User(YamlData["User"]):
    name: str = ""
    age: int = 0
    address: Optional[Address] = None


class Users(YamlData[Address]):
    pass


class Plain(YamlData):
    title = ""


M = TypeVar("M")


class Catalog(YamlData[M], Generic[M]):
    pass


class Items(Catalog[Address]):
    pass


class Counter(YamlData):
    hits: int = 0


P = TypeVar("P", bound="Profile")


class Profile(YamlData[P]):
    def __init__(self):
        super().__init__()
        self._name = ""

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, value):
        self._name = value

    @property
    def upper_name(self):
        return self._name.upper()


def test_to_map(resource_path):
    data = YamlData.to_map("com/example/user.yml")
    assert data == {
        "name": "Alice",
        "age": 30,
        "address": {"city": "Hanoi", "zip": "10000"},
        "nickname": "ignored-field",
    }
    assert list(data) == ["name", "age", "address", "nickname"]


def test_to_map_on_list_asks_for_to_maps():
    with pytest.raises(RuntimeError, match="use to_maps"):
        YamlData.to_map("com/example/users.yml")


def test_to_maps_returns_list_unchanged():
    assert YamlData.to_maps("com/example/users.yml") == [
        {"name": "Alice", "age": "30", "address": {"city": "Hanoi"}},
        {"name": "Bob", "age": 25, "unknown": "dropped"},
    ]


def test_to_maps_wraps_single_mapping():
    assert YamlData.to_maps("com/example/user_quoted.yml") == [{"name": "Carol", "age": "41"}]


def test_only_first_document_is_read():
    assert YamlData.to_map("com/example/multi.yml") == {"name": "first"}
    assert YamlData.to_maps("com/example/multi.yml") == [{"name": "first"}]


def test_empty_stream_is_an_error():
    with pytest.raises(RuntimeError, match="Yaml content is empty"):
        YamlData.to_map("com/example/empty.yml")
    with pytest.raises(RuntimeError, match="Yaml content is empty"):
        YamlData(Address, "com/example/empty.yml").to_model()


def test_scalar_root_is_rejected():
    with pytest.raises(RuntimeError, match="not a mapping"):
        YamlData.to_map("com/example/scalar.yml")
    with pytest.raises(RuntimeError, match="not a mapping"):
        YamlData.to_maps("com/example/scalar.yml")


def test_missing_resource():
    with pytest.raises(ResourceNotFound):
        YamlData.to_map("com/example/nope.yml")


def test_malformed_yaml(tmp_path):
    broken = tmp_path / "broken.yml"
    broken.write_text("key: [unclosed\n", encoding="utf-8")
    with pytest.raises(RuntimeError, match="Failed to parse"):
        YamlData.to_map(str(broken))


def test_gbk_resource(tmp_path):
    target = tmp_path / "gbk.yml"
    target.write_bytes("名称: 测试\n".encode("gbk"))
    assert YamlData.to_map(str(target)) == {"名称": "测试"}


def test_to_model_uses_decorator_resource():
    user = User().to_model()
    assert isinstance(user, User)
    assert user.name == "Alice"
    assert user.age == 30
    assert user.address == Address(city="Hanoi", zip="10000")
    assert not hasattr(user, "nickname")


def test_from_resource_overrides_decorator_and_chains():
    loader = User()
    assert loader.from_resource("com/example/user_quoted.yml") is loader
    user = loader.to_model()
    assert user.name == "Carol"
    # single-pass binding keeps the YAML scalar type
    assert user.age == "41"


def test_to_models_converts_each_element():
    users = User().from_resource("com/example/users.yml").to_models()
    assert [user.name for user in users] == ["Alice", "Bob"]
    assert users[0].age == 30
    assert users[0].address == Address(city="Hanoi", zip="")
    assert users[1].address is None
    assert all(isinstance(user, User) for user in users)


def test_to_models_on_single_mapping():
    with pytest.raises(RuntimeError, match="use to_model"):
        User().to_models()


def test_to_model_on_list():
    with pytest.raises(RuntimeError, match="use to_models"):
        User().from_resource("com/example/users.yml").to_model()


def test_to_model_without_resource_name():
    with pytest.raises(ResourceNotFound, match="from_resource"):
        Users().to_model()
    with pytest.raises(FileNotFoundError):
        YamlData(Address).to_models()


def test_explicit_model_and_resource():
    address = YamlData(Address, "com/example/users.yml").to_models()[0]
    assert address == Address(city="", zip="")


def test_model_class_from_generic_argument():
    assert Users().model_class is Address


def test_model_class_self_typed():
    assert User().model_class is User
    assert Plain().model_class is Plain


def test_model_class_from_type_var_bound():
    assert Profile().model_class is Profile


def test_model_class_without_model():
    with pytest.raises(RuntimeError, match="without model"):
        YamlData().model_class


def test_model_class_is_resolved_once(monkeypatch):
    calls = []
    original = Users._resolve_model_class

    def counting(self):
        calls.append(self)
        return original(self)

    monkeypatch.setattr(Users, "_resolve_model_class", counting)
    loader = Users()
    assert loader.model_class is Address
    assert loader.model_class is Address
    assert len(calls) == 1


def test_property_setters_are_used(tmp_path):
    target = tmp_path / "profile.yml"
    target.write_text("name: dana\nupper_name: IGNORED\n", encoding="utf-8")
    profile = Profile().from_resource(str(target)).to_model()
    assert isinstance(profile, Profile)
    assert profile.name == "dana"
    assert profile.upper_name == "DANA"


def test_plain_class_attributes_are_bound(tmp_path):
    target = tmp_path / "plain.yml"
    target.write_text("title: Smoke\nother: 1\n", encoding="utf-8")
    plain = Plain().from_resource(str(target)).to_model()
    assert plain.title == "Smoke"
    assert not hasattr(plain, "other")


def test_model_class_through_generic_subclass():
    assert Items().model_class is Address
    assert Catalog().model_class is Catalog


def test_to_models_validates_annotated_attributes(tmp_path):
    target = tmp_path / "counters.yml"
    target.write_text('- hits: "5"\n- hits: 7\n  extra: 1\n', encoding="utf-8")
    counters = Counter().from_resource(str(target)).to_models()
    assert [counter.hits for counter in counters] == [5, 7]
    assert not hasattr(counters[1], "extra")


def test_to_models_rejects_invalid_value(tmp_path):
    target = tmp_path / "users.yml"
    target.write_text("- name: Eve\n  age: old\n", encoding="utf-8")
    with pytest.raises(RuntimeError, match="Cannot convert value to User"):
        User().from_resource(str(target)).to_models()
