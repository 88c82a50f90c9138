import pytest

from ompcore.asset import Asset, MetaData
from ompcore.json_parser import JsonParser
from ompcore.object_factory import register_class
from ompcore.serializable import SerializableObject


class Box(SerializableObject):
    def __init__(self):
        self.label = ""

    def serialize(self, parser):
        parser.write_value("label", self.label)

    def deserialize(self, parser):
        self.label = parser.read_value("label")


register_class("SerializableTestBox", Box)


def _asset(asset_id, name):
    asset = Asset()
    asset.specify_metadata(
        MetaData(asset_id=asset_id, asset_name=name, path_on_disk=f"{name}.json", class_id="SerializableTestBox")
    )
    asset.create_object()
    return asset


def test_base_class_is_abstract():
    with pytest.raises(TypeError):
        SerializableObject()


def test_serialize_dependency_without_asset_raises():
    with pytest.raises(RuntimeError):
        Box().serialize_dependency(Box())


def test_get_dependency_without_asset_is_none():
    assert Box().get_dependency(5) is None


def test_serialize_dependency_records_on_asset():
    parent = _asset(11, "parent")
    child = _asset(22, "child")
    returned = parent.object.serialize_dependency(child.object)
    assert returned == 22
    assert parent.metadata.dependencies == {22}


def test_get_dependency_returns_child_object():
    parent = _asset(11, "parent")
    child = _asset(22, "child")
    parent.add_child(child)
    assert parent.object.get_dependency(22) is child.object
    assert parent.object.get_dependency(33) is None


def test_serialize_round_trip():
    box = Box()
    box.label = "crate"
    parser = JsonParser()
    box.serialize(parser)
    other = Box()
    other.deserialize(parser)
    assert other.label == "crate"