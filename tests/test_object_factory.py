from ompcore.json_parser import JsonParser
from ompcore.object_factory import create_serializable_object, register_class
from ompcore.serializable import SerializableObject


class First(SerializableObject):
    def __init__(self):
        self.value = 0

    def serialize(self, parser):
        parser.write_value("kind", "first")
        parser.write_value("value", self.value)

    def deserialize(self, parser):
        self.value = parser.read_value("value")


class Second(SerializableObject):
    def __init__(self):
        self.value = 0

    def serialize(self, parser):
        parser.write_value("kind", "second")

    def deserialize(self, parser):
        pass


def _kind(obj):
    parser = JsonParser()
    obj.serialize(parser)
    return parser.read_value("kind")


def test_unknown_class_gives_none():
    assert create_serializable_object("FactoryTestNoSuchClass") is None


def test_registered_class_is_created():
    register_class("FactoryTestFirst", First)
    obj = create_serializable_object("FactoryTestFirst")
    assert _kind(obj) == "first"
    assert obj.value == 0


def test_each_call_creates_new_object():
    register_class("FactoryTestFresh", First)
    first = create_serializable_object("FactoryTestFresh")
    first.value = 5
    second = create_serializable_object("FactoryTestFresh")
    assert second.value == 0
    assert first.value == 5


def test_existing_registration_is_kept():
    register_class("FactoryTestKeep", First)
    register_class("FactoryTestKeep", Second)
    obj = create_serializable_object("FactoryTestKeep")
    assert _kind(obj) == "first"