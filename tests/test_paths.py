import copy
import pickle
import threading

import pytest

from computed_property import MISSING, InvalidArgumentError, assign, deep_copy, resolve
from computed_property.paths import copy_containers, flatten, split_path


class Record:
    def __init__(self, **attrs):
        self.__dict__.update(attrs)


def test_resolve_dict():
    record = {"name": {"first": "Brian", "last": "Woodward"}}
    assert resolve(record, "name.first") == "Brian"
    assert resolve(record, "name") is record["name"]


def test_resolve_object():
    record = Record(name=Record(first="Brian"))
    assert resolve(record, "name.first") == "Brian"


def test_resolve_mixed():
    record = Record(files=[{"path": "a.txt"}, {"path": "b.txt"}])
    assert resolve(record, "files.1.path") == "b.txt"
    assert resolve(record, "files.2.path") is MISSING
    assert resolve(record, "files.first") is MISSING


def test_resolve_missing():
    record = {"name": {"first": "Brian"}, "empty": None}
    assert resolve(record, "nope") is MISSING
    assert resolve(record, "name.middle") is MISSING
    assert resolve(record, "name.first.x") is MISSING
    assert resolve(record, "empty.x") is MISSING
    assert resolve(record, "nope.deeper.still") is MISSING


def test_resolve_default():
    assert resolve({}, "a.b", default=None) is None
    assert resolve({"a": {"b": None}}, "a.b", default=1) is None


def test_resolve_invalid_path():
    with pytest.raises(InvalidArgumentError):
        resolve({}, ["a", "b"])


def test_assign_creates_intermediates():
    record = {}
    assign(record, "a.b.c", 1)
    assert record == {"a": {"b": {"c": 1}}}

    assign(record, "a.b.d", 2)
    assert record == {"a": {"b": {"c": 1, "d": 2}}}


def test_assign_replaces_plain_intermediates():
    record = {"a": 5}
    assign(record, "a.b", 1)
    assert record == {"a": {"b": 1}}


def test_assign_object():
    record = Record(name=Record(first="Brian"))
    assign(record, "name.first", "Bryan")
    assert record.name.first == "Bryan"

    assign(record, "data.title", "Home")
    assert record.data == {"title": "Home"}


def test_assign_list():
    record = {"items": [1]}
    assign(record, "items.0", 5)
    assign(record, "items.1", 6)
    assert record == {"items": [5, 6]}

    with pytest.raises(IndexError):
        assign(record, "items.5", 7)


def test_deep_copy():
    value = {"tags": ["a", "b"], "data": {"title": "Home"}}
    copied = deep_copy(value)
    assert copied == value
    assert copied is not value
    assert copied["tags"] is not value["tags"]
    assert copied["data"] is not value["data"]


def test_deep_copy_plain_values():
    text = "".join(["ho", "me"])
    assert deep_copy(text) is text
    assert deep_copy(None) is None
    assert deep_copy(MISSING) is MISSING
    assert deep_copy(deep_copy(5)) == 5


def test_deep_copy_uncopyable():
    lock = threading.Lock()
    assert deep_copy(lock) is lock


def test_flatten():
    assert flatten(None) == []
    assert flatten("a.b") == ["a.b"]
    assert flatten(["a", ["b", ["c"]], ("d",), "a"]) == ["a", "b", "c", "d", "a"]
    assert flatten([]) == []


def test_flatten_invalid():
    with pytest.raises(InvalidArgumentError):
        flatten(5)
    with pytest.raises(InvalidArgumentError):
        flatten(["a", None])


def test_split_path():
    assert split_path("a.b.c") == ("a", "b", "c")
    assert split_path("a") == ("a",)
    with pytest.raises(InvalidArgumentError):
        split_path(("a", "b"))


def test_missing():
    assert not MISSING
    assert repr(MISSING) == "MISSING"
    assert type(MISSING)() is MISSING
    assert copy.copy(MISSING) is MISSING
    assert copy.deepcopy(MISSING) is MISSING
    assert pickle.loads(pickle.dumps(MISSING)) is MISSING
    assert MISSING != None  # noqa: E711


def test_copy_containers():
    child = Record(value=1)
    value = {"items": [child, {"nested": [1, 2]}], "pair": ([3], child), "tags": {"a"}}
    copied = copy_containers(value)

    assert copied == value
    assert copied is not value
    assert copied["items"] is not value["items"]
    assert copied["items"][0] is child
    assert copied["items"][1]["nested"] is not value["items"][1]["nested"]
    assert copied["pair"][0] is not value["pair"][0]
    assert copied["pair"][1] is child
    assert copied["tags"] is not value["tags"]
    assert copy_containers(child) is child
    assert copy_containers("home") == "home"
