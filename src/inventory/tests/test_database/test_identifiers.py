import pytest

from inventory.database.identifiers import ensure_object_id, is_object_id, new_object_id
from inventory.exceptions.failures import FailureKind, KnownFailure


def test_new_object_id_shape():
    oid = new_object_id()

    assert len(oid) == 24
    assert is_object_id(oid)


def test_ids_are_unique():
    ids = [new_object_id() for _ in range(50)]

    assert len(set(ids)) == 50


@pytest.mark.parametrize("value", ["", "abc", "z" * 24, "a" * 25, "a" * 24 + "\n", None, 12345])
def test_is_object_id_rejects(value):
    assert not is_object_id(value)


def test_ensure_object_id_lowercases():
    assert ensure_object_id("ABCDEF" * 4, "categories") == "abcdef" * 4


def test_ensure_object_id_failure_names_field_and_value():
    with pytest.raises(KnownFailure) as info:
        ensure_object_id("bogus", "categories")

    failure = info.value
    assert failure.kind is FailureKind.INVALID_IDENTIFIER
    assert failure.field == "categories"
    assert failure.value == "bogus"
