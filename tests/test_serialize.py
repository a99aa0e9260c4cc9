"""
Tests for response shaping.
"""

from types import MappingProxyType, SimpleNamespace

from utils.schemas import Account, UserDto
from utils.serialize import allowed_fields, shape


class TestAllowedFields:
    def test_model_fields(self):
        assert allowed_fields(UserDto) == {"id", "email"}

    def test_iterable_of_names(self):
        assert allowed_fields(["id", "admin"]) == {"id", "admin"}

    def test_single_name(self):
        assert allowed_fields("email") == {"email"}


class TestShape:
    def test_drops_credential_from_account(self):
        account = Account(id=1, email="a@x.com", password="salt.digest", admin=True)
        assert shape(UserDto, account) == {"id": 1, "email": "a@x.com"}

    def test_dict_payload(self):
        payload = {"id": 2, "email": "b@x.com", "password": "x", "extra": [1, 2]}
        assert shape(UserDto, payload) == {"id": 2, "email": "b@x.com"}

    def test_plain_object_payload(self):
        obj = SimpleNamespace(id=3, email="c@x.com", password="x")
        assert shape(UserDto, obj) == {"id": 3, "email": "c@x.com"}

    def test_collection_keeps_order(self):
        payload = [
            {"id": 2, "email": "b@x.com", "password": "x"},
            Account(id=1, email="a@x.com", password="y"),
        ]
        assert shape(UserDto, payload) == [
            {"id": 2, "email": "b@x.com"},
            {"id": 1, "email": "a@x.com"},
        ]

    def test_missing_allowed_fields_are_left_out(self):
        assert shape(UserDto, {"email": "d@x.com", "password": "x"}) == {"email": "d@x.com"}

    def test_none_and_empty(self):
        assert shape(UserDto, None) is None
        assert shape(UserDto, []) == []

    def test_read_only_mapping(self):
        payload = MappingProxyType({"id": 4, "email": "e@x.com", "password": "x"})
        assert shape(UserDto, payload) == {"id": 4, "email": "e@x.com"}

    def test_slotted_object_and_properties(self):
        class Slotted:
            __slots__ = ("id", "password")

            def __init__(self):
                self.id = 5
                self.password = "x"

            @property
            def email(self):
                return "f@x.com"

        assert shape(UserDto, Slotted()) == {"id": 5, "email": "f@x.com"}
