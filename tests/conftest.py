"""Pytest configuration for dataknobs_schema tests."""

import sys
from enum import Enum
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_schema import (  # noqa: E402
    Any,
    Array,
    Boolean,
    Date,
    Literal,
    NativeEnum,
    Number,
    Object,
    String,
    Tuple,
    Union,
)


class Hobbies(str, Enum):
    READING = "reading"
    WRITING = "writing"
    CODING = "coding"


@pytest.fixture
def hobbies():
    """The Hobbies enum used by the user schema."""
    return Hobbies


@pytest.fixture
def geo_schema():
    """Object schema holding three coordinates."""
    return Object({"coords": Tuple([Number(), Number(), Number()])})


@pytest.fixture
def user_schema(geo_schema):
    """A user schema exercising most schema kinds."""
    tuple_schema = Object({
        "custom": Tuple([Date(), String()], rest=Number()),
    }).optional()

    return Object({
        "id": Union([String(), Number()]),
        "name": String().min(5),
        "age": Number().gt(18),
        "birthday": Date().optional(),
        "friends": Array(String()).nullish(),
        "literal": Literal("hello").optional(),
        "random": Number().default(lambda: 0.5),
        "is_new": Boolean().default(False),
        "hobbies": Array(NativeEnum(Hobbies)).nonempty().min(2).max(3),
        "jj": Any(),
    }).merge(geo_schema).extend({"tuple": tuple_schema})


@pytest.fixture
def valid_user():
    """A user accepted by user_schema."""
    return {
        "id": "123",
        "name": "Johnny",
        "age": 19,
        "hobbies": [Hobbies.CODING, Hobbies.READING],
        "coords": [0, 0, 0],
    }
