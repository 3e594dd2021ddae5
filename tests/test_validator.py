"""Tests for validation of values against each schema kind."""

import math
from concurrent.futures import Future
from datetime import date, datetime, timezone

import pytest

from dataknobs_schema import (
    MISSING,
    Any,
    Array,
    Boolean,
    Date,
    IssueCode,
    Literal,
    Map,
    NativeEnum,
    Number,
    Object,
    Promise,
    Record,
    Set,
    String,
    Tuple,
    Union,
    UnknownKeys,
    ValidationIssue,
    ValidationSettings,
    Validator,
    validate,
)


def paths(result):
    return [issue.path for issue in result.issues]


def codes(result):
    return [issue.code for issue in result.issues]


class TestPrimitives:
    """Test primitive kinds."""

    def test_string(self):
        """Test string acceptance and mismatch."""
        assert validate(String(), "abc").data == "abc"

        result = validate(String(), 5)
        assert not result.success
        assert result.issues == [
            ValidationIssue((), "Expected string, received number", IssueCode.TYPE_MISMATCH)
        ]

    def test_missing_is_required(self):
        """Test an absent value reports Required."""
        result = validate(String(), MISSING)
        assert result.issues[0].message == "Required"
        assert result.issues[0].code is IssueCode.TYPE_MISMATCH

    def test_number_rejects_bool_and_nan(self):
        """Test bool and NaN are not numbers."""
        assert validate(Number(), 1.5).success
        assert validate(Number(), True).issues[0].message == "Expected number, received boolean"
        assert validate(Number(), math.nan).issues[0].message == "Expected number, received nan"

    def test_boolean(self):
        """Test boolean does not accept integers."""
        assert validate(Boolean(), False).data is False
        assert not validate(Boolean(), 0).success

    def test_date(self):
        """Test dates and datetimes."""
        assert validate(Date(), date(2024, 1, 1)).success
        assert validate(Date(), datetime(2024, 1, 1, 8)).success
        assert not validate(Date(), "2024-01-01").success

    def test_any(self):
        """Test any accepts everything unchanged."""
        marker = object()
        assert validate(Any(), marker).data is marker
        assert validate(Any(), None).success
        assert validate(Any(), MISSING).success

    def test_promise(self):
        """Test only pending values satisfy a promise schema."""
        future = Future()
        assert validate(Promise(String()), future).data is future
        result = validate(Promise(), "x")
        assert result.issues[0].message == "Expected promise, received string"


class TestConstraints:
    """Test constraint checks after structural success."""

    def test_string_min(self):
        """Test string length bounds."""
        result = validate(String().min(5), "John")
        assert result.issues == [
            ValidationIssue((), "String must contain at least 5 character(s)", IssueCode.TOO_SMALL)
        ]

    def test_number_gt(self):
        """Test exclusive lower bound."""
        result = validate(Number().gt(18), 18)
        assert result.issues[0].message == "Number must be greater than 18"
        assert result.issues[0].code is IssueCode.TOO_SMALL
        assert validate(Number().gt(18), 19).success

    def test_number_inclusive_bounds(self):
        """Test min and max are inclusive."""
        schema = Number().min(1).max(3)
        assert validate(schema, 1).success
        assert validate(schema, 3).success
        assert validate(schema, 4).issues[0].message == "Number must be less than or equal to 3"
        assert codes(validate(schema, 0)) == [IssueCode.TOO_SMALL]

    def test_every_failing_constraint_reported(self):
        """Test sibling constraints are all checked."""
        schema = String().min(5).regex(r"^\d+$")
        result = validate(schema, "abc")
        assert codes(result) == [IssueCode.TOO_SMALL, IssueCode.INVALID_STRING]

    def test_custom_message(self):
        """Test a custom constraint message."""
        result = validate(String().nonempty("Name is required"), "")
        assert result.issues[0].message == "Name is required"

    def test_exact_length(self):
        """Test exact length failures."""
        result = validate(Array(Number()).length(2), [1, 2, 3])
        assert result.issues[0].message == "Array must contain exactly 2 element(s)"
        assert result.issues[0].code is IssueCode.TOO_BIG

    def test_date_bounds(self):
        """Test date bounds, mixing dates and datetimes."""
        schema = Date().min(date(2020, 1, 1))
        assert validate(schema, datetime(2021, 5, 1, 10, 30)).success
        result = validate(schema, date(2019, 12, 31))
        assert result.issues[0].message == "Date must be greater than or equal to 2020-01-01"

    def test_date_bounds_mixed_timezones(self):
        """Test naive and aware datetimes compare with naive read as UTC."""
        schema = Date().min(datetime(2020, 1, 1))
        assert validate(schema, datetime(2024, 1, 1, tzinfo=timezone.utc)).success
        result = validate(schema, datetime(2019, 6, 1, tzinfo=timezone.utc))
        assert codes(result) == [IssueCode.TOO_SMALL]

        aware = Date().max(datetime(2020, 1, 1, tzinfo=timezone.utc))
        assert validate(aware, datetime(2019, 1, 1)).success
        assert codes(validate(aware, datetime(2021, 1, 1))) == [IssueCode.TOO_BIG]

    def test_constraints_skipped_on_mismatch(self):
        """Test constraints do not run when the type is wrong."""
        result = validate(String().min(5), 12)
        assert codes(result) == [IssueCode.TYPE_MISMATCH]


class TestLiteralAndEnum:
    """Test literal and native enum kinds."""

    def test_literal(self):
        """Test literal matches exactly."""
        assert validate(Literal("hello"), "hello").success
        result = validate(Literal("hello"), "bye")
        assert result.issues[0].code is IssueCode.INVALID_LITERAL
        assert result.issues[0].message == "Invalid literal value, expected 'hello'"

    def test_literal_does_not_confuse_bool_and_int(self):
        """Test True is not the literal 1."""
        assert not validate(Literal(1), True).success
        assert validate(Literal(None), None).success

    def test_native_enum_class(self, hobbies):
        """Test enum members and their values are accepted."""
        schema = NativeEnum(hobbies)
        assert validate(schema, "coding").data == "coding"
        assert validate(schema, hobbies.CODING).data is hobbies.CODING

        result = validate(schema, "swimming")
        assert result.issues[0].code is IssueCode.INVALID_ENUM_VALUE
        assert "received 'swimming'" in result.issues[0].message

    def test_native_enum_values(self):
        """Test an enum built from a list of values."""
        schema = NativeEnum(["aaa", "bbb", 1])
        assert validate(schema, "aaa").success
        assert validate(schema, 1).success
        assert not validate(schema, True).success

    def test_missing_enum_is_required(self, hobbies):
        """Test an absent enum value reports Required."""
        assert validate(NativeEnum(hobbies), MISSING).issues[0].message == "Required"


class TestWrappers:
    """Test optional, nullable, default and refinement wrappers."""

    def test_optional(self):
        """Test optional accepts absent but not None."""
        schema = String().optional()
        assert validate(schema, MISSING).data is MISSING
        assert validate(schema, "x").data == "x"
        assert validate(schema, None).issues[0].message == "Expected string, received null"

    def test_nullable(self):
        """Test nullable accepts None but not absent."""
        schema = String().nullable()
        assert validate(schema, None).data is None
        assert validate(schema, MISSING).issues[0].message == "Required"

    def test_nullish(self):
        """Test nullish accepts both."""
        schema = Array(String()).nullish()
        assert validate(schema, None).success
        assert validate(schema, MISSING).success
        assert validate(schema, ["a"]).data == ["a"]

    def test_default_invoked_per_call(self):
        """Test the producer runs once for every validation."""
        calls = []

        def producer():
            calls.append(1)
            return len(calls) / 10

        schema = Number().default(producer)
        first = validate(schema, MISSING)
        second = validate(schema, MISSING)

        assert first.data == 0.1
        assert second.data == 0.2
        assert len(calls) == 2

    def test_default_not_used_when_present(self):
        """Test present values are validated by the inner schema."""
        schema = Boolean().default(False)
        assert validate(schema, True).data is True
        assert not validate(schema, "yes").success
        assert validate(schema, MISSING).data is False

    def test_default_is_revalidated(self):
        """Test produced defaults must satisfy the inner schema."""
        result = validate(Number().default("zero"), MISSING)
        assert result.issues[0].message == "Expected number, received string"

    def test_mutable_default_not_shared(self):
        """Test plain defaults are copied for every call."""
        schema = Any().default({"tags": []})
        first = validate(schema, MISSING).data
        second = validate(schema, MISSING).data
        assert first == second == {"tags": []}
        assert first is not second

    def test_default_producer_failure(self):
        """Test a raising producer becomes an issue."""
        def broken():
            raise RuntimeError("no entropy")

        result = validate(Number().default(broken), MISSING)
        assert result.issues[0].code is IssueCode.CUSTOM
        assert "no entropy" in result.issues[0].message

    def test_refinement(self):
        """Test refinement failure message and code."""
        schema = String().refine(lambda s: s.startswith("a"), "Must start with a")
        assert validate(schema, "apple").data == "apple"
        assert validate(schema, "banana").issues == [
            ValidationIssue((), "Must start with a", IssueCode.CUSTOM)
        ]

    def test_refinement_runs_after_inner_success(self):
        """Test the predicate is not called when the inner schema fails."""
        seen = []
        schema = String().min(3).refine(lambda s: seen.append(s) or True)

        result = validate(schema, "ab")
        assert codes(result) == [IssueCode.TOO_SMALL]
        assert seen == []

        validate(schema, "abc")
        assert seen == ["abc"]

    def test_refinement_result_truthiness_error(self):
        """Test a predicate result that cannot be used as a bool becomes an issue."""
        class Ambiguous:
            def __bool__(self):
                raise ValueError("truth value is ambiguous")

        result = validate(Number().refine(lambda n: Ambiguous()), 1)
        assert result.issues == [
            ValidationIssue((), "Custom validation error: truth value is ambiguous", IssueCode.CUSTOM)
        ]

    def test_refinement_exception(self):
        """Test predicate exceptions become custom issues."""
        def explode(value):
            raise ValueError("boom")

        result = validate(Number().refine(explode), 1)
        assert result.issues == [
            ValidationIssue((), "Custom validation error: boom", IssueCode.CUSTOM)
        ]


class TestUnion:
    """Test union variants in declared order."""

    def test_first_match_wins(self):
        """Test "5" stays a string."""
        result = validate(Union([Number(), String()]), "5")
        assert result.data == "5"
        assert isinstance(result.data, str)

    def test_single_aggregated_issue(self):
        """Test a failing union reports one issue."""
        result = validate(Union([Number(), String()]), True)
        assert result.issues == [
            ValidationIssue((), "Expected number | string, received boolean", IssueCode.TYPE_MISMATCH)
        ]

    def test_normalized_variant_output(self):
        """Test the matching variant's normalized data is returned."""
        schema = Union([Object({"a": Number()}), String()])
        assert validate(schema, {"a": 1, "b": 2}).data == {"a": 1}


class TestCollections:
    """Test arrays, sets and tuples."""

    def test_array_accumulates_element_issues(self):
        """Test every failing element is reported."""
        result = validate(Array(Number()), [1, "a", 2, "b"])
        assert paths(result) == [(1,), (3,)]

    def test_array_size_after_elements(self):
        """Test size constraints are reported after element issues."""
        result = validate(Array(Number()).min(3), ["a"])
        assert paths(result) == [(0,), ()]
        assert codes(result) == [IssueCode.TYPE_MISMATCH, IssueCode.TOO_SMALL]

    def test_array_preserves_container(self):
        """Test tuples stay tuples and lists stay lists."""
        assert validate(Array(Number()), (1, 2)).data == (1, 2)
        assert validate(Array(Number()), [1, 2]).data == [1, 2]

    def test_array_rejects_non_list(self):
        """Test mismatching containers."""
        assert validate(Array(Number()), {1, 2}).issues[0].message == "Expected array, received set"

    def test_set_size(self):
        """Test a set of four against max three."""
        schema = Set(Union([String(), Number()])).min(2).max(3)
        result = validate(schema, {1, 2, "a", "b"})
        assert result.issues == [
            ValidationIssue((), "Set must contain at most 3 element(s)", IssueCode.TOO_BIG)
        ]

    def test_set_success(self):
        """Test sets and frozensets normalize to their own type."""
        schema = Set(Number())
        assert validate(schema, {1, 2}).data == {1, 2}
        assert isinstance(validate(schema, frozenset({1})).data, frozenset)
        assert not validate(schema, [1, 2]).success

    def test_tuple_with_rest(self):
        """Test trailing elements validate against the rest schema."""
        schema = Tuple([Date(), String()], rest=Number())
        value = [datetime.now(), "x", 1, 2]
        result = validate(schema, value)
        assert result.success
        assert result.data == value

    def test_tuple_rest_failure(self):
        """Test rest element issues carry their index."""
        schema = Tuple([Date(), String()], rest=Number())
        result = validate(schema, [date.today(), "x", 1, "two"])
        assert paths(result) == [(3,)]

    def test_tuple_arity(self):
        """Test too few and too many elements."""
        schema = Tuple([Number(), Number(), Number()])
        short = validate(schema, [0, 0])
        assert short.issues == [
            ValidationIssue((), "Tuple must contain at least 3 element(s)", IssueCode.TOO_SMALL)
        ]
        long = validate(schema, [0, 0, 0, 0])
        assert codes(long) == [IssueCode.TOO_BIG]

    def test_tuple_positions(self):
        """Test each position uses its own schema."""
        result = validate(Tuple([Number(), String()]), ("a", 1))
        assert paths(result) == [(0,), (1,)]


class TestMappings:
    """Test records and maps."""

    def test_record(self):
        """Test record values are validated per entry."""
        schema = Record(String(), Number())
        assert validate(schema, {"a": 1, "b": 2}).data == {"a": 1, "b": 2}

        result = validate(schema, {"a": 1, "b": "x", "c": None})
        assert paths(result) == [("b",), ("c",)]

    def test_record_key_issue(self):
        """Test keys are validated against the key schema."""
        result = validate(Record(String().min(2), Number()), {"a": 1})
        assert result.issues[0].path == ("a",)
        assert result.issues[0].code is IssueCode.TOO_SMALL

    def test_map(self):
        """Test map keys and values."""
        schema = Map(Number(), String())
        assert validate(schema, {1: "a"}).data == {1: "a"}
        result = validate(schema, {1: "a", "k": "b"})
        assert result.issues == [
            ValidationIssue(("k",), "Expected number, received string", IssueCode.TYPE_MISMATCH)
        ]

    def test_mapping_mismatch(self):
        """Test non-mapping input."""
        assert validate(Record(String(), Number()), [1]).issues[0].message == (
            "Expected record, received array"
        )


class TestObjects:
    """Test object validation and unknown keys."""

    def test_two_issues_scenario(self):
        """Test name too short and age too low are both reported."""
        schema = Object({"name": String().min(5), "age": Number().gt(18)})
        result = validate(schema, {"name": "John", "age": 13})

        assert not result.success
        assert paths(result) == [("name",), ("age",)]
        assert "must be greater than 18" in result.issues[1].message

    def test_required_field(self):
        """Test a missing required field."""
        result = validate(Object({"name": String()}), {})
        assert result.issues == [
            ValidationIssue(("name",), "Required", IssueCode.TYPE_MISMATCH)
        ]

    def test_optional_fields_omitted(self):
        """Test absent optional fields are not added to the output."""
        schema = Object({"name": String(), "nick": String().optional(), "jj": Any()})
        assert validate(schema, {"name": "a"}).data == {"name": "a"}

    def test_defaults_injected(self):
        """Test defaults appear in the output."""
        schema = Object({"is_new": Boolean().default(False)})
        assert validate(schema, {}).data == {"is_new": False}

    def test_strip_unknown_by_default(self):
        """Test unknown keys are dropped."""
        schema = Object({"name": String()})
        assert validate(schema, {"name": "a", "extra": 1}).data == {"name": "a"}

    def test_strict(self):
        """Test unknown keys are reported in strict mode."""
        schema = Object({"name": String()}).strict()
        result = validate(schema, {"name": "a", "extra": 1, "more": 2})
        assert result.issues == [
            ValidationIssue(
                (), "Unrecognized key(s) in object: 'extra', 'more'", IssueCode.UNRECOGNIZED_KEYS
            )
        ]

    def test_passthrough(self):
        """Test unknown keys are kept in passthrough mode."""
        schema = Object({"name": String()}).passthrough()
        assert validate(schema, {"extra": 1, "name": "a"}).data == {"name": "a", "extra": 1}

    def test_settings_policy(self):
        """Test the validator settings apply when the schema sets no policy."""
        validator = Validator(ValidationSettings(unknown_keys=UnknownKeys.STRICT))
        assert not validator.validate(Object({}), {"x": 1}).success
        assert validator.validate(Object({}).strip(), {"x": 1}).data == {}

    def test_nested_paths(self):
        """Test paths descend through objects and arrays."""
        schema = Object({"user": Object({"friends": Array(String())})})
        result = validate(schema, {"user": {"friends": ["a", 1]}})
        assert paths(result) == [("user", "friends", 1)]

    def test_issues_in_declaration_order(self):
        """Test issue order follows field declaration, not input order."""
        schema = Object({"a": Number(), "b": Number(), "c": Number()})
        result = validate(schema, {"c": "x", "b": "x", "a": "x"})
        assert paths(result) == [("a",), ("b",), ("c",)]

    def test_path_prefix(self):
        """Test a caller-provided path prefixes every issue."""
        result = validate(String(), 1, path=["payload", 0])
        assert result.issues[0].path == ("payload", 0)

    def test_not_a_mapping(self):
        """Test non-mapping input."""
        assert validate(Object({}), "x").issues[0].message == "Expected object, received string"
