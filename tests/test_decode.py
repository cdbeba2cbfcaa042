"""Unit tests for the output decoder."""

from __future__ import annotations

from typing import Any

import pytest

from happycontract.abi.decode import decode_outputs, decode_result, shape_tuple, to_big_int, to_number
from happycontract.abi.models import TypedParam
from happycontract.errors import DecodeMismatchError


def _outputs(*entries: dict[str, Any]) -> tuple[TypedParam, ...]:
    return tuple(TypedParam.from_dict(e) for e in entries)


POSITION = {
    "name": "position",
    "type": "tuple",
    "components": [
        {"name": "owner", "type": "address"},
        {"name": "size", "type": "uint256"},
        {"name": "leverage", "type": "uint8"},
    ],
}


class TestVoidOutputs:
    """Methods without outputs."""

    def test_result_is_none(self) -> None:
        assert decode_result(["anything"], ()) is None
        assert decode_result([], ()) is None
        assert decode_result("0x", ()) is None

    def test_decode_outputs_passes_raw_through(self) -> None:
        raw = {"some": "receipt"}
        assert decode_outputs(raw, ()) is raw


class TestSingleOutput:
    """One declared output is unwrapped."""

    def test_bare_and_wrapped_scalar_agree(self) -> None:
        outputs = _outputs({"name": "", "type": "uint256"})
        assert decode_result("42", outputs) == 42
        assert decode_result(["42"], outputs) == 42

    def test_named_single_output_is_not_a_mapping(self) -> None:
        outputs = _outputs({"name": "balance", "type": "uint256"})
        assert decode_result("7", outputs) == 7

    def test_wide_integer_keeps_full_precision(self) -> None:
        outputs = _outputs({"name": "", "type": "uint256"})
        result = decode_result("340282366920938463463374607431768211455", outputs)
        assert result == 2**128 - 1
        assert isinstance(result, int)

    def test_narrow_integer(self) -> None:
        outputs = _outputs({"name": "", "type": "uint8"})
        assert decode_result("255", outputs) == 255

    def test_negative_int256(self) -> None:
        outputs = _outputs({"name": "", "type": "int256"})
        assert decode_result("-57896044618658097711785492504343953926634992332820282019728792003956564819968", outputs) == -(2**255)

    def test_hex_strings_and_bools(self) -> None:
        assert decode_result("0xff", _outputs({"name": "", "type": "uint16"})) == 255
        assert decode_result(True, _outputs({"name": "", "type": "uint8"})) == 1

    def test_array_output(self) -> None:
        outputs = _outputs({"name": "", "type": "uint16[]"})
        assert decode_result(["1", "2", "3"], outputs) == [1, 2, 3]

    def test_empty_array_output(self) -> None:
        outputs = _outputs({"name": "", "type": "uint256[]"})
        assert decode_result([], outputs) == []

    def test_fixed_size_array_keeps_every_element(self) -> None:
        assert decode_result((1, 2), _outputs({"name": "", "type": "uint256[2]"})) == [1, 2]
        owners = ("0xAbC", "0xDeF", "0x123")
        assert decode_result(owners, _outputs({"name": "owners", "type": "address[3]"})) == list(owners)

    def test_nested_array_dimensions(self) -> None:
        outputs = _outputs({"name": "grid", "type": "uint8[2][]"})
        assert decode_result([("1", "2"), ("3", "4")], outputs) == [[1, 2], [3, 4]]

    def test_sequence_valued_scalar_is_not_unpacked(self) -> None:
        outputs = _outputs({"name": "", "type": "string"})
        assert decode_result(["a", "b"], outputs) == ["a", "b"]

    def test_unknown_types_pass_through(self) -> None:
        assert decode_result("0xAbC", _outputs({"name": "", "type": "address"})) == "0xAbC"
        assert decode_result("12", _outputs({"name": "", "type": "uint64"})) == "12"
        assert decode_result(b"\x01", _outputs({"name": "", "type": "bytes"})) == b"\x01"


class TestTuples:
    """Tuple outputs become dicts or lists."""

    def test_all_named_tuple_becomes_mapping(self) -> None:
        result = decode_result(("0xowner", "100", "3"), _outputs(POSITION))
        assert result == {"owner": "0xowner", "size": 100, "leverage": 3}
        assert list(result) == ["owner", "size", "leverage"]

    def test_unnamed_component_gives_sequence(self) -> None:
        outputs = _outputs(
            {
                "name": "pair",
                "type": "tuple",
                "components": [
                    {"name": "left", "type": "uint8"},
                    {"name": "", "type": "uint8"},
                ],
            }
        )
        assert decode_result(["1", "2"], outputs) == [1, 2]

    def test_single_component_tuple_is_sequence(self) -> None:
        outputs = _outputs(
            {"name": "wrapped", "type": "tuple", "components": [{"name": "values", "type": "uint8[]"}]}
        )
        assert decode_result((["1", "2"],), outputs) == [[1, 2]]

    def test_tuple_array(self) -> None:
        outputs = _outputs(
            {
                "name": "entries",
                "type": "tuple[]",
                "components": [
                    {"name": "id", "type": "uint32"},
                    {"name": "amount", "type": "int256"},
                ],
            }
        )
        result = decode_result([("1", "-5"), ("2", "7")], outputs)
        assert result == [{"id": 1, "amount": -5}, {"id": 2, "amount": 7}]

    def test_single_component_tuple_given_bare_value(self) -> None:
        outputs = _outputs(
            {"name": "w", "type": "tuple", "components": [{"name": "v", "type": "uint8"}]},
            {"name": "x", "type": "uint8"},
        )
        assert decode_result(["5", "6"], outputs) == {"w": [5], "x": 6}

    def test_nested_tuple(self) -> None:
        outputs = _outputs(
            {
                "name": "book",
                "type": "tuple",
                "components": [
                    POSITION,
                    {"name": "opened", "type": "uint32"},
                ],
            }
        )
        result = decode_result((("0xowner", "1", "2"), "9"), outputs)
        assert result == {
            "position": {"owner": "0xowner", "size": 1, "leverage": 2},
            "opened": 9,
        }


class TestMultipleOutputs:
    """Several top-level outputs."""

    def test_all_named_outputs_become_mapping(self) -> None:
        outputs = _outputs(
            {"name": "reserve0", "type": "uint256"},
            {"name": "reserve1", "type": "uint256"},
            {"name": "blockTimestampLast", "type": "uint32"},
        )
        result = decode_result(["10", "20", "0x10"], outputs)
        assert result == {"reserve0": 10, "reserve1": 20, "blockTimestampLast": 16}

    def test_partially_named_outputs_stay_sequence(self) -> None:
        outputs = _outputs(
            {"name": "amount", "type": "uint256"},
            {"name": "", "type": "bool"},
        )
        assert decode_result(("5", True), outputs) == [5, True]

    def test_duplicate_names_stay_sequence(self) -> None:
        outputs = _outputs(
            {"name": "a", "type": "uint256"},
            {"name": "a", "type": "uint256"},
        )
        assert decode_result(["1", "2"], outputs) == [1, 2]

    def test_duplicate_component_names_stay_sequence(self) -> None:
        outputs = _outputs(
            {
                "name": "pair",
                "type": "tuple",
                "components": [
                    {"name": "side", "type": "uint8"},
                    {"name": "side", "type": "uint8"},
                ],
            }
        )
        assert decode_result(("1", "2"), outputs) == [1, 2]

    def test_decode_outputs_returns_positional_list(self) -> None:
        outputs = _outputs(
            {"name": "a", "type": "uint8"},
            {"name": "b", "type": "uint8[]"},
        )
        assert decode_outputs(("1", ["2", "3"]), outputs) == [1, [2, 3]]


class TestMismatch:
    """Raw data that does not fit the declared outputs."""

    def test_too_few_values(self) -> None:
        outputs = _outputs({"name": "a", "type": "uint256"}, {"name": "b", "type": "uint256"})
        with pytest.raises(DecodeMismatchError):
            decode_result(["1"], outputs)

    def test_non_positional_raw_for_several_outputs(self) -> None:
        outputs = _outputs({"name": "a", "type": "uint256"}, {"name": "b", "type": "uint256"})
        with pytest.raises(DecodeMismatchError):
            decode_result("1", outputs)

    def test_array_output_requires_sequence(self) -> None:
        outputs = _outputs({"name": "a", "type": "uint8"}, {"name": "b", "type": "uint8[]"})
        with pytest.raises(DecodeMismatchError):
            decode_result(["1", "2"], outputs)

    def test_several_values_for_one_integer_output(self) -> None:
        with pytest.raises(DecodeMismatchError):
            decode_result(["1", "2"], _outputs({"name": "", "type": "uint256"}))

    def test_fixed_size_array_requires_sequence(self) -> None:
        with pytest.raises(DecodeMismatchError):
            decode_result("7", _outputs({"name": "", "type": "uint256[2]"}))

    def test_unparseable_integer(self) -> None:
        with pytest.raises(DecodeMismatchError):
            decode_result("twelve", _outputs({"name": "", "type": "uint256"}))


class TestHelpers:
    def test_shape_tuple(self) -> None:
        named = _outputs({"name": "x", "type": "uint8"}, {"name": "y", "type": "uint8"})
        assert shape_tuple([1, 2], named) == {"x": 1, "y": 2}
        assert shape_tuple([1], named[:1]) == [1]

    def test_conversions(self) -> None:
        assert to_big_int(" 12 ") == 12
        assert to_number(3) == 3
        assert to_big_int("-0x10") == -16
