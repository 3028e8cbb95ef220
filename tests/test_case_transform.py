"""Tests for http_fetch.case_transform.

Tests cover:
- Word segmentation and single-key conversion
- Deep conversion of nested mappings and sequences
- Depth budget truncation
- Copy-on-transform (input never mutated)
- Round-trip and idempotence properties (hypothesis)
"""

import copy

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from http_fetch.case_transform import (
    camel_to_snake,
    snake_to_camel,
    split_words,
    to_camel_key,
    to_snake_key,
)


# =============================================================================
# Single Key Conversion
# =============================================================================


class TestSplitWords:
    @pytest.mark.parametrize(
        "key, words",
        [
            ("userId", ["user", "Id"]),
            ("HTTPServer", ["HTTP", "Server"]),
            ("user2Name", ["user", "2", "Name"]),
            ("user_id", ["user", "id"]),
            ("kebab-case key", ["kebab", "case", "key"]),
            ("caféName", ["café", "Name"]),
            ("名前", ["名前"]),
            ("ÜberStraße", ["Über", "Straße"]),
            ("userId２", ["user", "Id", "２"]),
            ("", []),
        ],
    )
    def test_split(self, key: str, words: list[str]) -> None:
        assert split_words(key) == words


class TestToSnakeKey:
    @pytest.mark.parametrize(
        "key, expected",
        [
            ("userId", "user_id"),
            ("createdAtTime", "created_at_time"),
            ("HTTPServer", "http_server"),
            ("parseJSON", "parse_json"),
            ("user2Name", "user_2_name"),
            ("UserName", "user_name"),
            ("already_snake", "already_snake"),
            ("caféName", "café_name"),
            ("名前", "名前"),
            ("ÉtatCivil", "état_civil"),
            ("name", "name"),
        ],
    )
    def test_conversion(self, key: str, expected: str) -> None:
        assert to_snake_key(key) == expected

    def test_non_string_key_unchanged(self) -> None:
        assert to_snake_key(5) == 5
        assert to_snake_key(None) is None


class TestToCamelKey:
    @pytest.mark.parametrize(
        "key, expected",
        [
            ("user_id", "userId"),
            ("created_at_time", "createdAtTime"),
            ("user_2_name", "user2Name"),
            ("HTTP_SERVER", "httpServer"),
            ("__private_field", "privateField"),
            ("alreadyCamel", "alreadyCamel"),
            ("café_name", "caféName"),
            ("年齢", "年齢"),
            ("état_civil", "étatCivil"),
            ("name", "name"),
            ("", ""),
        ],
    )
    def test_conversion(self, key: str, expected: str) -> None:
        assert to_camel_key(key) == expected

    def test_non_string_key_unchanged(self) -> None:
        assert to_camel_key(7) == 7


# =============================================================================
# Deep Conversion
# =============================================================================


class TestCamelToSnake:
    def test_nested_mappings_and_sequences(self) -> None:
        payload = {
            "userId": 5,
            "profileInfo": {"firstName": "Ann", "tagList": [{"tagName": "a"}, {"tagName": "b"}]},
            "recentOrders": [{"orderId": 1}, 2, "three"],
        }
        assert camel_to_snake(payload) == {
            "user_id": 5,
            "profile_info": {"first_name": "Ann", "tag_list": [{"tag_name": "a"}, {"tag_name": "b"}]},
            "recent_orders": [{"order_id": 1}, 2, "three"],
        }

    def test_scalars_returned_unchanged(self) -> None:
        assert camel_to_snake(42) == 42
        assert camel_to_snake("userId") == "userId"
        assert camel_to_snake(None) is None

    def test_values_are_not_renamed(self) -> None:
        assert camel_to_snake({"sortBy": "createdAt"}) == {"sort_by": "createdAt"}

    def test_top_level_list(self) -> None:
        assert camel_to_snake([{"userId": 1}, {"userId": 2}]) == [{"user_id": 1}, {"user_id": 2}]

    def test_tuple_elements_converted(self) -> None:
        assert camel_to_snake(({"userId": 1},)) == ({"user_id": 1},)

    def test_non_ascii_keys_kept(self) -> None:
        payload = {"名前": 1, "年齢": 2, "caféName": {"ÉtatCivil": 3}}
        assert camel_to_snake(payload) == {"名前": 1, "年齢": 2, "café_name": {"état_civil": 3}}

    def test_mapping_never_holds_both_forms(self) -> None:
        result = camel_to_snake({"user_id": 1, "userId": 2})
        assert result == {"user_id": 2}

    def test_input_not_mutated(self) -> None:
        payload = {"userId": 5, "nestedValue": {"innerKey": [{"deepKey": 1}]}}
        snapshot = copy.deepcopy(payload)
        result = camel_to_snake(payload)
        assert payload == snapshot
        assert result is not payload
        assert result["nested_value"] is not payload["nestedValue"]


class TestSnakeToCamel:
    def test_nested_mappings_and_sequences(self) -> None:
        payload = {"user_id": 5, "order_list": [{"order_id": 1, "line_items": [{"sku_code": "x"}]}]}
        assert snake_to_camel(payload) == {
            "userId": 5,
            "orderList": [{"orderId": 1, "lineItems": [{"skuCode": "x"}]}],
        }

    def test_input_not_mutated(self) -> None:
        payload = {"user_id": {"first_name": "Ann"}}
        snapshot = copy.deepcopy(payload)
        snake_to_camel(payload)
        assert payload == snapshot


# =============================================================================
# Depth Budget
# =============================================================================


class TestDepthBudget:
    def test_depth_zero_returns_none(self) -> None:
        assert camel_to_snake({"userId": 1}, depth=0) is None
        assert snake_to_camel({"user_id": 1}, depth=0) is None

    def test_depth_one_renames_top_level_only(self) -> None:
        result = camel_to_snake({"outerKey": {"innerKey": 1}}, depth=1)
        assert result == {"outer_key": {"innerKey": 1}}

    def test_keys_beyond_budget_remain_unrenamed(self) -> None:
        payload = {"levelOne": {"levelTwo": {"levelThree": {"levelFour": 1}}}}
        result = camel_to_snake(payload, depth=2)
        assert result == {"level_one": {"level_two": {"levelThree": {"levelFour": 1}}}}

    def test_sequence_consumes_budget(self) -> None:
        assert camel_to_snake([{"userId": 1}], depth=1) == [{"userId": 1}]
        assert camel_to_snake([{"userId": 1}], depth=2) == [{"user_id": 1}]

    def test_default_depth_is_ten(self) -> None:
        payload: dict = {"leafKey": 1}
        for _ in range(10):
            payload = {"wrapKey": payload}
        result = camel_to_snake(payload)
        node = result
        for _ in range(10):
            assert list(node) == ["wrap_key"]
            node = node["wrap_key"]
        # Eleventh level is past the budget
        assert node == {"leafKey": 1}

    def test_cyclic_input_terminates_at_budget(self) -> None:
        payload: dict = {"selfRef": None, "someKey": 1}
        payload["selfRef"] = payload
        result = camel_to_snake(payload, depth=3)
        assert "some_key" in result
        assert "self_ref" in result


# =============================================================================
# Properties
# =============================================================================

_word = st.from_regex(r"[a-z]{2,8}", fullmatch=True)
_camel_key = st.lists(_word, min_size=1, max_size=4).map(
    lambda words: words[0] + "".join(word.capitalize() for word in words[1:])
)
_snake_key = st.lists(_word, min_size=1, max_size=4).map("_".join)
_scalar = st.one_of(st.none(), st.booleans(), st.integers(), st.text(max_size=5))


def _payloads(keys: st.SearchStrategy[str]) -> st.SearchStrategy:
    return st.recursive(
        _scalar,
        lambda children: st.one_of(
            st.lists(children, max_size=3),
            st.dictionaries(keys, children, max_size=3),
        ),
        max_leaves=10,
    )


class TestProperties:
    @settings(max_examples=100)
    @given(_payloads(_camel_key))
    def test_camel_round_trip(self, payload) -> None:
        assert snake_to_camel(camel_to_snake(payload, depth=50), depth=50) == payload

    @settings(max_examples=100)
    @given(_payloads(_snake_key))
    def test_snake_round_trip(self, payload) -> None:
        assert camel_to_snake(snake_to_camel(payload, depth=50), depth=50) == payload

    @settings(max_examples=100)
    @given(_payloads(_snake_key))
    def test_snake_input_is_fixed_point_of_camel_to_snake(self, payload) -> None:
        assert camel_to_snake(payload, depth=50) == payload

    @settings(max_examples=100)
    @given(_payloads(_camel_key))
    def test_camel_input_is_fixed_point_of_snake_to_camel(self, payload) -> None:
        assert snake_to_camel(payload, depth=50) == payload

    @settings(max_examples=100)
    @given(_payloads(_camel_key))
    def test_input_never_mutated(self, payload) -> None:
        snapshot = copy.deepcopy(payload)
        camel_to_snake(payload)
        assert payload == snapshot
