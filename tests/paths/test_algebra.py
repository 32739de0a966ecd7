# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for the path algebra."""

from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from handlenav.errors import InvalidTraversalError
from handlenav.paths import (
    CURRENT_DIRECTORY,
    PARENT_DIRECTORY,
    ROOT_NAME,
    is_absolute,
    is_child_or_equal,
    join,
    normalize,
    normalize_strict,
    resolve,
    split,
    to_segments,
)

names = st.text(
    alphabet=st.characters(min_codepoint=97, max_codepoint=122),
    min_size=1,
    max_size=8,
)
segments = st.one_of(names, st.sampled_from(["", ".", ".."]))


class TestSplit:
    """Test split function."""

    def test_absolute_path(self) -> None:
        assert split("/folder/folder2/../file") == ["", "folder", "folder2", "..", "file"]

    def test_relative_path(self) -> None:
        assert split("a/b") == ["a", "b"]

    def test_trailing_separator_is_dropped(self) -> None:
        assert split("/a/b/") == ["", "a", "b"]

    def test_only_one_trailing_separator_is_dropped(self) -> None:
        assert split("a//") == ["a", ""]

    def test_empty_string_has_no_segments(self) -> None:
        assert split("") == []

    def test_default_argument_is_empty(self) -> None:
        assert split() == []

    def test_separator_alone_is_root(self) -> None:
        assert split("/") == [ROOT_NAME]

    def test_inner_empty_segments_are_kept(self) -> None:
        assert split("a//b") == ["a", "", "b"]


class TestJoin:
    """Test join function."""

    def test_root(self) -> None:
        assert join([ROOT_NAME]) == "/"

    def test_absolute(self) -> None:
        assert join(["", "a", "b"]) == "/a/b"

    def test_relative(self) -> None:
        assert join(["..", "a"]) == "../a"

    def test_empty(self) -> None:
        assert join([]) == ""

    @given(st.lists(names, max_size=6))
    def test_inverts_split_for_absolute_paths(self, parts: list[str]) -> None:
        path = [ROOT_NAME, *parts]
        assert split(join(path)) == path


class TestNormalize:
    """Test normalize function."""

    def test_dotdot_alone_escapes(self) -> None:
        assert normalize([".."], False) == []

    def test_dotdot_alone_upstream(self) -> None:
        assert normalize([".."], True) == [".."]

    def test_escape_without_upstream_returns_empty(self) -> None:
        assert normalize(split("./folder/../../../../file"), False) == []

    def test_escape_with_upstream_keeps_dotdot(self) -> None:
        assert normalize(split("./folder/../../../../file"), True) == split(
            "../../../file"
        )

    def test_absolute_clamps_at_root(self) -> None:
        assert normalize(split("/a/../../b"), False) == ["", "b"]

    def test_root_stays_root(self) -> None:
        assert normalize(split("/.."), True) == [ROOT_NAME]

    def test_drops_dots_and_empty_segments(self) -> None:
        assert normalize(["", "a", "", ".", "b"], False) == ["", "a", "b"]

    def test_empty_sentinel_only_anchors_at_start(self) -> None:
        assert normalize(["a", "", "b"], False) == ["a", "b"]

    def test_relative_pop(self) -> None:
        assert normalize(split("a/b/../c"), False) == ["a", "c"]

    def test_relative_cancels_to_nothing(self) -> None:
        assert normalize(split("a/.."), False) == []

    def test_upstream_cancels_only_own_names(self) -> None:
        assert normalize(split("../a/../../b"), True) == ["..", "..", "b"]

    def test_does_not_mutate_input(self) -> None:
        path = ["", "a", ".."]
        _ = normalize(path, True)
        assert path == ["", "a", ".."]

    @given(st.lists(names, max_size=8), st.booleans())
    @settings(max_examples=100)
    def test_normalized_absolute_is_fixed_point(
        self, parts: list[str], allow_upstream: bool
    ) -> None:
        path = [ROOT_NAME, *parts]
        assert normalize(path, allow_upstream) == path

    @given(st.lists(segments, max_size=12), st.booleans())
    @settings(max_examples=200)
    def test_idempotent(self, path: list[str], allow_upstream: bool) -> None:
        once = normalize([ROOT_NAME, *path], allow_upstream)
        assert normalize(once, allow_upstream) == once

    @given(st.lists(segments, max_size=12))
    def test_absolute_results_never_leave_root(self, path: list[str]) -> None:
        result = normalize([ROOT_NAME, *path], False)
        assert result[0] == ROOT_NAME
        assert CURRENT_DIRECTORY not in result
        assert PARENT_DIRECTORY not in result

    @given(st.lists(segments, max_size=12))
    def test_upstream_only_has_leading_dotdots(self, path: list[str]) -> None:
        result = normalize(path, True)
        names_seen = False
        for segment in result:
            if segment == PARENT_DIRECTORY:
                assert not names_seen
            else:
                names_seen = True


class TestNormalizeStrict:
    """Test normalize_strict function."""

    def test_raises_on_escape(self) -> None:
        with pytest.raises(InvalidTraversalError, match="escapes"):
            normalize_strict(split("a/../.."))

    def test_cancelled_path_is_not_an_escape(self) -> None:
        assert normalize_strict(split("a/..")) == []

    def test_plain_path(self) -> None:
        assert normalize_strict(split("a/./b")) == ["a", "b"]

    def test_absolute_never_raises(self) -> None:
        assert normalize_strict(split("/../..")) == [ROOT_NAME]


class TestResolve:
    """Test resolve function."""

    def test_relative_against_absolute(self) -> None:
        assert resolve(split("/a/b"), split("../c")) == split("/a/c")

    def test_documented_example(self) -> None:
        assert resolve(
            split("/folder/subfolder"), split("../subfolder2/project")
        ) == split("/folder/subfolder2/project")

    def test_upstream_above_root_clamps(self) -> None:
        assert join(resolve(split("/"), split(".."))) == "/"

    def test_root_with_empty_segment(self) -> None:
        assert resolve(["", ""], [".."]) == [ROOT_NAME]

    def test_no_input_is_current_directory(self) -> None:
        assert resolve([], []) == [CURRENT_DIRECTORY]

    def test_later_absolute_path_wins(self) -> None:
        assert resolve(split("/a"), split("/b"), split("c")) == split("/b/c")

    def test_empty_arguments_are_skipped(self) -> None:
        assert resolve(split("/a"), [], split("b")) == split("/a/b")

    def test_relative_only_stays_relative(self) -> None:
        assert resolve(split("a"), split("../../b")) == ["..", "b"]

    def test_cancelled_relative_becomes_current_directory(self) -> None:
        assert resolve(split("a"), split("..")) == [CURRENT_DIRECTORY]

    @given(st.lists(names, max_size=5), st.lists(segments, max_size=8))
    def test_absolute_base_gives_absolute_result(
        self, base: list[str], path: list[str]
    ) -> None:
        result = resolve([ROOT_NAME, *base], path)
        assert is_absolute(result)


class TestPredicates:
    """Test is_absolute, is_child_or_equal and to_segments."""

    def test_is_absolute(self) -> None:
        assert is_absolute([ROOT_NAME, "a"])
        assert not is_absolute(["a"])
        assert not is_absolute([])

    def test_child(self) -> None:
        assert is_child_or_equal(split("/a"), split("/a/b"))

    def test_equal(self) -> None:
        assert is_child_or_equal(split("/a"), split("/a"))

    def test_sibling(self) -> None:
        assert not is_child_or_equal(split("/a"), split("/b/a"))

    def test_parent_is_not_child(self) -> None:
        assert not is_child_or_equal(split("/a/b"), split("/a"))

    def test_root_contains_everything(self) -> None:
        assert is_child_or_equal([ROOT_NAME], split("/x/y"))

    def test_containment_requires_absolute_paths(self) -> None:
        with pytest.raises(AssertionError, match="expected absolute paths"):
            _ = is_child_or_equal(split("a"), split("a/b"))

    def test_to_segments_splits_strings(self) -> None:
        assert to_segments("/a/b") == ["", "a", "b"]

    def test_to_segments_copies_sequences(self) -> None:
        original = ("", "a")
        result = to_segments(original)
        assert result == ["", "a"]
        assert isinstance(result, list)
