"""
Unit Tests for the review content policies
"""
import pytest

from app.services.content_filter import (
    _DenylistPolicy,
    SubstringDenylistPolicy,
    WordBoundaryDenylistPolicy,
    build_content_policy,
)


class TestDenylistBase:

    def test_base_policy_is_abstract(self):
        with pytest.raises(TypeError):
            _DenylistPolicy(["darn"])


class TestSubstringPolicy:

    def test_clean_text_allowed(self):
        policy = SubstringDenylistPolicy(["darn"])

        assert policy.is_allowed("A wonderful course")

    def test_case_insensitive(self):
        policy = SubstringDenylistPolicy(["darn"])

        assert policy.find_violations("DARN this exam") == ["darn"]

    def test_matches_inside_words(self):
        """Substring matching flags terms embedded in longer words"""
        policy = SubstringDenylistPolicy(["ass"])

        assert not policy.is_allowed("The class was great")

    def test_empty_terms_ignored(self):
        policy = SubstringDenylistPolicy(["", "  ", "darn"])

        assert policy.terms == ["darn"]
        assert policy.is_allowed("")


class TestWordBoundaryPolicy:

    def test_whole_words_only(self):
        policy = WordBoundaryDenylistPolicy(["ass"])

        assert policy.is_allowed("The class was great")
        assert not policy.is_allowed("What an ass")

    def test_case_insensitive(self):
        policy = WordBoundaryDenylistPolicy(["darn"])

        assert policy.find_violations("Darn.") == ["darn"]


class TestBuildPolicy:

    def test_default_mode_uses_settings_denylist(self):
        policy = build_content_policy()

        assert isinstance(policy, SubstringDenylistPolicy)
        assert not policy.is_allowed("this is shit")

    def test_word_boundary_mode(self):
        policy = build_content_policy("word_boundary", ["darn"])

        assert isinstance(policy, WordBoundaryDenylistPolicy)

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            build_content_policy("regex", ["darn"])
