"""Tests for slug derivation and allocation."""

import pytest

from viewforge.views.errors import ConflictError, ValidationError
from viewforge.views.slugs import allocate_slug, slugify


class TestSlugify:
    def test_lowercases_and_hyphenates(self):
        assert slugify("All Movies") == "all-movies"

    def test_collapses_runs_of_other_characters(self):
        assert slugify("Drafts  &  Reviews!!") == "drafts-reviews"

    def test_strips_leading_and_trailing_separators(self):
        assert slugify("  --Compact view--  ") == "compact-view"

    def test_underscores_become_hyphens(self):
        assert slugify("updated_at order") == "updated-at-order"

    def test_empty_and_none(self):
        assert slugify("") == ""
        assert slugify(None) == ""
        assert slugify("!!!") == ""

    def test_keeps_digits(self):
        assert slugify("Top 10 (2024)") == "top-10-2024"


class TestAllocateSlug:
    def test_derives_from_label(self):
        assert allocate_slug([], "Compact View") == "compact-view"

    def test_explicit_slug_wins_over_label(self):
        assert allocate_slug([], "Compact View", slug="tight") == "tight"

    def test_explicit_slug_is_normalized(self):
        assert allocate_slug([], None, slug="My Slug") == "my-slug"

    def test_existing_explicit_slug_is_an_update(self):
        """Writing to an explicit slug that exists targets that view."""
        assert allocate_slug(["all", "compact"], "All", slug="all") == "all"

    def test_derived_slug_collision_is_rejected(self):
        """A label-derived slug must not silently take over another view."""
        with pytest.raises(ConflictError) as exc_info:
            allocate_slug(["compact-view"], "Compact View")
        assert exc_info.value.slug == "compact-view"

    def test_rename_onto_other_view_is_rejected(self):
        with pytest.raises(ConflictError):
            allocate_slug(["all", "compact"], "Compact", slug="compact", current_slug="all")

    def test_rename_to_free_slug(self):
        assert allocate_slug(["all", "compact"], "Everything", slug="everything", current_slug="all") == "everything"

    def test_update_keeping_current_slug(self):
        assert allocate_slug(["all"], "All", slug="all", current_slug="all") == "all"

    def test_missing_slug_and_label(self):
        with pytest.raises(ValidationError):
            allocate_slug([], None)

    def test_label_without_slug_characters(self):
        with pytest.raises(ValidationError):
            allocate_slug([], "***")

    def test_same_label_resave_is_an_update(self):
        """A label-derived slug owned by a view with that label is the same view."""
        labels = {"all-movies": "All Movies"}
        assert allocate_slug(labels, "All Movies", existing_labels=labels) == "all-movies"

    def test_same_slug_different_label_conflicts(self):
        labels = {"all-movies": "All movies (old)"}
        with pytest.raises(ConflictError):
            allocate_slug(labels, "All Movies", existing_labels=labels)
