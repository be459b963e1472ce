"""
Tests for the category service.
"""
import pytest

from blogpress.exceptions import Conflict, Forbidden, NotFound, ValidationFailed
from blogpress.models import Category


class TestPermissions:
    def test_non_staff_forbidden(self, categories, reader, category):
        with pytest.raises(Forbidden):
            categories.create({"name": "Rust"}, reader)
        with pytest.raises(Forbidden):
            categories.update(category.pk, {"name": "Py"}, reader)
        with pytest.raises(Forbidden):
            categories.delete(category.pk, reader)
        with pytest.raises(Forbidden):
            categories.restore(category.pk, None)

    def test_reads_are_open(self, categories, category, other_category):
        assert [c.name for c in categories.get_all()] == ["Django", "Python"]
        assert categories.get(category.pk) == category
        assert categories.exists(category.pk)


class TestCreateUpdate:
    def test_create_records_actor(self, categories, staff_user):
        created = categories.create(
            {"name": "  Rust  ", "description": "Systems", "is_active": True},
            staff_user,
        )

        assert created.name == "Rust"
        assert created.created_by == staff_user
        assert created.is_active

    def test_create_is_active_by_default(self, categories, staff_user):
        assert categories.create({"name": "Rust"}, staff_user).is_active

    def test_create_inactive(self, categories, staff_user):
        created = categories.create({"name": "Rust", "is_active": False}, staff_user)
        assert not created.is_active

    def test_update_without_flag_keeps_it(self, categories, staff_user, category):
        category.is_active = False
        category.save()

        updated = categories.update(category.pk, {"name": "Python"}, staff_user)
        assert not updated.is_active

    def test_duplicate_name_is_case_insensitive(self, categories, staff_user, category):
        with pytest.raises(Conflict) as excinfo:
            categories.create({"name": "PYTHON"}, staff_user)

        assert "name" in excinfo.value.message_dict
        assert Category.objects.count() == 1

    def test_conflict_is_a_validation_error(self, categories, staff_user, category):
        with pytest.raises(ValidationFailed):
            categories.create({"name": "python"}, staff_user)

    def test_invalid_fields(self, categories, staff_user):
        with pytest.raises(ValidationFailed) as excinfo:
            categories.create({"name": "x", "description": "d" * 501}, staff_user)

        assert set(excinfo.value.message_dict) == {"name", "description"}

    def test_update(self, categories, staff_user, category):
        updated = categories.update(
            category.pk,
            {"name": "Python 3", "description": "Modern Python", "is_active": True},
            staff_user,
        )

        assert updated.name == "Python 3"
        assert updated.updated_by == staff_user
        assert updated.updated_at is not None

    def test_update_keeps_own_name(self, categories, staff_user, category):
        updated = categories.update(category.pk, {"name": "python", "is_active": True}, staff_user)
        assert updated.name == "python"

    def test_update_to_taken_name(self, categories, staff_user, category, other_category):
        with pytest.raises(Conflict):
            categories.update(category.pk, {"name": "django"}, staff_user)

    def test_update_missing(self, categories, staff_user):
        with pytest.raises(NotFound):
            categories.update(999, {"name": "Nope"}, staff_user)


class TestDeleteRestore:
    def test_delete_hides_category(self, categories, staff_user, category):
        categories.delete(category.pk, staff_user)

        assert categories.get(category.pk) is None
        assert not categories.exists(category.pk)
        assert not categories.name_exists("Python")

    def test_delete_twice(self, categories, staff_user, category):
        categories.delete(category.pk, staff_user)
        with pytest.raises(NotFound):
            categories.delete(category.pk, staff_user)

    def test_name_reusable_after_delete(self, categories, staff_user, category):
        categories.delete(category.pk, staff_user)
        replacement = categories.create({"name": "Python"}, staff_user)

        assert replacement.pk != category.pk

    def test_restore(self, categories, staff_user, category):
        categories.delete(category.pk, staff_user)
        categories.restore(category.pk, staff_user)

        assert categories.exists(category.pk)

    def test_restore_conflicts_with_new_holder(self, categories, staff_user, category):
        categories.delete(category.pk, staff_user)
        categories.create({"name": "python"}, staff_user)

        with pytest.raises(Conflict):
            categories.restore(category.pk, staff_user)

    def test_restore_live_category(self, categories, staff_user, category):
        with pytest.raises(NotFound):
            categories.restore(category.pk, staff_user)


class TestListPaged:
    @pytest.fixture
    def many(self, db):
        names = ["Alpha", "Bravo", "Charlie", "Delta", "Echo", "Foxtrot", "Golf"]
        return [
            Category.objects.create(name=name, description=f"About {name.lower()}")
            for name in names
        ]

    def test_default_page(self, categories, many):
        page = categories.list_paged()

        assert page.total_count == 7
        assert [c.name for c in page.items] == ["Alpha", "Bravo", "Charlie", "Delta", "Echo"]

    def test_skip_and_limit(self, categories, many):
        page = categories.list_paged(skip=5, limit=5)

        assert page.total_count == 7
        assert [c.name for c in page.items] == ["Foxtrot", "Golf"]

    def test_filter_matches_name_or_description(self, categories, many):
        page = categories.list_paged(filter_text="ECHO")
        assert [c.name for c in page.items] == ["Echo"]

        page = categories.list_paged(filter_text="about")
        assert page.total_count == 7

    def test_sort_descending(self, categories, many):
        page = categories.list_paged(sorting="-name", limit=2)
        assert [c.name for c in page.items] == ["Golf", "Foxtrot"]

    def test_sort_by_created(self, categories, many):
        page = categories.list_paged(sorting="-createdAt", limit=1)
        assert page.items == [many[-1]]

    def test_excludes_deleted(self, categories, staff_user, many):
        categories.delete(many[0].pk, staff_user)
        page = categories.list_paged()

        assert page.total_count == 6
        assert page.items[0].name == "Bravo"
