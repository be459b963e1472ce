"""
Category administration.
"""
import logging
from collections import namedtuple

from django.db.models import Q
from django.utils import timezone

from ..conf import blog_settings
from ..exceptions import Conflict, Forbidden, NotFound, ValidationFailed
from ..forms import CategoryForm
from ..models import Category

logger = logging.getLogger(__name__)

PagedResult = namedtuple("PagedResult", ["total_count", "items"])

SORT_FIELDS = {
    "name": "name",
    "createdat": "created_at",
}


def _require_admin(actor):
    if actor is None or not actor.is_authenticated or not actor.is_staff:
        raise Forbidden("Only administrators can manage categories")


class CategoryService:
    """Soft-delete CRUD over categories with unique, case-insensitive names."""

    def get_all(self):
        return list(Category.objects.active().order_by("name"))

    def list_paged(self, filter_text=None, sorting=None, skip=0, limit=None):
        """
        One page of live categories.

        Args:
            filter_text: case-insensitive substring matched against name or
                description
            sorting: ``name`` or ``createdAt``, descending with a ``-``
                prefix; name ascending when omitted
            skip: number of rows to skip
            limit: page size, defaults to CATEGORIES_PER_PAGE

        Returns:
            PagedResult(total_count, items)
        """
        if limit is None:
            limit = blog_settings.CATEGORIES_PER_PAGE

        qs = Category.objects.active()
        if filter_text and filter_text.strip():
            term = filter_text.strip()
            qs = qs.filter(Q(name__icontains=term) | Q(description__icontains=term))

        total_count = qs.count()
        items = list(qs.order_by(*self._ordering(sorting))[skip:skip + limit])
        return PagedResult(total_count=total_count, items=items)

    def get(self, category_id):
        return Category.objects.active().filter(pk=category_id).first()

    def exists(self, category_id):
        return Category.objects.active().filter(pk=category_id).exists()

    def name_exists(self, name, exclude_id=None):
        qs = Category.objects.active().filter(name__iexact=name.strip())
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    def create(self, data, actor):
        """
        Create a category, active unless ``data`` sets ``is_active``.

        Raises:
            Forbidden: ``actor`` is not staff.
            ValidationFailed: a field is missing or too long.
            Conflict: a live category already has the name.
        """
        _require_admin(actor)
        cleaned = self._clean(data)
        self._check_name(cleaned["name"])

        category = Category.objects.create(
            name=cleaned["name"],
            description=cleaned["description"],
            is_active=cleaned["is_active"] if "is_active" in data else True,
            created_by=actor,
        )
        logger.info("Category %s created by %s", category.pk, actor.pk)
        return category

    def update(self, category_id, data, actor):
        """
        Update a live category. A missing ``is_active`` keeps the current value.

        Raises:
            Forbidden: ``actor`` is not staff.
            NotFound: no live category has ``category_id``.
            ValidationFailed: a field is missing or too long.
            Conflict: another live category already has the name.
        """
        _require_admin(actor)
        category = self.get(category_id)
        if category is None:
            raise NotFound("Category not found")

        cleaned = self._clean(data)
        self._check_name(cleaned["name"], exclude_id=category.pk)

        category.name = cleaned["name"]
        category.description = cleaned["description"]
        if "is_active" in data:
            category.is_active = cleaned["is_active"]
        category.updated_at = timezone.now()
        category.updated_by = actor
        category.save()
        logger.info("Category %s updated by %s", category.pk, actor.pk)
        return category

    def delete(self, category_id, actor):
        _require_admin(actor)
        category = self.get(category_id)
        if category is None:
            raise NotFound("Category not found")
        category.soft_delete(actor=actor)
        logger.info("Category %s deleted by %s", category.pk, actor.pk)
        return category

    def restore(self, category_id, actor):
        """
        Bring a deleted category back.

        Raises Conflict if a live category took its name in the meantime.
        """
        _require_admin(actor)
        category = Category.objects.deleted().filter(pk=category_id).first()
        if category is None:
            raise NotFound("Category not found")
        self._check_name(category.name, exclude_id=category.pk)
        category.restore()
        logger.info("Category %s restored by %s", category.pk, actor.pk)
        return category

    def _clean(self, data):
        form = CategoryForm(data)
        if not form.is_valid():
            raise ValidationFailed(form.errors.as_data())
        return form.cleaned_data

    def _check_name(self, name, exclude_id=None):
        if self.name_exists(name, exclude_id=exclude_id):
            raise Conflict({"name": [f"A category named '{name}' already exists."]})

    @staticmethod
    def _ordering(sorting):
        if not sorting or not sorting.strip():
            return ["name", "pk"]
        sorting = sorting.strip()
        descending = sorting.startswith("-")
        field = SORT_FIELDS.get(sorting.lstrip("-").lower(), "name")
        return [f"-{field}" if descending else field, "pk"]
