"""
Django admin configuration for blogpress.
"""
from django.contrib import admin, messages
from django.utils import timezone

from .exceptions import Conflict
from .models import Blog, BlogCategory, Category, Comment, Like
from .services import CategoryService


class BlogCategoryInline(admin.TabularInline):
    """Inline for managing category links on posts."""

    model = BlogCategory
    extra = 1
    raw_id_fields = ["category"]


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "post_count", "is_active", "is_deleted", "created_at"]
    list_filter = ["is_active", "is_deleted"]
    search_fields = ["name", "description"]
    list_editable = ["is_active"]
    readonly_fields = [
        "created_at",
        "updated_at",
        "created_by",
        "updated_by",
        "deleted_at",
        "deleted_by",
    ]

    actions = ["soft_delete_categories", "restore_categories"]

    @admin.action(description="Soft delete selected categories")
    def soft_delete_categories(self, request, queryset):
        service = CategoryService()
        count = 0
        for category in queryset.filter(is_deleted=False):
            service.delete(category.pk, request.user)
            count += 1
        self.message_user(request, f"{count} categories deleted.")

    @admin.action(description="Restore selected categories")
    def restore_categories(self, request, queryset):
        service = CategoryService()
        count = 0
        for category in queryset.filter(is_deleted=True):
            try:
                service.restore(category.pk, request.user)
            except Conflict:
                self.message_user(
                    request,
                    f"Cannot restore '{category.name}': a live category already uses the name.",
                    level=messages.ERROR,
                )
                continue
            count += 1
        self.message_user(request, f"{count} categories restored.")


@admin.register(Blog)
class BlogAdmin(admin.ModelAdmin):
    list_display = [
        "title_preview",
        "author",
        "is_published",
        "is_deleted",
        "view_count",
        "like_count",
        "created_at",
    ]
    list_filter = ["is_published", "is_deleted", "created_at"]
    search_fields = ["title", "content", "author__username"]
    raw_id_fields = ["author"]
    date_hierarchy = "created_at"
    inlines = [BlogCategoryInline]
    readonly_fields = [
        "slug",
        "view_count",
        "like_count",
        "estimated_read_time",
        "created_at",
        "updated_at",
        "published_at",
        "is_deleted",
        "deleted_at",
        "deleted_by",
    ]

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "content", "summary", "author")
        }),
        ("Presentation", {
            "fields": ("featured_image_url", "meta_description")
        }),
        ("Status", {
            "fields": ("is_published", "published_at", "is_deleted", "deleted_at", "deleted_by")
        }),
        ("Metadata", {
            "fields": (
                "view_count",
                "like_count",
                "estimated_read_time",
                "created_at",
                "updated_at",
            ),
            "classes": ("collapse",),
        }),
    )

    actions = ["publish_blogs", "unpublish_blogs"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    title_preview.short_description = "Title"

    def save_model(self, request, obj, form, change):
        # Slug, read time and first publication are derived, never edited here.
        if not obj.slug or "title" in form.changed_data:
            obj.slug = Blog.unique_slug(obj.title, exclude_pk=obj.pk)
        obj.refresh_read_time()
        if obj.is_published and obj.published_at is None:
            obj.published_at = timezone.now()
        if change:
            obj.updated_at = timezone.now()
        super().save_model(request, obj, form, change)

    @admin.action(description="Publish selected posts")
    def publish_blogs(self, request, queryset):
        count = 0
        for blog in queryset.filter(is_deleted=False):
            if blog.mark_published():
                blog.updated_at = timezone.now()
                blog.save(update_fields=["is_published", "published_at", "updated_at"])
                count += 1
        self.message_user(request, f"{count} posts published.")

    @admin.action(description="Unpublish selected posts")
    def unpublish_blogs(self, request, queryset):
        count = queryset.filter(is_published=True).update(
            is_published=False,
            updated_at=timezone.now(),
        )
        self.message_user(request, f"{count} posts unpublished.")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ["preview", "user", "blog", "is_edited", "is_deleted", "created_at"]
    list_filter = ["is_deleted", "created_at"]
    search_fields = ["content", "user__username", "blog__title"]
    raw_id_fields = ["blog", "user"]
    readonly_fields = ["created_at", "updated_at", "deleted_at", "deleted_by"]


@admin.register(Like)
class LikeAdmin(admin.ModelAdmin):
    list_display = ["user", "blog", "liked_at"]
    list_filter = ["liked_at"]
    search_fields = ["user__username", "blog__title"]
    raw_id_fields = ["user", "blog"]
    readonly_fields = ["liked_at"]

    # like_count is maintained by Like.toggle; rows are read-only here.
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
