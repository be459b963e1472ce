"""
Views for blogpress.
"""
from django.contrib.auth import get_user_model
from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse, reverse_lazy
from django.views import View
from django.views.generic import DetailView, FormView, ListView, TemplateView

from .conf import blog_settings
from .exceptions import ImageUploadError, NotFound, ValidationFailed
from .forms import BlogFilterForm, BlogForm, CategoryForm, CommentForm
from .models import BlogSort
from .services import BlogService, CategoryService, get_image_storage

blog_service = BlogService()
category_service = CategoryService()


def _wants_json(request):
    return request.headers.get("Accept") == "application/json"


def _error_response(exc, status=400):
    return JsonResponse({"errors": exc.message_dict}, status=status)


class StaffRequiredMixin(UserPassesTestMixin):
    raise_exception = True

    def test_func(self):
        return self.request.user.is_staff


class BlogListView(ListView):
    """List visible posts with category filter, sort and pagination."""

    template_name = "blogpress/blog_list.html"
    context_object_name = "blogs"

    def get_paginate_by(self, queryset):
        return blog_settings.POSTS_PER_PAGE

    def get_queryset(self):
        self.filters = BlogFilterForm(self.request.GET)
        self.filters.is_valid()
        return self.get_blogs(self.filters.category_ids, self.filters.sort_value)

    def get_blogs(self, category_ids, sort):
        return blog_service.get_all(self.request.user, category_ids=category_ids, sort=sort)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["filters"] = self.filters
        context["categories"] = category_service.get_all()
        context["sort_choices"] = BlogSort.choices
        return context


class BlogSearchView(BlogListView):
    """Search posts by title, content, summary or category name."""

    template_name = "blogpress/blog_search.html"

    def get_blogs(self, category_ids, sort):
        return blog_service.search(
            self.request.GET.get("q", ""),
            self.request.user,
            category_ids=category_ids,
            sort=sort,
        )

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["query"] = self.request.GET.get("q", "")
        return context


class CategoryBlogListView(BlogListView):
    """List posts in a specific category."""

    template_name = "blogpress/category_detail.html"

    def get_blogs(self, category_ids, sort):
        self.category = category_service.get(self.kwargs["pk"])
        if self.category is None:
            raise NotFound("Category not found")
        return blog_service.by_category(
            self.category.pk,
            self.request.user,
            category_ids=category_ids,
            sort=sort,
        )

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["category"] = self.category
        return context


class AuthorBlogListView(BlogListView):
    """List posts by a specific author. Authors also see their drafts."""

    template_name = "blogpress/author_blogs.html"

    def get_blogs(self, category_ids, sort):
        User = get_user_model()
        self.author = get_object_or_404(User, username=self.kwargs["username"])
        return blog_service.by_author(
            self.author,
            self.request.user,
            category_ids=category_ids,
            sort=sort,
        )

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["author"] = self.author
        return context


class BlogDetailView(DetailView):
    """Display a single post and count the view."""

    template_name = "blogpress/blog_detail.html"
    context_object_name = "blog"

    def get_object(self, queryset=None):
        viewer = self.request.user
        if "slug" in self.kwargs:
            blog = blog_service.get_by_slug(self.kwargs["slug"], viewer)
        else:
            blog = blog_service.get_by_id(self.kwargs["pk"], viewer)
        if blog is None:
            raise NotFound("Blog not found")

        if blog_service.increment_view_count(blog.pk):
            blog.view_count += 1
        return blog

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["comments"] = blog_service.comments_for(self.object.pk, self.request.user)
        context["comment_form"] = CommentForm()
        return context


class BlogCreateView(LoginRequiredMixin, FormView):
    """Create a new post."""

    form_class = BlogForm
    template_name = "blogpress/blog_form.html"

    def form_valid(self, form):
        try:
            blog = blog_service.create(
                form.data,
                self.request.user,
                image=self.request.FILES.get("image"),
            )
        except ValidationFailed as exc:
            form.add_error(None, exc)
            return self.form_invalid(form)
        except ImageUploadError as exc:
            form.add_error("image", str(exc))
            return self.form_invalid(form)
        return redirect(blog.get_absolute_url())


class BlogUpdateView(LoginRequiredMixin, FormView):
    """Edit an existing post. Only its author gets past get_blog()."""

    form_class = BlogForm
    template_name = "blogpress/blog_form.html"

    def get_blog(self):
        blog = blog_service.get_by_id(self.kwargs["pk"], self.request.user)
        if blog is None or not blog.is_owner:
            raise NotFound("Blog not found")
        return blog

    def get_initial(self):
        blog = self.get_blog()
        return {
            "title": blog.title,
            "content": blog.content,
            "summary": blog.summary,
            "featured_image_url": blog.featured_image_url,
            "meta_description": blog.meta_description,
            "category_ids": [category.pk for category in blog.category_list],
            "is_published": blog.is_published,
        }

    def form_valid(self, form):
        try:
            blog = blog_service.update(
                self.kwargs["pk"],
                form.data,
                self.request.user,
                image=self.request.FILES.get("image"),
            )
        except ValidationFailed as exc:
            form.add_error(None, exc)
            return self.form_invalid(form)
        except ImageUploadError as exc:
            form.add_error("image", str(exc))
            return self.form_invalid(form)
        return redirect(blog.get_absolute_url())


class BlogDeleteView(LoginRequiredMixin, TemplateView):
    """Confirm and soft delete a post."""

    template_name = "blogpress/blog_confirm_delete.html"
    success_url = reverse_lazy("blogpress:blog_list")

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        blog = blog_service.get_by_id(self.kwargs["pk"], self.request.user)
        if blog is None or not blog.is_owner:
            raise NotFound("Blog not found")
        context["blog"] = blog
        return context

    def post(self, request, pk):
        blog_service.delete(pk, request.user)
        return redirect(self.success_url)


class BlogActionView(LoginRequiredMixin, View):
    """POST-only status change on a post, named by ``action``."""

    action = None

    def post(self, request, pk):
        getattr(blog_service, self.action)(pk, request.user)
        return redirect(reverse("blogpress:blog_detail", kwargs={"pk": pk}))


class LikeToggleView(LoginRequiredMixin, View):
    """Toggle the current user's like on a post."""

    def post(self, request, pk):
        liked = blog_service.toggle_like(pk, request.user)
        return JsonResponse({
            "liked": liked,
            "like_count": blog_service.likes.count(pk),
        })


def _comment_payload(comment):
    return {
        "id": comment.pk,
        "blog_id": comment.blog_id,
        "content": comment.content,
        "user": comment.user.get_username(),
        "created_at": comment.created_at.isoformat(),
        "updated_at": comment.updated_at.isoformat() if comment.updated_at else None,
        "is_owner": comment.is_owner,
        "can_edit": comment.can_edit,
    }


class CommentCreateView(LoginRequiredMixin, View):
    """Add a comment to a post."""

    def post(self, request, pk):
        try:
            comment = blog_service.add_comment(pk, request.POST.get("content", ""), request.user)
        except ValidationFailed as exc:
            return _error_response(exc)

        if _wants_json(request):
            return JsonResponse(_comment_payload(comment), status=201)
        return redirect(reverse("blogpress:blog_detail", kwargs={"pk": pk}))


class CommentUpdateView(LoginRequiredMixin, View):
    """Edit the current user's comment."""

    def post(self, request, pk):
        try:
            comment = blog_service.comments.update(pk, request.POST.get("content", ""), request.user)
        except ValidationFailed as exc:
            return _error_response(exc)

        if _wants_json(request):
            return JsonResponse(_comment_payload(comment))
        return redirect(reverse("blogpress:blog_detail", kwargs={"pk": comment.blog_id}))


class CommentDeleteView(LoginRequiredMixin, View):
    """Remove a comment as its author or as the post's author."""

    def post(self, request, pk):
        comment = blog_service.comments.delete(pk, request.user)
        if _wants_json(request):
            return JsonResponse({"id": comment.pk, "deleted": True})
        return redirect(reverse("blogpress:blog_detail", kwargs={"pk": comment.blog_id}))


class ImageUploadView(LoginRequiredMixin, View):
    """Upload an image and return its public URL."""

    def post(self, request):
        image = request.FILES.get("image")
        if image is None:
            return JsonResponse({"errors": {"image": ["An image file is required."]}}, status=400)
        try:
            url = get_image_storage().upload_file(image)
        except ValidationFailed as exc:
            return _error_response(exc)
        except ImageUploadError:
            return JsonResponse({"errors": {"image": ["Image upload failed."]}}, status=502)
        return JsonResponse({"url": url}, status=201)


class CategoryListView(LoginRequiredMixin, StaffRequiredMixin, TemplateView):
    """Paged category administration list."""

    template_name = "blogpress/category_list.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        params = self.request.GET
        try:
            page = max(1, int(params.get("page", 1)))
        except ValueError:
            page = 1
        per_page = blog_settings.CATEGORIES_PER_PAGE

        result = category_service.list_paged(
            filter_text=params.get("filter"),
            sorting=params.get("sorting"),
            skip=(page - 1) * per_page,
            limit=per_page,
        )
        context.update({
            "categories": result.items,
            "total_count": result.total_count,
            "page": page,
            "has_next": page * per_page < result.total_count,
            "has_previous": page > 1,
            "filter": params.get("filter", ""),
            "sorting": params.get("sorting", ""),
        })
        return context


class CategoryCreateView(LoginRequiredMixin, StaffRequiredMixin, FormView):
    form_class = CategoryForm
    template_name = "blogpress/category_form.html"
    initial = {"is_active": True}
    success_url = reverse_lazy("blogpress:category_list")

    def form_valid(self, form):
        try:
            category_service.create(form.cleaned_data, self.request.user)
        except ValidationFailed as exc:
            form.add_error(None, exc)
            return self.form_invalid(form)
        return super().form_valid(form)


class CategoryUpdateView(LoginRequiredMixin, StaffRequiredMixin, FormView):
    form_class = CategoryForm
    template_name = "blogpress/category_form.html"
    success_url = reverse_lazy("blogpress:category_list")

    def get_initial(self):
        category = category_service.get(self.kwargs["pk"])
        if category is None:
            raise NotFound("Category not found")
        return {
            "name": category.name,
            "description": category.description,
            "is_active": category.is_active,
        }

    def form_valid(self, form):
        try:
            category_service.update(self.kwargs["pk"], form.cleaned_data, self.request.user)
        except ValidationFailed as exc:
            form.add_error(None, exc)
            return self.form_invalid(form)
        return super().form_valid(form)


class CategoryActionView(LoginRequiredMixin, StaffRequiredMixin, View):
    """POST-only delete/restore of a category, named by ``action``."""

    action = None

    def post(self, request, pk):
        try:
            getattr(category_service, self.action)(pk, request.user)
        except ValidationFailed as exc:
            return _error_response(exc, status=409)
        return redirect("blogpress:category_list")
