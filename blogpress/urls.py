"""
URL configuration for blogpress.

Include in your project urls.py:

    path('blog/', include('blogpress.urls')),
"""
from django.urls import path

from . import views

app_name = "blogpress"

urlpatterns = [
    # Listings
    path("", views.BlogListView.as_view(), name="blog_list"),
    path("search/", views.BlogSearchView.as_view(), name="blog_search"),
    path("category/<int:pk>/", views.CategoryBlogListView.as_view(), name="category_blogs"),
    path("author/<str:username>/", views.AuthorBlogListView.as_view(), name="author_blogs"),

    # Post CRUD
    path("post/new/", views.BlogCreateView.as_view(), name="blog_create"),
    path("post/<int:pk>/", views.BlogDetailView.as_view(), name="blog_detail"),
    path("post/<int:pk>/edit/", views.BlogUpdateView.as_view(), name="blog_update"),
    path("post/<int:pk>/delete/", views.BlogDeleteView.as_view(), name="blog_delete"),
    path(
        "post/<int:pk>/restore/",
        views.BlogActionView.as_view(action="restore"),
        name="blog_restore",
    ),
    path(
        "post/<int:pk>/publish/",
        views.BlogActionView.as_view(action="publish"),
        name="blog_publish",
    ),
    path(
        "post/<int:pk>/unpublish/",
        views.BlogActionView.as_view(action="unpublish"),
        name="blog_unpublish",
    ),
    path("posts/<slug:slug>/", views.BlogDetailView.as_view(), name="blog_detail_slug"),

    # Interactions
    path("post/<int:pk>/like/", views.LikeToggleView.as_view(), name="like_toggle"),
    path("post/<int:pk>/comment/", views.CommentCreateView.as_view(), name="comment_create"),
    path("comment/<int:pk>/edit/", views.CommentUpdateView.as_view(), name="comment_update"),
    path("comment/<int:pk>/delete/", views.CommentDeleteView.as_view(), name="comment_delete"),

    # Images
    path("images/upload/", views.ImageUploadView.as_view(), name="image_upload"),

    # Category administration
    path("categories/", views.CategoryListView.as_view(), name="category_list"),
    path("categories/new/", views.CategoryCreateView.as_view(), name="category_create"),
    path("categories/<int:pk>/edit/", views.CategoryUpdateView.as_view(), name="category_update"),
    path(
        "categories/<int:pk>/delete/",
        views.CategoryActionView.as_view(action="delete"),
        name="category_delete",
    ),
    path(
        "categories/<int:pk>/restore/",
        views.CategoryActionView.as_view(action="restore"),
        name="category_restore",
    ),
]
