"""
Forms validating blogpress input.

The services validate through these forms too, so the HTML views and
programmatic callers share one set of field rules.
"""
from django import forms

from .models import BlogSort, Category


class BlogForm(forms.Form):
    title = forms.CharField(
        min_length=3,
        max_length=200,
        error_messages={"required": "Title is required"},
    )
    content = forms.CharField(
        widget=forms.Textarea,
        min_length=10,
        max_length=10000,
        error_messages={"required": "Content is required"},
    )
    summary = forms.CharField(
        widget=forms.Textarea(attrs={"rows": 3}),
        max_length=300,
        required=False,
    )
    featured_image_url = forms.URLField(
        max_length=500,
        required=False,
        error_messages={"invalid": "Please enter a valid URL"},
    )
    meta_description = forms.CharField(max_length=160, required=False)
    category_ids = forms.ModelMultipleChoiceField(
        queryset=Category.objects.none(),
        error_messages={"required": "Please select at least one category"},
    )
    is_published = forms.BooleanField(required=False)
    # Uploaded by the service, not cleaned here.
    image = forms.FileField(required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["category_ids"].queryset = Category.objects.active().order_by("name")


class CommentForm(forms.Form):
    content = forms.CharField(
        widget=forms.Textarea(attrs={"rows": 3}),
        min_length=1,
        max_length=1000,
        error_messages={"required": "Comment content is required"},
    )


class CategoryForm(forms.Form):
    name = forms.CharField(
        min_length=2,
        max_length=100,
        error_messages={"required": "Category name is required"},
    )
    description = forms.CharField(
        widget=forms.Textarea(attrs={"rows": 3}),
        max_length=500,
        required=False,
    )
    is_active = forms.BooleanField(required=False)


class BlogFilterForm(forms.Form):
    """Query-string filters accepted by the listing views."""

    sort = forms.ChoiceField(choices=BlogSort.choices, required=False)
    category = forms.TypedMultipleChoiceField(coerce=int, required=False)
    q = forms.CharField(required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["category"].choices = [
            (str(pk), name)
            for pk, name in Category.objects.active().values_list("pk", "name")
        ]

    @property
    def sort_value(self):
        return self.cleaned_data.get("sort") or BlogSort.LATEST

    @property
    def category_ids(self):
        return self.cleaned_data.get("category") or []
