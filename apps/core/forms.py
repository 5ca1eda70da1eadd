# apps/core/forms.py

"""
Validation of JSON payloads

Forms receive the snake_case dict produced by apps.core.api.parse_body.
"""

from django import forms
from django.conf import settings
from django.core.validators import RegexValidator

from .models import Activity

hex_color = RegexValidator(r'^#[0-9a-fA-F]{6}$', 'Color must be a hex value like #3b82f6')


# === ACCOUNTS ===

class SignupForm(forms.Form):
    email = forms.EmailField(max_length=254)
    password = forms.CharField(min_length=8, max_length=128, strip=False)
    first_name = forms.CharField(max_length=150, required=False)
    last_name = forms.CharField(max_length=150, required=False)

    def clean_email(self):
        return self.cleaned_data['email'].lower()


class LoginForm(forms.Form):
    email = forms.EmailField(max_length=254)
    password = forms.CharField(strip=False)

    def clean_email(self):
        return self.cleaned_data['email'].lower()


class ProfileForm(forms.Form):
    first_name = forms.CharField(max_length=150, required=False)
    last_name = forms.CharField(max_length=150, required=False)


# === BOARDS ===

class BoardForm(forms.Form):
    """New board"""

    TEMPLATE_CHOICES = [
        ('classic', 'Classic'),
        ('kanban', 'Kanban'),
        ('scrum', 'Scrum'),
    ]

    name = forms.CharField(max_length=100)
    color = forms.CharField(max_length=7, required=False, validators=[hex_color])
    template = forms.ChoiceField(choices=TEMPLATE_CHOICES, required=False)


class BoardUpdateForm(forms.Form):
    name = forms.CharField(max_length=100, required=False)
    color = forms.CharField(max_length=7, required=False, validators=[hex_color])


class InvitationForm(forms.Form):
    email = forms.EmailField(max_length=254)

    def clean_email(self):
        return self.cleaned_data['email'].lower()


# === COLUMNS ===

class ColumnForm(forms.Form):
    name = forms.CharField(max_length=100)
    color = forms.CharField(max_length=7, required=False, validators=[hex_color])


class ColumnUpdateForm(forms.Form):
    """Partial update, absent fields stay untouched"""

    name = forms.CharField(max_length=100, required=False)
    color = forms.CharField(max_length=7, required=False, validators=[hex_color])
    is_expanded = forms.NullBooleanField(required=False)
    shortcut = forms.CharField(max_length=1, required=False, strip=False)


# === CARDS ===

class ItemForm(forms.Form):
    column_id = forms.CharField(max_length=9)
    title = forms.CharField(max_length=500)
    content = forms.CharField(max_length=5000, required=False)
    assignee_id = forms.CharField(max_length=9, required=False)


class ItemUpdateForm(forms.Form):
    title = forms.CharField(max_length=500, required=False)
    content = forms.CharField(max_length=5000, required=False)


class MoveForm(forms.Form):
    """
    Drag-and-drop gesture
    after_sibling_id: empty = drop at start, "end" = drop at end
    """

    target_container_id = forms.CharField(max_length=9, required=False)
    current_container_id = forms.CharField(max_length=9, required=False)
    after_sibling_id = forms.CharField(max_length=9, required=False)
    expected_revision = forms.IntegerField(min_value=0, required=False)

    def clean(self):
        cleaned_data = super().clean()
        for field in ('current_container_id', 'after_sibling_id'):
            if not cleaned_data.get(field):
                cleaned_data[field] = None
        return cleaned_data


class AssignForm(forms.Form):
    """assignee_id null clears the assignee"""

    assignee_id = forms.CharField(max_length=9, required=False)


class AssigneeForm(forms.Form):
    name = forms.CharField(max_length=100)


class SearchForm(forms.Form):
    q = forms.CharField(max_length=200)


# === COMMENTS ===

class CommentForm(forms.Form):
    content = forms.CharField(max_length=2000)


# === ACTIVITY ===

class ActivityFilterForm(forms.Form):
    limit = forms.IntegerField(min_value=1, required=False)
    offset = forms.IntegerField(min_value=0, required=False)
    board_id = forms.CharField(max_length=9, required=False)
    type = forms.ChoiceField(choices=Activity.TYPE_CHOICES, required=False)

    def clean_limit(self):
        limit = self.cleaned_data.get('limit') or settings.GROOVE_ACTIVITY_PAGE_SIZE
        return min(limit, settings.GROOVE_ACTIVITY_MAX_PAGE_SIZE)

    def clean_offset(self):
        return self.cleaned_data.get('offset') or 0
