from pathlib import Path

from django import forms
from django.conf import settings
from django.forms import formset_factory
from PIL import Image, UnidentifiedImageError

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png"}
ALLOWED_IMAGE_FORMATS = {"JPEG", "PNG"}


def _max_photos() -> int:
    return getattr(settings, "REPORT_MAX_PHOTOS", 3)


def _max_photo_size() -> int:
    return getattr(settings, "REPORT_MAX_PHOTO_SIZE", 1024 * 1024)


class MultipleFileInput(forms.ClearableFileInput):
    allow_multiple_selected = True


class MultipleImageField(forms.FileField):
    """File field accepting several uploads; cleans to a list."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault(
            "widget", MultipleFileInput(attrs={"accept": "image/jpeg,image/png"})
        )
        super().__init__(*args, **kwargs)

    def clean(self, data, initial=None):
        if not data:
            return []
        single_clean = super().clean
        if isinstance(data, (list, tuple)):
            return [single_clean(item, initial) for item in data]
        return [single_clean(data, initial)]


class EventReportForm(forms.Form):
    final_report_remarks = forms.CharField(
        required=False,
        label="Final remarks",
        widget=forms.Textarea(attrs={"rows": 4, "placeholder": "Summarise how the event went…"}),
    )
    ai_objective = forms.CharField(
        required=False,
        label="Report objective",
        widget=forms.Textarea(attrs={"rows": 4}),
        help_text="Formal objective paragraph for the report, e.g. the AI-generated draft.",
    )
    photos = MultipleImageField(
        required=False,
        label="Evidence photos",
        help_text="Up to 3 JPEG/PNG images, 1MB each.",
    )

    def __init__(self, *args, existing_photos: int = 0, **kwargs):
        self.existing_photos = existing_photos
        super().__init__(*args, **kwargs)

    def clean_photos(self):
        photos = self.cleaned_data.get("photos") or []
        limit = _max_photos()
        if self.existing_photos + len(photos) > limit:
            raise forms.ValidationError(
                f"You can upload a maximum of {limit} evidence images."
            )
        for upload in photos:
            validate_report_photo(upload)
        return photos


def validate_report_photo(upload) -> None:
    """Reject anything that is not a JPEG/PNG under the size limit."""
    name = getattr(upload, "name", "") or ""
    if Path(name).suffix.lower() not in ALLOWED_IMAGE_EXTENSIONS:
        raise forms.ValidationError(f"{name}: only JPEG and PNG images are allowed.")
    limit = _max_photo_size()
    if upload.size > limit:
        raise forms.ValidationError(
            f"{name}: file is larger than {limit // 1024} KB."
        )
    upload.seek(0)
    try:
        with Image.open(upload) as img:
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError) as exc:
        raise forms.ValidationError(f"{name}: not a valid image.") from exc
    finally:
        upload.seek(0)
    if image_format not in ALLOWED_IMAGE_FORMATS:
        raise forms.ValidationError(f"{name}: only JPEG and PNG images are allowed.")


class SocialLinkForm(forms.Form):
    url = forms.URLField(
        required=False,
        max_length=500,
        assume_scheme="https",
        label="Link",
        error_messages={"invalid": "Must be a valid URL"},
        widget=forms.URLInput(attrs={"placeholder": "https://…"}),
    )


SocialLinkFormSet = formset_factory(SocialLinkForm, extra=1)
