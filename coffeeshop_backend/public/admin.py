# public/admin.py

"""
STAFF CONSOLE WRITE PATH

Admin edits go through the same path as gateway writes:
- the shop store's mutation lock is held for the whole save, commit included
- a busy lock sends the editor back to the form with an error, nothing saved
- the entity's cached listing is dropped once the save has committed
- fields are validated by the same serializer the gateway uses
"""

from __future__ import annotations

from django import forms
from django.contrib import admin, messages
from django.http import HttpResponseRedirect

from public.services.exceptions import ServerBusyError
from public.services.listing_cache import Listing, invalidate_listing
from public.services.shop_store import get_shop_store


class WireValidatedForm(forms.ModelForm):
    """
    Runs the gateway serializer over the form values.

    `wire_fields` maps form field -> wire key. Serializer errors are shown on
    the matching form field; normalized values replace the cleaned ones.
    """

    serializer_class = None
    wire_fields: dict[str, str] = {}

    def clean(self):
        cleaned = super().clean()
        if self.errors:
            return cleaned

        data = {wire: cleaned.get(field) for field, wire in self.wire_fields.items()}
        if not data.get("id"):
            data["id"] = self.instance.pk

        s = self.serializer_class(data=data)
        if not s.is_valid():
            by_wire = {wire: field for field, wire in self.wire_fields.items()}
            for wire, errors in s.errors.items():
                field = by_wire.get(wire)
                self.add_error(field if field in self.fields else None, errors)
            return cleaned

        for field, wire in self.wire_fields.items():
            source = s.fields[wire].source
            if field in self.fields and source in s.validated_data:
                cleaned[field] = s.validated_data[source]
        return cleaned


class StoreWriteAdmin(admin.ModelAdmin):
    listing: Listing | None = None

    def _busy(self, request, exc: ServerBusyError):
        self.message_user(request, str(exc), level=messages.ERROR)
        return HttpResponseRedirect(request.get_full_path())

    def _locked(self, request, view, *args):
        if request.method != "POST":
            return view(request, *args)
        try:
            with get_shop_store().lock.hold():
                response = view(request, *args)
        except ServerBusyError as exc:
            return self._busy(request, exc)
        if self.listing is not None:
            invalidate_listing(self.listing)
        return response

    def changeform_view(self, request, object_id=None, form_url="", extra_context=None):
        return self._locked(
            request, super().changeform_view, object_id, form_url, extra_context
        )

    def delete_view(self, request, object_id, extra_context=None):
        return self._locked(request, super().delete_view, object_id, extra_context)

    def delete_queryset(self, request, queryset):
        listings = (self.listing,) if self.listing is not None else ()
        with get_shop_store().mutation(*listings):
            super().delete_queryset(request, queryset)

    def changelist_view(self, request, extra_context=None):
        # bulk actions take the lock themselves
        try:
            return super().changelist_view(request, extra_context)
        except ServerBusyError as exc:
            return self._busy(request, exc)
