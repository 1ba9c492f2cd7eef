"""Shared helpers for the pickletrack blueprints."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flask_wtf import FlaskForm


def form_error_message(form: FlaskForm) -> str:
    """Flatten a form's validation errors into a single message."""
    messages = []
    for field_name, errors in form.errors.items():
        field = getattr(form, field_name, None) if isinstance(field_name, str) else None
        label = field.label.text if field is not None else "Form"
        messages.extend(f"{label}: {error}" for error in errors)
    return "; ".join(messages) or "Invalid form submission."
