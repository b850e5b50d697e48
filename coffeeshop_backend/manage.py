"""
PATH: manage.py

Django management entrypoint.

If DJANGO_SETTINGS_MODULE is unset or points at the settings *package*
("backend.settings"), use the concrete dev module. Production sets
DJANGO_SETTINGS_MODULE=backend.settings.prod explicitly.
"""

from __future__ import annotations

import os
import sys


def _ensure_settings_module() -> None:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()

    if not current or current == "backend.settings":
        os.environ["DJANGO_SETTINGS_MODULE"] = "backend.settings.dev"


def main() -> None:
    _ensure_settings_module()

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Is it installed and is the virtualenv active?"
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
