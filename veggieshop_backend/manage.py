#!/usr/bin/env python
"""
VeggieShop management entrypoint.

    python manage.py migrate
    python manage.py seed_demo_data
    python manage.py runserver

Settings resolution:
- DJANGO_SETTINGS_MODULE wins when it names a concrete module
  (production sets backend.settings.prod).
- Unset, or pointing at the bare "backend.settings" package, falls back
  to backend.settings.dev.
"""

from __future__ import annotations

import os
import sys

DEFAULT_SETTINGS = "backend.settings.dev"
SETTINGS_PACKAGE = "backend.settings"


def resolve_settings_module(current: str | None) -> str:
    current = (current or "").strip()
    if current in ("", SETTINGS_PACKAGE):
        return DEFAULT_SETTINGS
    return current


def main() -> None:
    os.environ["DJANGO_SETTINGS_MODULE"] = resolve_settings_module(
        os.environ.get("DJANGO_SETTINGS_MODULE")
    )

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Django is not importable. Install the project "
            "(pip install -e .) inside an activated virtualenv."
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
