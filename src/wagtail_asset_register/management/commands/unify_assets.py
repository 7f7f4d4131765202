"""Management command to regenerate unified asset files."""

from __future__ import annotations

import logging

from django.core.management.base import BaseCommand, CommandParser

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Regenerate unified CSS/JS files for the groups in WAGTAIL_ASSET_REGISTER['UNIFY']."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--group",
            nargs="+",
            dest="group_ids",
            help="Specific group IDs to unify. If omitted, unifies every configured group.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be unified without writing files.",
        )

    def handle(self, **options: object) -> None:
        from wagtail_asset_register.api import unify_configured_groups
        from wagtail_asset_register.conf import get_setting

        configured: dict[str, dict[str, object]] = get_setting("UNIFY") or {}
        group_ids = options.get("group_ids") or list(configured)
        dry_run = options.get("dry_run")

        self.stdout.write(f"Unifying {len(group_ids)} group(s)...")  # type: ignore[arg-type]

        unified = 0
        errors = 0
        for group_id in group_ids:  # type: ignore[attr-defined]
            if dry_run:
                output = configured.get(group_id, {}).get("output")
                self.stdout.write(f"  [DRY RUN] Would unify: {group_id} -> {output}")
                unified += 1
                continue

            try:
                ok = unify_configured_groups([group_id])[group_id]
            except Exception:
                logger.exception("Failed to unify group %s", group_id)
                ok = False

            if ok:
                self.stdout.write(f"  Unified: {group_id}")
                unified += 1
            else:
                self.stderr.write(f"  ERROR: {group_id}")
                errors += 1

        prefix = "[DRY RUN] " if dry_run else ""
        self.stdout.write(
            self.style.SUCCESS(f"\n{prefix}Done. Unified: {unified}, Errors: {errors}")
        )
