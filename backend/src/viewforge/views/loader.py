"""Seed view definitions from YAML files."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from viewforge.views.errors import ViewStoreError
from viewforge.views.service import ViewService
from viewforge.views.slugs import slugify
from viewforge.views.types import ViewKind

logger = logging.getLogger(__name__)


@dataclass
class ViewSeed:
    """A view shipped with the application, saved once if absent."""

    entity_type: str
    kind: ViewKind
    body: dict[str, Any]
    source: str

    @property
    def slug(self) -> str:
        return slugify(self.body.get("slug") or self.body.get("label"))


class ViewSeedLoader:
    """Loads seed views from metadata/views/*.yaml files."""

    def __init__(self, views_path: Path):
        self.views_path = views_path
        self.seeds: list[ViewSeed] = []

    def load_all(self) -> None:
        """Load all seed views from YAML files."""
        if not self.views_path.exists():
            return

        for yaml_file in sorted(self.views_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
                if data and "view" in data:
                    self.seeds.append(self._parse_seed(data["view"], yaml_file.stem))

    def _parse_seed(self, data: dict, file_stem: str) -> ViewSeed:
        """Parse a view YAML into a ViewSeed."""
        body = {k: v for k, v in data.items() if k not in ("entityType", "kind")}
        return ViewSeed(
            entity_type=str(data["entityType"]),
            kind=ViewKind(data.get("kind", "list")),
            body=body,
            source=file_stem,
        )

    def apply(self, service: ViewService, acting_role: str | None = None) -> int:
        """Save every seed whose slug is not taken yet. Returns the number saved.

        Existing views are never overwritten, so operator edits survive
        restarts. A broken seed is logged and skipped.
        """
        saved = 0
        for seed in self.seeds:
            try:
                entity_type = service.catalog.resolve(seed.entity_type)
                if entity_type and service.store.find(entity_type.id, seed.kind, seed.slug):
                    continue
                service.save_view(seed.entity_type, seed.kind, seed.body, acting_role=acting_role)
                saved += 1
            except ViewStoreError as e:
                logger.warning("Skipping seed view '%s': %s", seed.source, e)
        return saved
