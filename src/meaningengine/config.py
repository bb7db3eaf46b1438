"""Engine configuration dataclasses.

Frozen dataclasses with sensible defaults for each component.
No env-var loading or file parsing; plain defaults that can
be overridden at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field


@dataclass(frozen=True)
class ProjectionConfig:
    """Defaults applied by ``OperatorEngine.project`` when a call omits them."""

    use_refs: bool = True
    use_tags: bool = True
    tag_mode: str = "any"
    # "cap:lipsync" contributes the bare tag "lipsync"
    pointer_tag_prefix: str = "cap:"


@dataclass(frozen=True)
class LoaderConfig:
    """Defaults for resolving registry descriptions into catalogs."""

    base_path: str = ""
    catalogs_key: str = "catalogs"


@dataclass(frozen=True)
class EngineConfig:
    """Settings for the ``MeaningEngine`` facade."""

    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    check_catalog_refs: bool = True
