"""
Catalog configuration.
"""

from dataclasses import dataclass, field


@dataclass
class CatalogConfig:
    """Where the catalog documents live and how edits are submitted."""

    page_url: str = ""
    pages_domain: str = "github.io"
    default_owner: str | None = None
    default_repo: str | None = None
    remote_base_path: str = "docs"
    local_data_dir: str = "docs"
    valid_values_file: str = "valid-platform-values.json"
    submission_sink: str = "issue"
    issue_labels: list[str] = field(default_factory=lambda: ["catalog-change"])
