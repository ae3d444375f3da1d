"""Path management for the MedTerm data directory."""

from pathlib import Path

from .config import MedTermConfig


class DataPaths:
    """Manages file paths within the MedTerm data directory."""

    def __init__(self, root: Path):
        """Initialize data paths from root directory.
        
        Args:
            root: Root directory holding the persisted documents
        """
        self.root = root

    @classmethod
    def from_config(cls, config: MedTermConfig) -> "DataPaths":
        """Create DataPaths from a MedTermConfig."""
        return cls(config.data_dir)

    def file_for_key(self, key: str) -> Path:
        """Get the JSON document path for a logical store key."""
        return self.root / f"{key}.json"

    def ensure(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
