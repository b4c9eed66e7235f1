"""
Generation result types.

The generator never touches the filesystem: it returns ``GeneratedFile``
artifacts (relative path plus full text) collected in a ``GenerationResult``
and leaves persistence to ``via.writer``.
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath


@dataclass(frozen=True)
class GeneratedFile:
    """One generated artifact, relative to the output root."""

    relative_path: PurePosixPath
    contents: str


@dataclass
class GenerationResult:
    """
    Result from a generator execution.

    Attributes:
        files: Artifacts in emission order
        warnings: Non-fatal diagnostics to display to the user
    """

    files: list[GeneratedFile] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def paths(self) -> list[PurePosixPath]:
        return [f.relative_path for f in self.files]

    def add_file(self, path: str | PurePosixPath, contents: str) -> None:
        """Record a generated artifact."""
        self.files.append(GeneratedFile(PurePosixPath(path), contents))

    def add_warning(self, warning: str) -> None:
        """Record a warning."""
        self.warnings.append(warning)

    def get_file(self, path: str | PurePosixPath) -> GeneratedFile | None:
        """Get the last artifact emitted for ``path``."""
        target = PurePosixPath(path)
        for generated in reversed(self.files):
            if generated.relative_path == target:
                return generated
        return None

    def merge(self, other: "GenerationResult") -> None:
        """Merge another result into this one."""
        self.files.extend(other.files)
        self.warnings.extend(other.warnings)
