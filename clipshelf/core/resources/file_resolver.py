"""File system backed resources"""

from pathlib import Path
from typing import Optional, Union
from loguru import logger


class FileResource:
    """Handle to a file or directory on disk"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser().resolve()

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def alive(self) -> bool:
        return self.path.exists()

    def __eq__(self, other):
        if not isinstance(other, FileResource):
            return False
        return self.path == other.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"FileResource({str(self.path)!r})"


class FileResolver:
    """
    Resolves absolute POSIX paths to FileResource handles.

    Paths outside ``root`` (when one is given) can't be addressed and are
    therefore never persisted.
    """

    def __init__(self, root: Optional[Union[str, Path]] = None):
        """
        Initialize resolver

        Args:
            root: Optional directory that all addressable resources live under
        """
        self.root = Path(root).expanduser().resolve() if root else None
        logger.debug(f"FileResolver initialized (root={self.root})")

    def identifier_of(self, ref: FileResource) -> str:
        if not isinstance(ref, FileResource) or not ref.alive:
            return ""

        if self.root is not None and not ref.path.is_relative_to(self.root):
            logger.debug(f"Resource outside resolver root: {ref.path}")
            return ""

        return ref.path.as_posix()

    def resolve(self, identifier: str) -> Optional[FileResource]:
        if not identifier:
            return None

        resource = FileResource(identifier)
        if not resource.alive:
            logger.debug(f"Unresolvable identifier: {identifier}")
            return None

        if self.root is not None and not resource.path.is_relative_to(self.root):
            return None

        return resource
