# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""File access and module path resolution.

FileSystemAccessor is the only place source files are read from disk.
PathResolver maps an import specifier to a candidate file path, the way a
bundler would: explicit extension, then extension inference, then an index
file inside a directory of that name.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_MODULE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".vue")
DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024


class FileSystemAccessor:
    """Read-only access to source files with size limits and encoding fallback."""

    def __init__(
        self,
        max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.max_file_size_bytes = max_file_size_bytes
        self._logger = logger or globals()["logger"]

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def read_text(self, path: str) -> Optional[str]:
        """Read file with UTF-8/latin-1 fallback and size limit.

        Args:
            path: Path of the file to read.

        Returns:
            File contents, or None if the file is missing, unreadable or too large.
        """
        file_path = Path(path)
        try:
            if not file_path.is_file():
                self._logger.debug(f"File not found: {path}")
                return None

            file_size = file_path.stat().st_size
            if file_size > self.max_file_size_bytes:
                self._logger.warning(
                    f"⚠️ Skipping {path}: {file_size} bytes "
                    f"exceeds limit ({self.max_file_size_bytes})"
                )
                return None

            try:
                return file_path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                # latin-1 accepts all byte values
                self._logger.warning(f"⚠️ File {path} is not UTF-8, using latin-1 fallback encoding")
                return file_path.read_text(encoding="latin-1")

        except PermissionError:
            self._logger.warning(f"Permission denied reading file: {path}")
            return None
        except OSError as e:
            self._logger.warning(f"Error reading {path}: {e}")
            return None


class PathResolver:
    """Resolve import specifiers relative to the importing file's directory.

    Only relative (`./`, `../`) and absolute specifiers are resolved; bare
    package specifiers (`vue`, `@scope/pkg`) name third-party code and
    resolve to None.
    """

    def __init__(
        self,
        filesystem: FileSystemAccessor,
        extensions: Sequence[str] = DEFAULT_MODULE_EXTENSIONS,
    ) -> None:
        self.filesystem = filesystem
        self.extensions: List[str] = list(extensions)

    def resolve(self, specifier: str, from_dir: str) -> Optional[str]:
        """Resolve a module specifier to an existing file path.

        Resolution order:
        1. Specifier already ends in a known extension: used as is
        2. `<specifier><ext>` for each extension in order
        3. `<specifier>/index<ext>` for each extension in order

        Args:
            specifier: Module specifier from an import/export declaration.
            from_dir: Directory of the file containing the declaration.

        Returns:
            Resolved absolute path, or None if nothing matches.
        """
        if not specifier.startswith((".", "/")):
            return None

        base = (Path(from_dir) / specifier).resolve()

        if base.suffix in self.extensions:
            return str(base) if self.filesystem.exists(str(base)) else None

        for ext in self.extensions:
            candidate = base.with_name(base.name + ext)
            if self.filesystem.exists(str(candidate)):
                return str(candidate)

        for ext in self.extensions:
            candidate = base / f"index{ext}"
            if self.filesystem.exists(str(candidate)):
                return str(candidate)

        return None
