from pathlib import Path

from legalrisk.processor.exceptions import FileReadError
from legalrisk.processor.models import Document


def document_file_path(files_root: Path, storage_filename: str) -> Path:
    """Build path to document file: {files_root}/{storage_filename}"""
    return files_root / storage_filename


class FileLoader:
    """Resolves filesystem path for a document and reads its bytes."""

    def __init__(self, files_root: Path) -> None:
        self._files_root = files_root

    def load(self, document: Document) -> bytes:
        """Read document bytes from disk.

        Raises:
            FileNotFoundError: if the file does not exist at resolved path.
            FileReadError: if the storage filename escapes the files root.
        """
        path = self._resolve_path(document)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return path.read_bytes()

    def _resolve_path(self, document: Document) -> Path:
        path = document_file_path(self._files_root, document.storage_filename).resolve()
        if not path.is_relative_to(self._files_root.resolve()):
            raise FileReadError(
                f"Storage filename '{document.storage_filename}' is outside the files root"
            )
        return path
