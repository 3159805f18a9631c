"""Photo attachments for complaint submissions."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path, PurePath
from typing import BinaryIO, Iterable, List, Optional, Sequence, Union

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from fiscabot.core.config import settings
from fiscabot.core.errors import PersistenceFailure, PhotoTooLarge, TooManyPhotos

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _extension(filename: str) -> str:
    return PurePath(filename.replace("\\", "/")).suffix


class PhotoStorage:
    """
    Stores uploaded photos under unique names in one directory.

    Each file keeps its original extension and is published as
    ``<url_prefix>/<name>``. Submissions with more than ``max_files`` photos
    are rejected, or cut down to the first ``max_files`` when ``overflow`` is
    ``"truncate"``. A photo larger than ``max_bytes`` rejects the whole
    submission.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        url_prefix: str = "/uploads",
        max_files: int = 6,
        overflow: str = "reject",
        max_bytes: int = 10 * 1024 * 1024,
    ):
        self.directory = Path(directory)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_files = max_files
        self.overflow = overflow
        self.max_bytes = max_bytes

    def check_count(self, count: int) -> None:
        if count > self.max_files and self.overflow == "reject":
            raise TooManyPhotos(count, self.max_files)

    def _write(self, name: str, source: BinaryIO, filename: str) -> None:
        """Copy ``source`` to disk in chunks, stopping once it passes ``max_bytes``."""
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / name
        written = 0
        with target.open("wb") as handle:
            while True:
                chunk = source.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > self.max_bytes:
                    break
                handle.write(chunk)
        if written > self.max_bytes:
            target.unlink(missing_ok=True)
            raise PhotoTooLarge(filename, self.max_bytes)

    async def save(self, files: Sequence[UploadFile]) -> List[str]:
        """Store the files and return their public paths in submission order."""
        photos = [f for f in files if f.filename]
        self.check_count(len(photos))
        photos = photos[: self.max_files]

        paths: List[str] = []
        try:
            for upload in photos:
                if upload.size is not None and upload.size > self.max_bytes:
                    raise PhotoTooLarge(upload.filename, self.max_bytes)
                name = f"{uuid.uuid4().hex}{_extension(upload.filename)}"
                await run_in_threadpool(self._write, name, upload.file, upload.filename)
                paths.append(f"{self.url_prefix}/{name}")
        except PhotoTooLarge:
            self.discard(paths)
            raise
        except OSError as exc:
            self.discard(paths)
            raise PersistenceFailure(
                "Erro ao salvar as fotos", details=str(exc)
            ) from exc
        return paths

    def resolve(self, name: str) -> Optional[Path]:
        """Path of a stored photo, or ``None`` for unknown or unsafe names."""
        if not name or name.startswith(".") or PurePath(name).name != name:
            return None
        target = self.directory / name
        return target if target.is_file() else None

    def discard(self, paths: Iterable[str]) -> None:
        """Remove photos saved for a submission that was not persisted."""
        for path in paths:
            target = self.directory / PurePath(path).name
            try:
                target.unlink()
            except FileNotFoundError:
                continue
            except OSError:
                logger.warning("photo_discard_failed", extra={"path": str(target)})


def get_photo_storage() -> PhotoStorage:
    return PhotoStorage(
        settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        max_files=settings.MAX_PHOTOS,
        overflow=settings.PHOTO_OVERFLOW,
        max_bytes=settings.MAX_PHOTO_BYTES,
    )
