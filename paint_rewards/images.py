"""
paint_rewards/images.py

Image-store collaborator for project evidence photos.

Storage is the local disk (UPLOAD_FOLDER), served under IMAGE_BASE_URL.

Multi-image upload is best-effort: each file gets its own ImageUploadResult
and a failed file never undoes the ones that were stored. Callers surface
failures as warnings.
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from .extensions import db
from .models import Project, ProjectImage

logger = logging.getLogger(__name__)


class ImageStoreError(Exception):
    """Upload or delete failed in the image store."""


@dataclass
class ImageUploadResult:
    filename: str
    url: Optional[str] = None
    image_id: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {"filename": self.filename, "url": self.url, "image_id": self.image_id, "error": self.error}


class LocalImageStore:
    def __init__(self, folder: str, base_url: str, allowed_extensions: Iterable[str]):
        self.folder = Path(folder)
        self.base_url = base_url.rstrip("/")
        self.allowed_extensions = {ext.lower() for ext in allowed_extensions}

    @classmethod
    def from_config(cls, config) -> "LocalImageStore":
        return cls(
            folder=config["UPLOAD_FOLDER"],
            base_url=config["IMAGE_BASE_URL"],
            allowed_extensions=config["ALLOWED_IMAGE_EXTENSIONS"],
        )

    def _extension(self, filename: str) -> str:
        return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

    def upload(self, project_id: int, file: FileStorage) -> str:
        """Store one file and return its public URL."""
        original = secure_filename(file.filename or "")
        if not original:
            raise ImageStoreError("missing filename")

        ext = self._extension(original)
        if ext not in self.allowed_extensions:
            raise ImageStoreError(f"unsupported file type: .{ext or '?'}")

        stored_name = f"{uuid.uuid4().hex}.{ext}"
        target_dir = self.folder / str(project_id)
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            file.save(str(target_dir / stored_name))
        except OSError as exc:
            raise ImageStoreError(f"could not store file: {exc}") from exc

        return f"{self.base_url}/{project_id}/{stored_name}"

    def path_for(self, url: str) -> Optional[Path]:
        """Map a URL produced by upload() back to a file path."""
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        relative = url[len(prefix):]
        path = (self.folder / relative).resolve()
        if self.folder.resolve() not in path.parents:
            return None
        return path

    def delete(self, url: str) -> None:
        path = self.path_for(url)
        if path is None:
            raise ImageStoreError(f"not a stored image: {url}")
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning("Image file already gone: %s", path)
        except OSError as exc:
            raise ImageStoreError(f"could not delete file: {exc}") from exc


def get_image_store() -> LocalImageStore:
    return current_app.extensions["image_store"]


# ---------------------------------------------------------------------
# Project-level operations
# ---------------------------------------------------------------------
def list_images(project_id: int) -> List[ProjectImage]:
    return (
        ProjectImage.query.filter_by(project_id=project_id)
        .order_by(ProjectImage.display_order.asc(), ProjectImage.id.asc())
        .all()
    )


def upload_project_images(project: Project, files: Iterable[FileStorage]) -> List[ImageUploadResult]:
    """
    Upload files for a project, one result per file.

    New images are appended after the current highest display order.
    """
    store = get_image_store()
    limit = current_app.config.get("MAX_IMAGES_PER_PROJECT")
    next_order = project.next_image_order()
    count = len(project.images)

    results: List[ImageUploadResult] = []
    for file in files:
        if not file or not file.filename:
            continue
        result = ImageUploadResult(filename=file.filename)

        if limit and count >= limit:
            result.error = f"image limit reached ({limit})"
            results.append(result)
            continue

        try:
            url = store.upload(project.id, file)
        except ImageStoreError as exc:
            logger.warning("Image upload failed for project %s (%s): %s", project.id, file.filename, exc)
            result.error = str(exc)
            results.append(result)
            continue

        image = ProjectImage(project_id=project.id, storage_ref=url, display_order=next_order)
        project.images.append(image)
        db.session.flush()

        next_order += 1
        count += 1
        result.url = url
        result.image_id = image.id
        results.append(result)

    return results


def delete_project_image(image: ProjectImage) -> Optional[str]:
    """
    Remove an image row and its stored file.

    A storage failure does not block the row deletion; it is logged and
    returned as a warning message.
    """
    warning = None
    try:
        get_image_store().delete(image.storage_ref)
    except ImageStoreError as exc:
        logger.warning("Image %s storage delete failed, continuing with row delete: %s", image.id, exc)
        warning = str(exc)

    # delete-orphan cascade removes the row and keeps project.images current
    image.project.images.remove(image)
    db.session.flush()
    return warning
