# backend/caras/services/gallery.py
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from caras.models.gallery import DEFAULT_ALBUM, GalleryImage
from caras.schemas.gallery import AlbumSummary, GalleryImageRead
from caras.services.storage import StorageError, object_key

logger = logging.getLogger(__name__)


class UploadRejected(ValueError):
    pass


@dataclass
class IncomingFile:
    filename: str
    content_type: Optional[str]
    data: bytes


def resolve_album(album: Optional[str]) -> str:
    return (album or "").strip() or DEFAULT_ALBUM


def to_read(img: GalleryImage) -> GalleryImageRead:
    return GalleryImageRead(
        id=img.id,
        image_url=img.image_url,
        alt_text=img.alt_text,
        name=img.name,
        album=resolve_album(img.album),
        album_description=img.album_description,
        created_at=img.created_at,
    )


def group_albums(images: Iterable) -> List[AlbumSummary]:
    """
    Albums in first-seen order. Missing album names count as "General"; the
    first image seen in an album is its cover and the first non-empty
    description wins.
    """
    albums: dict[str, AlbumSummary] = {}
    for img in images:
        name = resolve_album(getattr(img, "album", None))
        summary = albums.get(name)
        if summary is None:
            albums[name] = AlbumSummary(
                name=name,
                description=getattr(img, "album_description", None),
                cover_url=img.image_url,
                count=1,
            )
            continue
        summary.count += 1
        if not summary.description and getattr(img, "album_description", None):
            summary.description = img.album_description
    return list(albums.values())


def _album_clause(album: str):
    if album == DEFAULT_ALBUM:
        return or_(GalleryImage.album.is_(None), GalleryImage.album == "", GalleryImage.album == DEFAULT_ALBUM)
    return GalleryImage.album == album


def list_images(db: Session, album: Optional[str] = None) -> List[GalleryImage]:
    stmt = select(GalleryImage).order_by(GalleryImage.created_at.desc(), GalleryImage.id.desc())
    if album is not None:
        stmt = stmt.where(_album_clause(resolve_album(album)))
    return list(db.execute(stmt).scalars().all())


def list_albums(db: Session) -> List[AlbumSummary]:
    return group_albums(list_images(db))


def album_description(db: Session, album: str) -> Optional[str]:
    return (
        db.execute(
            select(GalleryImage.album_description)
            .where(_album_clause(resolve_album(album)), GalleryImage.album_description.is_not(None))
            .order_by(GalleryImage.created_at.asc())
        )
        .scalars()
        .first()
    )


def validate_uploads(files: Sequence[IncomingFile], allowed_extensions: set, max_bytes: int) -> None:
    if not files:
        raise UploadRejected("No files selected")
    for f in files:
        ext = PurePath(f.filename or "").suffix.lower().lstrip(".")
        if ext not in allowed_extensions:
            raise UploadRejected(f"{f.filename}: file type not allowed")
        if not f.data:
            raise UploadRejected(f"{f.filename}: file is empty")
        if len(f.data) > max_bytes:
            raise UploadRejected(f"{f.filename}: file is larger than {max_bytes // (1024 * 1024)} MB")


def upload_images(
    db: Session,
    store,
    files: Sequence[IncomingFile],
    album: Optional[str] = None,
    description: Optional[str] = None,
    alt_text: Optional[str] = None,
) -> List[GalleryImage]:
    """Store each file, then insert one row per stored file."""
    album_name = resolve_album(album)
    created: List[GalleryImage] = []
    for f in files:
        key = object_key(f.filename, prefix=album_name)
        url = store.upload(key, f.data, f.content_type)
        display = PurePath(f.filename).stem
        img = GalleryImage(
            image_url=url,
            storage_path=key,
            alt_text=alt_text or display,
            name=display,
            album=album_name,
            album_description=description,
        )
        db.add(img)
        db.commit()
        db.refresh(img)
        created.append(img)
    logger.info("uploaded %d image(s) to album %r", len(created), album_name)
    return created


def rename_image(db: Session, image_id: int, name: str) -> Optional[GalleryImage]:
    img = db.get(GalleryImage, image_id)
    if not img:
        return None
    img.name = name.strip()
    db.commit()
    db.refresh(img)
    return img


def delete_image(db: Session, store, image_id: int, purge: bool = True) -> bool:
    img = db.get(GalleryImage, image_id)
    if not img:
        return False
    key = img.storage_path
    db.delete(img)
    db.commit()
    if purge and key:
        try:
            store.delete(key)
        except (StorageError, OSError):
            logger.warning("gallery row %s deleted but object %s was not removed", image_id, key, exc_info=True)
    return True


def shuffled_page(
    images: Sequence[GalleryImage], page: int, page_size: int, seed: int
) -> Tuple[List[GalleryImage], int, int]:
    """Random tiling order that stays stable across pages for one seed."""
    ordered = sorted(images, key=lambda i: i.id)
    random.Random(seed).shuffle(ordered)
    total = len(ordered)
    page_size = max(page_size, 1)
    total_pages = max(math.ceil(total / page_size), 1)
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    return ordered[start:start + page_size], total, total_pages
