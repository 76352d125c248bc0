# backend/caras/api/gallery.py
from __future__ import annotations

import logging
import random
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from caras.api.notices import invalid, not_found, notice
from caras.config import Config
from caras.db import get_db
from caras.dependencies import get_current_admin, get_object_store, get_query_cache
from caras.schemas.gallery import AlbumSummary, GalleryImageRead, GalleryPage, GalleryRename
from caras.services import gallery as svc
from caras.services.query_cache import GALLERY_KEY, QueryCache
from caras.services.storage import StorageError

logger = logging.getLogger(__name__)

ALBUMS_KEY = GALLERY_KEY + ("albums",)
ALL_IMAGES_KEY = GALLERY_KEY + ("all",)

public_router = APIRouter(prefix="/gallery/public", tags=["Gallery"])
router = APIRouter(prefix="/gallery", tags=["Gallery"], dependencies=[Depends(get_current_admin)])


def album_list(db: Session, cache: QueryCache) -> List[AlbumSummary]:
    return cache.get_or_fetch(ALBUMS_KEY, lambda: svc.list_albums(db))


def _all_images(db: Session, cache: QueryCache) -> List[GalleryImageRead]:
    return cache.get_or_fetch(ALL_IMAGES_KEY, lambda: [svc.to_read(i) for i in svc.list_images(db)])


# ---- Public -------------------------------------------------------------------

@public_router.get("", response_model=GalleryPage)
def public_gallery(
    page: int = Query(1, ge=1),
    page_size: int = Query(Config.GALLERY_PAGE_SIZE, ge=1, le=100),
    seed: Optional[int] = Query(None, description="Shuffle seed; reuse it to page through the same order"),
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
) -> GalleryPage:
    seed = seed if seed is not None else random.randint(1, 2**31 - 1)
    items, total, total_pages = svc.shuffled_page(_all_images(db, cache), page, page_size, seed)
    return GalleryPage(
        items=items,
        total=total,
        page=min(page, total_pages),
        page_size=page_size,
        total_pages=total_pages,
        seed=seed,
    )


@public_router.get("/albums", response_model=List[AlbumSummary])
def public_albums(db: Session = Depends(get_db), cache: QueryCache = Depends(get_query_cache)):
    return album_list(db, cache)


# ---- Admin --------------------------------------------------------------------

def _read_files(files: List[UploadFile]) -> List[svc.IncomingFile]:
    incoming = []
    for f in files:
        # one byte past the limit is enough to reject
        data = f.file.read(Config.MAX_UPLOAD_BYTES + 1)
        incoming.append(svc.IncomingFile(filename=f.filename or "", content_type=f.content_type, data=data))
    return incoming


def _store_files(db: Session, store, cache: QueryCache, files, album, description, alt_text) -> List[GalleryImageRead]:
    try:
        svc.validate_uploads(files, Config.ALLOWED_IMAGE_EXTENSIONS, Config.MAX_UPLOAD_BYTES)
    except svc.UploadRejected as err:
        raise invalid("Upload rejected", err)
    try:
        created = svc.upload_images(db, store, files, album=album, description=description, alt_text=alt_text)
    except StorageError as err:
        logger.error("gallery upload to album %r failed: %s", album, err)
        raise notice(status.HTTP_502_BAD_GATEWAY, "Upload failed", str(err))
    finally:
        cache.invalidate(GALLERY_KEY)
    return [svc.to_read(i) for i in created]


@router.get("", response_model=List[GalleryImageRead])
def list_images(album: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return [svc.to_read(i) for i in svc.list_images(db, album=album)]


@router.get("/albums", response_model=List[AlbumSummary])
def list_albums(db: Session = Depends(get_db), cache: QueryCache = Depends(get_query_cache)):
    return album_list(db, cache)


@router.post("/upload", response_model=List[GalleryImageRead], status_code=status.HTTP_201_CREATED)
def upload(
    files: List[UploadFile] = File(...),
    album: Optional[str] = Form(None),
    album_description: Optional[str] = Form(None),
    alt_text: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    store=Depends(get_object_store),
    cache: QueryCache = Depends(get_query_cache),
):
    incoming = _read_files(files)
    return _store_files(db, store, cache, incoming, album, album_description, alt_text)


@router.post("/albums/{album}/upload", response_model=List[GalleryImageRead], status_code=status.HTTP_201_CREATED)
def upload_to_album(
    album: str,
    files: List[UploadFile] = File(...),
    alt_text: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    store=Depends(get_object_store),
    cache: QueryCache = Depends(get_query_cache),
):
    """Add photos to an existing album; they take the album's description."""
    incoming = _read_files(files)
    description = svc.album_description(db, album)
    return _store_files(db, store, cache, incoming, album, description, alt_text)


@router.patch("/{image_id}", response_model=GalleryImageRead)
def rename_image(
    image_id: int,
    payload: GalleryRename,
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_query_cache),
):
    img = svc.rename_image(db, image_id, payload.name)
    if not img:
        raise not_found("Image")
    cache.invalidate(GALLERY_KEY)
    return svc.to_read(img)


@router.delete("/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_image(
    image_id: int,
    db: Session = Depends(get_db),
    store=Depends(get_object_store),
    cache: QueryCache = Depends(get_query_cache),
) -> None:
    if not svc.delete_image(db, store, image_id, purge=Config.GALLERY_PURGE_OBJECTS):
        raise not_found("Image")
    cache.invalidate(GALLERY_KEY)
    return None
