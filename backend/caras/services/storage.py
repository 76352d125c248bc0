# backend/caras/services/storage.py
"""
Object storage for uploaded gallery images.

LocalObjectStore writes into a folder that main.py serves under /media;
SupabaseObjectStore talks to the hosted Storage REST API. Both return the
public URL of the stored object.
"""
from __future__ import annotations

import logging
import os
import time
import uuid
from pathlib import Path
from typing import Optional

import requests
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    pass


def object_key(filename: str, prefix: str = "") -> str:
    """Unique object key that keeps a sanitised form of the original name."""
    safe = secure_filename(filename) or "upload"
    stamp = f"{int(time.time())}_{uuid.uuid4().hex[:8]}"
    key = f"{stamp}_{safe}"
    if prefix:
        key = f"{secure_filename(prefix) or 'album'}/{key}"
    return key


class LocalObjectStore:
    def __init__(self, root: str, public_base_url: str = "/media", bucket: str = "gallery"):
        self.root = Path(root)
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        (self.root / bucket).mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        path = (self.root / self.bucket / key).resolve()
        if not str(path).startswith(str((self.root / self.bucket).resolve())):
            raise StorageError(f"Invalid object key: {key}")
        return path

    def upload(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return self.public_url(key)

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{key}"

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            os.remove(path)

    def exists(self, key: str) -> bool:
        return self._path(key).exists()


class SupabaseObjectStore:
    def __init__(self, base_url: str, service_key: str, bucket: str, timeout: int = 15, http=requests):
        self.base_url = base_url.rstrip("/")
        self.service_key = service_key
        self.bucket = bucket
        self.timeout = timeout
        self.http = http

    def _headers(self, content_type: Optional[str] = None) -> dict:
        headers = {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
        }
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def upload(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        resp = self.http.post(
            f"{self.base_url}/storage/v1/object/{self.bucket}/{key}",
            data=data,
            headers=self._headers(content_type or "application/octet-stream"),
            timeout=self.timeout,
        )
        if resp.status_code >= 400:
            raise StorageError(f"Upload failed ({resp.status_code}): {resp.text}")
        return self.public_url(key)

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{key}"

    def delete(self, key: str) -> None:
        resp = self.http.delete(
            f"{self.base_url}/storage/v1/object/{self.bucket}",
            json={"prefixes": [key]},
            headers=self._headers("application/json"),
            timeout=self.timeout,
        )
        if resp.status_code >= 400:
            raise StorageError(f"Delete failed ({resp.status_code}): {resp.text}")


def build_store(config) -> LocalObjectStore | SupabaseObjectStore:
    if config.STORAGE_BACKEND == "supabase":
        if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_KEY:
            raise RuntimeError("STORAGE_BACKEND=supabase needs SUPABASE_URL and SUPABASE_SERVICE_KEY")
        return SupabaseObjectStore(
            config.SUPABASE_URL,
            config.SUPABASE_SERVICE_KEY,
            config.STORAGE_BUCKET,
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
    return LocalObjectStore(config.LOCAL_STORAGE_DIR, config.PUBLIC_MEDIA_BASE_URL, config.STORAGE_BUCKET)
