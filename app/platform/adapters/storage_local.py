import os
import shutil
from pathlib import Path
from app.platform.ports.object_storage import ObjectStoragePort, PresignedUpload, PresignedDownload, UploadPolicy
from app.core.config import settings

class LocalFilesystemStorage(ObjectStoragePort):
    """Development stand-in for object storage.

    Uploads go through the API's direct-upload route, which checks the same
    UploadPolicy S3 would. Missing objects raise FileNotFoundError.
    """

    def __init__(self, root: str | None = None, upload_url: str | None = None, public_domain: str | None = None):
        self.root = os.path.abspath(root or settings.LOCAL_STORAGE_ROOT)
        self.upload_url = upload_url or settings.LOCAL_UPLOAD_URL
        self.public_domain = public_domain
        os.makedirs(self.root, exist_ok=True)

    def _path(self, key: str) -> str:
        safe = key.replace("..", "").strip("/")
        return os.path.join(self.root, safe)

    def presign_upload(self, key: str, content_type: str, expires_seconds: int | None = None, max_bytes: int | None = None) -> PresignedUpload:
        policy = UploadPolicy.for_content_type(content_type, max_bytes)
        return PresignedUpload(
            url=self.upload_url,
            fields={"key": key, "Content-Type": content_type},
            key=key,
            expires_in=settings.MEDIA_UPLOAD_EXPIRES_SECONDS if expires_seconds is None else expires_seconds,
            policy=policy,
            strategy="direct-api",
        )

    def presign_download(self, key: str, expires_seconds: int | None = None) -> PresignedDownload:
        # no signing locally; serve via nginx or an API proxy in real setups
        return PresignedDownload(
            url=Path(self._path(key)).as_uri(),
            key=key,
            expires_in=settings.MEDIA_DOWNLOAD_EXPIRES_SECONDS if expires_seconds is None else expires_seconds,
        )

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)

    def exists(self, key: str) -> bool:
        return os.path.exists(self._path(key))

    def delete(self, key: str) -> None:
        os.remove(self._path(key))

    def copy(self, source_key: str, destination_key: str) -> None:
        src = self._path(source_key)
        if not os.path.exists(src):
            raise FileNotFoundError(source_key)
        dst = self._path(destination_key)
        os.makedirs(os.path.dirname(dst), exist_ok=True)
        shutil.copyfile(src, dst)

    def public_url(self, key: str) -> str:
        if self.public_domain:
            return f"{self.public_domain.rstrip('/')}/{key}"
        return Path(self._path(key)).as_uri()
