import logging
import boto3
from botocore.client import Config
from app.platform.ports.object_storage import ObjectStoragePort, PresignedUpload, PresignedDownload, UploadPolicy
from app.core.config import settings

log = logging.getLogger("storage.s3")

class S3Storage(ObjectStoragePort):
    """Presigned-capability access to an S3 bucket.

    Errors from the storage service (``botocore.exceptions.ClientError``) are
    not caught or retried here. Deleting or copying objects is not coordinated
    with the database rows that reference their keys; callers own that.
    """

    def __init__(
        self,
        *,
        bucket: str | None = None,
        region: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        endpoint_url: str | None = None,
        public_domain: str | None = None,
        upload_expires_seconds: int | None = None,
        download_expires_seconds: int | None = None,
    ):
        self.bucket = bucket or settings.S3_BUCKET
        self.region = region or settings.S3_REGION
        self.public_domain = public_domain if public_domain is not None else settings.S3_PUBLIC_DOMAIN
        self.upload_expires_seconds = settings.MEDIA_UPLOAD_EXPIRES_SECONDS if upload_expires_seconds is None else upload_expires_seconds
        self.download_expires_seconds = settings.MEDIA_DOWNLOAD_EXPIRES_SECONDS if download_expires_seconds is None else download_expires_seconds
        session = boto3.session.Session(
            aws_access_key_id=access_key or settings.S3_ACCESS_KEY,
            aws_secret_access_key=secret_key or settings.S3_SECRET_KEY,
            region_name=self.region,
        )
        self.s3 = session.client(
            "s3",
            endpoint_url=endpoint_url or settings.S3_ENDPOINT_URL,
            config=Config(signature_version="s3v4"),
        )

    def presign_upload(self, key: str, content_type: str, expires_seconds: int | None = None, max_bytes: int | None = None) -> PresignedUpload:
        expires = self.upload_expires_seconds if expires_seconds is None else expires_seconds
        policy = UploadPolicy.for_content_type(content_type, max_bytes)
        post = self.s3.generate_presigned_post(
            Bucket=self.bucket,
            Key=key,
            Fields={"Content-Type": content_type},
            Conditions=policy.conditions(),
            ExpiresIn=expires,
        )
        log.debug("presigned upload key=%s type=%s max=%s expires=%s", key, content_type, policy.max_bytes, expires)
        return PresignedUpload(url=post["url"], fields=post["fields"], key=key, expires_in=expires, policy=policy)

    def presign_download(self, key: str, expires_seconds: int | None = None) -> PresignedDownload:
        expires = self.download_expires_seconds if expires_seconds is None else expires_seconds
        url = self.s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires,
        )
        return PresignedDownload(url=url, key=key, expires_in=expires)

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        self.s3.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)

    def delete(self, key: str) -> None:
        self.s3.delete_object(Bucket=self.bucket, Key=key)
        log.info("deleted s3://%s/%s", self.bucket, key)

    def copy(self, source_key: str, destination_key: str) -> None:
        self.s3.copy_object(
            Bucket=self.bucket,
            CopySource={"Bucket": self.bucket, "Key": source_key},
            Key=destination_key,
        )
        log.info("copied s3://%s/%s -> %s", self.bucket, source_key, destination_key)

    def public_url(self, key: str) -> str:
        domain = self.public_domain or f"https://{self.bucket}.s3.{self.region}.amazonaws.com"
        return f"{domain.rstrip('/')}/{key}"
