from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Optional, Protocol, Union
from uuid import uuid4

from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from menuhub.core import config
from menuhub.core.errors import UpstreamError, ValidationFailedError
from menuhub.schemas.catalog import HostedImage, InlineImage

logger = logging.getLogger(__name__)
UPLOAD_PREFIX = "[IMAGE_UPLOAD]"

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)
_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


class ImageUploader(Protocol):
    def upload(self, data: bytes, tenant_id: int, *, content_type: str = "image/jpeg") -> str:
        ...


def _sniff_content_type(data: bytes) -> str:
    if data.startswith(b"\x89PNG"):
        return "image/png"
    if data.startswith(b"GIF8"):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def decode_inline_image(raw: str, *, max_bytes: int = config.IMAGE_MAX_BYTES) -> tuple[bytes, str]:
    """Decode a base64 payload (optionally a data URL) into bytes and content type."""
    content_type: Optional[str] = None
    encoded = raw.strip()
    match = _DATA_URL_RE.match(encoded)
    if match:
        content_type = match.group("mime").lower()
        encoded = match.group("data")
        if content_type not in _EXTENSIONS:
            raise ValidationFailedError("Formato de imagem não suportado", field="image")

    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationFailedError("Imagem em base64 inválida", field="image") from exc

    if not data:
        raise ValidationFailedError("Imagem vazia", field="image")
    if len(data) > max_bytes:
        raise ValidationFailedError("Imagem excede o tamanho máximo permitido", field="image")

    return data, content_type or _sniff_content_type(data)


class R2ImageUploader:
    """Upload images to Cloudflare R2 through its S3-compatible API."""

    def __init__(
        self,
        *,
        account_id: str = config.R2_ACCOUNT_ID,
        access_key_id: str = config.R2_ACCESS_KEY_ID,
        secret_access_key: str = config.R2_SECRET_ACCESS_KEY,
        bucket_name: str = config.R2_BUCKET_NAME,
        public_url: str = config.R2_PUBLIC_URL,
        timeout_seconds: float = config.IMAGE_UPLOAD_TIMEOUT_SECONDS,
        client=None,
    ) -> None:
        self.account_id = account_id
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.bucket_name = bucket_name
        self.public_url = (public_url or "").rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_client(self):
        if self._client is not None:
            return self._client
        missing = [
            name
            for name, value in (
                ("R2_ACCOUNT_ID", self.account_id),
                ("R2_ACCESS_KEY_ID", self.access_key_id),
                ("R2_SECRET_ACCESS_KEY", self.secret_access_key),
            )
            if not value
        ]
        if missing:
            raise UpstreamError(f"Armazenamento de imagens não configurado: {', '.join(missing)}")

        import boto3

        self._client = boto3.client(
            "s3",
            endpoint_url=f"https://{self.account_id}.r2.cloudflarestorage.com",
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            region_name="auto",
            config=Config(
                connect_timeout=self.timeout_seconds,
                read_timeout=self.timeout_seconds,
                retries={"max_attempts": 2, "mode": "standard"},
            ),
        )
        return self._client

    def build_object_key(self, tenant_id: int, content_type: str) -> str:
        extension = _EXTENSIONS.get(content_type, "jpg")
        return f"tenants/{int(tenant_id)}/products/{uuid4().hex}.{extension}"

    def upload(self, data: bytes, tenant_id: int, *, content_type: str = "image/jpeg") -> str:
        if not self.bucket_name or not self.public_url:
            raise UpstreamError("Armazenamento de imagens não configurado: R2_BUCKET_NAME/R2_PUBLIC_URL")

        object_key = self.build_object_key(tenant_id, content_type)
        try:
            self._get_client().put_object(
                Bucket=self.bucket_name,
                Key=object_key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("%s failed tenant_id=%s key=%s error=%s", UPLOAD_PREFIX, tenant_id, object_key, exc)
            raise UpstreamError("Falha ao enviar imagem") from exc

        logger.info("%s stored tenant_id=%s key=%s bytes=%s", UPLOAD_PREFIX, tenant_id, object_key, len(data))
        return f"{self.public_url}/{object_key}"


def resolve_image(
    payload: Union[InlineImage, HostedImage, None],
    uploader: ImageUploader,
    tenant_id: int,
) -> Optional[str]:
    """Turn an image payload into the URL to persist, uploading inline data first."""
    if payload is None:
        return None
    if isinstance(payload, HostedImage):
        return payload.url

    data, content_type = decode_inline_image(payload.data)
    return uploader.upload(data, tenant_id, content_type=content_type)
