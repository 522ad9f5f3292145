"""Cloudinary upload adapter for message attachments."""

import base64
import logging
from typing import Optional

import httpx

from ....core.exceptions import FileUploadError

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"


class CloudinaryStorage:
    """
    Uploads attachments to Cloudinary using an unsigned upload preset.

    The file is sent as a base64 data URI to the ``auto/upload`` endpoint
    and the resulting ``secure_url`` is returned.
    """

    def __init__(
        self,
        cloud_name: Optional[str],
        upload_preset: Optional[str],
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
        api_base: str = CLOUDINARY_API_BASE,
    ):
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self.timeout = timeout
        self._http_client = http_client
        self._api_base = api_base.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.upload_preset)

    @property
    def upload_url(self) -> str:
        return f"{self._api_base}/{self.cloud_name}/auto/upload"

    async def upload(self, content: bytes, filename: str, mime_type: str) -> str:
        """Upload a file and return its public URL.

        Raises:
            FileUploadError: If storage is not configured or the upload fails
        """
        if not self.is_configured:
            raise FileUploadError("File storage is not configured")

        encoded = base64.b64encode(content).decode("ascii")
        form = {
            "file": f"data:{mime_type};base64,{encoded}",
            "upload_preset": self.upload_preset,
        }

        try:
            if self._http_client is not None:
                response = await self._http_client.post(self.upload_url, data=form, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.upload_url, data=form)
        except httpx.TimeoutException as e:
            logger.error(f"Cloudinary upload timed out for {filename}")
            raise FileUploadError("File upload timed out", details={"filename": filename}) from e
        except httpx.HTTPError as e:
            logger.error(f"Cloudinary upload failed for {filename}: {e}")
            raise FileUploadError("File upload failed", details={"filename": filename}) from e

        if not response.is_success:
            logger.error(f"Cloudinary rejected {filename}: HTTP {response.status_code} {response.text[:200]}")
            raise FileUploadError(
                "File upload was rejected",
                details={"filename": filename, "status_code": response.status_code},
            )

        try:
            body = response.json()
        except ValueError:
            body = {}
        secure_url = body.get("secure_url") if isinstance(body, dict) else None
        if not secure_url:
            raise FileUploadError("File upload returned no URL", details={"filename": filename})

        logger.info(f"Uploaded attachment {filename} ({len(content)} bytes)")
        return secure_url
