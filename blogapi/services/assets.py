"""
Cloudinary-backed image store.

The gateway is built once from ``Settings`` and passes credentials and a
timeout on every call, so nothing depends on ``cloudinary.config()`` globals.
Rejections (bad request, auth, not found) fail at once. Every other failure,
including the bare exceptions the admin API raises for missing credentials or
unmapped HTTP statuses, is retried with exponential backoff. Callers only ever
see ``AssetGatewayError``.
"""
import logging
import time
from functools import wraps
from typing import Iterable, List

from cloudinary import api, uploader
from cloudinary.exceptions import AlreadyExists, AuthorizationRequired, BadRequest, NotAllowed, NotFound

from blogapi.core.config import Settings
from blogapi.core.errors import AssetGatewayError
from blogapi.db.models.image import ImageRef

logger = logging.getLogger(__name__)

REJECTIONS = (BadRequest, AuthorizationRequired, NotAllowed, NotFound, AlreadyExists)


def retry_on_failure(method):
    """Retry ``method`` unless Cloudinary rejected the request outright.

    Expects ``self`` to provide ``max_retries`` and ``backoff_base``. Total
    attempts are one initial call plus ``max_retries`` retries.
    """
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        last_exception = None
        for attempt in range(self.max_retries + 1):
            try:
                return method(self, *args, **kwargs)
            except AssetGatewayError:
                raise
            except REJECTIONS as e:
                raise AssetGatewayError(f"{method.__name__} rejected: {e}") from e
            except Exception as e:
                last_exception = e
                logger.warning(f"{method.__name__} failed on attempt {attempt + 1}: {e!r}")

            if attempt < self.max_retries:
                time.sleep(self.backoff_base * 2 ** attempt)

        raise AssetGatewayError(
            f"{method.__name__} failed after {self.max_retries + 1} attempts: {last_exception!r}"
        ) from last_exception

    return wrapper


class AssetGateway:
    def __init__(self, settings: Settings):
        self.timeout = settings.asset_timeout
        self.max_retries = settings.asset_max_retries
        self.backoff_base = settings.asset_backoff_base
        self._credentials = {
            "cloud_name": settings.cloudinary_cloud_name,
            "api_key": settings.cloudinary_api_key,
            "api_secret": settings.cloudinary_api_secret,
        }

    def _options(self, **extra):
        return dict(self._credentials, timeout=self.timeout, **extra)

    @retry_on_failure
    def upload(self, path: str, folder: str) -> ImageRef:
        result = uploader.upload(
            path,
            **self._options(folder=folder, resource_type="image", quality="auto:good"),
        )
        url = result.get("secure_url") if isinstance(result, dict) else None
        public_id = result.get("public_id") if isinstance(result, dict) else None
        if not url or not public_id:
            raise AssetGatewayError(f"upload returned no asset: {result!r}")
        return ImageRef(url=url, public_id=public_id)

    @retry_on_failure
    def remove(self, public_id: str) -> None:
        result = uploader.destroy(public_id, **self._options(invalidate=True))
        outcome = result.get("result") if isinstance(result, dict) else None
        if outcome == "not found":
            logger.warning(f"Asset {public_id} was already gone")
        elif outcome != "ok":
            raise AssetGatewayError(f"remove {public_id} returned {result!r}")

    @retry_on_failure
    def remove_many(self, public_ids: Iterable[str]) -> None:
        ids: List[str] = [public_id for public_id in public_ids if public_id]
        if not ids:
            return
        result = api.delete_resources(ids, **self._options())
        deleted = result.get("deleted", {}) if isinstance(result, dict) else {}
        missing = [public_id for public_id in ids if public_id not in deleted]
        if missing:
            raise AssetGatewayError(f"remove_many did not report {missing}")
