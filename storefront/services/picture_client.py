# storefront/services/picture_client.py
import requests
from requests import RequestException

from storefront.data.models.catalog import ProductModel
from storefront.utils.retry import http_retry
from storefront.utils.settings import PICTURE_CDN_URL, PICTURE_SERVICE_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpeg",
    "image/pjpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}


def image_url(picture_id: int, seo_filename: str | None, mime_type: str | None, cdn_url: str | None = None) -> str | None:
    """Buduje adres obrazka w CDN, np. /images/0000042_red-shoe.jpeg"""
    if not picture_id:
        return None

    base = (cdn_url if cdn_url is not None else PICTURE_CDN_URL).rstrip("/")
    ext = _EXTENSIONS.get((mime_type or "").lower(), "jpeg")
    name = f"{picture_id:07d}"
    if seo_filename:
        name = f"{name}_{seo_filename}"
    return f"{base}/{name}.{ext}"


class PictureClient:
    """Klient zewnetrznego serwisu mediow (obrazki produktow)."""

    def __init__(self, base_url: str | None = None, cdn_url: str | None = None, timeout: int = 2):
        base = PICTURE_SERVICE_URL if base_url is None else base_url
        self.base_url = base.rstrip("/")
        self.cdn_url = cdn_url
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    @http_retry()
    def fetch_product_picture(self, product_id: int) -> dict | None:
        url = f"{self.base_url}/pictures/by-product/{product_id}"
        logger.info(f"PictureClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    def image_url_for(self, product: ProductModel) -> str | None:
        # bez serwisu mediow korzystamy z referencji zapisanej przy produkcie
        if not self.enabled:
            return image_url(product.picture_id, product.seo_filename, product.mime_type, self.cdn_url)

        try:
            picture = self.fetch_product_picture(product.id)
        except RequestException as e:
            logger.warning(f"Picture lookup failed for product {product.id}: {e}")
            return None

        if not picture:
            return None
        return image_url(
            picture.get("pictureId", 0),
            picture.get("seoFilename"),
            picture.get("mimeType"),
            self.cdn_url,
        )
