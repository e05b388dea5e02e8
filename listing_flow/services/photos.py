from __future__ import annotations

from typing import Iterable

# Previews that only exist on the device that picked them
LOCAL_PREVIEW_SCHEMES = ("blob:", "file:", "content:")
ABSOLUTE_SCHEMES = ("http://", "https://", "data:")


def is_local_preview(url: str) -> bool:
    return url.strip().lower().startswith(LOCAL_PREVIEW_SCHEMES)


def normalize_photo_url(url: str | None, base_url: str) -> str | None:
    """
    Turn a stored photo reference into something displayable.

    - local previews and absolute URLs are returned untouched
    - "/path" is resolved against base_url
    - a bare filename lives under base_url/picture/
    """
    if url is None:
        return None
    u = url.strip()
    if not u:
        return None
    low = u.lower()
    if low.startswith(LOCAL_PREVIEW_SCHEMES) or low.startswith(ABSOLUTE_SCHEMES):
        return u
    base = base_url.rstrip("/")
    if u.startswith("/"):
        return f"{base}{u}"
    return f"{base}/picture/{u}"


def normalize_photo_urls(urls: Iterable[object], base_url: str) -> list[str]:
    out: list[str] = []
    for u in urls:
        if not isinstance(u, str):
            continue
        n = normalize_photo_url(u, base_url)
        if n:
            out.append(n)
    return out


def persistable_photos(urls: Iterable[str]) -> list[str]:
    return [u.strip() for u in urls if u and u.strip() and not is_local_preview(u)]
