"""Media object keys.

A key addresses exactly one stored object and is laid out so that every
object of an animal lives under the tenant/company/farm/animal namespace:

    tenant/{tenant}/company/{company}/farm/{farm}/animal/{animal}/{timestamp}_{pose}.{ext}

The timestamp is milliseconds since the epoch, so keys sort by creation time
inside an animal's namespace. Keys are never reused or rewritten.
"""
import re
import time

KEY_PATTERN = re.compile(
    r"^tenant/(?P<tenant_id>[^/]+)/company/(?P<company_id>[^/]+)/farm/(?P<farm_id>[^/]+)"
    r"/animal/(?P<animal_id>[^/]+)/(?P<timestamp>\d+)_(?P<pose>[^/.]+)\.(?P<extension>[^/.]+)$"
)

def _segment(name: str, value) -> str:
    value = str(value) if value is not None else ""
    if not value.strip():
        raise ValueError(f"{name} must be a non-empty identifier")
    if "/" in value:
        raise ValueError(f"{name} must not contain '/'")
    return value

def media_key_prefix(tenant_id, company_id, farm_id, animal_id) -> str:
    return (
        f"tenant/{_segment('tenant_id', tenant_id)}"
        f"/company/{_segment('company_id', company_id)}"
        f"/farm/{_segment('farm_id', farm_id)}"
        f"/animal/{_segment('animal_id', animal_id)}/"
    )

def derive_media_key(tenant_id, company_id, farm_id, animal_id, pose: str, extension: str) -> str:
    prefix = media_key_prefix(tenant_id, company_id, farm_id, animal_id)
    pose = _segment("pose", pose).lower()
    extension = _segment("extension", str(extension).lstrip(".")).lower()
    timestamp = time.time_ns() // 1_000_000
    return f"{prefix}{timestamp}_{pose}.{extension}"

def extension_for(content_type: str) -> str:
    return "mp4" if content_type.lower().startswith("video/") else "jpg"

def kind_for(content_type: str) -> str:
    return "VIDEO" if content_type.lower().startswith("video/") else "PHOTO"
