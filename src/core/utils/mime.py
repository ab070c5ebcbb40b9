from core.utils.constants import IMAGE_MIME_PREFIX

GENERIC_CONTENT_TYPE = "application/octet-stream"


def normalize_content_type(content_type: str | None) -> str:
    """Lower-case the media type and drop parameters such as charset."""
    if not content_type:
        return GENERIC_CONTENT_TYPE

    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type or GENERIC_CONTENT_TYPE


def is_image_content_type(content_type: str | None) -> bool:
    return normalize_content_type(content_type).startswith(IMAGE_MIME_PREFIX)
