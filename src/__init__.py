"""Image Catalog Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Image upload and catalog service using Cloudinary, MongoDB, AWS Lambda and FastAPI"
)

__all__ = ["handlers", "core", "server"]
