"""Configuration health check."""

from typing import Any

from core.utils.constants import SERVICE_MESSAGE, SERVICE_VERSION
from core.utils.settings import environment_status
from core.utils.time import utc_now_iso

STATUS_HEALTHY = "healthy"
STATUS_MISSING_ENV = "missing_env_vars"


def health_status() -> dict[str, Any]:
    """Report whether every required variable is configured.

    Never touches MongoDB or Cloudinary, so it answers even when they are down.
    """
    environment = environment_status()
    configured = all(environment.values())

    return {
        "status": STATUS_HEALTHY if configured else STATUS_MISSING_ENV,
        "message": SERVICE_MESSAGE,
        "timestamp": utc_now_iso(),
        "version": SERVICE_VERSION,
        "environment": environment,
    }
