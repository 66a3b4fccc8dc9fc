"""Project-level configuration and path helpers."""

import os
from pathlib import Path
from typing import TYPE_CHECKING, Union

from .models import ServiceIdentity

if TYPE_CHECKING:
    from .telemetry.options import PolicyOptions

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "datapipe.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

_TRUE_VALUES = {"1", "true", "yes", "on"}


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def load_service_identity() -> ServiceIdentity:
    """Service identity from DATAPIPE_SERVICE_* environment variables."""
    return ServiceIdentity(
        name=os.getenv("DATAPIPE_SERVICE_NAME", "datapipe"),
        environment=os.getenv("DATAPIPE_SERVICE_ENVIRONMENT", "Development"),
        version=os.getenv("DATAPIPE_SERVICE_VERSION", ""),
        instance_id=os.getenv("DATAPIPE_SERVICE_INSTANCE_ID", ""),
    )


def load_policy_options() -> "PolicyOptions":
    """Telemetry policy options from DATAPIPE_TELEMETRY_* environment variables."""
    from .telemetry.options import PolicyOptions

    min_duration = os.getenv("DATAPIPE_TELEMETRY_MIN_DURATION_MS")
    return PolicyOptions(
        ms=int(min_duration) if min_duration else None,
        exclude=os.getenv("DATAPIPE_TELEMETRY_EXCLUDE_STARTS", "").lower()
        in _TRUE_VALUES,
        role=os.getenv("DATAPIPE_TELEMETRY_ROLE") or None,
        pipeline_name=os.getenv("DATAPIPE_TELEMETRY_SUPPRESS_PIPELINE") or None,
    )
