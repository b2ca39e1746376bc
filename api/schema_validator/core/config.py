from pydantic import BaseModel, ConfigDict
import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parents[1]


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class AppConfig(BaseModel):
    model_config = ConfigDict(protected_namespaces=())
    app_name: str = "api-schema-validator"
    version: str = "0.1.0"
    env: str = os.getenv("ENV", "dev")
    # Skips validation entirely, the core is never called.
    disable_schema_validation: bool = _env_flag("DISABLE_SCHEMA_VALIDATION")
    # Exposes the annotated copy of the data in API responses.
    enable_mismatches_on_ui: bool = _env_flag("ENABLE_MISMATCHES_ON_UI")
    max_errors_to_show: int = int(os.getenv("MAX_ERRORS_TO_SHOW", "10"))
    schemas_dir: str = os.getenv("SCHEMAS_DIR", str(PACKAGE_DIR / "assets" / "schemas"))
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "30"))
    icon_property_error: str = "😱"
    color_property_error: str = "#ee930a"
    icon_property_missing: str = "😡"
    color_property_missing: str = "#c10000"

CONFIG = AppConfig()
