import logging
import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class XRaySettings:
    port: int
    max_render_size: int
    default_preset: str
    default_thickness: float
    default_intensity: float
    enable_noise: bool
    source_url: str
    timeout: float
    retries: int
    cache_ttl: float
    max_upload_mb: int
    log_level: str

    @classmethod
    def from_env(cls) -> "XRaySettings":
        return cls(
            port=int(os.getenv("PORT", "5600")),
            max_render_size=int(os.getenv("MAX_RENDER_SIZE", "1700")),
            default_preset=os.getenv("DEFAULT_PRESET", "cortina").lower(),
            default_thickness=float(os.getenv("DEFAULT_THICKNESS", "0.55")),
            default_intensity=float(os.getenv("DEFAULT_INTENSITY", "1.0")),
            enable_noise=_env_flag("ENABLE_NOISE", "true"),
            source_url=os.getenv("SOURCE_URL", ""),
            timeout=float(os.getenv("SOURCE_TIMEOUT", "10.0")),
            retries=int(os.getenv("SOURCE_RETRIES", "2")),
            cache_ttl=float(os.getenv("CACHE_TTL", "30")),
            max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "25")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


SETTINGS = XRaySettings.from_env()


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level)
    return logging.getLogger("fabric-xray")
