from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
import pydantic


class Settings(BaseSettings):
    """
    Manages all engine settings.
    Reads from environment variables (and .env file).
    """

    # --- Anomaly Oracle Backends ---
    HYBRID_MODEL_PATH: str = "models/ecg_model_float32.onnx"
    CNN_MODEL_PATH: str = "models/cnn_ecg_quant.onnx"
    ORACLE_TIMEOUT_SEC: float = 5.0
    ORACLE_INTRA_OP_THREADS: int = 2

    # --- Scoring Policy ---
    DEFAULT_STRATEGY: str = "wsm"

    @pydantic.field_validator("ORACLE_TIMEOUT_SEC")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("ORACLE_TIMEOUT_SEC must be positive")
        return value

    # Pydantic-Settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Returns a cached instance of the Settings object.
    Using @lru_cache ensures the .env file is read only once.
    """
    return Settings()
