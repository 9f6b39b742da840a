from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    # Azure OpenAI (cargo extraction + spreadsheet column mapping)
    azure_openai_endpoint: str = ""
    azure_openai_api_key: SecretStr = SecretStr("")
    openai_model: str = "gpt-4.1-mini"
    openai_vision_model: str = "gpt-4o"

    # Google Maps (directions + reverse geocoding)
    google_maps_api_key: SecretStr = SecretStr("")
    google_maps_base_url: str = "https://maps.googleapis.com/maps/api"
    http_timeout: float = 30.0

    # Dimension parsing: values above the threshold are plain inches,
    # values at or below it are feet.inches shorthand
    length_threshold: float = 70
    width_threshold: float = 16
    height_threshold: float = 18

    # Default legal limits (inches / pounds) for oversize checks
    legal_length: float = 636
    legal_width: float = 102
    legal_height: float = 162
    legal_weight: float = 48000

    # Permit baseline applied per traversed state (federal standard): 65' long,
    # 8' 6" wide, 13' 6" high, 80,000 lb gross; escorts over 12' wide
    permit_length: float = 780
    permit_width: float = 102
    permit_height: float = 162
    permit_gross_weight: float = 80000
    escort_width: float = 144

    # Route analysis
    geocode_sample_target: int = 30
    waypoint_sample_target: int = 100
    geocode_concurrency: int = 1

    # Pipeline deadlines (seconds)
    analyze_timeout_seconds: float = 60
    route_timeout_seconds: float = 45

    # Logging
    log_level: str = "INFO"
    log_format: str = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


config = Config()
