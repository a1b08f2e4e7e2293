import os
import tempfile
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0", description="Relay bind address")
    port: int = Field(default=8080, ge=1, le=65535, description="Relay listen port")


class ClientConfig(BaseModel):
    backend_url: str = Field(default="http://localhost:8080", description="Relay base URL used by the client")
    timeout_seconds: float = Field(default=1800.0, gt=0, description="Client request timeout in seconds")


class DownloadConfig(BaseModel):
    scratch_dir: str = Field(
        default=os.path.join(tempfile.gettempdir(), "vidrelay"),
        description="Directory for downloaded files awaiting transfer"
    )
    metadata_timeout_seconds: float = Field(default=60.0, gt=0, description="Timeout for metadata dumps")
    fetch_timeout_seconds: float = Field(default=1800.0, gt=0, description="Timeout for file downloads")
    chunk_size: int = Field(default=1024 * 1024, ge=1024, description="Streaming chunk size in bytes")
    max_video_formats: int = Field(default=8, ge=1, description="Max video options offered per analysis")


class YtDlpConfig(BaseModel):
    binary: str = Field(default="yt-dlp", description="Extraction tool executable")
    socket_timeout: int = Field(default=10, ge=1, description="Socket timeout for yt-dlp")
    audio_format: str = Field(default="mp3", description="Audio re-encoding target")
    merge_format: str = Field(default="mp4", description="Container for merged video downloads")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    format: str = Field(default="%(message)s", description="Log format")
    enable_rich: bool = Field(default=True, description="Enable rich console logging")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()


class I18nConfig(BaseModel):
    default_locale: str = Field(default="en", description="Default locale")
    supported_locales: list = Field(default=["en", "ja"], description="Supported locales")


class ApiConfig(BaseModel):
    title: str = Field(default="vidrelay", description="API title")
    description: str = Field(default="Social media video relay backed by yt-dlp", description="API description")
    version: str = Field(default="1.0.0", description="API version")
    cors_origins: list = Field(default=["*"], description="CORS allowed origins")
    debug: bool = Field(default=False, description="Enable debug mode")


class Config(BaseModel):
    """Main configuration model"""
    server: ServerConfig = Field(default_factory=ServerConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    download: DownloadConfig = Field(default_factory=DownloadConfig)
    ytdlp: YtDlpConfig = Field(default_factory=YtDlpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    i18n: I18nConfig = Field(default_factory=I18nConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)


class EnvSettings(BaseSettings):
    """Flat environment variables understood by the relay and the client"""
    model_config = SettingsConfigDict(extra="ignore")

    host: Optional[str] = None
    port: Optional[int] = None
    backend_url: Optional[str] = None
    ytdlp_binary: Optional[str] = None
    scratch_dir: Optional[str] = None
    metadata_timeout: Optional[float] = None
    fetch_timeout: Optional[float] = None
    log_level: Optional[str] = None
    default_locale: Optional[str] = None
    cors_origins: Optional[str] = None


def load_config() -> Config:
    """Build configuration from environment variables, falling back to defaults"""
    env = EnvSettings()
    config_data = {}

    server = {}
    if env.host:
        server["host"] = env.host
    if env.port:
        server["port"] = env.port
    if server:
        config_data["server"] = server

    if env.backend_url:
        config_data["client"] = {"backend_url": env.backend_url.rstrip("/")}

    download = {}
    if env.scratch_dir:
        download["scratch_dir"] = env.scratch_dir
    if env.metadata_timeout:
        download["metadata_timeout_seconds"] = env.metadata_timeout
    if env.fetch_timeout:
        download["fetch_timeout_seconds"] = env.fetch_timeout
    if download:
        config_data["download"] = download

    if env.ytdlp_binary:
        config_data["ytdlp"] = {"binary": env.ytdlp_binary}

    if env.log_level:
        config_data["logging"] = {"level": env.log_level}

    if env.default_locale:
        config_data["i18n"] = {"default_locale": env.default_locale}

    if env.cors_origins:
        origins = [o.strip() for o in env.cors_origins.split(",") if o.strip()]
        config_data["api"] = {"cors_origins": origins or ["*"]}

    return Config(**config_data)


# Global config instance
config = load_config()
