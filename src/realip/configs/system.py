from pydantic import BaseModel, Field


class RealIPConfig(BaseModel):
    """Trusted proxies and the headers they use to advertise the client."""

    enabled: bool = Field(
        default=True, description="Install the real-IP middleware"
    )
    headers: list[str] = Field(
        default_factory=lambda: ["X-Forwarded-For", "X-Real-IP"],
        description="Client IP headers in priority order (first non-empty wins)",
    )
    # Validated by ``RealIP`` at build time, not here, so a bad entry
    # surfaces as ``InvalidNetwork``.
    trusted_networks: list[str] = Field(
        default_factory=lambda: ["127.0.0.0/8", "::1/128"],
        description="CIDRs of proxies whose headers are trusted",
    )


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="Emit JSON lines instead of coloured text"
    )


class ServerConfig(BaseModel):
    """Settings for ``python -m realip``."""

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8000, description="API server port")
