"""Pinecone control-plane connection config. Read-only; no business logic."""

from pydantic import BaseModel, Field, SecretStr

from pinecone_provider.config.settings import Settings, get_settings

CONTROLLER_URL_TEMPLATE = "https://controller.{environment}.pinecone.io"


class ControlPlaneConfig(BaseModel):
    """Credentials and endpoint selection handed to a control-plane client at construction."""

    api_key: SecretStr = Field(default=SecretStr(""), description="Value of the Api-Key header")
    environment: str = Field(default="", description="Pinecone environment, e.g. us-west1-gcp")
    timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request timeout (seconds)")

    @property
    def base_url(self) -> str:
        """Controller URL for the environment, or "" when no environment is set."""
        if not self.environment:
            return ""
        return CONTROLLER_URL_TEMPLATE.format(environment=self.environment)


def resolve_controlplane_config(
    api_key: str | None = None,
    environment: str | None = None,
    settings: Settings | None = None,
) -> ControlPlaneConfig:
    """
    Build a ControlPlaneConfig. Explicit values win; None falls back to settings
    (PINECONE_API_KEY / PINECONE_ENVIRONMENT). Empty results are left for the caller to report.
    """
    s = settings or get_settings()
    return ControlPlaneConfig(
        api_key=SecretStr(api_key if api_key is not None else s.pinecone_api_key),
        environment=environment if environment is not None else s.pinecone_environment,
        timeout_seconds=s.controlplane_timeout_seconds,
    )
