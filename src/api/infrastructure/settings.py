"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Tenant registry database connection settings.

    Environment variables:
        STOREFLEET_DB_HOST: Database host (default: localhost)
        STOREFLEET_DB_PORT: Database port (default: 5432)
        STOREFLEET_DB_DATABASE: Database name (default: storefleet)
        STOREFLEET_DB_USERNAME: Database user (default: storefleet)
        STOREFLEET_DB_PASSWORD: Database password (required in production)
        STOREFLEET_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        STOREFLEET_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="STOREFLEET_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="storefleet", description="Database name")
    username: str = Field(default="storefleet", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class ProvisioningSettings(BaseSettings):
    """Tenant provisioning settings.

    Environment variables:
        STOREFLEET_PROVISIONING_BASE_DOMAIN: Domain under which tenant hostnames
            are created (default: localtest.me)
        STOREFLEET_PROVISIONING_HELM_BINARY: Helm executable (default: helm)
        STOREFLEET_PROVISIONING_WOOCOMMERCE_CHART: Chart for woocommerce tenants
        STOREFLEET_PROVISIONING_MEDUSA_CHART: Chart for medusa-stub tenants
        STOREFLEET_PROVISIONING_RELEASE_TIMEOUT_SECONDS: Helm --timeout (default: 300)
        STOREFLEET_PROVISIONING_KUBE_IN_CLUSTER: Use the pod's service account
            instead of a kubeconfig (default: false)
        STOREFLEET_PROVISIONING_KUBE_CONTEXT: Kubeconfig context to use (optional)
    """

    model_config = SettingsConfigDict(
        env_prefix="STOREFLEET_PROVISIONING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_domain: str = Field(
        default="localtest.me",
        description="Base domain for tenant hostnames",
        min_length=1,
    )
    helm_binary: str = Field(default="helm", description="Helm executable")
    woocommerce_chart: str = Field(
        default="../helm/store-woocommerce",
        description="Chart reference for woocommerce tenants",
    )
    medusa_chart: str = Field(
        default="../helm/store-medusa-stub",
        description="Chart reference for medusa-stub tenants",
    )
    release_timeout_seconds: int = Field(
        default=300,
        description="Timeout for helm install/upgrade --wait",
        ge=1,
        le=3600,
    )
    kube_in_cluster: bool = Field(
        default=False,
        description="Load in-cluster service account credentials",
    )
    kube_context: str | None = Field(
        default=None,
        description="Kubeconfig context (defaults to the current context)",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="STOREFLEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Storefleet API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    # Guardrail enforced before a provisioning workflow is started
    max_tenants: int = Field(
        default=10,
        description="Maximum number of tenants on this platform instance",
        ge=1,
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def provisioning(self) -> ProvisioningSettings:
        """Get provisioning settings."""
        return get_provisioning_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_provisioning_settings() -> ProvisioningSettings:
    """Get cached provisioning settings."""
    return ProvisioningSettings()
