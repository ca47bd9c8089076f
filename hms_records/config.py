from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HMSApiConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="HMS_", env_file=".env", extra="ignore")

    base_url: str = Field(
        default="http://localhost:5000/api",
        validation_alias=AliasChoices(
            "HMS_BASE_URL",
            "REACT_APP_API_URL",
        ),
    )
    token: str = ""
    timeout: float = 30.0


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Timezone used to split a combined ``startAt`` into date and wall-clock time.
    display_timezone: str = "UTC"
    api: HMSApiConfig = Field(default_factory=lambda: HMSApiConfig())
