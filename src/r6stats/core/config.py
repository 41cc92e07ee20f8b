from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="R6STATS_"
    )

    # ubisoft services
    ubi_email: str | None = Field(default=None, repr=False)
    ubi_password: str | None = Field(default=None, repr=False)
    ubi_services_base_url: str = "https://public-ubiservices.ubi.com/v3"
    ubi_stats_base_url: str = "https://prod.datadev.ubisoft.com/v1"
    ubi_auth_app_id: str = "39baebad-39e5-4552-8c25-2c9b919064e2"
    ubi_stats_app_id: str = "3587dcbb-7f81-457c-9781-0e3f29f6f56a"
    ubi_space_id: str = "5172a557-50b5-4665-b7db-e3f2e8c5041d"
    platform_group: str = "PC"

    # ranked skill records (r6karma)
    ubi_ranked_base_url: str = "https://public-ubiservices.ubi.com/v1"
    ubi_ranked_sandbox: str = "OSBOR_PC_LNCH_A"
    ranked_region_id: str = "ncsa"
    ranked_board_id: str = "pvp_ranked"

    http_timeout_s: float = 30.0
    http_connect_timeout_s: float = 10.0

    # discriminator vocabulary additions, e.g. {"Team roles v2": "team_roles"}
    section_type_aliases: dict[str, str] = Field(default_factory=dict)
    record_type_aliases: dict[str, str] = Field(default_factory=dict)

    log_level: str = "WARNING"

    # -----------------------------
    # Required-key helpers
    # -----------------------------

    def require_credentials(self) -> tuple[str, str]:
        if not self.ubi_email or not self.ubi_password:
            raise RuntimeError(
                "R6STATS_UBI_EMAIL / R6STATS_UBI_PASSWORD are not set. "
                "Set them in the environment or .env file."
            )
        return self.ubi_email, self.ubi_password


settings = Settings()
