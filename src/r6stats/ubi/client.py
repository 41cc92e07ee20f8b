from __future__ import annotations

import logging
from dataclasses import dataclass, field

from r6stats.core.config import Settings
from r6stats.stats.decoder import StatsDecoder
from r6stats.stats.models import SkillHistory, StatsResult
from r6stats.stats.ranked import decode_skill_history
from r6stats.stats.types import AggregationKind, GameMode, TeamRole, TotalsMode

from .auth import UbiAuth
from .errors import UbiProfileNotFound
from .http import BaseHttpClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Profile:
    name: str
    profile_id: str

    @property
    def avatar_url(self) -> str:
        return f"https://ubisoft-avatars.akamaized.net/{self.profile_id}/default_146_146.png"


@dataclass
class UbiClient:
    """Profile lookup and playerstats fetch; decoding is delegated to StatsDecoder."""

    http: BaseHttpClient
    auth: UbiAuth
    settings: Settings
    decoder: StatsDecoder = field(default_factory=StatsDecoder)

    @classmethod
    def from_settings(cls, s: Settings, *, http: BaseHttpClient | None = None) -> UbiClient:
        email, password = s.require_credentials()
        http = http or BaseHttpClient(
            timeout_s=s.http_timeout_s, connect_timeout_s=s.http_connect_timeout_s
        )
        auth = UbiAuth(
            http=http,
            email=email,
            password=password,
            base_url=s.ubi_services_base_url,
            app_id=s.ubi_auth_app_id,
        )
        return cls(http=http, auth=auth, settings=s, decoder=StatsDecoder.from_settings(s))

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> UbiClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def resolve_profile(self, username: str) -> Profile:
        logger.debug("resolving profile for %s", username)
        payload = self.http.request_json(
            "GET",
            f"{self.settings.ubi_services_base_url.rstrip('/')}/profiles",
            params={"namesOnPlatform": username, "platformType": "uplay"},
            headers=self.auth.headers(self.settings.ubi_stats_app_id),
        )
        profiles = payload.get("profiles")
        if not isinstance(profiles, list) or not profiles or not isinstance(profiles[0], dict):
            raise UbiProfileNotFound(f"No user with name <{username}> found")

        first = profiles[0]
        name = first.get("nameOnPlatform")
        profile_id = first.get("profileId")
        if not isinstance(name, str) or not isinstance(profile_id, str):
            raise UbiProfileNotFound(f"No user with name <{username}> found")
        if name != username:
            raise UbiProfileNotFound(
                f"No user with exact name <{username}> found, closest match was <{name}>"
            )
        return Profile(name=name, profile_id=profile_id)

    def stats_params(self, kind: AggregationKind, season: str) -> dict[str, str]:
        return {
            "spaceId": self.settings.ubi_space_id,
            "view": kind.view,
            "aggregation": kind.aggregation,
            "gameMode": ",".join(m.value for m in GameMode),
            "platformGroup": self.settings.platform_group,
            "teamRole": ",".join(r.value for r in TeamRole),
            "seasons": season,
        }

    def fetch_stats(self, profile: Profile, season: str, kind: AggregationKind) -> bytes:
        logger.info(
            "getting %s stats for %s (season %s)", kind.aggregation, profile.name, season
        )
        return self.http.request_bytes(
            "GET",
            f"{self.settings.ubi_stats_base_url.rstrip('/')}/users/{profile.profile_id}/playerstats",
            params=self.stats_params(kind, season),
            headers=self.auth.headers(self.settings.ubi_stats_app_id),
        )

    def get_stats(
        self,
        profile: Profile,
        season: str,
        kind: AggregationKind,
        *,
        totals_mode: TotalsMode = TotalsMode.MEAN,
    ) -> StatsResult:
        data = self.fetch_stats(profile, season, kind)
        return self.decoder.decode(data, kind, totals_mode=totals_mode)

    def ranked_params(self, profile: Profile, num_seasons: int) -> dict[str, str]:
        if num_seasons < 1:
            raise ValueError("num_seasons must be at least 1")
        return {
            "board_ids": self.settings.ranked_board_id,
            # -1 is the current season, -2 the one before, ...
            "season_ids": ",".join(str(-(i + 1)) for i in range(num_seasons)),
            "region_ids": self.settings.ranked_region_id,
            "profile_ids": profile.profile_id,
        }

    def fetch_ranked_history(self, profile: Profile, num_seasons: int) -> bytes:
        logger.info("getting ranked history for %s (%d seasons)", profile.name, num_seasons)
        base = self.settings.ubi_ranked_base_url.rstrip("/")
        return self.http.request_bytes(
            "GET",
            f"{base}/spaces/{self.settings.ubi_space_id}/sandboxes/"
            f"{self.settings.ubi_ranked_sandbox}/r6karma/player_skill_records",
            params=self.ranked_params(profile, num_seasons),
            headers=self.auth.headers(self.settings.ubi_stats_app_id),
        )

    def get_ranked_history(self, profile: Profile, num_seasons: int) -> SkillHistory:
        data = self.fetch_ranked_history(profile, num_seasons)
        return decode_skill_history(
            data,
            region_id=self.settings.ranked_region_id,
            board_id=self.settings.ranked_board_id,
        )
