from __future__ import annotations

import json

from r6stats.stats.decoder import StatsDecoder
from r6stats.stats.models import BombsiteEntry, DetailedStats


def test_bombsites_keep_records_in_order() -> None:
    data = json.dumps(
        {
            "userId": "u-1",
            "profileData": {
                "u-1": {
                    "platforms": {
                        "PC": {
                            "gameModes": {
                                "ranked": {
                                    "type": "Team roles",
                                    "teamRoles": {
                                        "Defender": [
                                            {"type": "Seasonal", "statsDetail": "2F Kitchen", "kills": 3},
                                            {"type": "Seasonal", "kills": 1},
                                        ]
                                    },
                                }
                            }
                        }
                    }
                }
            },
        }
    )

    result = StatsDecoder().bombsites(data)

    assert result.ranked is not None
    assert result.ranked.defence == (
        BombsiteEntry(name="2F Kitchen", stats=DetailedStats(kills=3)),
        BombsiteEntry(name="n/a", stats=DetailedStats(kills=1)),
    )
    assert result.ranked.attack is None
