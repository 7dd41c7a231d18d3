"""
Seed the default game configurations.
Creates or refreshes the Tetris entry and a generic puzzle entry.
"""
import asyncio

from settlement_server.core.config import get_settings
from settlement_server.infrastructure.database.session import get_session, init_db
from settlement_server.modules.games import GameConfigService

DEFAULT_GAMES = [
    {
        "game_id": "tetris",
        "name": "Tetris",
        "description": "Classic falling blocks, replay-validated",
        "lives_config": {
            "daily_free_lives": 1,
            "claim_attempts_per_day": 5,
            "bonus_divisor": 50000,
            "bonus_cap": 40,
            "paid_life_cap": 10,
        },
        "scoring_rules": {"validation_required": True, "engine": "tetris", "max_moves": 10000},
        "payment_config": {
            "enabled": True,
            "prices_usd": {"cheap": 0.03, "mid": 0.09, "high": 0.27},
            "lives_per_tier": {"cheap": 1, "mid": 3, "high": 10},
        },
    },
    {
        "game_id": "memory",
        "name": "Memory Match",
        "description": "Card matching scored by the generic validator",
        "lives_config": {"daily_free_lives": 1, "paid_life_cap": 10},
        "scoring_rules": {"validation_required": True, "engine": "generic", "score_per_move": 10},
        "payment_config": {"enabled": True},
    },
]


async def seed_games():
    """Create or update the bundled games."""
    settings = get_settings()
    await init_db(settings)

    async for db in get_session():
        service = GameConfigService.with_session(db, settings)
        for game in DEFAULT_GAMES:
            config = await service.save(**game)
            print(f"Saved game '{config.game_id}' ({config.name})")
        await db.commit()


if __name__ == "__main__":
    asyncio.run(seed_games())
