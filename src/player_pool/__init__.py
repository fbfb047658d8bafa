from src.player_pool.cleaning import PoolCleaner
from src.player_pool.ingestion import IngestionError, RankingsIngester

__all__ = [
    "IngestionError",
    "PoolCleaner",
    "RankingsIngester",
]
