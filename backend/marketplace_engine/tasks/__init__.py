"""Entry points for externally scheduled work."""
from marketplace_engine.tasks.auctions import SWEEP_INTERVAL_SECONDS, run_auction_sweep

__all__ = ["SWEEP_INTERVAL_SECONDS", "run_auction_sweep"]
