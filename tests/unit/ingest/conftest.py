"""Sample mint addresses for ingestion tests."""

from trade_behavior.ingest.mints import WSOL_MINT

POPCAT = "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr"
BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

__all__ = ["BONK", "POPCAT", "USDC", "WSOL_MINT"]
