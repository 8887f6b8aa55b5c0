"""Backend selection: Google Sheets when configured, in-memory otherwise."""
import logging

import gspread
from google.oauth2.service_account import Credentials

from goal_tracker.config import Settings, settings
from goal_tracker.storage.backend import MemoryBackend, TabularBackend
from goal_tracker.storage.sheets import SheetsBackend


logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


def build_sheets_client(config: Settings) -> gspread.Client:
    """
    Authorize a gspread client from the service-account values in config.

    Raises:
        ValueError: If the private key cannot be parsed
    """
    credentials = Credentials.from_service_account_info(
        {
            "type": "service_account",
            "client_email": config.google_service_account_email,
            "private_key": config.private_key,
            "token_uri": TOKEN_URI,
        },
        scopes=SCOPES,
    )
    return gspread.authorize(credentials)


def select_backend(config: Settings) -> TabularBackend:
    """
    Pick the backend for this process.

    Falls back to memory when the Google values are missing, still hold the
    placeholder sheet id, or the client cannot be built.
    """
    if not config.sheets_configured:
        logger.warning("Google Sheets not configured, using in-memory storage")
        return MemoryBackend()

    try:
        client = build_sheets_client(config)
    except Exception as e:
        logger.warning("Google Sheets init failed, using in-memory storage: %s", e)
        return MemoryBackend()

    logger.info("Using Google Sheets storage: %s", config.google_sheet_id)
    return SheetsBackend(client, config.google_sheet_id, config.sheet_titles)


class Database:
    """Holds the backend chosen for this process."""

    backend: TabularBackend | None = None

    async def connect(self, config: Settings = settings) -> TabularBackend:
        """Select the backend on first call; later calls return the same one."""
        if self.backend is None:
            self.backend = select_backend(config)
        return self.backend


# Global database instance
database = Database()


def get_backend() -> TabularBackend:
    """Dependency to get the selected backend."""
    if database.backend is None:
        raise RuntimeError("Database not connected")
    return database.backend
