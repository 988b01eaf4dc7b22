"""
Google Sheets API client wrapper.

The googleapiclient service object is synchronous and not thread-safe, so
a fresh ``SheetsClient`` is built per delivery and its calls run in a
worker thread. Parsed service-account credentials are cached.
"""

import json
from functools import lru_cache
from typing import Any

from django.conf import settings
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .exceptions import DestinationNotImplemented, DispatchConfigError, DispatchTransientError

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"


@lru_cache(maxsize=4)
def load_credentials(credentials_json: str) -> service_account.Credentials:
    """Parse service account JSON (key file contents) into credentials."""
    try:
        info = json.loads(credentials_json)
    except json.JSONDecodeError as e:
        raise DispatchConfigError(f"Failed to parse GOOGLE_SERVICE_ACCOUNT_JSON: {e}") from e

    if not isinstance(info, dict) or not info.get("client_email") or not info.get("private_key"):
        raise DispatchConfigError(
            "Invalid service account credentials: missing client_email or private_key"
        )

    # Keys pasted through env files often carry escaped newlines
    info["private_key"] = info["private_key"].replace("\\n", "\n")
    try:
        return service_account.Credentials.from_service_account_info(info, scopes=[SHEETS_SCOPE])
    except ValueError as e:
        raise DispatchConfigError(f"Invalid service account credentials: {e}") from e


def quote_sheet_name(sheet_name: str) -> str:
    """Quote a tab name for A1 notation (``'My Sheet'``, with ``'`` doubled)."""
    return "'" + sheet_name.replace("'", "''") + "'"


def http_status(error: HttpError) -> int | None:
    status = getattr(error, "status_code", None)
    if status is None and getattr(error, "resp", None) is not None:
        status = getattr(error.resp, "status", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def classify_http_error(error: HttpError, spreadsheet_id: str) -> Exception:
    """Map a Sheets API error to a dispatch error."""
    status = http_status(error)
    if status == 404:
        return DispatchConfigError(
            f"Spreadsheet not found. Please check the spreadsheet ID: {spreadsheet_id}",
            field="spreadsheet_id",
        )
    if status == 403:
        return DispatchConfigError(
            "Permission denied. Please share the spreadsheet with the service account "
            "email and give it Editor permissions."
        )
    if status == 400:
        return DispatchConfigError(f"Google Sheets rejected the request: {error.reason}")
    if status == 429:
        return DispatchTransientError("Google Sheets rate limited the request.")
    return DispatchTransientError(f"Google Sheets API error (HTTP {status}): {error.reason}")


class SheetsClient:
    """Thin synchronous wrapper over the Sheets v4 values API."""

    def __init__(self, credentials: service_account.Credentials) -> None:
        self._service = build("sheets", "v4", credentials=credentials, cache_discovery=False)

    def get_spreadsheet(self, spreadsheet_id: str) -> dict[str, Any]:
        return (
            self._service.spreadsheets()
            .get(spreadsheetId=spreadsheet_id, fields="spreadsheetId")
            .execute()
        )

    def read_header_row(self, spreadsheet_id: str, sheet_name: str) -> list[str]:
        response = (
            self._service.spreadsheets()
            .values()
            .get(spreadsheetId=spreadsheet_id, range=f"{quote_sheet_name(sheet_name)}!1:1")
            .execute()
        )
        rows = response.get("values") or []
        return [str(cell) for cell in rows[0]] if rows else []

    def update_header_row(self, spreadsheet_id: str, sheet_name: str, headers: list[str]) -> None:
        (
            self._service.spreadsheets()
            .values()
            .update(
                spreadsheetId=spreadsheet_id,
                range=f"{quote_sheet_name(sheet_name)}!1:1",
                valueInputOption="RAW",
                body={"values": [headers]},
            )
            .execute()
        )

    def append_rows(self, spreadsheet_id: str, sheet_name: str, rows: list[list[Any]]) -> None:
        (
            self._service.spreadsheets()
            .values()
            .append(
                spreadsheetId=spreadsheet_id,
                range=f"{quote_sheet_name(sheet_name)}!A1",
                # Submitted text must never be evaluated as a formula
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": rows},
            )
            .execute()
        )


def get_sheets_client() -> SheetsClient:
    """
    Build a client from ``GOOGLE_SERVICE_ACCOUNT_JSON``.

    Raises:
        DestinationNotImplemented: No service account is configured.
        DispatchConfigError: The configured credentials are unusable.
    """
    credentials_json = settings.GOOGLE_SERVICE_ACCOUNT_JSON
    if not credentials_json:
        raise DestinationNotImplemented("Google Sheets delivery is not configured on this server")
    return SheetsClient(load_credentials(credentials_json))
