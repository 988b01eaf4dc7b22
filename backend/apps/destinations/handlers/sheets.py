"""
Google Sheets destination - appends each submission as a spreadsheet row.

The first write to an empty tab creates the header row
(``Timestamp``, ``Connector Name``, then the submitted field names). Later
writes follow the existing header order; fields with no matching column
are appended as new header cells so no submitted value is dropped.
"""

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError

from apps.core.logging import get_logger
from apps.core.utils import utc_now_iso

from ..constants import SHEET_CONNECTOR_HEADER, SHEET_TIMESTAMP_HEADER, DestinationType
from ..exceptions import DispatchConfigError, DispatchTransientError
from ..formatting import cell_value
from ..registry import DestinationHandler
from ..schemas import ConnectorMeta, SheetsDestinationConfig, SubmissionData
from ..sheets_client import SheetsClient, classify_http_error, get_sheets_client

logger = get_logger(__name__)


def build_rows(
    existing_headers: list[str],
    payload: SubmissionData,
    connector: ConnectorMeta,
    timestamp: str,
) -> tuple[list[str], list[list[Any]]]:
    """
    Work out the header row and the rows to append.

    Returns:
        Tuple of (headers, rows). ``rows`` starts with the header row when
        the tab was empty.
    """
    if existing_headers:
        missing = [name for name in payload if name not in existing_headers]
        headers = [*existing_headers, *missing]
    else:
        headers = [SHEET_TIMESTAMP_HEADER, SHEET_CONNECTOR_HEADER, *payload.keys()]

    row: list[Any] = []
    for header in headers:
        if header == SHEET_TIMESTAMP_HEADER:
            row.append(timestamp)
        elif header == SHEET_CONNECTOR_HEADER:
            row.append(connector.name)
        else:
            row.append(cell_value(payload.get(header)))

    if existing_headers:
        return headers, [row]
    return headers, [headers, row]


class SheetsHandler(DestinationHandler):
    destination_type = DestinationType.SHEETS
    config_model = SheetsDestinationConfig

    def __init__(self, client_factory: Callable[[], SheetsClient] = get_sheets_client) -> None:
        self._client_factory = client_factory

    def _append_sync(
        self,
        config: SheetsDestinationConfig,
        payload: SubmissionData,
        connector: ConnectorMeta,
    ) -> int:
        client = self._client_factory()
        try:
            client.get_spreadsheet(config.spreadsheet_id)
            existing_headers = client.read_header_row(config.spreadsheet_id, config.sheet_name)
            headers, rows = build_rows(existing_headers, payload, connector, utc_now_iso())
            if existing_headers and len(headers) > len(existing_headers):
                client.update_header_row(config.spreadsheet_id, config.sheet_name, headers)
            client.append_rows(config.spreadsheet_id, config.sheet_name, rows)
        except HttpError as e:
            raise classify_http_error(e, config.spreadsheet_id) from e
        except RefreshError as e:
            # The service account key was rejected by Google
            raise DispatchConfigError(f"Google service account authorization failed: {e}") from e
        except TransportError as e:
            raise DispatchTransientError(f"Could not reach Google to authorize: {e}") from e
        return len(rows)

    async def send(
        self,
        config: Mapping[str, Any],
        payload: SubmissionData,
        connector: ConnectorMeta,
    ) -> None:
        sheets_config: SheetsDestinationConfig = self.parse_config(config)
        appended = await asyncio.to_thread(self._append_sync, sheets_config, payload, connector)
        logger.info(
            "sheets_destination_appended",
            **{"connector.id": connector.id},
            sheet_name=sheets_config.sheet_name,
            rows=appended,
        )
