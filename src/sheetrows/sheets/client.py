"""Google Sheets API client."""

import asyncio
import logging
from typing import Any, Optional

from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..config import Settings, settings as default_settings
from ..exceptions import RemoteOperationError
from .base import ValueStore
from .models import DeleteRange, SheetInfo, ValueRange, WriteResult

logger = logging.getLogger(__name__)


def _http_status(error: HttpError) -> Optional[int]:
    status = getattr(error, "status_code", None)
    if status is None and getattr(error, "resp", None) is not None:
        status = getattr(error.resp, "status", None)
    return int(status) if status is not None else None


class GoogleSheetsClient(ValueStore):
    """Value store backed by the Google Sheets v4 API.

    The discovery client is synchronous, so every ``execute()`` runs in a
    worker thread.
    """

    def __init__(self, settings: Optional[Settings] = None, credentials=None):
        self.settings = settings or default_settings
        self._service = None
        self._credentials = credentials

    @classmethod
    def from_service_account_info(
        cls,
        client_email: str,
        private_key: str,
        scopes: Optional[list[str]] = None,
        settings: Optional[Settings] = None,
    ) -> "GoogleSheetsClient":
        """Build a client from inline service account credentials."""
        settings = settings or default_settings
        credentials = service_account.Credentials.from_service_account_info(
            {
                "type": "service_account",
                "client_email": client_email,
                "private_key": private_key,
                "token_uri": "https://oauth2.googleapis.com/token",
            },
            scopes=scopes or settings.google_scopes,
        )
        return cls(settings=settings, credentials=credentials)

    def _get_credentials(self):
        """Get service account credentials, or get/refresh OAuth2 credentials."""
        scopes = self.settings.google_scopes

        if self.settings.google_service_account_path is not None:
            return service_account.Credentials.from_service_account_file(
                str(self.settings.google_service_account_path), scopes=scopes
            )

        creds = None
        token_path = self.settings.google_token_path

        if token_path.exists():
            creds = Credentials.from_authorized_user_file(str(token_path), scopes)

        if not creds or not creds.valid:
            if creds and creds.expired and creds.refresh_token:
                creds.refresh(Request())
            else:
                credentials_path = self.settings.google_credentials_path
                if not credentials_path.exists():
                    raise FileNotFoundError(
                        f"Google credentials file not found at {credentials_path}. "
                        "Please download it from Google Cloud Console."
                    )
                flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes)
                creds = flow.run_local_server(port=0)

            # Save credentials for next run
            token_path.parent.mkdir(parents=True, exist_ok=True)
            with open(token_path, "w") as token:
                token.write(creds.to_json())

        return creds

    @property
    def service(self):
        """Get or create the Sheets API service."""
        if self._service is None:
            if self._credentials is None:
                self._credentials = self._get_credentials()
            self._service = build("sheets", "v4", credentials=self._credentials)
        return self._service

    async def _execute(self, operation: str, request) -> dict:
        """Run a prepared API request off the event loop."""
        try:
            return await asyncio.to_thread(request.execute)
        except HttpError as e:
            status = _http_status(e)
            logger.error(f"{operation} failed with status {status}: {e}")
            raise RemoteOperationError(operation, str(e), status=status) from e

    async def get_values(self, spreadsheet_id: str, range_notation: str) -> list[list[Any]]:
        request = (
            self.service.spreadsheets()
            .values()
            .get(spreadsheetId=spreadsheet_id, range=range_notation)
        )
        result = await self._execute("values.get", request)
        return result.get("values", [])

    async def append_values(
        self,
        spreadsheet_id: str,
        range_notation: str,
        rows: list[list[Any]],
        value_input_option: str = "USER_ENTERED",
        insert_data_option: str = "INSERT_ROWS",
    ) -> WriteResult:
        request = (
            self.service.spreadsheets()
            .values()
            .append(
                spreadsheetId=spreadsheet_id,
                range=range_notation,
                valueInputOption=value_input_option,
                insertDataOption=insert_data_option,
                body={"values": rows},
            )
        )
        result = await self._execute("values.append", request)
        updates = result.get("updates", {})
        logger.info(f"Appended {len(rows)} row(s) to {range_notation}")
        return WriteResult(
            updated_cells=updates.get("updatedCells", 0),
            updated_range=updates.get("updatedRange"),
        )

    async def update_values(
        self,
        spreadsheet_id: str,
        range_notation: str,
        rows: list[list[Any]],
        value_input_option: str = "RAW",
    ) -> WriteResult:
        request = (
            self.service.spreadsheets()
            .values()
            .update(
                spreadsheetId=spreadsheet_id,
                range=range_notation,
                valueInputOption=value_input_option,
                body={"values": rows},
            )
        )
        result = await self._execute("values.update", request)
        return WriteResult(
            updated_cells=result.get("updatedCells", 0),
            updated_range=result.get("updatedRange"),
        )

    async def batch_update_values(
        self,
        spreadsheet_id: str,
        data: list[ValueRange],
        value_input_option: str = "RAW",
    ) -> WriteResult:
        if not data:
            return WriteResult()

        body = {
            "valueInputOption": value_input_option,
            "data": [{"range": item.range, "values": item.values} for item in data],
        }
        request = (
            self.service.spreadsheets()
            .values()
            .batchUpdate(spreadsheetId=spreadsheet_id, body=body)
        )
        result = await self._execute("values.batchUpdate", request)
        logger.info(f"Updated {len(data)} range(s) in {spreadsheet_id}")
        return WriteResult(
            updated_cells=result.get("totalUpdatedCells", 0),
            details=[
                {"range": r.get("updatedRange"), "cells": r.get("updatedCells", 0)}
                for r in result.get("responses", [])
            ],
        )

    async def delete_ranges(self, spreadsheet_id: str, ranges: list[DeleteRange]) -> WriteResult:
        if not ranges:
            return WriteResult()

        body = {"requests": [item.to_request() for item in ranges]}
        request = self.service.spreadsheets().batchUpdate(spreadsheetId=spreadsheet_id, body=body)
        result = await self._execute("spreadsheets.batchUpdate", request)
        return WriteResult(details=result.get("replies", []))

    async def get_sheets(self, spreadsheet_id: str) -> list[SheetInfo]:
        request = self.service.spreadsheets().get(spreadsheetId=spreadsheet_id)
        result = await self._execute("spreadsheets.get", request)
        return [
            SheetInfo(
                name=sheet["properties"]["title"],
                id=sheet["properties"]["sheetId"],
                index=position,
            )
            for position, sheet in enumerate(result.get("sheets", []))
        ]
