"""Tests for the Google Sheets value store client."""

from unittest.mock import Mock, patch

import pytest
from googleapiclient.errors import HttpError

from sheetrows.exceptions import RemoteOperationError
from sheetrows.sheets import GoogleSheetsClient
from sheetrows.sheets.models import DeleteRange, ValueRange


@pytest.fixture
def service() -> Mock:
    """Create a mocked Sheets API service."""
    return Mock()


@pytest.fixture
def client(service, mock_settings) -> GoogleSheetsClient:
    client = GoogleSheetsClient(settings=mock_settings)
    client._service = service
    return client


def _values_api(service: Mock) -> Mock:
    return service.spreadsheets.return_value.values.return_value


class TestReads:
    @pytest.mark.asyncio
    async def test_get_values(self, client, service):
        _values_api(service).get.return_value.execute.return_value = {
            "range": "Sheet1!A1:B2",
            "values": [["id", "name"], ["1", "Ana"]],
        }

        values = await client.get_values("sheet-123", "Sheet1!A1:B2")

        assert values == [["id", "name"], ["1", "Ana"]]
        _values_api(service).get.assert_called_once_with(
            spreadsheetId="sheet-123", range="Sheet1!A1:B2"
        )

    @pytest.mark.asyncio
    async def test_get_values_empty_range(self, client, service):
        _values_api(service).get.return_value.execute.return_value = {"range": "Sheet1!A9"}
        assert await client.get_values("sheet-123", "Sheet1!A9") == []

    @pytest.mark.asyncio
    async def test_get_sheets(self, client, service):
        service.spreadsheets.return_value.get.return_value.execute.return_value = {
            "spreadsheetId": "sheet-123",
            "sheets": [
                {"properties": {"sheetId": 0, "title": "Summary"}},
                {"properties": {"sheetId": 84512, "title": "Data"}},
            ],
        }

        sheets = await client.get_sheets("sheet-123")

        assert [(s.name, s.id, s.index) for s in sheets] == [
            ("Summary", 0, 0),
            ("Data", 84512, 1),
        ]


class TestWrites:
    @pytest.mark.asyncio
    async def test_append_values(self, client, service):
        _values_api(service).append.return_value.execute.return_value = {
            "updates": {"updatedRange": "Sheet1!A5:B5", "updatedCells": 2}
        }

        result = await client.append_values("sheet-123", "Sheet1!A1", [["1", "x"]])

        assert result.success
        assert result.updated_cells == 2
        assert result.updated_range == "Sheet1!A5:B5"
        _values_api(service).append.assert_called_once_with(
            spreadsheetId="sheet-123",
            range="Sheet1!A1",
            valueInputOption="USER_ENTERED",
            insertDataOption="INSERT_ROWS",
            body={"values": [["1", "x"]]},
        )

    @pytest.mark.asyncio
    async def test_update_values(self, client, service):
        _values_api(service).update.return_value.execute.return_value = {
            "updatedRange": "Sheet1!A2:B2",
            "updatedCells": 2,
        }

        result = await client.update_values("sheet-123", "Sheet1!A2:B2", [[1, "x"]])

        assert result.updated_cells == 2
        _values_api(service).update.assert_called_once_with(
            spreadsheetId="sheet-123",
            range="Sheet1!A2:B2",
            valueInputOption="RAW",
            body={"values": [[1, "x"]]},
        )

    @pytest.mark.asyncio
    async def test_batch_update_values(self, client, service):
        _values_api(service).batchUpdate.return_value.execute.return_value = {
            "totalUpdatedCells": 4,
            "responses": [
                {"updatedRange": "Sheet1!A3:B3", "updatedCells": 2},
                {"updatedRange": "Sheet1!A2:B2", "updatedCells": 2},
            ],
        }

        result = await client.batch_update_values(
            "sheet-123",
            [
                ValueRange(range="Sheet1!A3:B3", values=[["2", "y"]]),
                ValueRange(range="Sheet1!A2:B2", values=[["1", "x"]]),
            ],
        )

        assert result.updated_cells == 4
        assert result.details[0] == {"range": "Sheet1!A3:B3", "cells": 2}
        body = _values_api(service).batchUpdate.call_args.kwargs["body"]
        assert body["valueInputOption"] == "RAW"
        assert [item["range"] for item in body["data"]] == ["Sheet1!A3:B3", "Sheet1!A2:B2"]

    @pytest.mark.asyncio
    async def test_batch_update_nothing(self, client, service):
        result = await client.batch_update_values("sheet-123", [])
        assert result.success
        _values_api(service).batchUpdate.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_ranges(self, client, service):
        service.spreadsheets.return_value.batchUpdate.return_value.execute.return_value = {
            "replies": [{}]
        }

        await client.delete_ranges(
            "sheet-123",
            [
                DeleteRange(
                    sheet_id=7,
                    start_row_index=4,
                    end_row_index=5,
                    start_column_index=0,
                    end_column_index=3,
                )
            ],
        )

        body = service.spreadsheets.return_value.batchUpdate.call_args.kwargs["body"]
        assert body == {
            "requests": [
                {
                    "deleteRange": {
                        "shiftDimension": "ROWS",
                        "range": {
                            "sheetId": 7,
                            "startRowIndex": 4,
                            "endRowIndex": 5,
                            "startColumnIndex": 0,
                            "endColumnIndex": 3,
                        },
                    }
                }
            ]
        }


class TestErrors:
    @pytest.mark.asyncio
    async def test_http_error_becomes_remote_error(self, client, service):
        error = HttpError(resp=Mock(status=403, reason="Forbidden"), content=b"{}")
        _values_api(service).get.return_value.execute.side_effect = error

        with pytest.raises(RemoteOperationError) as exc_info:
            await client.get_values("sheet-123", "Sheet1!A1")

        assert exc_info.value.status == 403
        assert exc_info.value.operation == "values.get"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_append_error_is_not_retried(self, client, service):
        execute = _values_api(service).append.return_value.execute
        execute.side_effect = HttpError(resp=Mock(status=500, reason="Backend Error"), content=b"")

        with pytest.raises(RemoteOperationError):
            await client.append_values("sheet-123", "Sheet1!A1", [["1"]])

        assert execute.call_count == 1


class TestCredentials:
    def test_missing_credentials_file(self, mock_settings):
        client = GoogleSheetsClient(settings=mock_settings)
        with pytest.raises(FileNotFoundError):
            client._get_credentials()

    def test_service_account_takes_precedence(self, mock_settings, tmp_path):
        key_file = tmp_path / "service-account.json"
        mock_settings.google_service_account_path = key_file
        client = GoogleSheetsClient(settings=mock_settings)

        with patch(
            "sheetrows.sheets.client.service_account.Credentials.from_service_account_file"
        ) as from_file:
            creds = client._get_credentials()

        assert creds is from_file.return_value
        from_file.assert_called_once_with(str(key_file), scopes=mock_settings.google_scopes)

    def test_service_is_built_once(self, mock_settings):
        credentials = Mock()
        client = GoogleSheetsClient(settings=mock_settings, credentials=credentials)

        with patch("sheetrows.sheets.client.build") as build:
            first = client.service
            second = client.service

        assert first is second
        build.assert_called_once_with("sheets", "v4", credentials=credentials)
