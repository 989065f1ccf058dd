"""Google BigQuery table store."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from google.api_core.exceptions import GoogleAPICallError, NotFound
from google.cloud import bigquery

from ..errors import RowInsertError

logger = logging.getLogger(__name__)


class BigQueryTable:
    """Streams rows into a BigQuery table."""

    def __init__(
        self,
        client: bigquery.Client,
        dataset: str,
        table: str,
        *,
        project: str | None = None,
        skip_invalid_rows: bool = False,
        ignore_unknown_values: bool = False,
    ) -> None:
        """Initialize the table store with a client, dataset and table name."""

        self._client = client # The BigQuery client
        self._table_ref = bigquery.DatasetReference(
            project or client.project, dataset
        ).table(table) # The fully qualified table
        self._skip_invalid_rows = skip_invalid_rows
        self._ignore_unknown_values = ignore_unknown_values

    @property
    def table_id(self) -> str:
        return f"{self._table_ref.project}.{self._table_ref.dataset_id}.{self._table_ref.table_id}"

    def exists(self) -> bool:
        """Check whether the table exists."""

        try:
            self._client.get_table(self._table_ref)
        except NotFound:
            logger.warning("BigQuery log table %s does not exist", self.table_id)
            return False

        return True

    def insert_rows(self, rows: Sequence[Mapping[str, Any]]) -> None:
        """Stream rows into the table, raising when BigQuery rejects any."""

        try:
            errors = self._client.insert_rows_json(
                self._table_ref,
                list(rows),
                skip_invalid_rows=self._skip_invalid_rows,
                ignore_unknown_values=self._ignore_unknown_values,
            )
        except GoogleAPICallError as exc:
            logger.error("BigQuery insert into %s failed: %s", self.table_id, exc)
            raise

        if errors:
            logger.error(
                "BigQuery rejected %d of %d row(s) for %s",
                len(errors),
                len(rows),
                self.table_id,
            )
            raise RowInsertError(errors)
