"""
Remote collaborator driving the MySQL client tools over ssh.

Metadata lines produced on the live side have the same shape as the ones
stored with the snapshot:

    <YYYY-MM> <count> <min id> <max id>

tab-separated, one line per month, ordered by month.
"""

import logging
import shlex
from pathlib import Path

from auditrestore.errors import RestoreError
from auditrestore.metadata import MetadataRecord
from auditrestore.sql_safety import quote_identifier, quote_literal, validate_identifier
from auditrestore.utils.tracing import trace_function

from .base import RemoteCollaborator
from .ssh import SshTransport

logger = logging.getLogger(__name__)

DEFAULT_STAGING_PATH = "/tmp/audit_restore_staging"
MONTH_FORMAT = "%Y-%m"


class MySqlRemote(RemoteCollaborator):
    """
    RemoteCollaborator for a MySQL instance reachable over ssh

    Args:
        transport: Command channel to the database host
        database: Database holding the audit table
        table: Audit table name
        time_column: Timestamp column the months are derived from
        id_column: Auto-increment primary key column
        staging_path: Remote path artifacts are staged at
        mysql_bin: mysql client executable on the host
        mysqldump_bin: mysqldump executable on the host
    """

    def __init__(
        self,
        transport: SshTransport,
        database: str,
        table: str,
        time_column: str = "created_at",
        id_column: str = "id",
        staging_path: str = DEFAULT_STAGING_PATH,
        mysql_bin: str = "mysql",
        mysqldump_bin: str = "mysqldump",
    ):
        for identifier in (database, table, time_column, id_column):
            validate_identifier(identifier)

        self.transport = transport
        self.host = transport.host
        self.database = database
        self.table = table
        self.time_column = time_column
        self.id_column = id_column
        self.staging_path = staging_path
        self.mysql_bin = mysql_bin
        self.mysqldump_bin = mysqldump_bin
        self._staged_compressed = False

    # ---- statement builders -------------------------------------------------

    def metadata_query(self) -> str:
        month = f"DATE_FORMAT({quote_identifier(self.time_column)}, '{MONTH_FORMAT}')"
        id_col = quote_identifier(self.id_column)
        return (
            f"SELECT {month} AS month, COUNT(*), MIN({id_col}), MAX({id_col}) "
            f"FROM {quote_identifier(self.table)} "
            f"GROUP BY month ORDER BY month"
        )

    def purge_statement(self, record: MetadataRecord) -> str:
        """
        Build the DELETE removing live rows of one subset

        Rows are matched on the record's id range, which is exactly the set
        of ids the re-import writes. A record without a usable id range
        falls back to matching the whole month.
        """
        table = quote_identifier(self.table)
        min_id, max_id = record.min_id, record.max_id
        if min_id is not None and max_id is not None:
            id_col = quote_identifier(self.id_column)
            return f"DELETE FROM {table} WHERE {id_col} BETWEEN {min_id} AND {max_id}"

        month = f"DATE_FORMAT({quote_identifier(self.time_column)}, '{MONTH_FORMAT}')"
        return f"DELETE FROM {table} WHERE {month} = {quote_literal(record.subset_id)}"

    def _mysql(self, sql: str | None = None, batch: bool = False) -> str:
        parts = [self.mysql_bin]
        if batch:
            parts += ["-N", "-B"]
        if sql is not None:
            parts += ["-e", sql]
        parts.append(self.database)
        return shlex.join(parts)

    # ---- RemoteCollaborator -------------------------------------------------

    @trace_function("remote.fetch_live_metadata", component="remote")
    def fetch_live_metadata(self) -> str:
        logger.debug(f"Fetching live metadata for {self.database}.{self.table}")
        return self.transport.run(self._mysql(self.metadata_query(), batch=True)).stdout

    @trace_function("remote.fetch_live_schema", component="remote")
    def fetch_live_schema(self) -> str:
        logger.debug(f"Fetching live schema for {self.database}.{self.table}")
        command = shlex.join([
            self.mysqldump_bin,
            "--no-data",
            "--skip-add-drop-table",
            self.database,
            self.table,
        ])
        return self.transport.run(command).stdout

    @trace_function("remote.purge_subset", component="remote")
    def purge_subset(self, record: MetadataRecord) -> None:
        self.transport.run(self._mysql(self.purge_statement(record)))

    @trace_function("remote.transfer_artifact", component="remote")
    def transfer_artifact(self, local_path: Path) -> None:
        local_path = Path(local_path)
        command = f"cat > {shlex.quote(self.staging_path)}"
        self.transport.run(command, stdin_path=local_path)
        self._staged_compressed = local_path.name.endswith(".gz")
        logger.debug(f"Staged {local_path.name} at {self.host}:{self.staging_path}")

    @trace_function("remote.import_staged_artifact", component="remote")
    def import_staged_artifact(self) -> None:
        staged = shlex.quote(self.staging_path)
        if self._staged_compressed:
            command = f"gzip -t {staged} && gzip -dc {staged} | {self._mysql()}"
        else:
            command = f"{self._mysql()} < {staged}"
        self.transport.run(command)

    def release_staging(self) -> None:
        try:
            self.transport.run(f"rm -f {shlex.quote(self.staging_path)}")
        except RestoreError as e:
            logger.warning(f"Could not remove staging file on {self.host}: {e}")
