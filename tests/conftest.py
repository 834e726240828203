"""
Pytest configuration and fixtures for audit-restore tests.
Provides a recording fake of the live instance and snapshot directory builders.
"""

import os
from pathlib import Path

import pytest

from auditrestore.remote import RemoteCollaborator

SNAPSHOT_SCHEMA = """\
-- MySQL dump 10.13  Distrib 8.0.36, for Linux (x86_64)
--
-- Host: localhost    Database: audit
/*!40101 SET @saved_cs_client     = @@character_set_client */;
/*!50503 SET character_set_client = utf8mb4 */;
CREATE TABLE `audit_log` (
  `id` bigint NOT NULL AUTO_INCREMENT,
  `created_at` datetime NOT NULL,
  `actor` varchar(64) NOT NULL,
  `action` varchar(255) NOT NULL,
  PRIMARY KEY (`id`)
) ENGINE=InnoDB AUTO_INCREMENT=4001 DEFAULT CHARSET=utf8mb4;
/*!40101 SET character_set_client = @saved_cs_client */;

-- Dump completed on 2024-06-01  3:00:01
"""

# Same table dumped later: only the header and the AUTO_INCREMENT value differ
LIVE_SCHEMA_SAME = """\
-- MySQL dump 10.13  Distrib 8.0.36, for Linux (x86_64)
--
-- Host: db1    Database: audit
/*!40101 SET @saved_cs_client     = @@character_set_client */;
/*!50503 SET character_set_client = utf8mb4 */;
CREATE TABLE `audit_log` (
  `id` bigint NOT NULL AUTO_INCREMENT,
  `created_at` datetime NOT NULL,
  `actor` varchar(64) NOT NULL,
  `action` varchar(255) NOT NULL,
  PRIMARY KEY (`id`)
) ENGINE=InnoDB AUTO_INCREMENT=9313 DEFAULT CHARSET=utf8mb4;
/*!40101 SET character_set_client = @saved_cs_client */;

-- Dump completed on 2024-07-15 11:42:57
"""

LIVE_SCHEMA_DIFFERENT = LIVE_SCHEMA_SAME.replace(
    "  `action` varchar(255) NOT NULL,\n",
    "  `action` varchar(255) NOT NULL,\n  `ip` varchar(45) DEFAULT NULL,\n",
)

M1 = "2024-01\t1000\t1\t1000"
M2 = "2024-02\t1000\t1001\t2000"
M3 = "2024-03\t1000\t2001\t3000"
M3_DRIFTED = "2024-03\t900\t2001\t2900"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "scenario: end-to-end restore scenario against the fake instance")
    config.addinivalue_line("markers", "slow: mark test as slow running")


class FakeRemote(RemoteCollaborator):
    """
    In-memory live instance that records every call

    Failures are injected through `fail`, keyed by:
        "schema", "metadata", ("purge", subset_id),
        ("transfer", file_name), ("import", file_name)
    """

    host = "fake-db"

    def __init__(self, live_schema: str = LIVE_SCHEMA_SAME, live_metadata: str = "", fail=None):
        self.live_schema = live_schema
        self.live_metadata = live_metadata
        self.fail = fail or {}
        self.calls = []
        self.staged = None
        self.staged_texts = {}

    def _maybe_fail(self, key) -> None:
        if key in self.fail:
            raise self.fail[key]

    def fetch_live_schema(self) -> str:
        self.calls.append(("fetch_live_schema",))
        self._maybe_fail("schema")
        return self.live_schema

    def fetch_live_metadata(self) -> str:
        self.calls.append(("fetch_live_metadata",))
        self._maybe_fail("metadata")
        return self.live_metadata

    def purge_subset(self, record) -> None:
        self.calls.append(("purge", record.subset_id))
        self._maybe_fail(("purge", record.subset_id))

    def transfer_artifact(self, local_path) -> None:
        path = Path(local_path)
        self.calls.append(("transfer", path.name))
        self._maybe_fail(("transfer", path.name))
        self.staged = path
        if path.suffix == ".sql":
            self.staged_texts[path.name] = path.read_text()

    def import_staged_artifact(self) -> None:
        self.calls.append(("import", self.staged.name))
        self._maybe_fail(("import", self.staged.name))

    def release_staging(self) -> None:
        self.calls.append(("release",))

    @property
    def mutating_calls(self) -> list:
        """Calls that change the live instance, in order."""
        return [call for call in self.calls if call[0] in ("purge", "transfer", "import")]


@pytest.fixture
def fake_remote():
    """Live instance with the snapshot's schema and no data."""
    return FakeRemote()


@pytest.fixture
def make_snapshot(tmp_path: Path):
    """
    Factory writing a snapshot directory

    Usage:
        snapshot_dir = make_snapshot([M1, M2], artifacts=["2024-01"])
    """
    def _make(metadata_lines=None, schema=SNAPSHOT_SCHEMA, artifacts=None, suffix=".sql.gz"):
        snapshot_dir = tmp_path / "snapshot"
        snapshot_dir.mkdir(exist_ok=True)

        if metadata_lines is not None:
            (snapshot_dir / "metadata.txt").write_text("\n".join(metadata_lines) + "\n")
        if schema is not None:
            (snapshot_dir / "schema.sql").write_text(schema)

        if artifacts is None:
            artifacts = [line.split()[0] for line in metadata_lines or []]
        for subset_id in artifacts:
            (snapshot_dir / f"{subset_id}{suffix}").write_bytes(b"\x1f\x8b fake dump")

        return snapshot_dir
    return _make


@pytest.fixture(autouse=True)
def clear_restore_env_vars(monkeypatch) -> None:
    """Keep AUDIT_RESTORE_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("AUDIT_RESTORE_") or key in ("OTLP_ENDPOINT", "TRACE_CONSOLE"):
            monkeypatch.delenv(key, raising=False)
