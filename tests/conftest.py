"""Shared pytest fixtures for all tests."""

from pathlib import Path

import pytest

from dump_filter.core.config import get_settings

SAMPLE_DUMP = b"".join(
    [
        b"-- MySQL dump 10.13  Distrib 8.0.36\n",
        b"SET NAMES utf8mb4;\n",
        b"DROP TABLE IF EXISTS `users`;\n",
        b"CREATE TABLE `users` (\n",
        b"  `id` int NOT NULL,\n",
        b"  PRIMARY KEY (`id`)\n",
        b") ENGINE=InnoDB;\n",
        b"LOCK TABLES `users` WRITE;\n",
        b"INSERT INTO `users` VALUES (1),(2),(3);\n",
        b"INSERT INTO `users` VALUES (4);\n",
        b"UNLOCK TABLES;\n",
        b"DROP TABLE IF EXISTS `audit_log`;\n",
        b"CREATE TABLE `audit_log` (\n",
        b"  `id` int NOT NULL\n",
        b") ENGINE=InnoDB;\n",
        b"LOCK TABLES `audit_log` WRITE;\n",
        b"INSERT INTO `audit_log` VALUES (1,'caf\xc3\xa9'),(2,'\xff');\n",
        b"UNLOCK TABLES;\n",
        b"-- Dump completed\n",
    ]
)


class FakeClock:
    """Clock advancing by a fixed step on every reading."""

    def __init__(self, start: float = 100.0, step: float = 0.25):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_dump() -> bytes:
    return SAMPLE_DUMP


@pytest.fixture
def dump_file(tmp_path: Path) -> Path:
    """Sample dump written to disk."""
    path = tmp_path / "dump.sql"
    path.write_bytes(SAMPLE_DUMP)
    return path


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
