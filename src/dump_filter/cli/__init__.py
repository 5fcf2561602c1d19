"""CLI for dump-filter.

Streams a mysqldump file to stdout, optionally dropping INSERT statements
for some tables and timing each CREATE TABLE / INSERT INTO phase.

Usage:
    dump-filter dump.sql > filtered.sql
    dump-filter dump.sql --except audit_log,sessions --log --format csv
    dump-filter dump.sql -e audit_log -e sessions --progress | mysql mydb

Environment:
    DUMP_FILTER_* variables (or a .env file) provide defaults.
"""

from dump_filter.cli.main import app, main

__all__ = ["app", "main"]
