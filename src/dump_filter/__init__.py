"""dump-filter: stream a mysqldump file, skip INSERTs for chosen tables, time each table."""

__version__ = "0.1.0"
