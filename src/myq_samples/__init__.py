"""Turn MySQL SHOW GLOBAL STATUS dumps into key/value samples."""

__version__ = "0.1.0"
