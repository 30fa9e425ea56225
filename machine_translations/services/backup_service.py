"""
Table backups with the database's own dump utility.
"""
import logging
import os
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union
from sqlalchemy.engine import URL, make_url

from machine_translations.core.config import settings
from machine_translations.core.exceptions import BackupError

logger = logging.getLogger(__name__)


class TableBackuper:
    """Dumps single tables to timestamped .sql files before they are modified."""

    def __init__(
        self,
        database_url: Union[str, URL],
        backup_dir: Optional[Union[str, Path]] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.url = make_url(database_url)
        self.backup_dir = Path(backup_dir or settings.backup_dir)
        self.now = now
        logger.info(
            f"Backups of database '{self.url.database}' on {self.url.host or 'localhost'} "
            f"as '{self.url.username}' go to {self.backup_dir}"
        )

    def get_backup_filename(self, table_name: str) -> Path:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        return self.backup_dir / f"{table_name}_{self.now().strftime('%Y%m%d_%H%M%S')}.sql"

    def build_command(self, table_name: str) -> Tuple[List[str], Dict[str, str]]:
        """
        Build the dump command and the extra environment it needs.

        The password goes into the environment so it never shows up in the
        process list or the log.

        Raises:
            BackupError: If the database backend has no supported dump utility
        """
        backend = self.url.get_backend_name()
        env: Dict[str, str] = {}

        if backend in ("mysql", "mariadb"):
            command = ["mysqldump", "--hex-blob", "--single-transaction"]
            if self.url.host:
                command.append(f"--host={self.url.host}")
            if self.url.port:
                command.append(f"--port={self.url.port}")
            if self.url.username:
                command.append(f"--user={self.url.username}")
            if self.url.password:
                env["MYSQL_PWD"] = str(self.url.password)
            command += [self.url.database, table_name]
        elif backend == "postgresql":
            command = ["pg_dump", f"--table={table_name}"]
            if self.url.host:
                command.append(f"--host={self.url.host}")
            if self.url.port:
                command.append(f"--port={self.url.port}")
            if self.url.username:
                command.append(f"--username={self.url.username}")
            if self.url.password:
                env["PGPASSWORD"] = str(self.url.password)
            command.append(self.url.database)
        else:
            raise BackupError(f"Backups are not supported for database backend '{backend}'")

        return command, env

    def backup_table(self, table_name: str) -> Path:
        """
        Dump a table to a new backup file.

        A failed dump never leaves a file behind, so every .sql file in the
        backup directory is complete.

        Args:
            table_name: Table to back up

        Returns:
            Path of the written backup file

        Raises:
            BackupError: If the dump fails or the backup file is missing or empty
        """
        backup_file = self.get_backup_filename(table_name)
        command, extra_env = self.build_command(table_name)
        logger.info(f"Backing up table: {table_name} to {backup_file}")
        logger.debug(f"Executing command: {' '.join(command)}")

        try:
            with open(backup_file, "wb") as f:
                completed = subprocess.run(
                    command,
                    stdout=f,
                    stderr=subprocess.PIPE,
                    env={**os.environ, **extra_env},
                    check=False,
                )
        except OSError as e:
            backup_file.unlink(missing_ok=True)
            raise BackupError(f"Could not run {command[0]} for table {table_name}: {e}") from e

        if completed.returncode != 0:
            stderr = (completed.stderr or b"").decode("utf-8", errors="replace").strip()
            backup_file.unlink(missing_ok=True)
            raise BackupError(f"{command[0]} exited with status {completed.returncode} for table {table_name}: {stderr}")

        if not backup_file.exists() or backup_file.stat().st_size == 0:
            backup_file.unlink(missing_ok=True)
            raise BackupError(f"Backup file was not created: {backup_file}")

        logger.info(f"Backup of {table_name} written ({backup_file.stat().st_size} bytes)")
        return backup_file
