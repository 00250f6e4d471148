#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Database server (MariaDB or PostgreSQL) for the monitoring server."""

from typing import List

from socbox.installer.configs.constants.constants import COMPONENT_DATABASE
from socbox.installer.configs.constants.enums import DatabaseType, OSFamily
from socbox.installer.utils.logger_utils import InstallerLogger

from .base import BaseComponent

MARIADB_CLIENT = ["mysql", "--protocol=socket", "--user=root", "--batch"]
PSQL_AS_POSTGRES = ["runuser", "-u", "postgres", "--", "psql", "-v", "ON_ERROR_STOP=1", "--quiet"]
PGSQL_RHEL_DATA_MARKER = "/var/lib/pgsql/data/PG_VERSION"


def mysql_quote(value: str) -> str:
    """Single-quoted MySQL/MariaDB string literal."""
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def pg_quote(value: str) -> str:
    """Single-quoted PostgreSQL string literal (standard_conforming_strings)."""
    return "'" + value.replace("'", "''") + "'"


class DatabaseComponent(BaseComponent):
    name = COMPONENT_DATABASE
    label = "Database"
    enable_key = None
    cli_flag = "database"
    # dropping the server packages risks the stored data
    remove_packages_on_uninstall = False

    def packages(self, ctx) -> List[str]:
        if ctx.env.database.db_type == DatabaseType.POSTGRESQL:
            if ctx.family == OSFamily.RHEL_LIKE:
                return ["postgresql-server", "postgresql"]
            return ["postgresql", "postgresql-contrib"]
        if ctx.family == OSFamily.RHEL_LIKE:
            return ["mariadb-server", "mariadb"]
        return ["mariadb-server", "mariadb-client"]

    def service_units(self, ctx) -> List[str]:
        if ctx.env.database.db_type == DatabaseType.POSTGRESQL:
            return ["postgresql"]
        return ["mariadb"]

    def data_paths(self, ctx) -> List[str]:
        if ctx.env.database.db_type == DatabaseType.POSTGRESQL:
            return ["/var/lib/pgsql"] if ctx.family == OSFamily.RHEL_LIKE else ["/var/lib/postgresql"]
        return ["/var/lib/mysql"]

    def install(self, ctx) -> None:
        db_type = ctx.env.database.db_type
        InstallerLogger.info(f"Installing database ({db_type.value}) for {ctx.family.value} family")
        if db_type == DatabaseType.POSTGRESQL:
            self._install_postgresql(ctx)
        else:
            self._install_mariadb(ctx)

    #####################################################
    # MariaDB
    #####################################################

    def _install_mariadb(self, ctx) -> None:
        env = ctx.env
        ctx.packages.install_packages(self.packages(ctx), units=self.service_units(ctx))
        ctx.services.enable_and_start("mariadb")

        root_password = env.database.root_password
        ctx.gateway.run(
            MARIADB_CLIENT,
            stdin=self.mariadb_secure_sql(root_password),
            redact=[root_password],
            note="secure root account",
        )

        if env.zabbix_server.enabled:
            InstallerLogger.info(f"Creating Zabbix database '{env.zabbix_server.db_name}'")
            ctx.gateway.run(
                MARIADB_CLIENT,
                stdin=self.mariadb_zabbix_sql(env.zabbix_server),
                redact=[env.zabbix_server.db_password],
                note="zabbix database and user",
            )

    @staticmethod
    def mariadb_secure_sql(root_password: str) -> str:
        # keep unix_socket auth for root so re-runs still connect without a password
        return "\n".join(
            [
                "ALTER USER 'root'@'localhost' IDENTIFIED VIA unix_socket "
                f"OR mysql_native_password USING PASSWORD({mysql_quote(root_password)});",
                "DROP USER IF EXISTS ''@'localhost';",
                "DROP DATABASE IF EXISTS test;",
                "DELETE FROM mysql.db WHERE Db='test' OR Db='test\\\\_%';",
                "FLUSH PRIVILEGES;",
                "",
            ]
        )

    @staticmethod
    def mariadb_zabbix_sql(settings) -> str:
        user = f"{mysql_quote(settings.db_user)}@'localhost'"
        password = mysql_quote(settings.db_password)
        return "\n".join(
            [
                f"CREATE DATABASE IF NOT EXISTS `{settings.db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_bin;",
                f"CREATE USER IF NOT EXISTS {user} IDENTIFIED BY {password};",
                f"ALTER USER {user} IDENTIFIED BY {password};",
                f"GRANT ALL PRIVILEGES ON `{settings.db_name}`.* TO {user};",
                "SET GLOBAL log_bin_trust_function_creators = 1;",
                "FLUSH PRIVILEGES;",
                "",
            ]
        )

    #####################################################
    # PostgreSQL
    #####################################################

    def _install_postgresql(self, ctx) -> None:
        env = ctx.env
        ctx.packages.install_packages(self.packages(ctx), units=self.service_units(ctx))

        if ctx.family == OSFamily.RHEL_LIKE:
            if ctx.gateway.path_exists(PGSQL_RHEL_DATA_MARKER):
                InstallerLogger.info("PostgreSQL data directory already initialized")
            else:
                ctx.gateway.run(["postgresql-setup", "--initdb"])
        ctx.services.enable_and_start("postgresql")

        root_password = env.database.root_password
        ctx.gateway.run(
            PSQL_AS_POSTGRES,
            stdin=f"ALTER USER postgres WITH PASSWORD {pg_quote(root_password)};\n",
            redact=[root_password],
            note="set postgres password",
        )

        if env.zabbix_server.enabled:
            InstallerLogger.info(f"Creating Zabbix database '{env.zabbix_server.db_name}'")
            ctx.gateway.run(
                PSQL_AS_POSTGRES,
                stdin=self.postgresql_zabbix_sql(env.zabbix_server),
                redact=[env.zabbix_server.db_password],
                note="zabbix database and role",
            )

    @staticmethod
    def postgresql_zabbix_sql(settings) -> str:
        user = settings.db_user
        password = pg_quote(settings.db_password)
        return "\n".join(
            [
                "DO $$",
                "BEGIN",
                f"  IF NOT EXISTS (SELECT FROM pg_roles WHERE rolname = {pg_quote(user)}) THEN",
                f"    CREATE ROLE {user} LOGIN PASSWORD {password};",
                "  ELSE",
                f"    ALTER ROLE {user} WITH LOGIN PASSWORD {password};",
                "  END IF;",
                "END",
                "$$;",
                f"SELECT 'CREATE DATABASE {settings.db_name} OWNER {user}' "
                f"WHERE NOT EXISTS (SELECT FROM pg_database WHERE datname = {pg_quote(settings.db_name)})\\gexec",
                f"GRANT ALL PRIVILEGES ON DATABASE {settings.db_name} TO {user};",
                "",
            ]
        )
