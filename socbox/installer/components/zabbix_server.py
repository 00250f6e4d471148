#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Zabbix server with the Apache-hosted PHP frontend."""

import os
import re
from functools import partial
from typing import List, Tuple

from socbox.installer.configs.constants.config_env_var_keys import KEY_ENV_ZABBIX_ENABLED
from socbox.installer.configs.constants.constants import (
    APACHE_PORTS_FILES,
    COMPONENT_DATABASE,
    COMPONENT_ZABBIX_SERVER,
    HTTP_PORT,
    ZABBIX_FRONTEND_CONF,
    ZABBIX_PHP_TIMEZONE_FILES,
    ZABBIX_SERVER_CONF,
    ZABBIX_SQL_SCRIPTS_DIR,
)
from socbox.installer.configs.constants.enums import DatabaseType, OSFamily
from socbox.installer.utils.config_file_utils import apply_directives, backup_suffix
from socbox.installer.utils.logger_utils import InstallerLogger

from .base import BaseComponent, enable_services, public_url
from .database import MARIADB_CLIENT
from .zabbix_release import install_release_package

SCHEMA_MARKER_TABLE = "users"


def set_php_timezone(text: str, timezone: str) -> str:
    """Set date.timezone in an Apache (php_value) or php-fpm (php_value[...]) config."""
    text = re.sub(
        r"^[ \t]*[#;]?[ \t]*php_value[ \t]+date\.timezone[ \t]+.*$",
        lambda m: re.match(r"^[ \t]*", m.group(0)).group(0) + f"php_value date.timezone {timezone}",
        text,
        flags=re.MULTILINE,
    )
    return re.sub(
        r"^[ \t]*[#;]?[ \t]*php_value\[date\.timezone\][ \t]*=.*$",
        f"php_value[date.timezone] = {timezone}",
        text,
        flags=re.MULTILINE,
    )


def set_listen_port(text: str, old_port: int, new_port: int) -> str:
    return re.sub(rf"^Listen[ \t]+{old_port}[ \t]*$", f"Listen {new_port}", text, flags=re.MULTILINE)


class ZabbixServerComponent(BaseComponent):
    name = COMPONENT_ZABBIX_SERVER
    label = "Zabbix Server"
    enable_key = KEY_ENV_ZABBIX_ENABLED
    depends_on = (COMPONENT_DATABASE,)
    cli_flag = "zabbix"

    def packages(self, ctx) -> List[str]:
        db = "pgsql" if ctx.env.database.db_type == DatabaseType.POSTGRESQL else "mysql"
        if ctx.family == OSFamily.RHEL_LIKE:
            frontend = [f"zabbix-web-{db}", "zabbix-apache-conf", "zabbix-selinux-policy"]
        else:
            frontend = ["zabbix-frontend-php", "zabbix-apache-conf"]
            if db == "pgsql":
                frontend.append("php-pgsql")
        return [f"zabbix-server-{db}"] + frontend + ["zabbix-sql-scripts", "zabbix-agent"]

    def service_units(self, ctx) -> List[str]:
        return ["zabbix-server", "zabbix-agent"]

    def web_units(self, ctx) -> List[str]:
        if ctx.family == OSFamily.RHEL_LIKE:
            return ["httpd", "php-fpm"]
        return ["apache2"]

    def owned_config_paths(self, ctx) -> List[str]:
        return [ZABBIX_FRONTEND_CONF]

    def access_endpoints(self, env) -> List[Tuple[str, str]]:
        return [("Zabbix Frontend", public_url(env, "/zabbix"))]

    def install(self, ctx) -> None:
        with self.best_effort("release repository"):
            install_release_package(ctx)

        ctx.packages.install_packages(
            self.packages(ctx), units=self.service_units(ctx) + self.web_units(ctx)
        )

        with self.best_effort("schema import"):
            self._import_schema(ctx)

        self._configure_server(ctx)
        with self.best_effort("PHP timezone"):
            self._configure_timezone(ctx)
        self._configure_frontend(ctx)
        if ctx.env.nginx.enabled:
            with self.best_effort("Apache listen port"):
                self._move_apache_port(ctx)

        enable_services(ctx, self.web_units(ctx) + self.service_units(ctx), restart=True)

    #####################################################
    # database schema
    #####################################################

    def schema_file(self, ctx) -> str:
        db = "postgresql" if ctx.env.database.db_type == DatabaseType.POSTGRESQL else "mysql"
        return os.path.join(ZABBIX_SQL_SCRIPTS_DIR, db, "server.sql.gz")

    def schema_imported(self, ctx) -> bool:
        settings = ctx.env.zabbix_server
        query = (
            "SELECT COUNT(*) FROM information_schema.tables "
            f"WHERE table_schema='{settings.db_name}' AND table_name='{SCHEMA_MARKER_TABLE}'"
        )
        if ctx.env.database.db_type == DatabaseType.POSTGRESQL:
            query = (
                "SELECT COUNT(*) FROM information_schema.tables "
                f"WHERE table_catalog='{settings.db_name}' AND table_name='{SCHEMA_MARKER_TABLE}'"
            )
            command = ["runuser", "-u", "postgres", "--", "psql", "-d", settings.db_name, "-tAc", query]
        else:
            command = MARIADB_CLIENT + ["--skip-column-names", "-e", query]
        returncode, output = ctx.gateway.probe(command)
        return returncode == 0 and any(line.strip() not in ("", "0") for line in output)

    def _import_schema(self, ctx) -> None:
        settings = ctx.env.zabbix_server
        if self.schema_imported(ctx):
            InstallerLogger.info(f"Zabbix schema already present in '{settings.db_name}'")
            return

        schema = self.schema_file(ctx)
        if not ctx.gateway.path_exists(schema) and not ctx.simulated:
            self.degrade(f"schema file not found: {schema}")
            return

        InstallerLogger.info("Importing Zabbix database schema")
        if ctx.env.database.db_type == DatabaseType.POSTGRESQL:
            client = f"psql -h localhost -q -v ON_ERROR_STOP=1 -U {settings.db_user} -d {settings.db_name}"
            ctx.gateway.run(
                ["bash", "-o", "pipefail", "-c", f"zcat {schema} | {client}"],
                env={"PGPASSWORD": settings.db_password},
                redact=[settings.db_password],
            )
        else:
            client = f"mysql --default-character-set=utf8mb4 --user={settings.db_user} {settings.db_name}"
            ctx.gateway.run(
                ["bash", "-o", "pipefail", "-c", f"zcat {schema} | {client}"],
                env={"MYSQL_PWD": settings.db_password},
                redact=[settings.db_password],
            )
            ctx.gateway.run(
                MARIADB_CLIENT + ["-e", "SET GLOBAL log_bin_trust_function_creators = 0;"],
                note="restore binlog function policy",
            )

    #####################################################
    # configuration files
    #####################################################

    def _configure_server(self, ctx) -> None:
        settings = ctx.env.zabbix_server
        apply_directives(
            ctx.gateway,
            ZABBIX_SERVER_CONF,
            {
                "DBHost": "localhost",
                "DBName": settings.db_name,
                "DBUser": settings.db_user,
                "DBPassword": settings.db_password,
                "ListenPort": str(settings.server_port),
            },
            backup=backup_suffix(),
        )

    def _configure_timezone(self, ctx) -> None:
        candidates = [path for path in ZABBIX_PHP_TIMEZONE_FILES if ctx.gateway.path_exists(path)]
        if not candidates:
            # laid down by zabbix-apache-conf (debian) or zabbix-web (rhel)
            if ctx.family == OSFamily.RHEL_LIKE:
                candidates = [ZABBIX_PHP_TIMEZONE_FILES[-1]]
            else:
                candidates = [ZABBIX_PHP_TIMEZONE_FILES[0]]
        for path in candidates:
            ctx.gateway.edit_file(path, partial(set_php_timezone, timezone=ctx.env.zabbix_server.timezone))

    def frontend_config(self, ctx) -> str:
        env = ctx.env
        settings = env.zabbix_server
        postgres = env.database.db_type == DatabaseType.POSTGRESQL

        def php_str(value) -> str:
            return "'" + str(value).replace("\\", "\\\\").replace("'", "\\'") + "'"

        lines = [
            "<?php",
            f"$DB['TYPE']     = {php_str('POSTGRESQL' if postgres else 'MYSQL')};",
            f"$DB['SERVER']   = {php_str('localhost')};",
            "$DB['PORT']     = '0';",
            f"$DB['DATABASE'] = {php_str(settings.db_name)};",
            f"$DB['USER']     = {php_str(settings.db_user)};",
            f"$DB['PASSWORD'] = {php_str(settings.db_password)};",
            "$DB['SCHEMA']   = '';",
            "$DB['ENCRYPTION'] = false;",
            "$DB['KEY_FILE'] = '';",
            "$DB['CERT_FILE'] = '';",
            "$DB['CA_FILE'] = '';",
            "$DB['VERIFY_HOST'] = false;",
            "$DB['CIPHER_LIST'] = '';",
            "$DB['VAULT_URL'] = '';",
            "$DB['VAULT_DB_PATH'] = '';",
            "$DB['VAULT_TOKEN'] = '';",
            "$DB['DOUBLE_IEEE754'] = true;",
            f"$ZBX_SERVER      = {php_str('localhost')};",
            f"$ZBX_SERVER_PORT = {php_str(settings.server_port)};",
            f"$ZBX_SERVER_NAME = {php_str(env.site_name or env.server_hostname or 'Zabbix')};",
            "$IMAGE_FORMAT_DEFAULT = IMAGE_FORMAT_PNG;",
            "",
        ]
        return "\n".join(lines)

    def _configure_frontend(self, ctx) -> None:
        if ctx.gateway.path_exists(ZABBIX_FRONTEND_CONF):
            InstallerLogger.info(f"{ZABBIX_FRONTEND_CONF} exists; leaving it unchanged")
            return
        web_user = "apache" if ctx.family == OSFamily.RHEL_LIKE else "www-data"
        ctx.gateway.write_file(
            ZABBIX_FRONTEND_CONF,
            self.frontend_config(ctx),
            mode=0o640,
            owner=f"{web_user}:{web_user}",
            redact=[ctx.env.zabbix_server.db_password],
        )

    def _move_apache_port(self, ctx) -> None:
        """Free port 80 for Nginx by moving Apache to the frontend port."""
        path = APACHE_PORTS_FILES[1] if ctx.family == OSFamily.RHEL_LIKE else APACHE_PORTS_FILES[0]
        ctx.gateway.edit_file(
            path,
            partial(set_listen_port, old_port=HTTP_PORT, new_port=ctx.env.zabbix_server.frontend_port),
            backup_suffix=backup_suffix(),
        )
