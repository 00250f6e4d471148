#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Centralized constants for the provisioning engine and component installers.

These constants replace magic strings and numbers embedded in component code
so that names, ports, paths and placeholder values stay consistent between
installation, removal and the run summary.
"""

from socbox.socbox_constants import InstallerRole
from socbox.installer.configs.constants.enums import OSFamily
from socbox.installer.configs.constants.config_env_var_keys import (
    KEY_ENV_DB_ROOT_PASSWORD,
    KEY_ENV_SERVER_HOSTNAME,
    KEY_ENV_SITE_NAME,
    KEY_ENV_SOC_IP,
    KEY_ENV_WAZUH_API_PASSWORD,
    KEY_ENV_WAZUH_INDEXER_ADMIN_PASSWORD,
    KEY_ENV_WAZUH_REGISTRATION_PASSWORD,
    KEY_ENV_ZABBIX_DB_PASSWORD,
)

# Required keys per role, in the order they are checked
REQUIRED_ENV_KEYS = {
    InstallerRole.SERVER: (KEY_ENV_SITE_NAME, KEY_ENV_SERVER_HOSTNAME, KEY_ENV_DB_ROOT_PASSWORD),
    InstallerRole.CLIENT: (KEY_ENV_SITE_NAME, KEY_ENV_SOC_IP),
}

# Placeholder values shipped in the environment templates; a run refuses to
# use any of these for a credential it consumes
PLACEHOLDER_DB_ROOT_PASSWORD = "CHANGE_ME_ROOT"
PLACEHOLDER_ZABBIX_DB_PASSWORD = "CHANGE_ME_ZABBIX_DB"
PLACEHOLDER_WAZUH_API_PASSWORD = "CHANGE_ME_WAZUH_API"
PLACEHOLDER_WAZUH_INDEXER_PASSWORD = "CHANGE_ME_WAZUH_INDEXER"
PLACEHOLDER_WAZUH_REGISTRATION_PASSWORD = "CHANGE_ME_REGISTRATION"

CREDENTIAL_PLACEHOLDERS = {
    KEY_ENV_DB_ROOT_PASSWORD: PLACEHOLDER_DB_ROOT_PASSWORD,
    KEY_ENV_ZABBIX_DB_PASSWORD: PLACEHOLDER_ZABBIX_DB_PASSWORD,
    KEY_ENV_WAZUH_API_PASSWORD: PLACEHOLDER_WAZUH_API_PASSWORD,
    KEY_ENV_WAZUH_INDEXER_ADMIN_PASSWORD: PLACEHOLDER_WAZUH_INDEXER_PASSWORD,
    KEY_ENV_WAZUH_REGISTRATION_PASSWORD: PLACEHOLDER_WAZUH_REGISTRATION_PASSWORD,
}

# Component names (registry keys)
COMPONENT_DATABASE = "database"
COMPONENT_WAZUH_MANAGER = "wazuh-manager"
COMPONENT_ZABBIX_SERVER = "zabbix-server"
COMPONENT_NGINX = "nginx"
COMPONENT_FIREWALL = "firewall"
COMPONENT_WAZUH_AGENT = "wazuh-agent"
COMPONENT_ZABBIX_AGENT = "zabbix-agent"
COMPONENT_CLAMAV = "clamav"

# Selection keyword for the uninstaller
SELECT_ALL = "all"

# Product versions
WAZUH_VERSION = "4.7"
WAZUH_REPO_MAJOR = "4.x"
ZABBIX_VERSION = "7.0"

# Default ports
DEFAULT_WAZUH_LISTEN_PORT = 1514
DEFAULT_WAZUH_REGISTRATION_PORT = 1515
DEFAULT_WAZUH_API_PORT = 55000
DEFAULT_WAZUH_INDEXER_PORT = 9200
DEFAULT_WAZUH_DASHBOARD_PORT = 5601
DEFAULT_ZABBIX_SERVER_PORT = 10051
DEFAULT_ZABBIX_AGENT_PORT = 10050
DEFAULT_ZABBIX_FRONTEND_PORT = 8080
SSH_PORT = 22
HTTP_PORT = 80
HTTPS_PORT = 443

# Working directory for downloaded installers and generated inputs
SOCBOX_WORK_DIR = "/var/lib/socbox"

# Wazuh
WAZUH_INSTALL_SCRIPT_URL = f"https://packages.wazuh.com/{WAZUH_VERSION}/wazuh-install.sh"
WAZUH_GPG_KEY_URL = "https://packages.wazuh.com/key/GPG-KEY-WAZUH"
WAZUH_APT_REPO_URL = f"https://packages.wazuh.com/{WAZUH_REPO_MAJOR}/apt/"
WAZUH_YUM_REPO_URL = f"https://packages.wazuh.com/{WAZUH_REPO_MAJOR}/yum/"
WAZUH_WORK_DIR = f"{SOCBOX_WORK_DIR}/wazuh"
WAZUH_CONFIG_BUNDLE = f"{WAZUH_WORK_DIR}/wazuh-install-files.tar"
WAZUH_OSSEC_DIR = "/var/ossec"
WAZUH_OSSEC_CONF = f"{WAZUH_OSSEC_DIR}/etc/ossec.conf"
WAZUH_CLIENT_KEYS = f"{WAZUH_OSSEC_DIR}/etc/client.keys"
WAZUH_AGENT_AUTH_BIN = f"{WAZUH_OSSEC_DIR}/bin/agent-auth"
WAZUH_API_USERS_FILE = f"{WAZUH_OSSEC_DIR}/api/configuration/security/user_wui.yml"
WAZUH_INDEXER_DATA_DIR = "/var/lib/wazuh-indexer"
WAZUH_KEYRING = "/usr/share/keyrings/wazuh-archive-keyring.gpg"
WAZUH_APT_SOURCE_LIST = "/etc/apt/sources.list.d/wazuh.list"
WAZUH_YUM_REPO_FILE = "/etc/yum.repos.d/wazuh.repo"

# Zabbix
ZABBIX_SERVER_CONF = "/etc/zabbix/zabbix_server.conf"
ZABBIX_AGENT_CONF = "/etc/zabbix/zabbix_agentd.conf"
ZABBIX_FRONTEND_CONF = "/etc/zabbix/web/zabbix.conf.php"
ZABBIX_SQL_SCRIPTS_DIR = "/usr/share/zabbix-sql-scripts"
ZABBIX_RELEASE_PACKAGE = "zabbix-release"
ZABBIX_APT_RELEASE_URL = (
    "https://repo.zabbix.com/zabbix/{version}/{distro}/pool/main/z/zabbix-release/"
    "zabbix-release_latest+{distro}{release}_all.deb"
)
ZABBIX_RPM_RELEASE_URL = (
    "https://repo.zabbix.com/zabbix/{version}/rhel/{major}/x86_64/zabbix-release-latest.el{major}.noarch.rpm"
)
ZABBIX_PHP_TIMEZONE_FILES = (
    "/etc/zabbix/apache.conf",
    "/etc/apache2/conf-available/zabbix.conf",
    "/etc/httpd/conf.d/zabbix.conf",
    "/etc/php-fpm.d/zabbix.conf",
)
APACHE_PORTS_FILES = (
    "/etc/apache2/ports.conf",
    "/etc/httpd/conf/httpd.conf",
)

# Nginx
NGINX_SITE_NAME = "soc-proxy.conf"
NGINX_SITES_AVAILABLE_DIR = "/etc/nginx/sites-available"
NGINX_SITES_ENABLED_DIR = "/etc/nginx/sites-enabled"
NGINX_CONF_D_DIR = "/etc/nginx/conf.d"

# ClamAV
CLAMAV_CRON_FILE = "/etc/cron.d/clamav-scan"
CLAMAV_DEFINITIONS_DIR = "/var/lib/clamav"
# files carrying an "Example" guard line that must be commented out;
# Debian generates its freshclam.conf through debconf without one
CLAMAV_CONFIG_FILES = {
    OSFamily.DEBIAN_LIKE: ("/etc/clamav/freshclam.conf",),
    OSFamily.RHEL_LIKE: ("/etc/freshclam.conf", "/etc/clamd.d/scan.conf"),
}
CLAMAV_SCAN_SOCKET = "/run/clamd.scan/clamd.sock"
DEFAULT_CLAMAV_SCAN_PATHS = ("/home", "/srv")
DEFAULT_CLAMAV_SCHEDULE = "0 2 * * *"
DEFAULT_CLAMAV_LOG_FILE = "/var/log/clamav/scan.log"

# Product default credentials that remain after installation and must be rotated
DEFAULT_CREDENTIAL_REMINDERS = {
    COMPONENT_WAZUH_MANAGER: (
        "Wazuh dashboard 'admin' password is stored in "
        f"{WAZUH_CONFIG_BUNDLE} (wazuh-passwords.txt)"
    ),
    COMPONENT_ZABBIX_SERVER: "Zabbix frontend login defaults to Admin / zabbix",
}
