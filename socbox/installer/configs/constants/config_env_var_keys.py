#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Environment variable keys
"""

# site identity
KEY_ENV_SITE_NAME = "SITE_NAME"  # Short name of the site being provisioned
KEY_ENV_ENVIRONMENT = "ENVIRONMENT"  # production, staging, lab, ...
KEY_ENV_SERVER_HOSTNAME = "SERVER_HOSTNAME"  # Hostname of the SOC server
KEY_ENV_SERVER_DOMAIN = "SERVER_DOMAIN"  # Public name used in access URLs (defaults to SERVER_HOSTNAME)
KEY_ENV_SERVER_IP = "SERVER_IP"  # Address Wazuh nodes bind to (defaults to 127.0.0.1)
KEY_ENV_SOC_IP = "SOC_IP"  # Address of the SOC server as seen from clients

# database
KEY_ENV_DB_TYPE = "DB_TYPE"  # mariadb|mysql|postgresql|postgres
KEY_ENV_DB_ROOT_PASSWORD = "DB_ROOT_PASSWORD"
KEY_ENV_DB_HOST = "DB_HOST"
KEY_ENV_DB_PORT = "DB_PORT"

# wazuh manager
KEY_ENV_WAZUH_ENABLED = "WAZUH_ENABLED"
KEY_ENV_WAZUH_API_USER = "WAZUH_API_USER"
KEY_ENV_WAZUH_API_PASSWORD = "WAZUH_API_PASSWORD"
KEY_ENV_WAZUH_INDEXER_ADMIN_PASSWORD = "WAZUH_INDEXER_ADMIN_PASSWORD"
KEY_ENV_WAZUH_LISTEN_PORT = "WAZUH_LISTEN_PORT"  # agent event port
KEY_ENV_WAZUH_REGISTRATION_PORT = "WAZUH_REGISTRATION_PORT"  # agent enrollment port
KEY_ENV_WAZUH_API_PORT = "WAZUH_API_PORT"
KEY_ENV_WAZUH_INDEXER_PORT = "WAZUH_INDEXER_PORT"
KEY_ENV_WAZUH_DASHBOARD_PORT = "WAZUH_DASHBOARD_PORT"

# zabbix server
KEY_ENV_ZABBIX_ENABLED = "ZABBIX_ENABLED"
KEY_ENV_ZABBIX_DB_NAME = "ZABBIX_DB_NAME"
KEY_ENV_ZABBIX_DB_USER = "ZABBIX_DB_USER"
KEY_ENV_ZABBIX_DB_PASSWORD = "ZABBIX_DB_PASSWORD"
KEY_ENV_ZABBIX_TIMEZONE = "ZABBIX_TIMEZONE"  # PHP date.timezone for the frontend
KEY_ENV_ZABBIX_SERVER_PORT = "ZABBIX_SERVER_PORT"
KEY_ENV_ZABBIX_FRONTEND_PORT = "ZABBIX_FRONTEND_PORT"  # Apache port when fronted by nginx

# nginx
KEY_ENV_NGINX_ENABLED = "NGINX_ENABLED"
KEY_ENV_ENABLE_TLS = "ENABLE_TLS"
KEY_ENV_LETSENCRYPT_EMAIL = "LETSENCRYPT_EMAIL"
KEY_ENV_TLS_CERT_PATH = "TLS_CERT_PATH"
KEY_ENV_TLS_KEY_PATH = "TLS_KEY_PATH"

# firewall
KEY_ENV_ENABLE_FIREWALL = "ENABLE_FIREWALL"

# wazuh agent (client)
KEY_ENV_WAZUH_MANAGER = "WAZUH_MANAGER"  # defaults to SOC_IP
KEY_ENV_WAZUH_PORT = "WAZUH_PORT"
KEY_ENV_WAZUH_PROTOCOL = "WAZUH_PROTOCOL"  # tcp|udp
KEY_ENV_WAZUH_AGENT_GROUP = "WAZUH_AGENT_GROUP"
KEY_ENV_WAZUH_REGISTRATION_PASSWORD = "WAZUH_REGISTRATION_PASSWORD"

# zabbix agent (client)
KEY_ENV_ZABBIX_SERVER = "ZABBIX_SERVER"  # defaults to SOC_IP
KEY_ENV_ZABBIX_SERVER_ACTIVE = "ZABBIX_SERVER_ACTIVE"  # defaults to ZABBIX_SERVER
KEY_ENV_ZABBIX_HOST_METADATA = "ZABBIX_HOST_METADATA"
KEY_ENV_ZABBIX_HOST_GROUP = "ZABBIX_HOST_GROUP"
KEY_ENV_ZABBIX_LISTEN_PORT = "ZABBIX_LISTEN_PORT"
KEY_ENV_ZABBIX_ENABLE_REMOTE_COMMANDS = "ZABBIX_ENABLE_REMOTE_COMMANDS"  # 0|1

# clamav (client)
KEY_ENV_CLAMAV_ENABLED = "CLAMAV_ENABLED"
KEY_ENV_CLAMAV_SCAN_PATHS = "CLAMAV_SCAN_PATHS"  # comma-separated
KEY_ENV_CLAMAV_SCHEDULE = "CLAMAV_SCHEDULE"  # cron expression
KEY_ENV_CLAMAV_LOG_FILE = "CLAMAV_LOG_FILE"

# boolean component switches (true|false, empty means false)
ENV_FLAG_KEYS = (
    KEY_ENV_WAZUH_ENABLED,
    KEY_ENV_ZABBIX_ENABLED,
    KEY_ENV_NGINX_ENABLED,
    KEY_ENV_ENABLE_TLS,
    KEY_ENV_ENABLE_FIREWALL,
    KEY_ENV_CLAMAV_ENABLED,
)
