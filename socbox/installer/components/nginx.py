#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Nginx reverse proxy in front of the Zabbix frontend and Wazuh dashboard."""

import os
from typing import List, Tuple

from socbox.installer.configs.constants.config_env_var_keys import KEY_ENV_NGINX_ENABLED
from socbox.installer.configs.constants.constants import (
    COMPONENT_NGINX,
    HTTP_PORT,
    HTTPS_PORT,
    NGINX_CONF_D_DIR,
    NGINX_SITE_NAME,
    NGINX_SITES_AVAILABLE_DIR,
    NGINX_SITES_ENABLED_DIR,
)
from socbox.installer.configs.constants.enums import OSFamily
from socbox.installer.utils.logger_utils import InstallerLogger

from .base import BaseComponent, enable_services, public_url

PROXY_HEADERS = [
    "proxy_set_header Host $host;",
    "proxy_set_header X-Real-IP $remote_addr;",
    "proxy_set_header X-Forwarded-For $proxy_add_x_forwarded_for;",
    "proxy_set_header X-Forwarded-Proto $scheme;",
]


def _location(path: str, upstream: str, extra: Tuple[str, ...] = ()) -> List[str]:
    lines = [f"    location {path} {{", f"        proxy_pass {upstream};"]
    lines += [f"        {line}" for line in PROXY_HEADERS + list(extra)]
    lines.append("    }")
    return lines


def render_site(env, tls: bool) -> str:
    """Server blocks proxying /zabbix/ to Apache and / to the Wazuh dashboard."""
    server_name = env.server_domain or env.server_hostname or "_"

    locations = []
    if env.zabbix_server.enabled:
        locations += _location(
            "/zabbix/", f"http://127.0.0.1:{env.zabbix_server.frontend_port}/zabbix/"
        )
    if env.wazuh_manager.enabled:
        locations += _location(
            "/",
            f"https://127.0.0.1:{env.wazuh_manager.dashboard_port}/",
            ("proxy_ssl_verify off;", "proxy_read_timeout 300;"),
        )
    else:
        locations += ["    location / {", "        return 404;", "    }"]

    lines = ["# SoC-in-a-Box reverse proxy (managed by socbox)", ""]
    if tls:
        lines += [
            "server {",
            f"    listen {HTTP_PORT};",
            f"    listen [::]:{HTTP_PORT};",
            f"    server_name {server_name};",
            "    return 301 https://$host$request_uri;",
            "}",
            "",
            "server {",
            f"    listen {HTTPS_PORT} ssl;",
            f"    listen [::]:{HTTPS_PORT} ssl;",
            f"    server_name {server_name};",
            f"    ssl_certificate {env.nginx.tls_cert_path};",
            f"    ssl_certificate_key {env.nginx.tls_key_path};",
            "    ssl_protocols TLSv1.2 TLSv1.3;",
            "    ssl_prefer_server_ciphers on;",
        ]
    else:
        lines += [
            "server {",
            f"    listen {HTTP_PORT};",
            f"    listen [::]:{HTTP_PORT};",
            f"    server_name {server_name};",
        ]
    lines += ["    client_max_body_size 64m;", ""] + locations + ["}", ""]
    return "\n".join(lines)


class NginxComponent(BaseComponent):
    name = COMPONENT_NGINX
    label = "Nginx Reverse Proxy"
    enable_key = KEY_ENV_NGINX_ENABLED
    cli_flag = "nginx"

    def packages(self, ctx) -> List[str]:
        return ["nginx"]

    def removal_packages(self, ctx) -> List[str]:
        if ctx.family == OSFamily.DEBIAN_LIKE:
            return ["nginx", "nginx-common"]
        return ["nginx"]

    def service_units(self, ctx) -> List[str]:
        return ["nginx"]

    def site_path(self, ctx) -> str:
        if ctx.family == OSFamily.RHEL_LIKE:
            return os.path.join(NGINX_CONF_D_DIR, NGINX_SITE_NAME)
        return os.path.join(NGINX_SITES_AVAILABLE_DIR, NGINX_SITE_NAME)

    def owned_config_paths(self, ctx) -> List[str]:
        if ctx.family == OSFamily.RHEL_LIKE:
            return [self.site_path(ctx)]
        return [os.path.join(NGINX_SITES_ENABLED_DIR, NGINX_SITE_NAME), self.site_path(ctx)]

    def access_endpoints(self, env) -> List[Tuple[str, str]]:
        return [("Reverse Proxy", public_url(env, "/"))]

    def tls_ready(self, ctx) -> bool:
        nginx = ctx.env.nginx
        if not nginx.enable_tls:
            return False
        if not (nginx.tls_cert_path and nginx.tls_key_path):
            self.degrade("ENABLE_TLS is set but TLS_CERT_PATH/TLS_KEY_PATH are not; serving plain HTTP")
            return False
        missing = [p for p in (nginx.tls_cert_path, nginx.tls_key_path) if not ctx.gateway.path_exists(p)]
        if missing:
            self.degrade(f"TLS certificate files not found ({', '.join(missing)}); serving plain HTTP")
            return False
        return True

    def install(self, ctx) -> None:
        ctx.packages.install_packages(self.packages(ctx), units=self.service_units(ctx))

        site = self.site_path(ctx)
        ctx.gateway.write_file(site, render_site(ctx.env, self.tls_ready(ctx)), mode=0o644)

        if ctx.family == OSFamily.DEBIAN_LIKE:
            enabled = os.path.join(NGINX_SITES_ENABLED_DIR, NGINX_SITE_NAME)
            if not ctx.gateway.path_exists(enabled):
                ctx.gateway.run(["ln", "-sf", site, enabled])
        elif ctx.gateway.has_command("setsebool"):
            with self.best_effort("SELinux proxy permission"):
                ctx.gateway.run(["setsebool", "-P", "httpd_can_network_connect", "1"])

        if ctx.env.nginx.enable_tls and ctx.env.nginx.letsencrypt_email:
            InstallerLogger.info("Certificate issuance is not automated; provide TLS_CERT_PATH and TLS_KEY_PATH")

        ctx.gateway.run(["nginx", "-t"], note="validate configuration")
        enable_services(ctx, self.service_units(ctx), restart=True)
