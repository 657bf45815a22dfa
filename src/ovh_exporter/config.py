import os
from dataclasses import dataclass

_ENV_PREFIX = "OVH_EXPORTER_"


def _env(name: "str", default: "str" = "") -> "str":
    return os.environ.get(_ENV_PREFIX + name, default)


def _env_bool(name: "str") -> "bool":
    return _env(name).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    # listen_address: format ":9162" or
    # "0.0.0.0:9162"
    listen_address: "str" = ":9162"
    telemetry_path: "str" = "/metrics"
    # collection interval in seconds
    scrape_interval: "int" = 60
    log_level: "str" = "info"
    metric_prefix: "str" = "ovh"
    keep_stale_series: "bool" = False
    log_format: "str" = "console"

    # TLS is enabled when both files are set
    tls_cert_file: "str" = ""
    tls_key_file: "str" = ""
    # basic auth is enabled when a username is set
    basic_auth_username: "str" = ""
    basic_auth_password: "str" = ""

    # endpoint URL or alias such as "ovh-eu"
    api_endpoint: "str" = ""
    api_app_key: "str" = ""
    api_app_secret: "str" = ""
    api_consumer_key: "str" = ""

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            listen_address=_env("WEB_LISTEN_ADDRESS", ":9162"),
            telemetry_path=_env("WEB_TELEMETRY_PATH", "/metrics"),
            scrape_interval=int(_env("SCRAPE_INTERVAL", "60")),
            log_level=_env("LOG_LEVEL", "info"),
            metric_prefix=_env("METRIC_PREFIX", "ovh"),
            keep_stale_series=_env_bool("KEEP_STALE_SERIES"),
            log_format=_env("LOG_FORMAT", "console"),
            tls_cert_file=_env("WEB_TLS_CERT_FILE"),
            tls_key_file=_env("WEB_TLS_KEY_FILE"),
            basic_auth_username=_env("WEB_BASIC_AUTH_USERNAME"),
            basic_auth_password=_env("WEB_BASIC_AUTH_PASSWORD"),
            api_endpoint=_env("API_ENDPOINT"),
            api_app_key=_env("API_APP_KEY"),
            api_app_secret=_env("API_APP_SECRET"),
            api_consumer_key=_env("API_CONSUMER_KEY"),
        )

    @property
    def missing_credentials(self) -> "list[str]":
        """
        names of the required API settings that are not set.
        """
        required = {
            "api_endpoint": self.api_endpoint,
            "api_app_key": self.api_app_key,
            "api_app_secret": self.api_app_secret,
            "api_consumer_key": self.api_consumer_key,
        }
        return [name for name, value in required.items() if not value]

    @property
    def basic_auth(self) -> "tuple[str, str] | None":
        if not self.basic_auth_username:
            return None
        return (self.basic_auth_username, self.basic_auth_password)
