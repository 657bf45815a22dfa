import argparse

from ovh_exporter import __version__
from ovh_exporter.config import Config


def parse_args(argv: "list[str] | None" = None) -> "Config":
    config = Config.from_env()

    parser = argparse.ArgumentParser(
        prog="ovh-exporter",
        description="Prometheus OVH API Exporter",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--web.listen-address",
        dest="listen_address",
        default=config.listen_address,
        help="Address to listen on (default: :9162)",
    )
    parser.add_argument(
        "--web.telemetry-path",
        dest="telemetry_path",
        default=config.telemetry_path,
        help="Path under which to expose metrics (default: /metrics)",
    )
    parser.add_argument(
        "--api-endpoint",
        dest="api_endpoint",
        default=config.api_endpoint,
        help=(
            "OVH API endpoint. Can be either a URL or one of these aliases: "
            "ovh-eu, ovh-ca, ovh-us, kimsufi-eu, kimsufi-ca, soyoustart-eu, "
            "soyoustart-ca"
        ),
    )
    parser.add_argument(
        "--api-app-key",
        dest="api_app_key",
        default=config.api_app_key,
        help="OVH API app key",
    )
    parser.add_argument(
        "--api-app-secret",
        dest="api_app_secret",
        default=config.api_app_secret,
        help="OVH API app secret",
    )
    parser.add_argument(
        "--api-consumer-key",
        dest="api_consumer_key",
        default=config.api_consumer_key,
        help="OVH API consumer key",
    )
    parser.add_argument(
        "--metric-prefix",
        dest="metric_prefix",
        default=config.metric_prefix,
        help='Prefix for every metric name (default: "ovh")',
    )
    parser.add_argument(
        "--scrape.interval",
        dest="scrape_interval",
        type=int,
        default=config.scrape_interval,
        help="Collection interval in seconds (default: 60)",
    )
    parser.add_argument(
        "--collector.keep-stale-series",
        dest="keep_stale_series",
        action="store_true",
        default=config.keep_stale_series,
        help="Keep the last value of buckets missing from the usage data",
    )
    parser.add_argument(
        "--log.level",
        dest="log_level",
        default=config.log_level,
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: info)",
    )

    parser.add_argument(
        "--log.format",
        dest="log_format",
        default=config.log_format,
        choices=["console", "logfmt", "json"],
        help="Output format of log messages (default: console)",
    )
    parser.add_argument(
        "--web.tls-cert-file",
        dest="tls_cert_file",
        default=config.tls_cert_file,
        help="Certificate file to serve metrics over TLS",
    )
    parser.add_argument(
        "--web.tls-key-file",
        dest="tls_key_file",
        default=config.tls_key_file,
        help="Private key file of the TLS certificate",
    )
    parser.add_argument(
        "--web.basic-auth-username",
        dest="basic_auth_username",
        default=config.basic_auth_username,
        help="Username required to access the web endpoints",
    )
    parser.add_argument(
        "--web.basic-auth-password",
        dest="basic_auth_password",
        default=config.basic_auth_password,
        help="Password required to access the web endpoints",
    )

    args = parser.parse_args(argv)
    config.listen_address = args.listen_address
    config.telemetry_path = args.telemetry_path
    config.api_endpoint = args.api_endpoint
    config.api_app_key = args.api_app_key
    config.api_app_secret = args.api_app_secret
    config.api_consumer_key = args.api_consumer_key
    config.metric_prefix = args.metric_prefix
    config.scrape_interval = args.scrape_interval
    config.keep_stale_series = args.keep_stale_series
    config.log_level = args.log_level
    config.log_format = args.log_format
    config.tls_cert_file = args.tls_cert_file
    config.tls_key_file = args.tls_key_file
    config.basic_auth_username = args.basic_auth_username
    config.basic_auth_password = args.basic_auth_password

    missing = config.missing_credentials
    if missing:
        flags = ", ".join("--" + name.replace("_", "-") for name in missing)
        parser.error(f"the following settings are required: {flags}")

    if bool(config.tls_cert_file) != bool(config.tls_key_file):
        parser.error(
            "--web.tls-cert-file and --web.tls-key-file must be set together"
        )

    return config
