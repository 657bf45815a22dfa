import pytest

from conftest import FakeClient
from ovh_exporter import __main__ as entrypoint
from ovh_exporter.config import Config


def make_config() -> "Config":
    return Config(
        listen_address=":0",
        api_endpoint="ovh-eu",
        api_app_key="ak",
        api_app_secret="as",
        api_consumer_key="ck",
    )


class TestParseListenAddress:
    def test_port_only(self) -> "None":
        assert entrypoint._parse_listen_address(":9162") == ("0.0.0.0", 9162)

    def test_host_and_port(self) -> "None":
        assert entrypoint._parse_listen_address("127.0.0.1:8080") == (
            "127.0.0.1",
            8080,
        )


class TestRun:
    @pytest.mark.asyncio
    async def test_discovery_failure_exits_before_serving(
        self,
        monkeypatch: "pytest.MonkeyPatch",
    ) -> "None":
        client = FakeClient(
            {
                "/cloud/project": ["p1", "p2"],
                "/cloud/project/p1": RuntimeError("boom"),
            }
        )
        served: "list[object]" = []
        monkeypatch.setattr(entrypoint, "OVHAPIClient", lambda **kwargs: client)
        monkeypatch.setattr(
            entrypoint, "start_server", lambda *args, **kwargs: served.append(args)
        )

        with pytest.raises(SystemExit) as exc_info:
            await entrypoint._run(make_config())

        assert exc_info.value.code == 1
        assert served == []
        assert client.closed is True
        assert not any(call.endswith("/usage/current") for call in client.calls)

    @pytest.mark.asyncio
    async def test_unknown_endpoint_alias_exits(self) -> "None":
        config = make_config()
        config.api_endpoint = "ovh-mars"

        with pytest.raises(SystemExit):
            await entrypoint._run(config)

    @pytest.mark.asyncio
    async def test_invalid_listen_address_exits(self) -> "None":
        config = make_config()
        config.listen_address = "localhost"

        with pytest.raises(SystemExit):
            await entrypoint._run(config)
