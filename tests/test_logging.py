import json

import pytest
import structlog

from ovh_exporter.logging import build_processors


def render(fmt: "str", **event: "object") -> "str":
    renderer = build_processors(fmt)[-1]
    return renderer(None, "info", dict(event))


class TestBuildProcessors:
    def test_json_format(self) -> "None":
        line = render("json", event="collection_cycle_end", level="info")
        assert json.loads(line) == {"event": "collection_cycle_end", "level": "info"}

    def test_logfmt_format(self) -> "None":
        line = render(
            "logfmt", event="project_discovered", level="info", project_id="p1"
        )
        assert line == "level=info event=project_discovered project_id=p1"

    def test_console_format(self) -> "None":
        processors = build_processors("console")
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_unknown_format(self) -> "None":
        with pytest.raises(ValueError):
            build_processors("xml")
