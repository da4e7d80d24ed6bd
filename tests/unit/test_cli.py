"""
Tests for the notifyd-ingest command line.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from notifyd.app_shell.cli import load_request, main
from notifyd.domain.entities import HintType, ImageData


def write_request(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "request.json"
    path.write_text(json.dumps(data))
    return path


class TestLoadRequest:
    def test_hints_by_signature_and_type(self, tmp_path: Path) -> None:
        path = write_request(
            tmp_path,
            {
                "app_name": "cli",
                "summary": "s",
                "hints": {
                    "urgency": {"signature": "y", "value": 2},
                    "transient": {"type": "bool", "value": True},
                    "image-data": {"signature": "(iiibiiay)", "value": [1, 1, 4, True, 8, 4, [0, 0, 0, 255]]},
                },
            },
        )
        req = load_request(path)
        assert req.hints["urgency"].type is HintType.BYTE
        assert req.hints["transient"].value is True
        assert isinstance(req.hints["image-data"].value, ImageData)

    def test_not_an_object(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            load_request(write_request(tmp_path, [1, 2]))


class TestMain:
    def test_notify(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = write_request(
            tmp_path,
            {
                "app_name": "cli",
                "summary": "<b>Hello</b>",
                "body": "see https://example.com",
                "actions": ["default", "Open"],
                "hints": {"image-data": {"signature": "(iiibiiay)", "value": [2, 1, 8, True, 8, 4, [255] * 8]}},
            },
        )
        rules = tmp_path / "rules.yaml"
        rules.write_text("max_timeout_normal: 1000\n")
        with pytest.raises(SystemExit) as exit_info:
            main(["notify", str(path), "--rules", str(rules)])
        assert exit_info.value.code == 0

        result = json.loads(capsys.readouterr().out)
        assert result["success"] is True
        assert result["id"] == 1
        assert result["notification"]["summary"] == "Hello"
        assert result["notification"]["expire_timeout"] == 1000
        assert result["notification"]["image"]["bytes"] == 8
        assert result["notification"]["body"]["links"][0]["url"] == "https://example.com"

    def test_missing_request(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exit_info:
            main(["notify", str(tmp_path / "nope.json"), "--rules", str(tmp_path / "nope.yaml")])
        assert exit_info.value.code == 1

    def test_sanitize(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            main(["sanitize", "<script>x</script><b>ok</b>"])
        result = json.loads(capsys.readouterr().out)
        assert result["markup"] == "<b>ok</b>"
        assert result["removed"] == ["dropped_element"]

    @pytest.mark.parametrize(("url", "code"), [("https://example.com", 0), ("javascript:alert(1)", 1)])
    def test_check_url(self, url: str, code: int, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exit_info:
            main(["check-url", url])
        assert exit_info.value.code == code
        assert json.loads(capsys.readouterr().out)["accepted"] is (code == 0)
