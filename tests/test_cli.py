"""命令行接口测试。"""

import dataclasses
import json
import os
from unittest.mock import MagicMock

import requests

from sdkvm.cli import (
    EXIT_ENVIRONMENT_ERROR,
    EXIT_OK,
    EXIT_USER_ERROR,
    create_parser,
    run_cli,
)
from conftest import install, make_current, snapshot


def run(config, *argv, session=None):
    args = create_parser().parse_args(list(argv))
    return run_cli(args, config, session=session)


def catalog_session(responses):
    """按 URL 片段返回响应体的 requests 会话。"""
    session = MagicMock(spec=["get"])

    def get(url, **kwargs):
        for fragment, body in responses.items():
            if fragment in url:
                response = MagicMock()
                response.text = body
                return response
        raise requests.exceptions.ConnectionError(url)

    session.get.side_effect = get
    return session


class TestInstall:
    """install 命令。"""

    def test_resolves_default_version(self, config, capsys):
        session = catalog_session({
            "/default/java": "17.0.1-tem",
            "/validate/java/17.0.1-tem/": "valid",
        })

        assert run(config, "install", "java", session=session) == EXIT_OK
        assert "java 17.0.1-tem" in capsys.readouterr().out
        assert session.get.call_count == 2

    def test_unresolvable_version(self, config, capsys):
        session = catalog_session({"/validate/": "invalid"})

        assert run(config, "install", "java", "99.99.99", session=session) == EXIT_USER_ERROR
        err = capsys.readouterr().err
        assert "99.99.99" in err
        assert "sdk list java" in err

    def test_unknown_candidate(self, config, capsys):
        session = catalog_session({})
        before = snapshot(config.candidates_dir)

        assert run(config, "install", "cobol", "1.0", session=session) == EXIT_USER_ERROR
        assert "cobol" in capsys.readouterr().err
        assert snapshot(config.candidates_dir) == before
        session.get.assert_not_called()

    def test_local_folder_is_linked_and_made_current(self, config, tmp_path):
        session = catalog_session({"/validate/": "invalid"})
        build = tmp_path / "jdk-build"
        build.mkdir()

        assert run(config, "install", "java", "dev", str(build), session=session) == EXIT_OK

        version_path = config.candidates_dir / "java" / "dev"
        assert version_path.is_symlink()
        assert os.readlink(config.candidates_dir / "java" / "current") == "dev"

    def test_catalog_unavailable_degrades_to_offline(self, config, capsys):
        session = catalog_session({})
        install(config.candidates_dir, "java", "11.0.2")

        assert run(config, "install", "java", "11.0.2", session=session) == EXIT_OK
        assert "已安装" in capsys.readouterr().out
        assert session.get.call_count == 1

    def test_catalog_unavailable_without_version_requires_one(self, config, capsys):
        session = catalog_session({})
        install(config.candidates_dir, "java", "11.0.2")
        make_current(config.candidates_dir, "java", "11.0.2")

        assert run(config, "install", "java", session=session) == EXIT_USER_ERROR
        assert "必须指定" in capsys.readouterr().err

    def test_offline_without_local_version(self, config, capsys):
        session = catalog_session({})
        config = dataclasses.replace(config, api_available=False)

        assert run(config, "install", "kotlin", "1.9.0", session=session) == EXIT_USER_ERROR
        assert "离线" in capsys.readouterr().err
        session.get.assert_not_called()

    def test_missing_manifest(self, config, capsys):
        (config.sdkman_dir / "var" / "candidates").unlink()

        assert run(config, "install", "java", session=catalog_session({})) == EXIT_ENVIRONMENT_ERROR
        assert "candidates" in capsys.readouterr().err
        assert not (config.sdkman_dir / "var" / "log").exists()

    def test_mistyped_root_is_left_untouched(self, monkeypatch, tmp_path, capsys):
        root = tmp_path / "typo-root"
        monkeypatch.setenv("SDKMAN_DIR", str(root))
        monkeypatch.delenv("SDKMAN_CANDIDATES_DIR", raising=False)
        monkeypatch.delenv("sdkman_curl_max_time", raising=False)
        monkeypatch.setenv("SDKMAN_AVAILABLE", "false")
        args = create_parser().parse_args(["install", "java", "1.0"])

        assert run_cli(args, session=catalog_session({})) == EXIT_ENVIRONMENT_ERROR
        assert not root.exists()

    def test_log_file_written_inside_existing_install(self, config):
        run(config, "list", "java")
        assert (config.sdkman_dir / "var" / "log" / "sdkvm.log").is_file()


class TestUninstall:
    """uninstall 命令。"""

    def test_refuses_current_without_force(self, config, capsys):
        install(config.candidates_dir, "java", "17.0.1-tem")
        make_current(config.candidates_dir, "java", "17.0.1-tem")
        before = snapshot(config.candidates_dir)

        assert run(config, "uninstall", "java", "17.0.1-tem") == EXIT_USER_ERROR

        captured = capsys.readouterr()
        assert "--force" in captured.out
        assert "当前版本" in captured.err
        assert snapshot(config.candidates_dir) == before

    def test_force_removes_current(self, config):
        version_path = install(config.candidates_dir, "java", "17.0.1-tem")
        link = make_current(config.candidates_dir, "java", "17.0.1-tem")

        assert run(config, "uninstall", "java", "17.0.1-tem", "--force") == EXIT_OK
        assert not os.path.lexists(link)
        assert not version_path.exists()

    def test_not_installed(self, config, capsys):
        assert run(config, "uninstall", "java", "11.0.2") == EXIT_USER_ERROR
        assert "未安装" in capsys.readouterr().err


class TestUseCurrentList:
    """use、current、list 命令。"""

    def test_use_then_current(self, config, capsys):
        install(config.candidates_dir, "java", "11.0.2")

        assert run(config, "use", "java", "11.0.2") == EXIT_OK
        assert run(config, "current", "java") == EXIT_OK
        assert "java 11.0.2" in capsys.readouterr().out

    def test_current_unset(self, config, capsys):
        assert run(config, "current", "java") == EXIT_USER_ERROR

    def test_current_all(self, config, capsys):
        install(config.candidates_dir, "java", "11.0.2")
        make_current(config.candidates_dir, "java", "11.0.2")

        assert run(config, "current") == EXIT_OK
        assert "java: 11.0.2" in capsys.readouterr().out

    def test_list_json(self, config, capsys):
        install(config.candidates_dir, "java", "17.0.1-tem")
        install(config.candidates_dir, "java", "11.0.2")
        make_current(config.candidates_dir, "java", "11.0.2")

        assert run(config, "list", "java", "--format", "json") == EXIT_OK
        result = json.loads(capsys.readouterr().out)
        assert result == {
            "candidate": "java",
            "current": "11.0.2",
            "versions": ["11.0.2", "17.0.1-tem"],
        }

    def test_list_marks_current(self, config, capsys):
        install(config.candidates_dir, "java", "11.0.2")
        make_current(config.candidates_dir, "java", "11.0.2")

        assert run(config, "list", "java") == EXIT_OK
        assert " * 11.0.2" in capsys.readouterr().out


def test_no_command(config):
    assert run(config) == EXIT_USER_ERROR


def test_config_error_from_environment(monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("SDKMAN_DIR", str(tmp_path))
    monkeypatch.setenv("sdkman_curl_max_time", "never")
    args = create_parser().parse_args(["list", "java"])

    assert run_cli(args) == EXIT_ENVIRONMENT_ERROR
    assert "sdkman_curl_max_time" in capsys.readouterr().err
