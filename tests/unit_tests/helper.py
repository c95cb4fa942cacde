import os
import shutil
import subprocess
import tempfile
import unittest
from typing import Any
from unittest.mock import MagicMock, patch

PACKAGE_ROOT = "lib/node_modules/@stdlib"

# 外部コマンド(make)の呼び出しを無効化するモックのターゲット
MOCK_SUBPROCESS_UTIL_RUN = "affected_tests.utils.subprocess_util.SubprocessUtil.run"


class MockManager:
    """複数のモックをmock_nameという名前でアクセスできるようにするクラス"""

    def __init__(self):
        self.mock_dict: dict[str, MagicMock] = {}
        self._init_default_mocks()

    def _init_default_mocks(self):
        # make呼び出しを無効化するfixtureを生成
        self._set_mock(
            "fixture_subprocess_util_run_ok",
            MOCK_SUBPROCESS_UTIL_RUN,
            return_value=subprocess.CompletedProcess(args=[], returncode=0),
        )

    def _set_mock(self, mock_name: str, mock_target: str, return_value: Any = ""):
        # モックを生成してreturn_valueを設定
        self.mock_dict[mock_name] = self._parameterized_mock_factory(mock_target, return_value)

    def _parameterized_mock_factory(self, mock_target: str, return_value: Any):
        instance = MagicMock()
        instance.return_value = return_value
        patcher = patch(mock_target, instance)
        return patcher.start()

    def _get_mock(self, mock_name: str) -> None | MagicMock:
        if mock_name in self.mock_dict:
            return self.mock_dict[mock_name]
        return None

    def get_mock_call_count(self, mock_name: str):
        return self._get_mock(mock_name).call_count

    def get_mock_call_args_list(self, mock_name: str):
        return self._get_mock(mock_name).call_args_list

    def set_mock_side_effect(
        self, mock_target: str = "", mock_alias: str = "", side_effect: Any = lambda: None
    ) -> None:
        mock_name = mock_alias if mock_alias else mock_target
        if mock_name and mock_name not in self.mock_dict:
            self._set_mock(mock_name, mock_target, 0)
        self.mock_dict[mock_name].side_effect = side_effect


class BaseTestCase(unittest.TestCase):
    """一時ディレクトリにパッケージツリーを作り、make呼び出しをモックするテストの基底クラス"""

    def setUp(self):
        self.mock_manager = MockManager()
        self.repo_dir = tempfile.mkdtemp(prefix="affected_tests_")

    def tearDown(self):
        patch.stopall()
        shutil.rmtree(self.repo_dir, ignore_errors=True)

    def write_file(self, rel_path: str, content: str = "") -> str:
        # リポジトリ相対パスでファイルを作成する
        file_path = os.path.join(self.repo_dir, rel_path)
        os.makedirs(os.path.dirname(file_path), exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(content)
        return rel_path

    def make_package(self, name: str, requires: list[str] | None = None, *, native: bool = False) -> str:
        """lib/index.js と test/test.js を持つパッケージを作成してディレクトリを返す"""
        directory = f"{PACKAGE_ROOT}/{name}"
        body = "".join(f"var x{i} = require( '@stdlib/{dep}' );\n" for i, dep in enumerate(requires or []))
        self.write_file(f"{directory}/lib/index.js", "'use strict';\n" + body + "module.exports = {};\n")
        self.write_file(f"{directory}/test/test.js", "var main = require( './../lib' );\n")
        if native:
            self.write_file(f"{directory}/binding.gyp", "{}\n")
        return directory

    def check_mock_call_count(self, mock_name: str, expected_count: int):
        self.assertEqual(self.mock_manager.get_mock_call_count(mock_name), expected_count, mock_name)

    def check_run_call_count(self, expected_count: int):
        # make呼び出しの回数をチェック(特殊処理)
        self.check_mock_call_count("fixture_subprocess_util_run_ok", expected_count)

    def get_run_commands(self) -> list[list[str]]:
        calls = self.mock_manager.get_mock_call_args_list("fixture_subprocess_util_run_ok")
        return [c.args[0] if c.args else c.kwargs["args"] for c in calls]

    def set_mock_side_effect(self, mock_target: str = "", mock_alias: str = "", side_effect: Any = lambda: None):
        self.mock_manager.set_mock_side_effect(mock_target=mock_target, mock_alias=mock_alias, side_effect=side_effect)
