from __future__ import annotations

import os
from enum import Enum

from pydantic import BaseModel, Field

from affected_tests import settings


class RunState(str, Enum):
    EMPTY = "empty"  # テスト対象のパッケージなし(正常終了)
    SKIPPED = "skipped"  # パッケージはあるがテストファイルなし(正常終了)
    DRY_RUN = "dry_run"  # テストファイルを選択したが--dry-runのため実行しない
    RUN = "run"  # テストランナーを実行した

    def __str__(self):
        return self.value

    def __repr__(self) -> str:
        return self.value


class AffectedParams(BaseModel):
    changed_files: list[str] = Field(default_factory=list, description="変更されたファイルのパス(リポジトリ相対)")
    repo_dir: str = Field(default_factory=os.getcwd, description="リポジトリのルートディレクトリ")
    package_root: str = Field(default=settings.package_root, description="パッケージツリーのルート(リポジトリ相対)")
    interval: float = Field(default=settings.heartbeat_interval, description="ハートビートの出力間隔(秒)")
    dry_run: bool = Field(default=False, description="Trueならビルドとテストを実行せず選択結果だけ表示する")

    def get_command(self) -> str:
        cmd = "run_affected_tests " + " ".join(self.changed_files)
        for field, value in self:
            if field == "changed_files" or not value:
                continue
            if isinstance(value, bool):
                cmd += f" --{field.replace('_', '-')}"
            else:
                cmd += f" --{field.replace('_', '-')} {value}"
        return cmd


class PackageInfo(BaseModel):
    directory: str = Field(description="パッケージディレクトリ(例: lib/node_modules/@stdlib/math/base/special/sin)")
    name: str = Field(description="パッケージ名(例: math/base/special/sin)")
    has_native_addon: bool = Field(default=False, description="ネイティブアドオンのビルド定義を持つか")


class SelectionResult(BaseModel):
    state: RunState = Field(default=RunState.EMPTY, description="実行結果の状態")
    changed_files: list[str] = Field(default_factory=list, description="入力された変更ファイル")
    packages: list[PackageInfo] = Field(default_factory=list, description="変更されたパッケージ")
    dependents: list[str] = Field(default_factory=list, description="変更パッケージをrequireしているディレクトリ")
    directories: list[str] = Field(default_factory=list, description="テスト対象ディレクトリ(変更+依存)")
    test_files: list[str] = Field(default_factory=list, description="実行するテストファイル")

    @property
    def package_names(self) -> list[str]:
        return [package.name for package in self.packages]

    @property
    def package_directories(self) -> list[str]:
        return [package.directory for package in self.packages]
