from affected_tests import settings
from affected_tests.analyzer.dependent_scanner import find_dependents
from affected_tests.analyzer.package_resolver import resolve_packages
from affected_tests.analyzer.test_collector import collect_test_files, working_set
from affected_tests.schema.schema import AffectedParams, PackageInfo, RunState, SelectionResult
from affected_tests.utils.log_util import log, log_i
from affected_tests.utils.rich_console import display_selection_result, run_command_with_panel


def split_changed_files(args: list[str]) -> list[str]:
    """引数を空白で連結してから分割する(1つの引数に複数パスが入っていてもよい)"""
    return " ".join(args).split()


class AffectedTestsWorkflow:
    """
    変更ファイルから影響を受けるテストを選んで実行するワークフロー。

    流れ:
        1. 変更ファイル → 変更パッケージ(resolve)
        2. 変更パッケージのネイティブアドオンをビルド(build_native_addons)
        3. 変更パッケージをrequireしているパッケージを検索(scan_dependents)
        4. 変更+依存パッケージのテストファイルを収集(collect_tests)
        5. テストランナーを実行(run_tests)

    外部コマンドが失敗した場合はCalledProcessErrorをそのまま送出します。
    """

    def __init__(self, params: AffectedParams):
        self.params = params
        self.result = SelectionResult(changed_files=split_changed_files(params.changed_files))

    def run(self) -> SelectionResult:
        if not self.resolve():
            log_i("No packages to test.")
            self.result.state = RunState.EMPTY
            return self.result

        if not self.params.dry_run:
            self.build_native_addons()

        self.scan_dependents()
        self.collect_tests()
        display_selection_result(self.result)

        if not self.result.test_files:
            log_i("テストファイルが見つからないためテストをスキップします。")
            self.result.state = RunState.SKIPPED
            return self.result

        if self.params.dry_run:
            log_i("dry-runのためテストを実行しません。")
            self.result.state = RunState.DRY_RUN
            return self.result

        self.run_tests()
        self.result.state = RunState.RUN
        return self.result

    def resolve(self) -> list[PackageInfo]:
        self.result.packages = resolve_packages(
            self.result.changed_files, repo_dir=self.params.repo_dir, package_root=self.params.package_root
        )
        log("packages= %s", self.result.package_names)
        return self.result.packages

    def build_native_addons(self) -> None:
        for package in self.result.packages:
            if not package.has_native_addon:
                continue
            command = [settings.make_command, settings.addon_target, f"{settings.addon_pattern_var}={package.name}"]
            run_command_with_panel(
                f"ネイティブアドオンをビルドします: {package.name}",
                command,
                success_message=f"ビルドに成功しました: {package.name}",
                error_message=f"ビルドに失敗しました: {package.name}",
                cwd=self.params.repo_dir,
            )

    def scan_dependents(self) -> list[str]:
        self.result.dependents = find_dependents(
            self.result.package_names, repo_dir=self.params.repo_dir, package_root=self.params.package_root
        )
        self.result.directories = working_set(self.result.package_directories, self.result.dependents)
        log("directories= %s", self.result.directories)
        return self.result.dependents

    def collect_tests(self) -> list[str]:
        self.result.test_files = collect_test_files(self.result.directories, repo_dir=self.params.repo_dir)
        log("test_files= %s", self.result.test_files)
        return self.result.test_files

    def run_tests(self) -> None:
        command = [settings.make_command, settings.test_target, "FILES=" + " ".join(self.result.test_files)]
        run_command_with_panel(
            f"テストを実行します: {len(self.result.test_files)} files",
            command,
            success_message="All affected tests passed.",
            error_message="テストが失敗しました。",
            cwd=self.params.repo_dir,
        )
