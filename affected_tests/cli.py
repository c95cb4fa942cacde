import argparse
import os
import sys

import affected_tests
from affected_tests import settings
from affected_tests.core.affected_workflow import AffectedTestsWorkflow
from affected_tests.core.heartbeat import heartbeat_scope
from affected_tests.schema.schema import AffectedParams, RunState, SelectionResult
from affected_tests.utils.log_util import log, log_e
from affected_tests.utils.rich_console import console_print, display_params
from affected_tests.utils.subprocess_util import SubprocessUtil

EXIT_COMMAND_NOT_FOUND = 127


def main() -> None:
    """メイン処理(args前処理、パラメータ設定、実行、終了コード決定)"""
    log("")
    log("========================================")
    log("||    run_affected_tests cli start    ||")
    log("========================================")
    parser = argparse.ArgumentParser(
        prog="run_affected_tests",
        description="変更ファイルから影響を受けるパッケージのテストだけを実行します",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("files", help="変更されたファイルのパス(空白区切りの複数パスも可)", nargs="*")
    parser.add_argument("--repo-dir", help="リポジトリのルートディレクトリ", default=os.getcwd())
    parser.add_argument("--package-root", help="パッケージツリーのルート(リポジトリ相対)", default=settings.package_root)
    parser.add_argument(
        "--interval", help="ハートビートの出力間隔(秒)", type=float, default=settings.heartbeat_interval
    )
    parser.add_argument("--dry-run", help="ビルドとテストを実行せず、選択結果だけを表示", action="store_true")
    parser.add_argument("-v", "--version", action="store_true", help="バージョン情報を表示")
    args = parser.parse_args()
    if args.version:
        show_version_and_exit()

    params = AffectedParams(
        changed_files=args.files,
        repo_dir=args.repo_dir,
        package_root=args.package_root,
        interval=args.interval,
        dry_run=args.dry_run,
    )
    if settings.is_debug:
        display_params(params)
    sys.exit(main_exec(params))


def main_exec(params: AffectedParams) -> int:
    """
    ハートビートを動かしながらワークフローを実行し、終了コードを返します。

    ハートビートはどの終了経路(テスト対象なし、成功、失敗)でも必ず停止します。
    """
    log("command= %s", params.get_command())
    try:
        with heartbeat_scope(params.interval):
            result = AffectedTestsWorkflow(params).run()
    except SubprocessUtil.CalledProcessError as e:
        log_e("コマンドが失敗しました(returncode=%d): %s", e.returncode, e.cmd)
        return e.returncode or 1
    except OSError as e:
        log_e("コマンドを実行できませんでした: %s", e)
        return EXIT_COMMAND_NOT_FOUND
    show_result(result)
    return 0


def show_result(result: SelectionResult) -> None:
    if result.state == RunState.EMPTY:
        console_print("[green]No packages to test.")
    elif result.state == RunState.SKIPPED:
        console_print("[green]No affected tests to run.")
    elif result.state == RunState.DRY_RUN:
        console_print(f"[yellow]Dry run: {len(result.test_files)} test files selected, not run.")
    else:
        console_print(f"[green]All affected tests passed. ({len(result.test_files)} files)")


def show_version_and_exit() -> None:
    print(f"run_affected_tests version {affected_tests.__version__}")
    sys.exit(0)


if __name__ == "__main__":  # このスクリプトが直接実行された場合にのみ、以下のコードを実行します。
    main()
