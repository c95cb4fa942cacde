from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from affected_tests.schema.schema import AffectedParams, SelectionResult
from affected_tests.utils.subprocess_util import SubprocessUtil

# 標準出力はテストランナーの出力に使うので、進捗や診断はすべて標準エラー出力に出す
console = Console(width=120, stderr=True)


def console_print(*args, **kwargs):
    console.print(*args, **kwargs)


def print_plain(message: str) -> None:
    # タイムスタンプの[]などをrichのマークアップとして解釈させない
    console.print(message, markup=False, highlight=False)


def run_command_with_panel(
    description: str, command: list[str], success_message: str, error_message: str, cwd: str | None = None
) -> SubprocessUtil.CompletedProcess:
    """
    指定されたコマンドを実行し、結果をパネルで表示します。

    コマンドの出力はそのまま端末に流します(CIのログに残すため)。
    失敗した場合はCalledProcessErrorをそのまま送出します。
    """
    console_print(Panel(f"{description}\n$ {SubprocessUtil.join(command)}", style="cyan"))
    try:
        result = SubprocessUtil.run(command, cwd=cwd, check=True)
    except SubprocessUtil.CalledProcessError as e:
        console_print(Panel(f"{error_message}\n{e}", style="red"))
        raise
    console_print(Panel(success_message, style="green"))
    return result


def prepare_table_common(title: str, title_style: str = "bold") -> Table:
    table = Table(title=title, title_style=title_style)
    table.add_column("項目", style="cyan", no_wrap=True)
    table.add_column("値")

    # ローカルマシンに設定されているタイムゾーンを取得
    local_tz = datetime.now().astimezone().tzinfo
    table.caption = f"取得日時: {datetime.now(tz=local_tz).strftime('%Y-%m-%d %H:%M:%S')}"
    table.caption_justify = "left"
    return table


def _add_rows(table: Table, key: str, values: list[str]) -> None:
    if not values:
        table.add_row(key, "(なし)")
        return
    for i, value in enumerate(values):
        table.add_row(key if i == 0 else "", value)


def display_params(params: AffectedParams):
    """CLIパラメータを整形して表示します。"""
    table = prepare_table_common("AffectedParams")
    for key, value in params.model_dump().items():
        if key == "changed_files":
            _add_rows(table, key, value)
            continue
        table.add_row(key, str(value))

    console_print(Panel(table, title="パラメータ", border_style="white"))


def display_selection_result(result: SelectionResult):
    """テスト対象の選択結果を整形して表示します。"""
    table = prepare_table_common(f"SelectionResult({result.state})")
    _add_rows(table, "変更パッケージ", result.package_names)
    _add_rows(table, "ネイティブアドオン", [p.name for p in result.packages if p.has_native_addon])
    _add_rows(table, "依存パッケージ", result.dependents)
    _add_rows(table, "テストファイル", result.test_files)

    console_print(Panel(table, title="テスト対象", border_style="green"))
