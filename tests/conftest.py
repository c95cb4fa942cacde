# conftest.py(tests)
import pytest

from affected_tests.core import heartbeat


# 失敗したテストの行数をFAILURES WITH LINE NUMBERSに追加表示するカスタムプラグイン
def pytest_terminal_summary(terminalreporter):
    reports = terminalreporter.getreports("failed")
    if reports:
        terminalreporter.section("FAILURES WITH LINE NUMBERS")
        for report in reports:
            file_name = report.location[0]
            line_number = report.location[1] + 1  # 0始まりなので1行ずらす
            test_name = report.nodeid.split("::")[-1]
            terminalreporter.line(f"FAILED {file_name}:{line_number} <=(click to jump) {test_name}")


# ハートビートの出力がテストのログを埋めないように、printerを捨てる関数に差し替える
@pytest.fixture(autouse=True)
def _silence_heartbeat(monkeypatch):
    monkeypatch.setattr(heartbeat, "print_plain", lambda message: None)
