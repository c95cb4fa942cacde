import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime

from affected_tests import settings
from affected_tests.utils.log_util import log
from affected_tests.utils.rich_console import print_plain

HEARTBEAT_MESSAGE = "Long running command in progress..."


def heartbeat_message() -> str:
    local_tz = datetime.now().astimezone().tzinfo
    return f"[{datetime.now(tz=local_tz).strftime('%Y-%m-%d %H:%M:%S')}] {HEARTBEAT_MESSAGE}"


class HeartbeatHandle:
    """
    CIのセッションが無出力でタイムアウトしないよう、定期的にメッセージを出力するバックグラウンドスレッドのハンドル。

    start()で開始してstop()で停止します。共有データは持たず、出力するだけです。
    """

    def __init__(self, interval: float, printer: Callable[[str], None] | None = None):
        self.interval = interval
        self.printer = printer or print_plain
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._beat, name="heartbeat", daemon=True)

    def start(self) -> "HeartbeatHandle":
        log("heartbeat start interval= %s", self.interval)
        self._thread.start()
        return self

    def stop(self, timeout: float | None = None) -> None:
        if self._stop_event.is_set():
            return
        log("heartbeat stop")
        self._stop_event.set()
        if self._thread.is_alive():
            self._thread.join(timeout)

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._stop_event.is_set()

    def _beat(self) -> None:
        # 出力してからinterval秒待つ、をstopされるまで繰り返す
        while True:
            self.printer(heartbeat_message())
            if self._stop_event.wait(self.interval):
                break


def start_heartbeat(
    interval: float = settings.heartbeat_interval, printer: Callable[[str], None] | None = None
) -> HeartbeatHandle:
    return HeartbeatHandle(interval, printer).start()


def stop_heartbeat(handle: HeartbeatHandle) -> None:
    handle.stop()


@contextmanager
def heartbeat_scope(
    interval: float = settings.heartbeat_interval, printer: Callable[[str], None] | None = None
) -> Iterator[HeartbeatHandle]:
    """本体の前にハートビートを開始し、正常終了でも例外でも必ず1回だけ停止する"""
    handle = start_heartbeat(interval, printer)
    try:
        yield handle
    finally:
        stop_heartbeat(handle)
