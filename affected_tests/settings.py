import os
from os.path import dirname, join

from dotenv import load_dotenv

load_dotenv(verbose=True)

dotenv_path = join(dirname(__file__), ".env")
load_dotenv(dotenv_path)


def _get_list(key: str, default: str) -> tuple[str, ...]:
    # カンマ区切りの環境変数をタプルに変換(空要素は除外)
    value = os.getenv(key, default)
    return tuple(item.strip() for item in value.split(",") if item.strip())


# package tree(パッケージツリーのルート。リポジトリからの相対パス)
package_root = os.getenv("PACKAGE_ROOT", "lib/node_modules/@stdlib").rstrip("/")
import_prefix = os.getenv("IMPORT_PREFIX", "@stdlib/")  # require( '@stdlib/xxx' ) の '@stdlib/' 部分

# パッケージディレクトリ末尾から取り除く慣習的なサブディレクトリ名
conventional_dirs = _get_list("CONVENTIONAL_DIRS", "bin,data,etc,include,lib,src,test")

# scan
script_ext = os.getenv("SCRIPT_EXT", ".js")  # 依存関係を検索するスクリプトの拡張子

# tests
test_dir_name = os.getenv("TEST_DIR_NAME", "test")
test_file_glob = os.getenv("TEST_FILE_GLOB", "test*.js")
fixtures_dir_name = os.getenv("FIXTURES_DIR_NAME", "fixtures")
test_search_depth = int(os.getenv("TEST_SEARCH_DEPTH", "2"))  # ネストしたパッケージに入らないための深さ制限

# native add-on
native_build_file = os.getenv("NATIVE_BUILD_FILE", "binding.gyp")

# make
make_command = os.getenv("MAKE_COMMAND", "make")
test_target = os.getenv("TEST_TARGET", "test-javascript-files")
addon_target = os.getenv("ADDON_TARGET", "install-node-addons")
addon_pattern_var = os.getenv("ADDON_PATTERN_VAR", "NODE_ADDONS_PATTERN")

# heartbeat(秒)
heartbeat_interval = float(os.getenv("HEARTBEAT_INTERVAL", "30"))

# log
log_file = os.getenv("LOG_FILE", "")  # 指定時のみファイルにもログを出力する

# mode
is_debug = os.getenv("IS_DEBUG", "False").lower() in ("true", "1", "t")  # デバッグモード(例: IS_DEBUG=True)
