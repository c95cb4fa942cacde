import os
import re
from collections.abc import Iterable

from tqdm import tqdm

from affected_tests import settings
from affected_tests.analyzer.package_resolver import is_package_directory, to_package_directory
from affected_tests.utils.file_util import FileUtil
from affected_tests.utils.log_util import log, log_i, log_w


def build_require_pattern(package_name: str, import_prefix: str = settings.import_prefix) -> re.Pattern:
    """
    パッケージをrequireする式にだけマッチする正規表現を作成します。

    例: package_name="math/base/special/sin" の場合は
    require( '@stdlib/math/base/special/sin' ) にマッチします。
    クオートまで含めて完全一致させるので、require( '@stdlib/foo-bar' ) は foo にマッチしません。
    リテラルの require( '...' ) 形式より意図的に広く、ダブルクオートと括弧内の任意の空白(なしも含む)も受け付けます。
    """
    module_name = re.escape(import_prefix + package_name)
    return re.compile(r"require\(\s*(['\"])" + module_name + r"\1\s*\)")


def references_package(content: str, package_name: str, import_prefix: str = settings.import_prefix) -> bool:
    return build_require_pattern(package_name, import_prefix).search(content) is not None


def find_referenced_packages(content: str, patterns: dict[str, re.Pattern]) -> list[str]:
    """contentがrequireしているパッケージ名を返す(patternsはパッケージ名→正規表現)"""
    return [package_name for package_name, pattern in patterns.items() if pattern.search(content)]


def list_script_files(
    repo_dir: str = ".", package_root: str = settings.package_root, script_ext: str = settings.script_ext
) -> list[str]:
    """パッケージツリー内の全スクリプトファイル(リポジトリ相対パス)"""
    return FileUtil.find_files(os.path.join(repo_dir, package_root), ext=script_ext, base_path=repo_dir)


def find_dependents(
    package_names: Iterable[str],
    repo_dir: str = ".",
    package_root: str = settings.package_root,
    import_prefix: str = settings.import_prefix,
    script_files: Iterable[str] | None = None,
) -> list[str]:
    """
    パッケージ名をrequireしているファイルを探し、そのファイルのパッケージディレクトリを返します。

    テキストの一致だけで判定するため、動的なrequireや別名経由のrequireは検出できません。
    依存の依存までは辿りません(1段のみ)。一致なしはエラーではなく空リストを返します。

    引数:
        package_names (Iterable[str]): 変更されたパッケージ名。
        repo_dir (str): リポジトリのルートディレクトリ。
        package_root (str): パッケージツリーのルート(リポジトリ相対)。
        import_prefix (str): require式のパッケージ名の前に付く接頭辞。
        script_files (Iterable[str] | None): 検索対象ファイル(リポジトリ相対)。Noneならツリー全体。

    戻り値:
        list[str]: ソート済みで重複なしのパッケージディレクトリ。
    """
    patterns = {name: build_require_pattern(name, import_prefix) for name in package_names}
    if not patterns:
        return []
    if script_files is None:
        script_files = list_script_files(repo_dir, package_root)

    dependents = set()
    for file_path in tqdm(script_files, desc="scan dependents", disable=not settings.is_debug):
        try:
            content = FileUtil.read_file(os.path.join(repo_dir, file_path))
        except (OSError, UnicodeDecodeError) as e:
            log_w("ファイルの読み込みに失敗したためスキップします: %s (%s)", file_path, e)
            continue
        referenced = find_referenced_packages(content, patterns)
        if not referenced:
            continue
        directory = to_package_directory(file_path)
        if is_package_directory(directory, package_root):
            log("dependent= %s requires %s", directory, referenced)
            dependents.add(directory)

    log_i("dependents found= %d", len(dependents))
    return sorted(dependents)
