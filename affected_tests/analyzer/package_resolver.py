import os
import posixpath
from collections.abc import Iterable

from affected_tests import settings
from affected_tests.schema.schema import PackageInfo
from affected_tests.utils.log_util import log


def filter_package_files(changed_files: Iterable[str], package_root: str = settings.package_root) -> list[str]:
    """パッケージツリー配下のファイルだけを残す"""
    prefix = package_root.rstrip("/") + "/"
    return [path for path in changed_files if path.startswith(prefix)]


def strip_conventional_dir(directory: str, conventional_dirs: Iterable[str] = settings.conventional_dirs) -> str:
    """
    末尾のパス要素が慣習的なサブディレクトリ名(lib, test など)なら1つだけ取り除きます。

    引数:
        directory (str): ディレクトリのパス。
        conventional_dirs (Iterable[str]): 取り除く対象のディレクトリ名。

    戻り値:
        str: パッケージディレクトリのパス。
    """
    directory = directory.rstrip("/")
    parent, last = posixpath.split(directory)
    if parent and last in set(conventional_dirs):
        return parent
    return directory


def to_package_directory(file_path: str, conventional_dirs: Iterable[str] = settings.conventional_dirs) -> str:
    """ファイルのパスから、そのファイルが属するパッケージディレクトリを求める"""
    return strip_conventional_dir(posixpath.dirname(file_path), conventional_dirs)


def to_package_name(directory: str, package_root: str = settings.package_root) -> str:
    """パッケージディレクトリからルートを除いたパッケージ名を求める"""
    prefix = package_root.rstrip("/") + "/"
    if directory.startswith(prefix):
        return directory[len(prefix) :]
    return directory


def is_package_directory(directory: str, package_root: str = settings.package_root) -> bool:
    # ルート自身(例: lib/node_modules/@stdlib/README.md の親)はパッケージではない
    return directory.startswith(package_root.rstrip("/") + "/")


def resolve_package_directories(
    changed_files: Iterable[str],
    package_root: str = settings.package_root,
    conventional_dirs: Iterable[str] = settings.conventional_dirs,
) -> list[str]:
    """
    変更ファイルのリストを重複なしのパッケージディレクトリのリストに変換します。

    パッケージツリー外のファイルは無視します。結果はソート済みで、空なら
    テスト対象のパッケージがないことを意味します(エラーではありません)。
    """
    conventional_dirs = tuple(conventional_dirs)
    directories = set()
    for file_path in filter_package_files(changed_files, package_root):
        directory = to_package_directory(file_path, conventional_dirs)
        if is_package_directory(directory, package_root):
            directories.add(directory)
        else:
            log("skip file outside of any package= %s", file_path)
    return sorted(directories)


def has_native_addon(
    directory: str, repo_dir: str = ".", native_build_file: str = settings.native_build_file
) -> bool:
    return os.path.isfile(os.path.join(repo_dir, directory, native_build_file))


def resolve_packages(
    changed_files: Iterable[str],
    repo_dir: str = ".",
    package_root: str = settings.package_root,
    conventional_dirs: Iterable[str] = settings.conventional_dirs,
) -> list[PackageInfo]:
    """変更ファイルから変更パッケージ(ディレクトリ、パッケージ名、ネイティブアドオン有無)を求める"""
    packages = []
    for directory in resolve_package_directories(changed_files, package_root, conventional_dirs):
        package = PackageInfo(
            directory=directory,
            name=to_package_name(directory, package_root),
            has_native_addon=has_native_addon(directory, repo_dir),
        )
        log("package= %s", package)
        packages.append(package)
    return packages
