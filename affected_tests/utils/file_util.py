import os
import pathlib

from affected_tests.utils.log_util import log


class FileUtil:
    @staticmethod
    def read_file(file_path: str) -> str:
        if os.path.isfile(file_path):
            with open(file_path, encoding="utf-8") as file:
                return file.read()
        return ""

    @staticmethod
    def find_files(root_path: str, ext: str = ".js", base_path: str = ".") -> list[str]:
        """Find files in the root_path

        Args:
            root_path (str): root path to find files
            ext (str): file extension to find
            base_path (str): returned paths are relative to this path

        Returns:
            list[str]: sorted list of file paths (posix style, relative to base_path)
        """
        file_paths = []
        if os.path.isdir(root_path):  # noqa: PTH112
            for path in pathlib.Path(root_path).rglob(f"*{ext}"):
                if path.is_file():
                    file_paths.append(FileUtil.relpath(str(path), base_path))
        log("find_files root_path= %s, found= %d", root_path, len(file_paths))
        return sorted(file_paths)

    @staticmethod
    def walk_files(root_path: str, max_depth: int) -> list[str]:
        """
        root_path配下のファイルをmax_depth階層まで列挙します(find -maxdepth 相当)。

        root_path直下のファイルが深さ1です。
        """
        file_paths = []
        root_path = os.path.normpath(root_path)
        root_depth = root_path.count(os.sep)
        for dir_path, dir_names, file_names in os.walk(root_path):
            depth = dir_path.count(os.sep) - root_depth  # dir_path直下のファイルの深さは depth + 1
            if depth + 1 >= max_depth:
                dir_names[:] = []  # これ以上深く潜らない
            if depth + 1 > max_depth:
                continue
            file_paths.extend(os.path.join(dir_path, file_name) for file_name in file_names)
        return sorted(file_paths)

    @staticmethod
    def relpath(path: str, base_path: str = ".") -> str:
        return pathlib.PurePath(os.path.relpath(path, base_path)).as_posix()
