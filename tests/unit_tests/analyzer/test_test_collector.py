from tests.unit_tests.helper import PACKAGE_ROOT, BaseTestCase
from affected_tests.analyzer.test_collector import collect_test_files, is_fixture_path, is_test_file, working_set

SIN_DIR = f"{PACKAGE_ROOT}/math/base/special/sin"


class TestTestCollector(BaseTestCase):
    # =============  working_set  ==============

    def test_working_set_union(self):
        self.assertEqual(working_set(["b", "a"], ["c", "a"]), ["a", "b", "c"])

    def test_working_set_empty_dependents(self):
        self.assertEqual(working_set([SIN_DIR], []), [SIN_DIR])

    # =============  is_fixture_path / is_test_file  ==============

    def test_is_fixture_path(self):
        self.assertTrue(is_fixture_path(f"{SIN_DIR}/test/fixtures/test.js"))
        self.assertTrue(is_fixture_path(f"{SIN_DIR}/fixtures/pkg/test/test.js"))
        self.assertFalse(is_fixture_path(f"{SIN_DIR}/test/test.fixtures.js"))

    def test_is_test_file(self):
        self.assertTrue(is_test_file(f"{SIN_DIR}/test/test.js"))
        self.assertTrue(is_test_file(f"{SIN_DIR}/test/test.main.js"))
        self.assertFalse(is_test_file(f"{SIN_DIR}/test/fixtures/test.js"))
        self.assertFalse(is_test_file(f"{SIN_DIR}/test/utils.js"))
        self.assertFalse(is_test_file(f"{SIN_DIR}/lib/test.js"))

    # =============  collect_test_files  ==============

    def test_collect_test_files_scenario(self):
        self.make_package("math/base/special/sin")
        result = collect_test_files([SIN_DIR], repo_dir=self.repo_dir)
        self.assertEqual(result, [f"{SIN_DIR}/test/test.js"])

    def test_collect_test_files_multiple_sorted(self):
        self.make_package("math/base/special/sin")
        self.write_file(f"{SIN_DIR}/test/test.native.js")
        self.write_file(f"{SIN_DIR}/test/test.assign.js")
        result = collect_test_files([SIN_DIR, SIN_DIR], repo_dir=self.repo_dir)
        self.assertEqual(
            result,
            [f"{SIN_DIR}/test/test.assign.js", f"{SIN_DIR}/test/test.js", f"{SIN_DIR}/test/test.native.js"],
        )

    def test_collect_test_files_excludes_fixtures(self):
        directory = f"{PACKAGE_ROOT}/utils/fixtures-demo/fixtures"
        self.write_file(f"{directory}/test/test.js")
        self.make_package("math/base/special/sin")
        self.write_file(f"{SIN_DIR}/test/fixtures/test/test.js")
        result = collect_test_files([directory, SIN_DIR], repo_dir=self.repo_dir)
        self.assertEqual(result, [f"{SIN_DIR}/test/test.js"])

    def test_collect_test_files_depth_limited(self):
        # ネストしたパッケージ(namespace配下のパッケージ)のテストは拾わない
        namespace_dir = f"{PACKAGE_ROOT}/math/base/special"
        self.make_package("math/base/special/sin")
        self.write_file(f"{namespace_dir}/test/test.js")
        result = collect_test_files([namespace_dir], repo_dir=self.repo_dir)
        self.assertEqual(result, [f"{namespace_dir}/test/test.js"])

    def test_collect_test_files_no_tests(self):
        self.write_file(f"{SIN_DIR}/lib/index.js")
        self.assertEqual(collect_test_files([SIN_DIR], repo_dir=self.repo_dir), [])

    def test_collect_test_files_missing_directory(self):
        self.assertEqual(collect_test_files([f"{PACKAGE_ROOT}/deleted/pkg"], repo_dir=self.repo_dir), [])
