import os
import sys
from datetime import datetime

EVALUATION_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'evaluation'))
if EVALUATION_DIR not in sys.path:
	sys.path.insert(0, EVALUATION_DIR)

import evaluation


SAMPLE_OUTPUT = """
============================= test session starts ==============================
collected 4 items

tests/test_core.py::test_count_frequencies_empty PASSED                  [ 25%]
tests/test_core.py::test_roundtrip FAILED                                [ 50%]
tests/test_replay.py::test_auto_run_matches_service SKIPPED (slow)       [ 75%]
tests/test_service.py::test_cli_report ERROR                             [100%]
=========================== short test summary info ============================
"""


def test_parse_pytest_verbose_output():
	tests = evaluation.parse_pytest_verbose_output(SAMPLE_OUTPUT)
	assert [t["outcome"] for t in tests] == ["passed", "failed", "skipped", "error"]
	assert tests[0]["nodeid"] == "tests/test_core.py::test_count_frequencies_empty"
	assert tests[1]["name"] == "test_roundtrip"


def test_summarize_counts_outcomes():
	summary = evaluation.summarize(evaluation.parse_pytest_verbose_output(SAMPLE_OUTPUT))
	assert summary == {"passed": 1, "failed": 1, "error": 1, "skipped": 1, "total": 4}


def test_generate_output_path():
	path = evaluation.generate_output_path(datetime(2024, 3, 9, 7, 5, 1))
	assert path.parts[-4:] == ("evaluation", "2024-03-09", "07-05-01", "report.json")


def test_environment_info_keys():
	info = evaluation.get_environment_info()
	for key in ("python_version", "platform", "git_commit", "git_branch"):
		assert key in info
