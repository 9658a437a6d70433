"""End-to-end tests for the reconstruction pipeline and the command line."""
import io
import os
from decimal import Decimal

import pytest

from payroll_recon import main as cli
from payroll_recon.extractors import record_reader
from payroll_recon.pipelines import pipeline
from payroll_recon.utilities import config
from payroll_recon.utilities.exceptions import EmptyDatasetError, NoDepartmentFilesError

EXPECTED_SAMPLE_OUTPUT = (
    "Employee #1 (Bob) earned $147.25 during the period\n"
    "Employee #7 (Alice) earned $360.00 during the period\n"
    "Employee #10 (Carol) earned $102.00 during the period\n"
    "Total employees paid: 3\n"
    "Total regular pay: $472.00\n"
    "Total overtime pay: $137.25\n"
)


def run(directory, **kwargs):
    stream = io.StringIO()
    batch = pipeline.run_full_pipeline(directory, year=2015, stream=stream, **kwargs)
    return batch, stream.getvalue()


class TestRunFullPipeline:

    def test_sample_output(self, sample_dir):
        batch, output = run(sample_dir)
        assert output == EXPECTED_SAMPLE_OUTPUT
        assert batch.employees_paid == 3
        assert batch.total_regular_pay == Decimal("472.00")
        assert batch.total_ot_pay == Decimal("137.25")

    def test_single_employee_scenario(self, write_file, tmp_path):
        write_file("A1", "A1-7:Alice:Engineer:20.00:30.00")
        write_file("01052015", "7,10,0")
        write_file("01062015", "7,5,2")

        _, output = run(tmp_path)

        assert output.splitlines()[0] == "Employee #7 (Alice) earned $360.00 during the period"

    def test_deterministic(self, sample_dir):
        assert run(sample_dir)[1] == run(sample_dir)[1]

    def test_duplicate_line_counted_once(self, write_file, tmp_path):
        write_file("A1", "A1-7:Alice:Engineer:10.00:0")
        write_file("01052015", "7,8,0", "7,8,0")
        write_file("01062015", "7,8,0", "7,8.0,0")

        _, output = run(tmp_path)

        # 8 + 8.0 hours at 10.00
        assert "earned $160.00" in output

    def test_unknown_employee_excluded(self, write_file, tmp_path):
        write_file("A1", "A1-1:Ann:Clerk:10.00:15.00")
        write_file("01052015", "1,1,1", "11,100,100", "10,100,100")

        batch, output = run(tmp_path)

        assert output.count("Employee #") == 1
        assert "Employee #1 (Ann) earned $25.00" in output
        assert batch.employees_paid == 1
        assert batch.total_regular_pay == Decimal("10.00")
        assert batch.total_ot_pay == Decimal("15.00")

    @pytest.mark.parametrize("bad_line", ["2,1e40,0", "9" * 5000 + ",1,0"])
    def test_unusable_payroll_line_is_skipped(self, write_file, tmp_path, bad_line):
        write_file("A1", "A1-1:Ann:Clerk:10.00:15.00", "A1-2:Ben:Clerk:10.00:15.00")
        write_file("01052015", "1,1,0", bad_line, "2,2,0")

        _, output = run(tmp_path)

        assert output == (
            "Employee #1 (Ann) earned $10.00 during the period\n"
            "Employee #2 (Ben) earned $20.00 during the period\n"
            "Total employees paid: 2\n"
            "Total regular pay: $30.00\n"
            "Total overtime pay: $0.00\n"
        )

    def test_all_employees_unknown(self, write_file, tmp_path):
        write_file("A1", "A1-1:Ann:Clerk:10.00:15.00")
        write_file("01052015", "2,8")

        _, output = run(tmp_path)

        assert output == (
            "Total employees paid: 0\n"
            "Total regular pay: $0.00\n"
            "Total overtime pay: $0.00\n"
        )

    def test_no_department_files_is_fatal(self, write_file, tmp_path):
        write_file("01052015", "7,8")
        stream = io.StringIO()
        with pytest.raises(NoDepartmentFilesError):
            pipeline.run_full_pipeline(tmp_path, year=2015, stream=stream)
        assert stream.getvalue() == ""

    def test_only_malformed_payroll_is_fatal(self, write_file, tmp_path):
        write_file("A1", "A1-1:Ann:Clerk:10.00:15.00")
        write_file("01052015", "garbage", "")
        with pytest.raises(EmptyDatasetError):
            run(tmp_path)

    def test_only_malformed_departments_is_fatal(self, write_file, tmp_path):
        write_file("A1", "not a department line")
        write_file("01052015", "1,8")
        with pytest.raises(EmptyDatasetError):
            run(tmp_path)

    def test_strict_dates_skips_impossible_days(self, write_file, tmp_path):
        write_file("A1", "A1-1:Ann:Clerk:10.00:15.00")
        write_file("01052015", "1,1")
        write_file("02302015", "1,5")

        assert "earned $60.00" in run(tmp_path)[1]
        assert "earned $10.00" in run(tmp_path, strict_dates=True)[1]


class TestMain:

    def test_success(self, sample_dir, capsys):
        assert cli.main(["-d", str(sample_dir), "--year", "2015"]) == 0
        assert capsys.readouterr().out == EXPECTED_SAMPLE_OUTPUT

    def test_fatal_input_exits_one(self, write_file, tmp_path, capsys):
        write_file("01052015", "7,8")
        assert cli.main(["-d", str(tmp_path), "--year", "2015"]) == 1
        assert "Employee #" not in capsys.readouterr().out

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["--directory"],
            ["-x", "."],
            ["-d", ".", "extra"],
            ["-d", ".", "--year", "15"],
        ],
    )
    def test_usage_errors_exit_one(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(argv)
        assert exc_info.value.code == 1
        assert "usage:" in capsys.readouterr().err

    def test_missing_directory_exits_one(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["-d", str(tmp_path / "missing")])
        assert exc_info.value.code == 1
        assert "does not exist" in capsys.readouterr().err

    @pytest.mark.parametrize("denied_mode", [os.R_OK, os.X_OK])
    def test_inaccessible_directory_exits_one(self, sample_dir, monkeypatch, capsys, denied_mode):
        monkeypatch.setattr(record_reader.os, "access", lambda path, mode: mode != denied_mode)
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["-d", str(sample_dir)])
        assert exc_info.value.code == 1
        assert "Employee #" not in capsys.readouterr().out

    def test_lowercase_log_level_default(self, sample_dir, monkeypatch, capsys):
        monkeypatch.setattr(config, "DEFAULT_LOG_LEVEL", "info")
        assert cli.main(["-d", str(sample_dir), "--year", "2015"]) == 0
        assert capsys.readouterr().out == EXPECTED_SAMPLE_OUTPUT

    def test_lowercase_log_level_option(self, sample_dir, capsys):
        assert cli.main(["-d", str(sample_dir), "--year", "2015", "--log-level", "debug"]) == 0
        assert capsys.readouterr().out == EXPECTED_SAMPLE_OUTPUT

    @pytest.mark.parametrize(
        "setting, value",
        [("DEFAULT_LOG_LEVEL", "VERBOSE"), ("DEFAULT_YEAR", "20x5")],
    )
    def test_bad_environment_default_exits_one(self, sample_dir, monkeypatch, capsys, setting, value):
        monkeypatch.setattr(config, setting, value)
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["-d", str(sample_dir)])
        assert exc_info.value.code == 1
        assert "usage:" in capsys.readouterr().err

    def test_year_default_from_environment(self, sample_dir, monkeypatch, capsys):
        monkeypatch.setattr(config, "DEFAULT_YEAR", "2015")
        assert cli.main(["-d", str(sample_dir)]) == 0
        assert capsys.readouterr().out == EXPECTED_SAMPLE_OUTPUT
