"""Integration tests for experiment files and the captain's log."""

from pathlib import Path

import pandas as pd
import pytest

from starlog.abstractions import ExperimentIdentifier, ExperimentRecord
from starlog.config import LogConfig
from starlog.errors import ExperimentExistsError, StarlogIOError
from starlog.experiment_log import ExperimentLogger, header_lines, log_experiment
from starlog.values import LoggableValue


def read_lines(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()


class Unprintable:
    """A value whose textual representation fails."""

    def __str__(self):
        raise RuntimeError("cannot render")


class TestLogExperiment:
    """Tests for the log_experiment entry point."""

    def test_path_without_tag(self, temp_dir):
        path = log_experiment("x", description="D", version="1.0", number=1, folder=temp_dir)
        assert path == Path(temp_dir) / "1.0" / "exp.1.0.1.txt"
        assert path.exists()

    def test_path_with_tag(self, temp_dir):
        path = log_experiment("x", description="D", tag="ml", version="1.0", number=1, folder=temp_dir)
        assert path == Path(temp_dir) / "1.0" / "exp.ml.1.0.1.txt"

    def test_contents_in_order(self, temp_dir):
        """Header, stardate, description, then every value in order."""
        path = log_experiment(
            "Final AUC:", 0.789, "",
            description="D", tag="ml", version="1.0", number=1, folder=temp_dir,
        )
        lines = read_lines(path)

        header = lines[0]
        assert "1" in header and "1.0" in header and "ml" in header
        assert header == "Experiment #1 (v:1.0) [tag:ml]"

        stardate_index = lines.index("Execution Date and Time:") + 1
        description_index = lines.index("D")
        auc_index = lines.index("Final AUC:")
        assert stardate_index < description_index < auc_index
        assert lines[auc_index:] == ["Final AUC:", "0.789", ""]

    def test_header_without_tag(self, temp_dir):
        path = log_experiment(description="D", version="2.0", number=3, folder=temp_dir)
        assert read_lines(path)[0] == "Experiment #3 (v:2.0)"

    def test_refuses_overwrite(self, temp_dir):
        """Logging the same identifiers twice fails and keeps the first file."""
        path = log_experiment("first", description="D", tag="ml", version="1.0", number=1, folder=temp_dir)
        original = path.read_text(encoding="utf-8")

        with pytest.raises(ExperimentExistsError) as excinfo:
            log_experiment("second", description="D2", tag="ml", version="1.0", number=1, folder=temp_dir)

        assert excinfo.value.path == path
        assert "already exists" in str(excinfo.value)
        assert path.read_text(encoding="utf-8") == original

    def test_existing_error_is_file_exists_error(self, temp_dir):
        log_experiment(description="D", number=1, folder=temp_dir)
        with pytest.raises(FileExistsError):
            log_experiment(description="D", number=1, folder=temp_dir)

    def test_refused_call_does_not_touch_master_log(self, temp_dir):
        log_experiment(description="D", number=1, folder=temp_dir)
        master = Path(temp_dir) / "capitan.log"
        before = master.read_text(encoding="utf-8")

        with pytest.raises(ExperimentExistsError):
            log_experiment(description="D", number=1, folder=temp_dir)

        assert master.read_text(encoding="utf-8") == before

    def test_empty_dict_written_as_text(self, temp_dir):
        """An empty dict still gets its own line between its neighbours."""
        path = log_experiment("Params:", {}, "end", description="D", number=1, folder=temp_dir)
        lines = read_lines(path)
        start = lines.index("Params:")
        assert lines[start:start + 3] == ["Params:", "{}", "end"]

    def test_relative_version_writes_nothing(self, temp_dir):
        """A '..' version is refused before any file lands outside the folder."""
        folder = Path(temp_dir) / "logs"
        with pytest.raises(ValueError):
            log_experiment("x", description="D", version="..", number=1, folder=folder)

        assert sorted(p.name for p in Path(temp_dir).iterdir()) == []

    def test_tag_separates_experiments(self, temp_dir):
        """Same version and number with different tags are different files."""
        a = log_experiment(description="D", tag="ml", number=1, folder=temp_dir)
        b = log_experiment(description="D", tag="nlp", number=1, folder=temp_dir)
        c = log_experiment(description="D", number=1, folder=temp_dir)
        assert len({a, b, c}) == 3

    def test_config_supplies_defaults(self, log_config):
        path = log_experiment(description="D", number=5, config=log_config.with_overrides(tag="cv"))
        assert path == Path(log_config.folder) / "1.0" / "exp.cv.1.0.5.txt"

    def test_explicit_arguments_override_config(self, log_config):
        path = log_experiment(description="D", number=1, version="3.2", tag="", config=LogConfig(
            folder=log_config.folder, version="9.9", tag="old",
        ))
        assert path == Path(log_config.folder) / "3.2" / "exp.3.2.1.txt"


class TestMasterLog:
    """Tests for the captain's log side effect."""

    def test_two_lines_per_call(self, temp_dir):
        """The captain's log grows by exactly two lines per call."""
        master = Path(temp_dir) / "capitan.log"
        for number in range(1, 4):
            log_experiment("value", description=f"run {number}", number=number, folder=temp_dir)
            assert len(read_lines(master)) == 2 * number

    def test_timestamp_matches_experiment_file(self, temp_dir):
        path = log_experiment(description="D", number=1, folder=temp_dir)
        lines = read_lines(path)
        stardate = lines[lines.index("Execution Date and Time:") + 1]

        master_lines = read_lines(Path(temp_dir) / "capitan.log")
        assert master_lines[0] == f"Experiment v:1.0.1 - Stardate: {stardate}"
        assert master_lines[1] == "\tD"


class TestTablesAndPlots:
    """Tests for tabular and plot values."""

    def test_table_is_pretty_printed(self, temp_dir, results_table):
        path = log_experiment("Results:", results_table, description="D", number=1, folder=temp_dir)
        lines = read_lines(path)
        start = lines.index("Results:") + 1

        assert set(lines[start]) == {"="}
        assert "model" in lines[start + 1]
        assert set(lines[start + 2]) == {"-"}
        assert any("xgb" in line for line in lines[start:])
        assert str(results_table) not in "\n".join(lines)

    def test_plots_saved_with_letters(self, temp_dir, figure, second_figure):
        path = log_experiment(
            "Loss:", figure, "Bars:", second_figure,
            description="D", tag="ml", version="1.0", number=1, folder=temp_dir,
        )
        directory = Path(temp_dir) / "1.0"
        plot_a = directory / "exp.ml.1.0.1-a.png"
        plot_b = directory / "exp.ml.1.0.1-b.png"

        assert plot_a.exists()
        assert plot_b.exists()
        lines = read_lines(path)
        assert lines[lines.index("Loss:") + 1] == str(plot_a)
        assert lines[lines.index("Bars:") + 1] == str(plot_b)

    def test_existing_plot_fails_before_writing(self, temp_dir, figure):
        directory = Path(temp_dir) / "1.0"
        directory.mkdir(parents=True)
        (directory / "exp.1.0.1-a.png").write_bytes(b"old plot")

        with pytest.raises(ExperimentExistsError):
            log_experiment(figure, description="D", number=1, folder=temp_dir)

        assert not (directory / "exp.1.0.1.txt").exists()
        assert not (Path(temp_dir) / "capitan.log").exists()
        assert (directory / "exp.1.0.1-a.png").read_bytes() == b"old plot"


class TestFailedWrites:
    """Tests for cleanup after a write fails partway."""

    def test_partial_files_removed(self, temp_dir, figure):
        with pytest.raises(RuntimeError):
            log_experiment("before", figure, Unprintable(), description="D", number=1, folder=temp_dir)

        directory = Path(temp_dir) / "1.0"
        assert not (directory / "exp.1.0.1.txt").exists()
        assert not (directory / "exp.1.0.1-a.png").exists()
        assert not (Path(temp_dir) / "capitan.log").exists()

    def test_can_retry_after_failure(self, temp_dir):
        with pytest.raises(RuntimeError):
            log_experiment(Unprintable(), description="D", number=1, folder=temp_dir)

        path = log_experiment("ok", description="D", number=1, folder=temp_dir)
        assert "ok" in read_lines(path)

    def test_unwritable_folder(self, temp_dir):
        """A file blocking the folder surfaces as StarlogIOError."""
        blocker = Path(temp_dir) / "logs"
        blocker.write_text("not a directory")
        with pytest.raises(StarlogIOError):
            log_experiment(description="D", number=1, folder=blocker)


class TestExperimentLogger:
    """Tests for the ExperimentLogger class."""

    def test_record_for_uses_config(self, log_config):
        exp_logger = ExperimentLogger(log_config.with_overrides(tag="ml"))
        record = exp_logger.record_for("a", "", description="D", number=2)
        assert record.identifier == ExperimentIdentifier(version="1.0", number=2, tag="ml")
        assert len(record.entries) == 2

    def test_write_prebuilt_record(self, log_config):
        exp_logger = ExperimentLogger(log_config)
        record = ExperimentRecord(
            identifier=ExperimentIdentifier(version="1.0", number=9),
            description="Prebuilt",
            timestamp="2024-01-01 00:00:00",
            entries=[LoggableValue.text("hello"), LoggableValue.blank()],
        )
        path = exp_logger.write(record)
        lines = read_lines(path)

        assert lines == header_lines(record) + ["hello", ""]

    def test_history(self, log_config):
        exp_logger = ExperimentLogger(log_config)
        exp_logger.log(description="first", number=1)
        exp_logger.log(description="second", number=2)

        history = exp_logger.history()
        assert [entry.number for entry in history] == [1, 2]
        assert [entry.description for entry in history] == ["first", "second"]

    def test_csv_table_roundtrip_content(self, log_config, temp_dir):
        """A table read from disk is logged the same as an in-memory one."""
        csv_path = Path(temp_dir) / "metrics.csv"
        pd.DataFrame({"epoch": [1, 2], "loss": [0.5, 0.25]}).to_csv(csv_path, index=False)

        exp_logger = ExperimentLogger(log_config)
        path = exp_logger.log(LoggableValue.table(pd.read_csv(csv_path)), description="D", number=1)
        text = path.read_text(encoding="utf-8")
        assert "epoch" in text
        assert "0.25" in text
