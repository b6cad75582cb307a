"""Tests for the import report and its file formats."""

import csv
import json

from jobimport.core.model import RemoteFolder, RemoteJob
from jobimport.importer.report import ImportReport, save_items_json, save_report_csv, save_report_json
from jobimport.messages import format_failed_exception, format_success

FOLDER = "com.cloudbees.hudson.plugins.folder.Folder"
JOB = "hudson.model.FreeStyleProject"


def make_items():
    folder = RemoteFolder(name="folderA", impl=FOLDER, url="http://r/job/folderA")
    job2 = RemoteJob(name="job2", impl=JOB, url="http://r/job/folderA/job/job2", parent=folder)
    job1 = RemoteJob(name="job1", impl=JOB, url="http://r/job/folderA/job/job1", parent=folder)
    folder.add_child(job2)
    folder.add_child(job1)
    return folder, job1, job2


def test_report_is_sorted_and_tracks_outcomes():
    """Test the report iterates by full name whatever the insertion order."""
    folder, job1, job2 = make_items()
    report = ImportReport()
    report.set_status(job2, format_failed_exception(RuntimeError("boom")))
    report.set_status(job1, format_success())
    report.ensure(folder)

    assert list(report) == [folder, job1, job2]
    assert report.get(folder).status == "Pending"
    assert report.get(job2).status == "Failed - boom"
    assert report.succeeded == [job1]
    assert report.failed == [job2]
    assert job1 in report
    assert len(report) == 3


def test_exception_without_message():
    assert format_failed_exception(KeyError()) == "Failed - KeyError"


def test_save_report_json_and_csv(tmp_path):
    folder, job1, job2 = make_items()
    job1.missing_plugins = {"b": "2.0", "c": "1.1"}
    report = ImportReport()
    report.set_status(job1, format_success())
    report.set_status(folder, format_success())

    json_path = tmp_path / "report.json"
    save_report_json(report, json_path)
    data = json.loads(json_path.read_text())

    assert data["version"] == 1
    assert [row["full_name"] for row in data["items"]] == ["folderA", "folderA/job1"]
    assert data["items"][0]["folder"] is True
    assert data["items"][1]["missing_plugins"] == {"b": "2.0", "c": "1.1"}

    csv_path = tmp_path / "report.csv"
    save_report_csv(report, csv_path)
    with csv_path.open(newline="") as f:
        rows = list(csv.DictReader(f))

    assert rows[1]["full_name"] == "folderA/job1"
    assert rows[1]["status"] == "Success"
    assert rows[1]["missing_plugins"] == "b@2.0|c@1.1"
    assert rows[0]["folder"] == "yes"


def test_save_items_json(tmp_path):
    folder, job1, job2 = make_items()
    path = tmp_path / "items.json"

    save_items_json([job2, folder, job1], path)
    data = json.loads(path.read_text())

    assert [d["full_name"] for d in data] == ["folderA", "folderA/job1", "folderA/job2"]
    assert data[0]["parent"] is None
    assert data[1]["parent"] == "folderA"
    assert data[2]["impl"] == JOB
