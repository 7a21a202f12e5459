import json

from main import main


def test_sample_catalog_run_prints_trip(capsys):
    assert main(["paris", "lyon", "--budget", "2000", "--days", "4"]) == 0
    trip = json.loads(capsys.readouterr().out)
    assert trip["destinations"][0]["destination"]["id"] == "paris"


def test_missing_catalog_file_exits_with_error(tmp_path, capsys):
    missing = tmp_path / "missing.json"
    assert main(["paris", "--catalog", str(missing), "--budget", "1000", "--days", "3"]) == 1
    err = capsys.readouterr().err
    assert '"code": "INVALID_CATALOG"' in err
    assert '"stage": "fetch"' in err


def test_malformed_catalog_json_exits_with_error(tmp_path, capsys):
    catalog = tmp_path / "broken.json"
    catalog.write_text("[{not json", encoding="utf-8")
    assert main(["--catalog", str(catalog), "--list"]) == 1
    assert '"code": "INVALID_CATALOG"' in capsys.readouterr().err


def test_catalog_record_without_id_exits_with_error(tmp_path, capsys):
    catalog = tmp_path / "noid.json"
    catalog.write_text(json.dumps([{"name": "Nowhere"}]), encoding="utf-8")
    assert main(["--catalog", str(catalog), "--list"]) == 1
    assert '"code": "INVALID_CATALOG"' in capsys.readouterr().err
