"""
Tests for the sensor inventory: storage, scan batches, settings and CLI.
"""

import json
from datetime import date

import pytest

from gs1_decoder import GS1Decoder, decode
from inventory import (
    ScanBatch,
    ScanStatus,
    SensorNotFound,
    SensorStatus,
    SensorStorage,
    expiry_status,
    load_settings,
)
from gs1_decoder.log_config import reset_logging
from inventory.cli import main as cli_main


PRODUCT = "0100012345678901"
SERIAL_A = "21123456789012"
SERIAL_B = "21999999999999"
BARCODE_A = PRODUCT + "17251231" + SERIAL_A
BARCODE_B = PRODUCT + "17260630" + SERIAL_B + "10LOT77"


@pytest.fixture
def storage(tmp_path):
    return SensorStorage(backend="json", data_dir=tmp_path)


@pytest.fixture
def mongo_storage():
    mongomock = pytest.importorskip("mongomock")
    return SensorStorage(backend="mongodb", db=mongomock.MongoClient().t1d_stock)


@pytest.fixture(params=["json", "mongodb"])
def any_storage(request, tmp_path):
    if request.param == "json":
        return SensorStorage(backend="json", data_dir=tmp_path)
    return request.getfixturevalue("mongo_storage")


class TestStorage:
    """Repository operations, run against both backends."""

    def test_add_if_absent(self, any_storage):
        result = any_storage.add_if_absent(decode(BARCODE_A))

        assert result.accepted
        assert result.sensor.serial_number == "123456789012"
        assert result.sensor.status == SensorStatus.AVAILABLE
        assert result.sensor.product_type == "Dexcom G7"
        assert [s.id for s in any_storage.list_sensors()] == [result.sensor.id]

    def test_duplicate_serial_rejected(self, any_storage):
        first = any_storage.add_if_absent(decode(BARCODE_A))
        second = any_storage.add_if_absent(decode(BARCODE_A))

        assert not second.accepted
        assert second.sensor.id == first.sensor.id
        assert len(any_storage.list_sensors()) == 1

    def test_lot_and_product_type_stored(self, any_storage):
        sensor = any_storage.add_if_absent(decode(BARCODE_B), product_type="Dexcom ONE+").sensor

        stored = any_storage.get(sensor.id)
        assert stored.lot_number == "LOT77"
        assert stored.product_type == "Dexcom ONE+"
        assert stored.expiry_date == date(2026, 6, 30)

    def test_set_status(self, any_storage):
        sensor = any_storage.add_if_absent(decode(BARCODE_A)).sensor

        updated = any_storage.set_status(sensor.id, SensorStatus.LOST)

        assert updated.status == SensorStatus.LOST
        assert any_storage.available_sensors() == []
        assert [s.id for s in any_storage.notify_sensors()] == [sensor.id]

    def test_set_status_by_name(self, any_storage):
        sensor = any_storage.add_if_absent(decode(BARCODE_A)).sensor

        assert any_storage.set_status(sensor.id, "broken").status == SensorStatus.BROKEN
        assert any_storage.set_status(sensor.id, "Available").status == SensorStatus.AVAILABLE

    def test_set_status_unknown_sensor(self, any_storage):
        with pytest.raises(SensorNotFound):
            any_storage.set_status("nope", SensorStatus.LOST)

    def test_set_status_unknown_value(self, any_storage):
        sensor = any_storage.add_if_absent(decode(BARCODE_A)).sensor

        with pytest.raises(ValueError):
            any_storage.set_status(sensor.id, "misplaced")

    def test_remove(self, any_storage):
        sensor = any_storage.add_if_absent(decode(BARCODE_A)).sensor

        assert any_storage.remove(sensor.id)
        assert not any_storage.remove(sensor.id)
        assert any_storage.list_sensors() == []
        assert not any_storage.contains_serial("123456789012")

    def test_mark_as_used(self, any_storage):
        sensor = any_storage.add_if_absent(decode(BARCODE_A)).sensor

        assert any_storage.mark_as_used(sensor.id)
        assert any_storage.get(sensor.id) is None

    def test_listed_by_expiry(self, any_storage):
        later = any_storage.add_if_absent(decode(BARCODE_B)).sensor
        sooner = any_storage.add_if_absent(decode(BARCODE_A)).sensor

        assert [s.id for s in any_storage.list_sensors()] == [sooner.id, later.id]

    def test_find_by_serial(self, any_storage):
        any_storage.add_if_absent(decode(BARCODE_A))

        assert any_storage.find_by_serial("123456789012") is not None
        assert any_storage.find_by_serial("") is None
        assert any_storage.find_by_serial("000000000000") is None


class TestJSONBackend:

    def test_persists_across_instances(self, tmp_path):
        SensorStorage(backend="json", data_dir=tmp_path).add_if_absent(decode(BARCODE_A))

        reopened = SensorStorage(backend="json", data_dir=tmp_path)
        assert reopened.contains_serial("123456789012")

    def test_file_shape(self, storage, tmp_path):
        storage.add_if_absent(decode(BARCODE_A))

        payload = json.loads((tmp_path / "sensors.json").read_text(encoding="utf-8"))
        doc = payload["sensors"][0]
        assert doc["serial_number"] == "123456789012"
        assert doc["expiry_date"] == "2025-12-31"
        assert doc["status"] == "Available"

    def test_unknown_backend(self, tmp_path):
        with pytest.raises(ValueError):
            SensorStorage(backend="sqlite", data_dir=tmp_path)

    def test_connection(self, storage):
        assert storage.check_connection()


class TestScanBatch:
    """Staging scans before they are saved."""

    def test_stage_and_commit(self, storage):
        batch = ScanBatch(storage)

        assert batch.submit(BARCODE_A).status == ScanStatus.STAGED
        assert batch.submit(BARCODE_B).status == ScanStatus.STAGED
        assert storage.list_sensors() == []

        added = batch.commit()

        assert len(added) == 2
        assert batch.pending == []
        assert len(storage.list_sensors()) == 2

    def test_repeated_frame_is_duplicate(self, storage):
        batch = ScanBatch(storage)

        batch.submit(BARCODE_A)
        outcome = batch.submit(BARCODE_A)

        assert outcome.status == ScanStatus.DUPLICATE
        assert len(batch.pending) == 1

    def test_already_stored_is_duplicate(self, storage):
        storage.add_if_absent(decode(BARCODE_A))

        outcome = ScanBatch(storage).submit(BARCODE_A)

        assert outcome.status == ScanStatus.DUPLICATE
        assert outcome.record.serial_number == "123456789012"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_nothing_in_view(self, storage, raw):
        assert ScanBatch(storage).submit(raw).status == ScanStatus.EMPTY

    def test_rejected(self, storage):
        outcome = ScanBatch(storage).submit("https://example.com")

        assert outcome.status == ScanStatus.REJECTED
        assert outcome.failure.reason.value == "IncompleteRecord"

    def test_discard(self, storage):
        batch = ScanBatch(storage)
        batch.submit(BARCODE_A)
        batch.discard()

        assert batch.commit() == []
        assert storage.list_sensors() == []

    def test_commit_skips_serials_stored_meanwhile(self, storage):
        batch = ScanBatch(storage)
        batch.submit(BARCODE_A)
        storage.add_if_absent(decode(BARCODE_A))

        assert batch.commit() == []
        assert len(storage.list_sensors()) == 1

    def test_consume_scanner(self, storage):
        scanner = iter([None, BARCODE_A, BARCODE_A, "junk", BARCODE_B])

        outcomes = ScanBatch(storage).consume(scanner)

        assert [o.status for o in outcomes] == [
            ScanStatus.EMPTY,
            ScanStatus.STAGED,
            ScanStatus.DUPLICATE,
            ScanStatus.REJECTED,
            ScanStatus.STAGED,
        ]

    def test_product_type_and_decoder(self, storage):
        batch = ScanBatch(storage, decoder=GS1Decoder("generic"), product_type="Dexcom G6")
        batch.submit(PRODUCT + "17251231" + "21ABC987")

        sensor = batch.commit()[0]
        assert sensor.serial_number == "ABC987"
        assert sensor.product_type == "Dexcom G6"

    def test_silent_without_logging_configured(self, storage, capsys):
        reset_logging()
        batch = ScanBatch(storage)

        batch.consume([BARCODE_A, BARCODE_A, "junk", BARCODE_B])
        sensor = batch.commit()[0]
        storage.set_status(sensor.id, SensorStatus.LOST)
        storage.remove(sensor.id)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""


class TestSettings:

    def test_defaults(self):
        settings = load_settings({})

        assert settings["serial_profile"] == "fixed"
        assert settings["product_type"] == "Dexcom G7"
        assert settings["near_expiry_months"] == 1

    def test_environment_overrides(self):
        settings = load_settings({
            "SENSOR_STOCK_SERIAL_PROFILE": "generic",
            "SENSOR_STOCK_NEAR_EXPIRY_MONTHS": "3",
        })

        assert settings["serial_profile"] == "generic"
        assert settings["near_expiry_months"] == 3

    def test_bad_profile(self):
        with pytest.raises(ValueError):
            load_settings({"SENSOR_STOCK_SERIAL_PROFILE": "both"})

    def test_bad_integer(self):
        with pytest.raises(ValueError):
            load_settings({"SENSOR_STOCK_NEAR_EXPIRY_MONTHS": "soon"})


class TestExpiryStatus:

    def test_statuses(self):
        today = date(2025, 1, 15)

        assert expiry_status(date(2025, 1, 14), 1, today=today) == "Expired"
        assert expiry_status(date(2025, 1, 15), 1, today=today) == "Near Expiry"
        assert expiry_status(date(2025, 2, 15), 1, today=today) == "Near Expiry"
        assert expiry_status(date(2025, 2, 16), 1, today=today) == "Valid"


class TestInventoryCLI:
    """sensor-stock"""

    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for key in ("SENSOR_STOCK_SERIAL_PROFILE", "SENSOR_STOCK_PRODUCT_TYPE",
                    "SENSOR_STOCK_NEAR_EXPIRY_MONTHS"):
            monkeypatch.delenv(key, raising=False)
        yield
        reset_logging()

    def _run(self, tmp_path, *args):
        return cli_main(["--backend", "json", "--data-dir", str(tmp_path), *args])

    def test_scan_and_list(self, tmp_path, capsys):
        assert self._run(tmp_path, "scan", BARCODE_A, BARCODE_B) == 0
        assert "Added 2 sensor(s)" in capsys.readouterr().out

        assert self._run(tmp_path, "list", "--json") == 0
        docs = json.loads(capsys.readouterr().out)
        assert [d["serial_number"] for d in docs] == ["123456789012", "999999999999"]
        assert "_id" not in docs[0]

    def test_verbose_logs_to_stderr(self, tmp_path, capsys):
        assert self._run(tmp_path, "-v", "scan", BARCODE_A) == 0

        captured = capsys.readouterr()
        assert "sensor_added" in captured.err
        assert "sensor_added" not in captured.out

    def test_quiet_by_default(self, tmp_path, capsys):
        self._run(tmp_path, "scan", BARCODE_A)

        assert capsys.readouterr().err == ""

    def test_scan_rejects(self, tmp_path, capsys):
        assert self._run(tmp_path, "scan", "junk") == 1
        assert "Could not decode" in capsys.readouterr().err

    def test_set_status_and_remove(self, tmp_path, capsys):
        self._run(tmp_path, "scan", BARCODE_A)
        sensor_id = SensorStorage(backend="json", data_dir=tmp_path).list_sensors()[0].id
        capsys.readouterr()

        assert self._run(tmp_path, "set-status", sensor_id, "lost") == 0
        assert "Lost/Stolen" in capsys.readouterr().out

        assert self._run(tmp_path, "list") == 0
        assert "To notify supplier:" in capsys.readouterr().out

        assert self._run(tmp_path, "remove", sensor_id) == 0
        assert self._run(tmp_path, "remove", sensor_id) == 1

    def test_set_status_unknown(self, tmp_path, capsys):
        assert self._run(tmp_path, "set-status", "nope", "lost") == 1
        assert "No sensor" in capsys.readouterr().err

    def test_list_empty(self, tmp_path, capsys):
        assert self._run(tmp_path, "list") == 0
        assert "No sensors yet" in capsys.readouterr().out
