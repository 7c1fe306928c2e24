from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from core.auto.exceptions import (
    AutoNotFoundException,
    VersionInvalidException,
    VersionOutdatedException,
    VinExistsException,
)
from core.auto.read_service import AutoReadService
from core.auto.write_service import AutoWriteService
from infrastructure.database.models import Auto, AutoFile, AutoModel, Image
from infrastructure.database.seed import populate
from infrastructure.database.session import Database
from models.auto_enums import AutoKind


def _new_auto(vin="ZFA31200000123456", name="Neu"):
    auto = Auto(
        vin=vin,
        horsepower=110,
        kind=AutoKind.LIMOUSINE,
        price=Decimal("19999.90"),
        discount=Decimal("0.05"),
        available=True,
        release_date=date(2024, 1, 31),
        homepage="https://neu.example.com",
        keywords=["COMFORT"],
    )
    auto.model = AutoModel(name=name, subtitle="neu")
    auto.images = [Image(caption="Front", content_type="image/png")]
    return auto


def _changes(**overrides):
    values = dict(
        vin="WVWZZZ1JZXW000001",
        horsepower=155,
        kind=AutoKind.SUV,
        price=Decimal("12.50"),
        discount=Decimal("0.010"),
        available=False,
        release_date=date(2023, 3, 1),
        homepage="https://changed.example.com",
        keywords=["SPORT", "HYBRID"],
    )
    values.update(overrides)
    return Auto(**values)


def test_create_persists_auto_and_sends_mail(session, mail_service):
    auto_id = AutoWriteService(session, mail_service).create(_new_auto())

    assert auto_id == 7
    auto = AutoReadService(session).find_by_id(auto_id, with_images=True)
    assert auto.version == 1
    assert auto.model.name == "Neu"
    assert [image.caption for image in auto.images] == ["Front"]
    assert mail_service.sent == [
        ("New auto 7", "The auto with model <strong>Neu</strong> has been created")
    ]


def test_create_without_keywords_stores_empty_list(session, mail_service):
    auto = _new_auto()
    auto.keywords = None

    auto_id = AutoWriteService(session, mail_service).create(auto)

    assert AutoReadService(session).find_by_id(auto_id).keywords == []


def test_create_with_existing_vin(session, mail_service):
    with pytest.raises(VinExistsException) as exc_info:
        AutoWriteService(session, mail_service).create(_new_auto(vin="WBA3A5C50CF256651"))

    assert exc_info.value.message == "VIN WBA3A5C50CF256651 already exists"
    assert mail_service.sent == []


def test_update_increments_version(session, mail_service):
    new_version = AutoWriteService(session, mail_service).update(1, _changes(), '"1"')

    assert new_version == 2
    auto = AutoReadService(session).find_by_id(1)
    assert auto.horsepower == 155
    assert auto.kind == AutoKind.SUV
    assert auto.keywords == ["SPORT", "HYBRID"]
    # модель не меняется при update
    assert auto.model.name == "Alpha"


def test_update_sets_updated_timestamp(session, mail_service):
    before = AutoReadService(session).find_by_id(1).updated

    AutoWriteService(session, mail_service).update(1, _changes(), '"1"')

    updated = AutoReadService(session).find_by_id(1).updated
    assert updated.tzinfo is None
    assert updated >= before


def test_update_accepts_newer_version(session, mail_service):
    assert AutoWriteService(session, mail_service).update(1, _changes(), '"7"') == 2


@pytest.mark.parametrize("version", [None, "1", '"abc"', '"1234"', "'1'", '"1"x'])
def test_update_with_invalid_version(session, mail_service, version):
    with pytest.raises(VersionInvalidException):
        AutoWriteService(session, mail_service).update(1, _changes(), version)


def test_update_with_outdated_version(session, mail_service):
    service = AutoWriteService(session, mail_service)
    service.update(1, _changes(), '"1"')

    with pytest.raises(VersionOutdatedException) as exc_info:
        service.update(1, _changes(horsepower=160), '"1"')

    assert exc_info.value.message == "Version 1 is outdated"


def test_concurrent_update_is_outdated(tmp_path, mail_service):
    database = Database(f"sqlite:///{tmp_path / 'concurrent.db'}")
    populate(database)

    with database.get_session() as first, database.get_session() as second:
        stale = AutoReadService(second).find_by_id(1)
        assert stale.version == 1

        AutoWriteService(first, mail_service).update(1, _changes(), '"1"')

        with pytest.raises(VersionOutdatedException):
            AutoWriteService(second, mail_service).update(1, _changes(horsepower=170), '"1"')

    database.dispose()


@pytest.mark.parametrize("auto_id", [None, 999])
def test_update_unknown_auto(session, mail_service, auto_id):
    with pytest.raises(AutoNotFoundException):
        AutoWriteService(session, mail_service).update(auto_id, _changes(), '"1"')


def test_update_with_vin_of_other_auto(session, mail_service):
    with pytest.raises(VinExistsException):
        AutoWriteService(session, mail_service).update(1, _changes(vin="WBA3A5C50CF256651"), '"1"')


def test_delete_removes_owned_rows(session, mail_service):
    service = AutoWriteService(session, mail_service)
    service.add_file(1, b"\x89PNG", "alpha.png", "image/png")

    assert service.delete(1) is True

    with pytest.raises(AutoNotFoundException):
        AutoReadService(session).find_by_id(1)
    for entity in (AutoModel, Image, AutoFile):
        count = session.scalar(select(func.count()).select_from(entity).where(entity.auto_id == 1))
        assert count == 0


def test_delete_unknown_auto(session, mail_service):
    with pytest.raises(AutoNotFoundException):
        AutoWriteService(session, mail_service).delete(999)


def test_add_file_replaces_previous_file(session, mail_service):
    service = AutoWriteService(session, mail_service)
    service.add_file(2, b"first", "first.txt", "text/plain")
    service.add_file(2, b"second", "second.pdf", "application/pdf")

    auto_file = AutoReadService(session).find_file_by_auto_id(2)
    assert auto_file.data == b"second"
    assert auto_file.filename == "second.pdf"
    assert session.scalar(select(func.count(AutoFile.id))) == 1


def test_add_file_for_unknown_auto(session, mail_service):
    with pytest.raises(AutoNotFoundException):
        AutoWriteService(session, mail_service).add_file(999, b"x", "x.bin", None)


def test_find_file_without_file(session):
    assert AutoReadService(session).find_file_by_auto_id(3) is None
