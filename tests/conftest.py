"""Shared test fixtures and configuration."""

from datetime import date

import pytest

from confs_scraper.models import CandidateRecord
from confs_scraper.store import JSONRecordStore, SQLRecordStore

REFERENCE_DATE = date(2026, 1, 1)


def make_fragment(
    name: str = "PyCon DE",
    url: str = "https://pycon.de/?utm_source=confs.tech",
    location: str = "Berlin, Germany・May 3 - May 5",
    cfp_url: str = "https://pycon.de/cfp/",
    cfp_text: str = "CFP closes Feb 28",
    topics: tuple[str, ...] = ("#python", "#data"),
) -> str:
    """Build one confs.tech listing entry. Pass None to leave a section out."""
    parts = ["<dl>"]
    if name is not None:
        parts.append(
            f'<dt class="visuallyHidden">Conference name</dt><dd><a href="{url}">{name}</a></dd>'
        )
    if location is not None:
        parts.append(
            f'<dt class="visuallyHidden">Location and date</dt><dd>{location}</dd>'
        )
    if cfp_url is not None:
        parts.append(
            f'<dt class="visuallyHidden">Call for paper end date</dt>'
            f'<dd><a href="{cfp_url}">{cfp_text}</a></dd>'
        )
    parts.append(
        '<dt class="visuallyHidden">Twitter username</dt>'
        '<dd><a href="https://twitter.com/pyconde">@pyconde</a></dd>'
        '<dt class="visuallyHidden">Link to code of conduct</dt>'
        '<dd><a href="https://pycon.de/coc"> Code of conduct </a></dd>'
    )
    parts.append("</dl>")
    if topics:
        items = "".join(f"<li> {t} </li>" for t in topics)
        parts.append(f'<ul class="ConferenceItem_topics__87OPm">{items}</ul>')
    return "".join(parts)


@pytest.fixture
def fragment() -> str:
    return make_fragment()


@pytest.fixture
def fragments() -> list[str]:
    """Three distinct listing entries."""
    return [
        make_fragment(),
        make_fragment(
            name="JSConf EU",
            url="https://jsconf.eu/",
            location="Amsterdam, Netherlands・Jun 10",
            cfp_url="https://sessionize.com/jsconf-eu",
            topics=("#javascript",),
        ),
        make_fragment(
            name="RustFest",
            url="https://rustfest.global",
            location="Online",
            cfp_url=None,
            topics=(),
        ),
    ]


@pytest.fixture
def candidate() -> CandidateRecord:
    return CandidateRecord(
        name="PyCon DE",
        url="https://pycon.de/",
        start_date="May 3",
        end_date="May 5",
        city="Berlin",
        country="Germany",
        cfp_url="https://pycon.de/cfp",
        cfp_end_date="Feb 28",
        topics=["#python"],
    )


@pytest.fixture
def json_store(tmp_path) -> JSONRecordStore:
    return JSONRecordStore(tmp_path / "conferences.json")


@pytest.fixture
def sql_store():
    store = SQLRecordStore("sqlite://")
    yield store
    store.close()


@pytest.fixture(params=["json", "sql"])
def store(request, tmp_path):
    """Each record store implementation in turn."""
    if request.param == "json":
        yield JSONRecordStore(tmp_path / "conferences.json")
    else:
        sql = SQLRecordStore(f"sqlite:///{tmp_path / 'conferences.db'}")
        yield sql
        sql.close()
