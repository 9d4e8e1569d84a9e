"""Extract conference fields from confs.tech listing fragments.

Each fragment is the inner markup of one listing entry: a definition list
where visually hidden ``<dt>`` labels describe the ``<dd>`` that follows,
plus a list of topic tags.
"""

from typing import Optional

from bs4 import BeautifulSoup, Tag
from rich.console import Console

from confs_scraper.models import UNKNOWN, CandidateRecord
from confs_scraper.normalizers.location import find_date_token, parse_location_date

console = Console()

# Label text -> (field, rule) pairs read from the value element.
# Rules:
#   link_text     text of the first <a>
#   link_href     href of the first <a>
#   text          full text of the value element
#   date          first "Month Day" token in the value text
LABEL_RULES: dict[str, list[tuple[str, str]]] = {
    "Conference name": [("name", "link_text"), ("url", "link_href")],
    "Location and date": [("location_date", "text")],
    "Call for paper end date": [("cfp_url", "link_href"), ("cfp_end_date", "date")],
    "Twitter username": [("twitter", "link_href")],
    "Mastodon username": [("mastodon", "link_href")],
    "Link to code of conduct": [("code_of_conduct", "link_href")],
}

# CSS-module class; the hashed suffix changes between site builds
TOPICS_CLASS_PREFIX = "ConferenceItem_topics"


def _squash(text: Optional[str]) -> str:
    return " ".join((text or "").split())


def find_labeled_value(soup: BeautifulSoup, label: str) -> Optional[Tag]:
    """Return the element following the first <dt> whose text contains label."""
    for term in soup.find_all("dt"):
        if label in term.get_text():
            return term.find_next_sibling()
    return None


def read_value(value: Tag, rule: str) -> str:
    """Apply one extraction rule to a value element."""
    if rule == "text":
        return _squash(value.get_text())
    if rule == "date":
        return find_date_token(_squash(value.get_text()))

    link = value if value.name == "a" else value.find("a")
    if link is None:
        return ""
    if rule == "link_text":
        return _squash(link.get_text())
    if rule == "link_href":
        return (link.get("href") or "").strip()

    raise ValueError(f"Unknown extraction rule: {rule}")


def extract_topics(soup: BeautifulSoup) -> list[str]:
    """Collect topic tags in document order, skipping empty ones."""
    topics = []
    for topic_list in soup.find_all(
        "ul", class_=lambda c: bool(c) and c.startswith(TOPICS_CLASS_PREFIX)
    ):
        for item in topic_list.find_all("li"):
            topic = _squash(item.get_text())
            if topic:
                topics.append(topic)
    return topics


def extract_fragment(html: str) -> CandidateRecord:
    """Parse one listing fragment into a candidate record.

    Missing labels or missing child elements leave the field as UNKNOWN.
    """
    soup = BeautifulSoup(html or "", "lxml")

    values: dict[str, str] = {}
    for label, rules in LABEL_RULES.items():
        value = find_labeled_value(soup, label)
        if value is None:
            continue
        for field, rule in rules:
            values[field] = read_value(value, rule) or UNKNOWN

    location = parse_location_date(values.pop("location_date", ""))

    return CandidateRecord(
        **values,
        city=location.city,
        country=location.country,
        start_date=location.start_date,
        end_date=location.end_date,
        topics=extract_topics(soup),
    )


def extract_all(fragments: list[str]) -> list[CandidateRecord]:
    """Extract one candidate per fragment, preserving order.

    A fragment that fails to parse yields an all-UNKNOWN record so the rest
    of the batch is unaffected.
    """
    candidates = []
    for i, html in enumerate(fragments):
        try:
            candidates.append(extract_fragment(html))
        except Exception as e:
            console.print(f"[yellow]Fragment {i} could not be parsed: {e}[/yellow]")
            candidates.append(CandidateRecord())
    return candidates
