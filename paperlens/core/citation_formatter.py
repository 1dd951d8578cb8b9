"""
Citation formatting - author parsing and APA/IEEE/BibTeX rendering
"""
from __future__ import annotations

import re
from typing import List

from .models import AuthorName, CitationSet


DEFAULT_TITLE = "Untitled study"
NO_DATE = "n.d."

_AUTHOR_SEPARATORS = re.compile(r"\s*(?:;|&|\band\b)\s*", re.IGNORECASE)
_USERNAME = re.compile(r"^[A-Za-z]+(?:[._][A-Za-z]+)+$")
_INITIALS = re.compile(r"^(?:[A-Za-z]\.\s*)+$|^[A-Z]{1,3}$")


def cap(word: str) -> str:
    """Upper-case the first letter, lower-case the rest"""
    return word[:1].upper() + word[1:].lower() if word else ""


def cap_name(name: str) -> str:
    return " ".join("-".join(cap(piece) for piece in word.split("-")) for word in name.split())


def parse_username(username: str) -> AuthorName:
    """Guess name parts from an email local part such as juan.p.delacruz"""
    local = username.split("@", 1)[0]
    tokens = [token for token in re.split(r"[._\-+]+", local) if token and not token.isdigit()]
    if len(tokens) >= 2:
        return AuthorName(
            first=cap(tokens[0]),
            middle=" ".join(cap(token) for token in tokens[1:-1]),
            last=cap(tokens[-1]),
        )
    return AuthorName(last=cap(tokens[0]) if tokens else "Author")


def parse_name(token: str) -> AuthorName:
    """Parse "Last, First Middle", "First Middle Last" or a bare surname"""
    token = token.strip()
    if not token:
        return AuthorName()
    if "@" in token or _USERNAME.match(token):
        return parse_username(token)

    if "," in token:
        last, _, rest = token.partition(",")
        given = [cap_name(part) for part in rest.split()]
        return AuthorName(
            first=given[0] if given else "",
            middle=" ".join(given[1:]),
            last=cap_name(last.strip()),
        )

    parts = token.split()
    if len(parts) >= 2:
        return AuthorName(
            first=cap_name(parts[0]),
            middle=" ".join(cap_name(part) for part in parts[1:-1]),
            last=cap_name(parts[-1]),
        )
    return AuthorName(last=cap_name(parts[0]))


def _is_given_names(piece: str) -> bool:
    return len(piece.split()) == 1 or bool(_INITIALS.match(piece))


def _split_comma_group(group: str) -> List[str]:
    """Split one separator-free chunk into author tokens"""
    pieces = [piece.strip() for piece in group.split(",") if piece.strip()]
    if len(pieces) < 2 or len(pieces) % 2:
        return pieces

    pairs = [(pieces[idx], pieces[idx + 1]) for idx in range(0, len(pieces), 2)]
    if all(_is_given_names(given) or len(last.split()) == 1 for last, given in pairs):
        return [f"{last}, {given}" for last, given in pairs]
    return pieces


def parse_authors(author_raw: str) -> List[AuthorName]:
    """
    Parse a free-form author string

    Args:
        author_raw: e.g. "Dela Cruz, Juan; Maria Santos and J. Reyes"

    Returns:
        At least one AuthorName; ``last`` is never empty
    """
    raw = str(author_raw or "").strip()
    if not raw:
        return [AuthorName()]

    names: List[AuthorName] = []
    for group in _AUTHOR_SEPARATORS.split(raw):
        if not group or not group.strip(" ,"):
            continue
        for token in _split_comma_group(group):
            names.append(parse_name(token))
    return names or [AuthorName()]


def to_apa(name: AuthorName) -> str:
    initials = name.initials
    return f"{name.last}, {initials}" if initials else name.last


def to_ieee(apa: str) -> str:
    last, _, initials = apa.partition(",")
    return re.sub(r"\s+", " ", f"{initials.strip()} {last.strip()}").strip()


def bibtex_author(apa_list: List[str]) -> str:
    return " and ".join(apa_list)


def normalize_year(year) -> str:
    match = re.search(r"\d{4}", str(year or ""))
    return match.group(0) if match else NO_DATE


def sentence_case(title: str) -> str:
    text = (title or "").lower()
    text = re.sub(r"(^\w)|([.!?]\s+\w)", lambda match: match.group(0).upper(), text)
    return re.sub(r"\s+", " ", text).strip()


def bibtex_key(apa_list: List[str], year: str) -> str:
    first_last = (apa_list[0] if apa_list else "Author").split(",")[0]
    stem = re.sub(r"[^a-z0-9]", "", first_last.lower()) or "author"
    return f"{stem}{'nd' if year == NO_DATE else year}"


def format_citations(author_raw: str, title: str, year) -> CitationSet:
    """
    Render APA, IEEE and BibTeX strings

    Pure function: identical inputs always give identical output.
    """
    apa_list = [to_apa(name) for name in parse_authors(author_raw)]
    ieee_list = [to_ieee(entry) for entry in apa_list]
    yr = normalize_year(year)
    raw_title = (title or "").strip() or DEFAULT_TITLE
    title_sentence = sentence_case(raw_title).rstrip(".") or DEFAULT_TITLE

    apa = f"{', '.join(apa_list)} ({yr}). {title_sentence}."
    ieee = f'{", ".join(ieee_list)}, "{title_sentence}," {yr.rstrip(".")}.'
    key = bibtex_key(apa_list, yr)
    bibtex = "\n".join(
        [
            f"@article{{{key},",
            f"  title={{{raw_title}}},",
            f"  author={{{bibtex_author(apa_list)}}},",
            f"  year={{{yr}}}",
            "}",
        ]
    )
    return CitationSet(apa=apa, ieee=ieee, bibtex=bibtex, key=key)


def render_citations(citations: CitationSet) -> str:
    return (
        f"### Citations\n**APA**\n> {citations.apa}\n\n"
        f"**IEEE**\n> {citations.ieee}\n\n"
        f"**BibTeX**\n```bibtex\n{citations.bibtex}\n```"
    )
