"""Reader for the plain-text santa file.

The file is made of sections separated by blank lines. Lines starting with
``//`` are comments and any number of blank lines may precede the first
section.

1. Message: two lines, the subject and the message template. The template
   supports ``%1`` (giver name), ``%2`` (giver address) and ``%3`` (receiver
   name).
2. Seed: one line holding a signed 64-bit integer.
3. People: one ``name:address`` line per participant. Names must be unique.
4. Exclusions (optional): one comma-separated group of names per line. People
   in the same group never draw each other. Names are matched exactly first
   and case-insensitively second.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from santa.notify.message import MessageTemplate
from santa.services.domains import check_seed
from santa.services.exclusions import ExclusionGroup, exclusion_group
from santa.services.registry import ConfigurationError, Participant, ParticipantRegistry

Line = Tuple[int, str]

SEED_PATTERN = re.compile(r"-?[0-9]+")


class SantaFileError(ConfigurationError):
    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.line = line
        super().__init__(f"line {line}: {message}" if line is not None else message)


@dataclass(frozen=True)
class SantaConfig:
    registry: ParticipantRegistry
    groups: List[ExclusionGroup]
    seed: int
    template: MessageTemplate


def split_sections(text: str) -> List[List[Line]]:
    sections: List[List[Line]] = []
    current: List[Line] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip(" \t")
        if line.startswith("//"):
            continue
        if line:
            current.append((number, line))
        elif current:
            sections.append(current)
            current = []
    if current:
        sections.append(current)
    return sections


def _parse_template(section: List[Line]) -> MessageTemplate:
    if len(section) != 2:
        raise SantaFileError(
            "The first section needs exactly two lines: the subject and the message.",
            section[0][0],
        )
    (_, subject), (_, body) = section
    return MessageTemplate(subject=subject, body=body)


def _parse_seed(section: Optional[List[Line]]) -> int:
    if not section:
        raise SantaFileError("Need a line designating the seed in the second section.")
    number, value = section[0]
    if not SEED_PATTERN.fullmatch(value):
        raise SantaFileError(f"Seed must be an integer, got {value!r}.", number)
    seed = int(value)
    if len(section) > 1:
        raise SantaFileError("Extra line at the end of the seed section.", section[1][0])
    try:
        return check_seed(seed)
    except ConfigurationError as exc:
        raise SantaFileError(str(exc), number) from None


def _parse_people(section: Optional[List[Line]]) -> ParticipantRegistry:
    if not section:
        raise SantaFileError("Need a third section listing the people as name:address.")
    registry = ParticipantRegistry()
    for number, line in section:
        name, colon, address = line.partition(":")
        name, address = name.strip(" \t"), address.strip(" \t")
        if not colon:
            raise SantaFileError(f"Couldn't find an address in {line!r}.", number)
        if not name or not address:
            raise SantaFileError(f"Both a name and an address are required in {line!r}.", number)
        if name in registry:
            raise SantaFileError(f"Duplicate participant name {name!r}.", number)
        registry.add(name, address)
    return registry


def _lookup(registry: ParticipantRegistry, name: str, number: int) -> Participant:
    if name in registry:
        return registry.get(name)
    matches = [p for p in registry if p.name.casefold() == name.casefold()]
    if len(matches) == 1:
        return matches[0]
    if matches:
        raise SantaFileError(f"{name!r} matches more than one participant.", number)
    raise SantaFileError(f"Unknown participant {name!r} in exclusion group.", number)


def _parse_groups(section: Optional[List[Line]], registry: ParticipantRegistry) -> List[ExclusionGroup]:
    groups: List[ExclusionGroup] = []
    for number, line in section or []:
        names = [name.strip(" \t") for name in line.split(",")]
        if any(not name for name in names):
            raise SantaFileError(f"Empty name in exclusion group {line!r}.", number)
        groups.append(exclusion_group(_lookup(registry, name, number) for name in names))
    return groups


def parse_santa_file(text: str) -> SantaConfig:
    sections = split_sections(text)
    if not sections:
        raise SantaFileError("The santa file is empty.")
    if len(sections) > 4:
        raise SantaFileError("Unexpected content after the exclusion section.", sections[4][0][0])

    padded: List[Optional[List[Line]]] = [*sections, *[None] * (4 - len(sections))]
    message, seed_lines, people, exclusions = padded
    template = _parse_template(message)
    seed = _parse_seed(seed_lines)
    registry = _parse_people(people)
    groups = _parse_groups(exclusions, registry)
    return SantaConfig(registry=registry, groups=groups, seed=seed, template=template)


def load_santa_file(path: Union[str, Path]) -> SantaConfig:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SantaFileError(f"Santa file not found: {path}") from None
    return parse_santa_file(text)
