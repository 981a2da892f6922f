# Tag registry for tagshelf.
# Maps the loosely written tag names found in patterns to a closed set of
# canonical tag identifiers.
#
# This is the only place where tag names are normalized.

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple


class Tag(str, Enum):
    ALBUM = "ALBUM"
    ALBUMARTIST = "ALBUMARTIST"
    ARTIST = "ARTIST"
    BARCODE = "BARCODE"
    BPM = "BPM"
    BY = "BY"
    CATALOGID = "CATALOGID"
    CATALOGNUMBER = "CATALOGNUMBER"
    COMPOSER = "COMPOSER"
    CONDUCTOR = "CONDUCTOR"
    COPYRIGHT = "COPYRIGHT"
    COUNTRY = "COUNTRY"
    CREDITS = "CREDITS"
    DATE = "DATE"
    DESCRIPTION = "DESCRIPTION"
    DISCNUMBER = "DISCNUMBER"
    DISCTOTAL = "DISCTOTAL"
    ENCODEDBY = "ENCODEDBY"
    GAIN = "GAIN"
    GENRE = "GENRE"
    GROUPING = "GROUPING"
    ID = "ID"
    ISRC = "ISRC"
    LABEL = "LABEL"
    LANGUAGE = "LANGUAGE"
    LENGTH = "LENGTH"
    LOCATION = "LOCATION"
    LYRICS = "LYRICS"
    MCDI = "MCDI"
    MEDIA = "MEDIA"
    MEDIATYPE = "MEDIATYPE"
    NORM = "NORM"
    ORGANIZATION = "ORGANIZATION"
    ORIGYEAR = "ORIGYEAR"
    PEAK = "PEAK"
    PERFORMER = "PERFORMER"
    PGAP = "PGAP"
    PMEDIA = "PMEDIA"
    PROVIDER = "PROVIDER"
    PUBLISHER = "PUBLISHER"
    RELEASECOUNTRY = "RELEASECOUNTRY"
    SMPB = "SMPB"
    STYLE = "STYLE"
    TBPM = "TBPM"
    TITLE = "TITLE"
    TLEN = "TLEN"
    TMED = "TMED"
    TOOL = "TOOL"
    TOTALDISCS = "TOTALDISCS"
    TOTALTRACKS = "TOTALTRACKS"
    TRACKNUMBER = "TRACKNUMBER"
    TRACKTOTAL = "TRACKTOTAL"
    TSRC = "TSRC"
    TYPE = "TYPE"
    UPC = "UPC"
    UPLOADER = "UPLOADER"
    URL = "URL"
    WEBSITE = "WEBSITE"
    WMCOLLECTIONID = "WMCOLLECTIONID"
    WORK = "WORK"
    WWW = "WWW"
    WWWAUDIOFILE = "WWWAUDIOFILE"
    WWWAUDIOSOURCE = "WWWAUDIOSOURCE"

    # Supplied by the caller, never read from the file's tags.
    EXTENSION = "extension"


def _build_aliases() -> Mapping[str, Tag]:
    table = {tag.name: tag for tag in Tag}
    table.update(
        {
            "DISC": Tag.DISCNUMBER,
            "TRACK": Tag.TRACKNUMBER,
            "YEAR": Tag.DATE,
        }
    )
    return MappingProxyType(table)


# Keys are normalized names: first underscore removed, uppercased.
ALIASES: Mapping[str, Tag] = _build_aliases()


def normalize_tag_name(raw: str) -> str:
    # Only the first underscore goes away, so "album_artist" and
    # "albumartist" are equivalent but "a_l_bum" is not "ALBUM".
    return raw.replace("_", "", 1).upper()


def resolve_tag(raw: str) -> Optional[Tag]:
    """Return the canonical tag for a name written in a pattern, or None."""
    return ALIASES.get(normalize_tag_name(raw))


def available_tags() -> List[Tuple[str, Tag]]:
    """List (accepted name, canonical tag) pairs, sorted by name."""
    return sorted(ALIASES.items())
