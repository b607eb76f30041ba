"""Release-title quality detection using guessit.

guessit does the tokenizing; its property values are mapped onto the
short labels ``QualityInfo`` carries.  A few token tables fill in what
guessit folds together: the 4K/UHD badges, WEB-DL versus a bare WEB
release, HDR flavours, dotted or newer codec names, PROPER versus REPACK.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

import structlog
from guessit import guessit
from guessit.api import GuessitException

from trawlarr.domain.entities import QualityInfo

log = structlog.get_logger(__name__)

_Table = tuple[tuple[str, re.Pattern[str]], ...]


def _token(pattern: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![a-z0-9])(?:{pattern})(?![a-z0-9])", re.IGNORECASE)


def _table(*rows: tuple[str, str]) -> _Table:
    return tuple((label, _token(pattern)) for label, pattern in rows)


# --- guessit value mappings ---

_SCREEN_SIZE_TO_RESOLUTION: dict[str, str] = {
    "2160p": "2160p",
    "1080p": "1080p",
    "1080i": "1080p",
    "720p": "720p",
    "576p": "576p",
    "480p": "480p",
    "360p": "360p",
}

_SOURCE_TO_LABEL: dict[str, str] = {
    "Blu-ray": "BluRay",
    "Ultra HD Blu-ray": "BluRay",
    "Web": "WEB",
    "HDTV": "HDTV",
    "Ultra HDTV": "HDTV",
    "DVD": "DVD",
    "HD-DVD": "HD-DVD",
    "TV": "TV",
    "Satellite": "SAT",
    "Telesync": "TS",
    "Camera": "CAM",
    "Telecine": "TC",
    "Workprint": "WP",
}

_RIP_LABELS: dict[str, str] = {
    "BluRay": "BDRip",
    "WEB": "WEBRip",
    "DVD": "DVDRip",
}

# Most specific first; a title listing several codecs reports the first.
_AUDIO_CODEC_TO_LABEL: dict[str, str] = {
    "DTS:X": "DTS-X",
    "DTS-HD": "DTS-HD",
    "DTS": "DTS",
    "Dolby Digital Plus": "DDP",
    "Dolby Digital": "DD",
    "Dolby TrueHD": "TrueHD",
    "Dolby Atmos": "Atmos",
    "AAC": "AAC",
    "FLAC": "FLAC",
    "MP3": "MP3",
    "Opus": "Opus",
    "LPCM": "LPCM",
    "PCM": "PCM",
}

# --- tokens guessit does not keep apart ---

_RESOLUTION_BADGES = _table(("2160p", r"4k|uhd"))

_WEB_DL = _token(r"web-?dl")

_CODECS = _table(
    ("H.265", r"h\.265"),
    ("H.264", r"h\.264"),
    ("VP9", r"vp9"),
    ("AV1", r"av1"),
)

_HDR = _table(
    ("DolbyVision", r"dolby[ .-]?vision|dovi|dv"),
    ("HDR10+", r"hdr10(?:\+|plus)"),
    ("HDR10", r"hdr10"),
    ("HDR", r"hdr"),
)

_PROPER = _token(r"proper")
_REPACK = _token(r"repack|rerip")


def _as_list(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def _first(table: _Table, title: str) -> str | None:
    for label, pattern in table:
        if pattern.search(title):
            return label
    return None


def _resolution(guess: Mapping[str, object], title: str) -> str | None:
    screen_size = guess.get("screen_size")
    if screen_size and str(screen_size) in _SCREEN_SIZE_TO_RESOLUTION:
        return _SCREEN_SIZE_TO_RESOLUTION[str(screen_size)]
    return _first(_RESOLUTION_BADGES, title)


def _source(guess: Mapping[str, object], other: list[str], title: str) -> str | None:
    if "Remux" in other:
        return "REMUX"
    sources = _as_list(guess.get("source"))
    if not sources:
        return None
    label = _SOURCE_TO_LABEL.get(sources[0], sources[0])
    if "Rip" in other and label in _RIP_LABELS:
        return _RIP_LABELS[label]
    if label == "WEB" and _WEB_DL.search(title):
        return "WEB-DL"
    return label


def _audio(guess: Mapping[str, object]) -> str | None:
    codecs = set(_as_list(guess.get("audio_codec")))
    codec = next((c for c in _AUDIO_CODEC_TO_LABEL if c in codecs), None)
    if codec is None:
        return None
    label = _AUDIO_CODEC_TO_LABEL[codec]

    if label == "DTS-HD" and "Master Audio" in _as_list(guess.get("audio_profile")):
        return "DTS-HD MA"
    channels = guess.get("audio_channels")
    # DDP5.1 / DD5.1 carry the channel layout in the label.
    if channels and label in ("DDP", "DD"):
        return f"{label}{channels}"
    return label


def _hdr(other: list[str], title: str) -> str | None:
    if "Dolby Vision" in other:
        return "DolbyVision"
    label = _first(_HDR, title)
    if label is None and "HDR10" in other:
        return "HDR10"
    return label


def _video_codec(guess: Mapping[str, object], title: str) -> str | None:
    codecs = _as_list(guess.get("video_codec"))
    if codecs:
        return codecs[0]
    return _first(_CODECS, title)


def _guess(title: str) -> Mapping[str, object]:
    try:
        return guessit(title)
    except GuessitException as e:
        log.debug("quality_guess_failed", title=title, error=str(e))
        return {}


def extract_quality(title: str) -> QualityInfo:
    """Detect quality attributes in a release *title*.

    Unrecognised attributes stay ``None``; this never raises.
    """
    if not title or not title.strip():
        return QualityInfo()

    guess = _guess(title)
    other = _as_list(guess.get("other"))

    revised = "Proper" in other or bool(guess.get("proper_count"))
    repack = revised and _REPACK.search(title) is not None
    proper = revised and (not repack or _PROPER.search(title) is not None)

    return QualityInfo(
        resolution=_resolution(guess, title),
        source=_source(guess, other, title),
        codec=_video_codec(guess, title),
        audio=_audio(guess),
        hdr=_hdr(other, title),
        proper=proper,
        repack=repack,
    )
