"""Parsing of provider episode blobs and cheap URL checks.

Apple-CMS style sources encode all episodes of a video in one string::

    "Episode 1$https://cdn/1.m3u8#Episode 2$https://cdn/2.m3u8$$$Ep 1$https://embed/1"

Play groups are separated by ``$$$`` (labels live in ``vod_play_from``),
episodes by ``#`` and name/URL by ``$``.  Providers are sloppy, so the
parser skips malformed segments instead of failing the whole video.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from kvideo.domain.entities.catalog import (
    EpisodeCandidate,
    ParseStatus,
    PlaybackParse,
    VideoSummary,
)

GROUP_SEPARATOR = "$$$"
EPISODE_SEPARATOR = "#"
FIELD_SEPARATOR = "$"

_MANIFEST_MARKER = ".m3u8"


def is_valid_url_format(url: str | None) -> bool:
    """Return True for syntactically valid http(s) URLs. No network access."""
    if not url:
        return False
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def is_manifest_url(url: str) -> bool:
    """HLS manifests are assumed to validate themselves at play time."""
    return _MANIFEST_MARKER in url.lower()


def _parse_group(group: str) -> tuple[list[EpisodeCandidate], int]:
    episodes: list[EpisodeCandidate] = []
    skipped = 0

    for raw in group.split(EPISODE_SEPARATOR):
        segment = raw.strip()
        if not segment:
            # Trailing/double separators are noise, not malformed data
            continue

        name, sep, rest = segment.partition(FIELD_SEPARATOR)
        # Extra fields after the URL (e.g. "EP1$url$hls") are ignored
        url = rest.split(FIELD_SEPARATOR, 1)[0]
        if not sep:
            # Bare URL without a name
            if not is_valid_url_format(segment):
                skipped += 1
                continue
            name, url = "", segment

        url = url.strip()
        if not url:
            skipped += 1
            continue

        index = len(episodes)
        episodes.append(
            EpisodeCandidate(
                index=index,
                name=name.strip() or f"Episode {index + 1}",
                url=url,
            )
        )

    return episodes, skipped


def _is_manifest_group(label: str, episodes: list[EpisodeCandidate]) -> bool:
    if "m3u8" in label.lower():
        return True
    return any(is_manifest_url(ep.url) for ep in episodes)


def parse_play_url(blob: str | None, play_from: str | None = None) -> PlaybackParse:
    """Parse an episode blob into a typed, ordered episode sequence.

    When the blob holds several play groups, the first group that looks
    like HLS (label or URLs mention ``m3u8``) wins, otherwise the first
    group that produced any episode.  Never raises.
    """
    if not blob or not blob.strip():
        return PlaybackParse(status=ParseStatus.EMPTY)

    labels = (play_from or "").split(GROUP_SEPARATOR)
    parsed: list[tuple[str, list[EpisodeCandidate], int]] = []
    for i, group in enumerate(blob.split(GROUP_SEPARATOR)):
        label = labels[i].strip() if i < len(labels) else ""
        episodes, skipped = _parse_group(group)
        parsed.append((label, episodes, skipped))

    non_empty = [p for p in parsed if p[1]]
    if not non_empty:
        return PlaybackParse(
            status=ParseStatus.EMPTY,
            skipped=sum(p[2] for p in parsed),
        )

    label, episodes, skipped = next(
        (p for p in non_empty if _is_manifest_group(p[0], p[1])),
        non_empty[0],
    )
    status = ParseStatus.PARTIAL if skipped else ParseStatus.SUCCESS
    return PlaybackParse(
        status=status,
        episodes=tuple(episodes),
        skipped=skipped,
        group=label,
    )


def first_playable_url(video: VideoSummary) -> str | None:
    """First syntactically valid episode URL of *video*, if any."""
    parsed = parse_play_url(video.play_url, video.play_from)
    for episode in parsed.episodes:
        if is_valid_url_format(episode.url):
            return episode.url
    return None
