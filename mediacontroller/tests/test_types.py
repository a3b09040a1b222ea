"""
Unit Tests: Core Types

Tests:
    - Result containers
    - SourceId validation and parsing
    - PlaybackStatus / PlaybackInfo semantics
    - MediaMetadata content detection and rendering
    - Timestamp conversions
"""

import pytest

from mediacontroller.core.types import (
    Err,
    MediaMetadata,
    Ok,
    PlaybackInfo,
    PlaybackStatus,
    PlaybackType,
    RepeatMode,
    SourceId,
    Timestamp,
)


class TestResult:
    """Tests for Ok / Err."""

    def test_ok(self):
        """Test Ok exposes its value."""
        result = Ok(3)
        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == 3
        assert result.unwrap_or(0) == 3
        assert result.map(lambda v: v * 2) == Ok(6)

    def test_err(self):
        """Test Err refuses to unwrap and propagates through map."""
        result = Err("boom")
        assert result.is_err()
        assert result.unwrap_or(0) == 0
        assert result.map(lambda v: v * 2) is result
        with pytest.raises(RuntimeError, match="boom"):
            result.unwrap()


class TestSourceId:
    """Tests for SourceId."""

    def test_create(self):
        """Test basic SourceId creation."""
        sid = SourceId("Spotify.exe")
        assert sid.value == "Spotify.exe"
        assert str(sid) == "Spotify.exe"

    def test_equality_and_hash(self):
        """Test ids with the same value are interchangeable keys."""
        assert SourceId("A") == SourceId("A")
        assert len({SourceId("A"), SourceId("A"), SourceId("B")}) == 2

    @pytest.mark.parametrize("raw", ["", "   ", None, 42])
    def test_rejects_invalid(self, raw):
        """Test blank and non-string identities are rejected."""
        with pytest.raises(ValueError):
            SourceId(raw)

    def test_parse(self):
        """Test parse() returns Ok or Err instead of raising."""
        assert SourceId.parse("VLC").unwrap() == SourceId("VLC")
        result = SourceId.parse("")
        assert result.is_err()
        assert "Invalid SourceId" in result.error


class TestPlayback:
    """Tests for PlaybackStatus and PlaybackInfo."""

    def test_status_values_match_provider(self):
        """Test integer values line up with the native enumeration."""
        assert [s.value for s in PlaybackStatus] == [0, 1, 2, 3, 4, 5]
        assert PlaybackStatus(5) is PlaybackStatus.PAUSED

    def test_only_closed_is_terminal(self):
        """Test CLOSED is the single terminal status."""
        terminal = [s for s in PlaybackStatus if s.is_terminal]
        assert terminal == [PlaybackStatus.CLOSED]
        assert PlaybackInfo(PlaybackStatus.CLOSED).is_terminal
        assert not PlaybackInfo(PlaybackStatus.STOPPED).is_terminal

    def test_is_playing(self):
        assert PlaybackStatus.PLAYING.is_playing
        assert not PlaybackStatus.PAUSED.is_playing

    def test_to_dict(self):
        """Test serialization uses enum names."""
        info = PlaybackInfo(
            PlaybackStatus.PLAYING,
            playback_type=PlaybackType.MUSIC,
            is_shuffle_active=True,
            auto_repeat_mode=RepeatMode.LIST,
            playback_rate=1.0,
        )
        assert info.to_dict() == {
            "status": "PLAYING",
            "playback_type": "MUSIC",
            "is_shuffle_active": True,
            "auto_repeat_mode": "LIST",
            "playback_rate": 1.0,
        }
        assert PlaybackInfo(PlaybackStatus.OPENED).to_dict()["playback_type"] is None


class TestMediaMetadata:
    """Tests for MediaMetadata."""

    def test_empty_has_no_content(self):
        """Test an all-blank record is recognized."""
        assert not MediaMetadata().has_content
        assert not MediaMetadata(track_number=3, genres=("Rock",)).has_content

    def test_content_fields(self):
        assert MediaMetadata(title="Song").has_content
        assert MediaMetadata(subtitle="Episode 4").has_content

    def test_str(self):
        """Test rendering prefers artist - title."""
        assert str(MediaMetadata(title="Intro", artist="The xx")) == "The xx - Intro"
        assert str(MediaMetadata(title="Intro")) == "Intro"
        assert str(MediaMetadata()) == "<unknown>"

    def test_to_dict(self):
        data = MediaMetadata(title="Intro", genres=("Indie", "Pop")).to_dict()
        assert data["title"] == "Intro"
        assert data["genres"] == ["Indie", "Pop"]
        assert data["playback_type"] is None


class TestTimestamp:
    """Tests for Timestamp."""

    def test_conversions(self):
        ts = Timestamp(nanos=1_500_000_000)
        assert ts.seconds == 1.5
        assert ts.millis == 1500

    def test_now_is_monotonic_enough(self):
        first = Timestamp.now()
        second = Timestamp.now()
        assert second >= first
        assert first.elapsed_millis() >= 0
