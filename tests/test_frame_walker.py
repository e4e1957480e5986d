"""Test the ID3v2.3 frame walker"""

import logging

from mp3inspect.exceptions import TranscodeFailure
from mp3inspect.id3.frames import FRAME_LABELS, FrameWalker, WalkerConfig, parse_frame_header
from mp3inspect.id3.models import (
    EncodingPolicy,
    EncodingTag,
    FrameSizeMode,
    TagHeader,
    WalkTermination,
)


def utf16_payload(text):
    return b"\x01" + b"\xff\xfe" + text.encode("utf-16-le")


class RecordingTranscoder:
    """Transcoder stand-in that remembers its calls"""

    def __init__(self, result="decoded"):
        self.calls = []
        self.result = result

    def __call__(self, data, encoding, legacy_encoding):
        self.calls.append((data, encoding, legacy_encoding))
        return self.result


class TestFrameHeader:
    """Test frame sub-header decoding"""

    def test_synchsafe_size(self):
        """Test default synchsafe frame size"""
        header = parse_frame_header(b"TIT2\x00\x00\x01\x00\x00\x00")
        assert header.frame_id == "TIT2"
        assert header.size == 128

    def test_big_endian_size(self):
        """Test plain big-endian frame size"""
        header = parse_frame_header(b"TIT2\x00\x00\x01\x00\x00\x00", FrameSizeMode.BIG_ENDIAN)
        assert header.size == 256

    def test_flags(self):
        """Test the flag word is kept"""
        header = parse_frame_header(b"TIT2\x00\x00\x00\x05\x80\xc0")
        assert header.tag_alter_preservation
        assert header.compressed
        assert header.encrypted
        assert not header.grouped


class TestFrameWalker:
    """Test walking a tag body"""

    def test_single_utf16_title(self, mp3):
        """Test one UTF-16 TIT2 frame declared 13 bytes long"""
        body = mp3.frame("TIT2", utf16_payload("Hello"))
        assert len(body) == 23

        result = FrameWalker().walk(body)

        assert len(result.fields) == 1
        field = result.fields[0]
        assert field.frame_id == "TIT2"
        assert field.label == "Title"
        assert field.text == "Hello"
        assert result.offset == 23
        assert result.termination is WalkTermination.END_OF_TAG

    def test_fields_in_encounter_order(self, mp3):
        """Test several frames are reported in file order"""
        body = (mp3.text_frame("TPE1", "Performer")
                + mp3.text_frame("TALB", "Album")
                + mp3.text_frame("TIT2", "Song"))

        result = FrameWalker().walk(body)

        assert [f.label for f in result.fields] == ["Performer", "Album", "Title"]
        assert [f.text for f in result.fields] == ["Performer", "Album", "Song"]
        assert result.frames_seen == 3

    def test_priv_gets_whole_payload(self, mp3):
        """Test PRIV frames are decoded whole as Latin-1"""
        payload = b"\x01owner\x00\x10\x20"
        transcoder = RecordingTranscoder()

        result = FrameWalker(transcoder=transcoder).walk(mp3.frame("PRIV", payload))

        assert len(transcoder.calls) == 1
        data, encoding, _ = transcoder.calls[0]
        assert data == payload
        assert len(data) == len(payload)
        assert encoding is EncodingTag.LATIN1
        assert result.fields[0].label == "Private Frame"
        assert result.fields[0].text == "decoded"

    def test_text_frame_drops_selector(self, mp3):
        """Test other frames pass framesz - 1 bytes to the transcoder"""
        transcoder = RecordingTranscoder()

        FrameWalker(transcoder=transcoder).walk(mp3.frame("TALB", b"\x00Album"))

        data, encoding, legacy_encoding = transcoder.calls[0]
        assert data == b"Album"
        assert encoding is EncodingTag.LEGACY_REGIONAL
        assert legacy_encoding == "gb18030"

    def test_unrecognized_frame_stops_walk(self, mp3):
        """Test padding ends the walk without an error"""
        body = mp3.text_frame("TIT2", "Song") + b"\x00" * 30

        result = FrameWalker().walk(body)

        assert len(result.fields) == 1
        assert result.termination is WalkTermination.UNRECOGNIZED_FRAME
        assert result.offset == 15

    def test_unrecognized_frame_hides_later_frames(self, mp3):
        """Test frames after an unknown id are never read"""
        body = (mp3.text_frame("TIT2", "Song")
                + mp3.frame("ZZZZ", b"junk")
                + mp3.text_frame("TALB", "Album"))

        result = FrameWalker().walk(body)

        assert [f.frame_id for f in result.fields] == ["TIT2"]
        assert result.termination is WalkTermination.UNRECOGNIZED_FRAME

    def test_picture_reports_size_only(self, mp3):
        """Test APIC frames are never decoded"""
        transcoder = RecordingTranscoder()
        picture = b"\x00image/png\x00\x03\x00" + b"\x89PNG" * 50

        result = FrameWalker(transcoder=transcoder).walk(mp3.frame("APIC", picture))

        assert transcoder.calls == []
        field = result.fields[0]
        assert field.is_binary
        assert field.binary_size == len(picture)
        assert field.label == "Picture"
        assert field.text is None

    def test_selector_only_frame_is_skipped(self, mp3):
        """Test a frame with no text after the selector byte"""
        body = mp3.frame("TIT2", b"\x00") + mp3.text_frame("TALB", "Album")

        result = FrameWalker().walk(body)

        assert [f.frame_id for f in result.fields] == ["TALB"]
        assert result.frames_skipped == 1

    def test_empty_private_frame_is_skipped(self, mp3):
        """Test a zero-length PRIV frame is skipped without decoding"""
        transcoder = RecordingTranscoder()
        body = mp3.frame("PRIV", b"") + mp3.text_frame("TALB", "Album")

        result = FrameWalker(transcoder=transcoder).walk(body)

        assert [f.frame_id for f in result.fields] == ["TALB"]
        assert result.frames_seen == 2
        assert result.frames_skipped == 1
        assert len(transcoder.calls) == 1

    def test_empty_picture_frame_is_skipped(self, mp3):
        """Test a zero-length APIC frame yields no zero-byte picture"""
        body = mp3.frame("APIC", b"") + mp3.text_frame("TALB", "Album")

        result = FrameWalker().walk(body)

        assert [f.frame_id for f in result.fields] == ["TALB"]
        assert not any(f.is_binary for f in result.fields)
        assert result.frames_skipped == 1

    def test_one_character_frame_survives(self, mp3):
        """Test a single character after the selector is still decoded"""
        result = FrameWalker().walk(mp3.text_frame("TRCK", "5"))

        assert result.fields[0].label == "Track Number"
        assert result.fields[0].text == "5"

    def test_transcode_failure_skips_frame(self, mp3):
        """Test a failing frame is dropped and the walk continues"""
        body = mp3.frame("TIT2", b"\x01\xff\xfeA") + mp3.text_frame("TALB", "Album")

        result = FrameWalker().walk(body)

        assert [f.frame_id for f in result.fields] == ["TALB"]
        assert result.frames_skipped == 1
        assert result.termination is WalkTermination.END_OF_TAG

    def test_custom_transcoder_failure(self, mp3):
        """Test failures raised by a substituted transcoder are contained"""
        def failing(data, encoding, legacy_encoding):
            raise TranscodeFailure("nope")

        result = FrameWalker(transcoder=failing).walk(mp3.text_frame("TIT2", "Song"))

        assert result.fields == []
        assert result.frames_seen == 1

    def test_regional_policy_decodes_legacy_codepage(self, mp3):
        """Test selector 0 text in GB18030 under the default policy"""
        body = mp3.text_frame("TPE1", "周杰伦", selector=0, codec="gb18030")

        result = FrameWalker().walk(body)

        assert result.fields[0].text == "周杰伦"

    def test_strict_policy_uses_latin1(self, mp3):
        """Test selector 0 is ISO-8859-1 under the strict policy"""
        config = WalkerConfig(encoding_policy=EncodingPolicy.STRICT_SPEC)
        body = mp3.frame("TIT2", b"\x00caf\xe9")

        result = FrameWalker(config).walk(body)

        assert result.fields[0].text == "café"

    def test_big_endian_frame_sizes(self, mp3):
        """Test frames above 127 bytes with positional sizes"""
        text = "x" * 199
        config = WalkerConfig(frame_size_mode=FrameSizeMode.BIG_ENDIAN)
        body = mp3.text_frame("TIT2", text, big_endian=True) + mp3.text_frame("TALB", "A", big_endian=True)

        result = FrameWalker(config).walk(body)

        assert [f.text for f in result.fields] == [text, "A"]

    def test_overrunning_frame(self, mp3):
        """Test a frame larger than the remaining body ends the walk"""
        body = mp3.text_frame("TIT2", "Song") + mp3.frame("TALB", b"\x00Alb", size=100)

        result = FrameWalker().walk(body)

        assert [f.frame_id for f in result.fields] == ["TIT2"]
        assert result.termination is WalkTermination.TRUNCATED_FRAME
        assert result.offset == 15

    def test_short_tail_ends_walk(self, mp3):
        """Test fewer than 10 trailing bytes end the walk normally"""
        body = mp3.text_frame("TIT2", "Song") + b"\x00" * 5

        result = FrameWalker().walk(body)

        assert result.termination is WalkTermination.END_OF_TAG
        assert result.offset == 15

    def test_unlabeled_frames(self, mp3):
        """Test known but unlabeled frames keep the walk going"""
        body = mp3.text_frame("TPOS", "1/2") + mp3.text_frame("TIT2", "Song")

        result = FrameWalker().walk(body)
        assert [f.frame_id for f in result.fields] == ["TIT2"]
        assert result.frames_skipped == 1

        result = FrameWalker(WalkerConfig(emit_unlabeled=True)).walk(body)
        assert [f.label for f in result.fields] == ["TPOS", "Title"]

    def test_compressed_frame_skipped(self, mp3):
        """Test compressed frames are not decoded"""
        transcoder = RecordingTranscoder()
        body = mp3.text_frame("TIT2", "Song", flags=0x0080)

        result = FrameWalker(transcoder=transcoder).walk(body)

        assert result.fields == []
        assert transcoder.calls == []

    def test_iter_fields_can_stop_early(self, mp3):
        """Test the walk is lazy"""
        transcoder = RecordingTranscoder()
        body = mp3.text_frame("TIT2", "One") + mp3.text_frame("TALB", "Two")

        fields = FrameWalker(transcoder=transcoder).iter_fields(body)
        next(fields)
        fields.close()

        assert len(transcoder.calls) == 1

    def test_header_flags_are_warned(self, mp3, caplog):
        """Test unsynchronisation taken from the tag header is reported"""
        header = TagHeader(
            magic=b"ID3", version=(3, 0), unsynchronisation=True,
            extended_header=False, experimental=False, footer_present=False, size=15
        )
        config = WalkerConfig().with_header(header)
        assert config.unsynchronisation

        with caplog.at_level(logging.WARNING):
            FrameWalker(config).walk(mp3.text_frame("TIT2", "Song"))

        assert "unsynchronisation" in caplog.text

    def test_label_table(self):
        """Test the reported frame labels"""
        assert len(FRAME_LABELS) == 12
        assert FRAME_LABELS["TPE2"] == "Band"
        assert FRAME_LABELS["TEXT"] == "Lyricist"
