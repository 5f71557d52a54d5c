"""Contract tests for parsing gifsicle 1.9x ``-I`` output."""

import pytest

from giftool.error_handling import UnparseableOutputError
from giftool.parsing import (
    ImageInfo,
    parse_color_table_size,
    parse_frames_count,
    parse_info,
    parse_logical_screen,
)

ANIMATED_REPORT = """\
* /work/gifsicle_tmp/data_cache/k3v9q0m1x7c2b8n4z6l5a0s9d8f7g6h5.gif 10 images
  logical screen 800x600
  global color table [128]
  background 0
  loop forever
  + image #0 800x600
    disposal asis delay 0.10s
  + image #1 800x600
    disposal asis delay 0.10s
"""

SINGLE_FRAME_REPORT = """\
* /tmp/a.gif 1 image
  logical screen 10x10
  global color table [2]
  background 0
  + image #0 10x10
"""


class TestParseInfo:
    @pytest.mark.fast
    def test_animated_report(self):
        info = parse_info(ANIMATED_REPORT, file_size=12345)

        assert info == ImageInfo(
            frames_count=10,
            image_width=800,
            image_height=600,
            image_colors=128,
            file_size=12345,
        )

    @pytest.mark.fast
    def test_single_image_report(self):
        info = parse_info(SINGLE_FRAME_REPORT)

        assert info.frames_count == 1
        assert (info.image_width, info.image_height) == (10, 10)
        assert info.image_colors == 2
        assert info.file_size == 0

    @pytest.mark.fast
    def test_repeat_parse_is_identical(self):
        assert parse_info(ANIMATED_REPORT, 10) == parse_info(ANIMATED_REPORT, 10)

    @pytest.mark.fast
    def test_as_dict(self):
        assert parse_info(SINGLE_FRAME_REPORT, 42).as_dict() == {
            "frames_count": 1,
            "image_width": 10,
            "image_height": 10,
            "image_colors": 2,
            "file_size": 42,
        }

    @pytest.mark.fast
    def test_missing_color_table(self):
        report = ANIMATED_REPORT.replace("  global color table [128]\n", "")
        with pytest.raises(UnparseableOutputError, match="global color table"):
            parse_info(report)

    @pytest.mark.fast
    def test_missing_logical_screen(self):
        report = ANIMATED_REPORT.replace("  logical screen 800x600\n", "")
        with pytest.raises(UnparseableOutputError, match="logical screen"):
            parse_info(report)

    @pytest.mark.fast
    def test_empty_output(self):
        with pytest.raises(UnparseableOutputError):
            parse_info("")

    @pytest.mark.fast
    def test_error_text_is_not_guessed(self):
        with pytest.raises(UnparseableOutputError):
            parse_info("gifsicle: /tmp/x.gif: file not in GIF format\n")

    @pytest.mark.fast
    def test_colour_table_out_of_range(self):
        report = ANIMATED_REPORT.replace("[128]", "[512]")
        with pytest.raises(UnparseableOutputError, match="outside"):
            parse_info(report)

    @pytest.mark.fast
    def test_zero_screen_size(self):
        report = ANIMATED_REPORT.replace("800x600\n  global", "0x600\n  global")
        with pytest.raises(UnparseableOutputError, match="logical screen size"):
            parse_info(report)

    @pytest.mark.fast
    def test_warning_before_report_is_skipped(self):
        report = (
            "gifsicle: /work/data_cache/abc.gif: warning: trailing garbage after GIF ignored\n"
            + SINGLE_FRAME_REPORT
        )

        info = parse_info(report, file_size=7)

        assert info == ImageInfo(
            frames_count=1, image_width=10, image_height=10, image_colors=2, file_size=7
        )

    @pytest.mark.fast
    def test_warning_alone_is_unparseable(self):
        with pytest.raises(UnparseableOutputError, match="frame count"):
            parse_info("gifsicle: /tmp/x.gif: warning: trailing garbage after GIF ignored\n")


class TestFieldParsers:
    @pytest.mark.fast
    def test_frames_count_uses_first_report_line(self):
        assert parse_frames_count(ANIMATED_REPORT) == 10

    @pytest.mark.fast
    def test_frames_count_malformed(self):
        with pytest.raises(UnparseableOutputError, match="frame count"):
            parse_frames_count("* /tmp/a.gif many images\n")

    @pytest.mark.fast
    def test_logical_screen(self):
        assert parse_logical_screen("  logical screen 320x240\n") == (320, 240)

    @pytest.mark.fast
    def test_color_table_size(self):
        assert parse_color_table_size("  global color table [64]\n") == 64
