"""Tests for request parsing and validation."""

import re
from datetime import datetime

import pytest

from video_editor.domain.exceptions import InvalidRange, InvalidRequest
from video_editor.domain.requests import (
    ContainerFormat,
    Operation,
    Quality,
    TranscodeRequest,
    default_output_name,
)


class TestOperation:
    """Tests for Operation.from_action."""

    @pytest.mark.parametrize(
        "action, expected",
        [
            ("transcodeVideo", Operation.TRANSCODE),
            ("trim", Operation.TRIM),
            ("createThumbnail", Operation.THUMBNAIL),
            ("execFFMPEG", Operation.RAW_COMMAND),
        ],
    )
    def test_known_actions(self, action, expected):
        assert Operation.from_action(action) is expected

    def test_unknown_action_returns_none(self):
        assert Operation.from_action("getVideoInfo") is None


class TestQuality:
    """Tests for Quality codes and dimension caps."""

    def test_codes_map_to_tiers(self):
        assert Quality.from_code(0) is Quality.HIGH
        assert Quality.from_code(1) is Quality.MEDIUM
        assert Quality.from_code(2) is Quality.LOW
        assert Quality.from_code("1") is Quality.MEDIUM

    @pytest.mark.parametrize("code", [None, 7, -1, "high", True, [1], float("inf"), float("nan"), "1e999"])
    def test_unknown_codes_default_to_high(self, code):
        assert Quality.from_code(code) is Quality.HIGH

    def test_dimension_caps(self):
        """Every tier caps both dimensions at 320, 480 or 640."""
        assert {q.max_dimension for q in Quality} == {320, 480, 640}
        assert Quality.LOW.max_dimension == 320
        assert Quality.MEDIUM.max_dimension == 480
        assert Quality.HIGH.max_dimension == 640


class TestContainerFormat:
    """Tests for ContainerFormat codes and extensions."""

    def test_codes_map_to_formats(self):
        assert ContainerFormat.from_code(0) is ContainerFormat.M4V
        assert ContainerFormat.from_code(1) is ContainerFormat.MPEG4
        assert ContainerFormat.from_code(2) is ContainerFormat.M4A
        assert ContainerFormat.from_code(3) is ContainerFormat.QUICK_TIME

    def test_unknown_code_defaults_to_mpeg4(self):
        assert ContainerFormat.from_code(None) is ContainerFormat.MPEG4
        assert ContainerFormat.from_code(42) is ContainerFormat.MPEG4

    @pytest.mark.parametrize("code", [float("inf"), float("-inf"), "1e999", "nan"])
    def test_non_finite_code_defaults_to_mpeg4(self, code):
        assert ContainerFormat.from_code(code) is ContainerFormat.MPEG4

    def test_extensions(self):
        assert {c.extension for c in ContainerFormat} == {".mov", ".m4a", ".m4v", ".mp4"}
        assert ContainerFormat.QUICK_TIME.extension == ".mov"


class TestDefaultOutputName:
    def test_uses_timestamp(self):
        assert default_output_name(datetime(2024, 1, 31, 23, 59, 59)) == "20240131_235959"


class TestFromOptions:
    """Tests for TranscodeRequest.from_options."""

    def test_transcode_defaults(self):
        """Should apply the documented defaults for omitted options."""
        request = TranscodeRequest.from_options(Operation.TRANSCODE, {"fileUri": "/v/clip.mp4"})

        assert request.input_locator == "/v/clip.mp4"
        assert request.quality is Quality.HIGH
        assert request.container_format is ContainerFormat.MPEG4
        assert request.save_to_library is True
        assert request.delete_input_on_success is False
        assert request.duration == 0.0
        assert re.fullmatch(r"\d{8}_\d{6}", request.output_name)

    def test_transcode_options(self):
        request = TranscodeRequest.from_options(
            Operation.TRANSCODE,
            {
                "fileUri": "/v/clip.mp4",
                "outputFileName": "holiday",
                "quality": 2,
                "outputFileType": 3,
                "saveToLibrary": "false",
                "deleteInputFile": True,
                "duration": 12.5,
            },
        )

        assert request.output_name == "holiday"
        assert request.quality is Quality.LOW
        assert request.container_format is ContainerFormat.QUICK_TIME
        assert request.save_to_library is False
        assert request.delete_input_on_success is True
        assert request.duration == 12.5

    def test_negative_duration_means_whole_input(self):
        request = TranscodeRequest.from_options(Operation.TRANSCODE, {"fileUri": "/v/a.mp4", "duration": -3})
        assert request.duration == 0.0

    @pytest.mark.parametrize("duration", ["inf", float("inf"), "nan", "1e999"])
    def test_non_finite_duration_means_whole_input(self, duration):
        request = TranscodeRequest.from_options(Operation.TRANSCODE, {"fileUri": "/v/a.mp4", "duration": duration})
        assert request.duration == 0.0

    def test_trim_range(self):
        request = TranscodeRequest.from_options(
            Operation.TRIM, {"fileUri": "/v/a.mp4", "trimStart": 2.0, "trimEnd": "7.5"}
        )
        assert request.trim_start == 2.0
        assert request.trim_end == 7.5
        assert request.trim_duration == 5.5

    def test_trim_zero_duration_raises(self):
        """trimStart == trimEnd is an empty range."""
        with pytest.raises(InvalidRange, match="duration is 0"):
            TranscodeRequest.from_options(Operation.TRIM, {"fileUri": "/v/a.mp4", "trimStart": 5.0, "trimEnd": 5.0})

    def test_trim_negative_duration_raises(self):
        with pytest.raises(InvalidRange):
            TranscodeRequest.from_options(Operation.TRIM, {"fileUri": "/v/a.mp4", "trimStart": 7.5, "trimEnd": 2.0})

    def test_trim_negative_start_raises(self):
        """A start before the beginning of the input is rejected before any command is built."""
        with pytest.raises(InvalidRange, match="not a valid position"):
            TranscodeRequest.from_options(Operation.TRIM, {"fileUri": "/v/a.mp4", "trimStart": -2, "trimEnd": 3})

    def test_trim_non_finite_start_raises(self):
        with pytest.raises(InvalidRange, match="not a valid position"):
            TranscodeRequest(operation=Operation.TRIM, trim_start=float("nan"), trim_end=1.0)

    @pytest.mark.parametrize("trim_end", ["inf", float("-inf"), "nan"])
    def test_trim_rejects_non_finite_end(self, trim_end):
        with pytest.raises(InvalidRequest, match="finite number"):
            TranscodeRequest.from_options(Operation.TRIM, {"fileUri": "/v/a.mp4", "trimEnd": trim_end})

    def test_trim_requires_end(self):
        with pytest.raises(InvalidRequest, match="trimEnd"):
            TranscodeRequest.from_options(Operation.TRIM, {"fileUri": "/v/a.mp4", "trimStart": 1})

    def test_trim_rejects_non_numeric_end(self):
        with pytest.raises(InvalidRequest, match="must be a number"):
            TranscodeRequest.from_options(Operation.TRIM, {"fileUri": "/v/a.mp4", "trimEnd": "soon"})

    @pytest.mark.parametrize("options", [{}, {"fileUri": ""}, {"fileUri": 12}])
    def test_file_uri_required(self, options):
        with pytest.raises(InvalidRequest, match="fileUri"):
            TranscodeRequest.from_options(Operation.THUMBNAIL, options)

    def test_options_must_be_mapping(self):
        with pytest.raises(InvalidRequest, match="options must be an object"):
            TranscodeRequest.from_options(Operation.TRANSCODE, ["/v/a.mp4"])

    def test_raw_command_args_kept_verbatim(self):
        request = TranscodeRequest.from_options(
            Operation.RAW_COMMAND, {"cmd": ["-i", "in file.mp4", "-t", 3, "out.mp4"]}
        )
        assert request.raw_args == ("-i", "in file.mp4", "-t", "3", "out.mp4")
        assert request.input_locator == ""

    def test_raw_command_requires_array(self):
        with pytest.raises(InvalidRequest, match="cmd"):
            TranscodeRequest.from_options(Operation.RAW_COMMAND, {"cmd": "-i in.mp4 out.mp4"})

    def test_request_is_immutable(self):
        request = TranscodeRequest.from_options(Operation.THUMBNAIL, {"fileUri": "/v/a.mp4"})
        with pytest.raises(AttributeError):
            request.output_name = "other"
