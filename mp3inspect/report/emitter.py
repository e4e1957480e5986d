"""
Report rendering for inspection results

Turns InspectionResult objects into the text shown by the CLI, or into plain
dictionaries that are dumped as YAML.
"""

from typing import Any, Dict, List

import yaml

from .inspector import InspectionResult, InspectionStatus
from ..utils.helpers import format_bitrate, format_duration, format_file_size, truncate_string


SEPARATOR = "-" * 61


class ReportEmitter:
    """
    Renders inspection results

    Args:
        show_statistics: Include the audio statistics block
        max_text_length: Longest field text shown in text reports
    """

    def __init__(self, show_statistics: bool = True, max_text_length: int = 200):
        self.show_statistics = show_statistics
        self.max_text_length = max_text_length

    def render(self, result: InspectionResult, fmt: str = "text") -> str:
        """
        Render one result

        Args:
            result: Inspection result
            fmt: "text" or "yaml"

        Returns:
            Rendered report
        """
        if fmt == "yaml":
            return self.render_yaml([result])
        return self.render_text(result)

    def render_text(self, result: InspectionResult) -> str:
        lines = [SEPARATOR, f"The file name is: {result.path}"]

        if result.status is InspectionStatus.FAILED:
            lines.append(f"Error: {result.error}")
            return "\n".join(lines)

        if result.status is InspectionStatus.ID3V2:
            header = result.header
            lines.append(f"ID3v{header.version_str} tag, {format_file_size(header.size)}")
        elif result.status is InspectionStatus.LEGACY:
            lines.append("ID3v1 tag")
        else:
            lines.append("No TAG ID")

        for decoded in result.fields:
            if decoded.is_binary:
                value = f"{decoded.binary_size} bytes of binary data"
            else:
                value = truncate_string(decoded.text or "", self.max_text_length)
            lines.append(f"The {decoded.label} is:\t\t{value}")

        if self.show_statistics and result.statistics is not None:
            lines.extend(self._statistics_lines(result))

        return "\n".join(lines)

    def _statistics_lines(self, result: InspectionResult) -> List[str]:
        statistics = result.statistics
        if not statistics.has_frames:
            return ["Audio:\t\t\tno audio frames detected"]

        lines = [
            f"Frames:\t\t\t{statistics.frame_count}",
            f"Sample rate:\t\t{statistics.sample_rate} Hz",
            f"Average bitrate:\t{format_bitrate(statistics.average_bitrate)}",
        ]
        if statistics.duration_seconds is not None:
            lines.append(f"Duration:\t\t{format_duration(statistics.duration_seconds)}")
        if statistics.non_layer3_frames:
            lines.append(f"Non Layer III frames:\t{statistics.non_layer3_frames}")
        return lines

    def to_dict(self, result: InspectionResult) -> Dict[str, Any]:
        """Plain dictionary view of one result"""
        data: Dict[str, Any] = {
            'file': str(result.path),
            'status': result.status.value,
        }

        if result.error is not None:
            data['error'] = result.error.message
            return data

        if result.header is not None:
            data['tag'] = {
                'version': result.header.version_str,
                'size': result.header.size,
                'unsynchronisation': result.header.unsynchronisation,
                'extended_header': result.header.extended_header,
                'experimental': result.header.experimental,
                'footer': result.footer is not None,
            }
        if result.termination is not None:
            data['walk_termination'] = result.termination.value

        data['fields'] = [decoded.to_dict() for decoded in result.fields]

        if self.show_statistics and result.statistics is not None:
            data['audio'] = result.statistics.to_dict()

        return data

    def render_yaml(self, results: List[InspectionResult]) -> str:
        """Render several results as one YAML document"""
        return yaml.safe_dump(
            [self.to_dict(result) for result in results],
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False
        )
