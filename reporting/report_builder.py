"""
Report Builder Module
Renders DOM diff results as text and JSON reports using Jinja2 templates.
"""

from jinja2 import Environment, FileSystemLoader
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
import logging

from dom_history.dom_node import DOMElementNode
from dom_history.tree_comparator import DOMDiffResult
from utils.file_utils import write_file_content

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_TITLE = "DOM tree changes"


def element_label(elem: DOMElementNode) -> str:
    """``<tag> (xpath)``, without the parenthesised part when the xpath is empty."""
    label = f"<{elem.tag_name}>"
    return f"{label} ({elem.xpath})" if elem.xpath else label


class ReportBuilder:
    def __init__(self, title: str = DEFAULT_TITLE):
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters['element_label'] = element_label
        self.template = self.env.get_template("dom_diff_report.txt.j2")
        self.title = title
        self.data: Dict[str, Any] = {}
        self.result: Optional[DOMDiffResult] = None

    def collect_metrics(self, result: DOMDiffResult) -> Dict[str, Any]:
        """Collect and organize diff metrics."""
        self.result = result
        self.data = {
            'title': self.title,
            'has_changes': result.has_changes,
            **result.to_dict(),
        }
        return self.data

    def render_text(self, result: DOMDiffResult, title: Optional[str] = None) -> str:
        """Render the human-readable report."""
        text = self.template.render(result=result, title=title or self.title)
        return text.rstrip("\n")

    def generate_text_report(self, result: DOMDiffResult, output_path: Union[str, Path]) -> Path:
        """Write the text report to ``output_path``."""
        output_path = Path(output_path)
        write_file_content(output_path, self.render_text(result) + "\n")
        logger.info(f"Text report written to {output_path}")
        return output_path

    def generate_json_report(self, result: DOMDiffResult, output_path: Union[str, Path]) -> Path:
        """Write the JSON report with the raw diff data to ``output_path``."""
        output_path = Path(output_path)
        write_file_content(output_path, json.dumps(self.collect_metrics(result), indent=2))
        logger.info(f"JSON report written to {output_path}")
        return output_path


def format_dom_diff_result(result: DOMDiffResult, title: str = DEFAULT_TITLE) -> str:
    """Format a DOM diff result as an easy-to-read string."""
    return ReportBuilder(title=title).render_text(result)
