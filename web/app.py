"""
Web Interface for DOM Snapshot Diffing
"""

import logging
import os
import sys
import tempfile
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from flask import Flask, jsonify, request, send_file
from dom_history.config import config
from dom_history.html_parser import HTMLSnapshotParser
from dom_history.tree_comparator import DOMTreeComparator
from reporting.report_builder import ReportBuilder
from utils.file_utils import ensure_directory, write_file_content

logger = logging.getLogger(__name__)

app = Flask(__name__)
parser = HTMLSnapshotParser()

# Use system temp directory instead of local uploads
TEMP_DIR = Path(tempfile.gettempdir()) / 'dom_history'
REPORT_PATH = TEMP_DIR / 'report.txt'


def _read_html_inputs():
    """Return (old_html, new_html, title) from uploaded files or a JSON body."""
    has_files = 'old_html_file' in request.files and 'new_html_file' in request.files and \
                request.files['old_html_file'].filename and request.files['new_html_file'].filename
    if has_files:
        old_html = request.files['old_html_file'].read().decode('utf-8')
        new_html = request.files['new_html_file'].read().decode('utf-8')
        return old_html, new_html, request.form.get('title')

    payload = request.get_json(silent=True) or {}
    old_html = payload.get('old_html')
    new_html = payload.get('new_html')
    if isinstance(old_html, str) and isinstance(new_html, str):
        return old_html, new_html, payload.get('title')
    return None, None, None


@app.route('/diff', methods=['POST'])
def diff():
    """Compare two HTML snapshots and return the classified elements."""
    try:
        old_html, new_html, title = _read_html_inputs()
        if old_html is None:
            return jsonify({'error': 'Both old and new HTML snapshots are required'}), 400

        old_tree = parser.parse(old_html)
        new_tree = parser.parse(new_html)
        comparator = DOMTreeComparator(ignored_attributes=config.ignored_attributes)
        result = comparator.compare_trees(old_tree, new_tree)

        builder = ReportBuilder(title=title or config.report_title)
        report = builder.render_text(result)
        ensure_directory(TEMP_DIR)
        write_file_content(REPORT_PATH, report + '\n')

        return jsonify({
            'success': True,
            'summary': result.summary(),
            'result': result.to_dict(),
            'report': report,
            'report_url': '/download/report'
        })
    except Exception as e:
        logger.error(f"Error diffing snapshots: {str(e)}", exc_info=True)
        return jsonify({'error': str(e)}), 500


@app.route('/download/report')
def download_report():
    """Download the last diff report."""
    if REPORT_PATH.exists():
        return send_file(
            REPORT_PATH,
            mimetype='text/plain',
            as_attachment=True,
            download_name='dom_diff_report.txt'
        )
    return jsonify({'error': 'No report available'}), 404


if __name__ == '__main__':
    logging.basicConfig(level=config.log_level)
    port = int(os.environ.get("PORT", config.port))
    app.run(host="0.0.0.0", port=port, debug=True)
