"""
Atomic file writer - ensures no partial writes or corrupted report files.
Implements temp-write → fsync → rename pattern for durability.
"""

import os
import json
import time
import logging
import tempfile
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)


def write_text_atomic(content: str, output_path: Path) -> Dict[str, Any]:
    """
    Write text content atomically to prevent partial files.

    Args:
        content: Text to write
        output_path: Final path for the file

    Returns:
        Dictionary with write results (status 'completed' or 'failed')
    """
    start_time = time.time()
    temp_path = None

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)

        # Temp file in the target directory so the rename stays on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            suffix='.tmp',
            prefix=f'{output_path.stem}_',
            dir=output_path.parent
        )
        temp_path = Path(temp_path_str)

        with os.fdopen(temp_fd, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, output_path)

        return {
            'status': 'completed',
            'output_path': str(output_path),
            'bytes_written': len(content.encode('utf-8')),
            'duration_seconds': time.time() - start_time
        }

    except OSError as e:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()

        logger.error(f"Atomic write to {output_path} failed: {e}")
        return {
            'status': 'failed',
            'error': str(e),
            'output_path': str(output_path),
            'bytes_written': 0,
            'duration_seconds': time.time() - start_time
        }


def write_json_atomic(payload: Dict[str, Any], output_path: Path) -> Dict[str, Any]:
    """
    Write a JSON document atomically.

    Args:
        payload: JSON-serializable dictionary (dates are written as strings)
        output_path: Path for the JSON file

    Returns:
        Dictionary with write results
    """
    try:
        # Serialize first so a bad payload never touches the filesystem
        json_content = json.dumps(payload, indent=2, default=str)
    except (TypeError, ValueError) as e:
        return {
            'status': 'failed',
            'error': f'JSON serialization failed: {e}',
            'output_path': str(output_path),
            'bytes_written': 0
        }

    return write_text_atomic(json_content, output_path)


def write_both_atomic(
    report_content: str,
    results: Dict[str, Any],
    report_path: Path,
    results_path: Path
) -> Dict[str, Any]:
    """
    Write the Markdown report and its results JSON sidecar.

    If the sidecar write fails the report is removed (all-or-nothing).

    Args:
        report_content: Markdown report content
        results: Report suite results dictionary
        report_path: Path for report file
        results_path: Path for results JSON file

    Returns:
        Dictionary with combined write results
    """
    report_result = write_text_atomic(report_content, report_path)

    if report_result['status'] != 'completed':
        return {
            'status': 'failed',
            'error': f"Report write failed: {report_result.get('error', 'Unknown')}",
            'report_written': False,
            'results_written': False
        }

    results_result = write_json_atomic(results, results_path)

    if results_result['status'] != 'completed':
        if report_path.exists():
            report_path.unlink()

        return {
            'status': 'failed',
            'error': f"Results write failed: {results_result.get('error', 'Unknown')}",
            'report_written': False,
            'results_written': False
        }

    return {
        'status': 'completed',
        'report_path': str(report_path),
        'results_path': str(results_path),
        'report_bytes': report_result['bytes_written'],
        'results_bytes': results_result['bytes_written'],
        'report_written': True,
        'results_written': True
    }
