from __future__ import annotations

import logging
import os
import tempfile
from typing import Any, Dict, List, Optional

import gradio as gr

from .config import LoaderOptions
from .flattening import ABSENT, Table
from .loader import load_table
from .paths import ROOT, format_record_path
from .schema_utils import find_metadata_keys, find_record_paths
from .shapes import ObjectInput, detect_shape

logger = logging.getLogger(__name__)


def upload_path(file_obj) -> Optional[str]:
    if file_obj is None:
        return None
    return file_obj if isinstance(file_obj, str) else getattr(file_obj, 'name', None)


def build_options(root_path, metadata_keys, on_malformed_line='strict', metadata_conflict='overwrite') -> LoaderOptions:
    if isinstance(metadata_keys, str):
        metadata_keys = [metadata_keys]
    return LoaderOptions(
        record_path=root_path,
        metadata_keys=tuple(metadata_keys or ()),
        on_malformed_line=on_malformed_line or 'strict',
        metadata_conflict=metadata_conflict or 'overwrite',
    )


def _empty_upload(message: str):
    return (
        None,
        gr.update(choices=[ROOT], value=ROOT),
        gr.update(choices=[], value=[]),
        message,
        None,
        "",
    )


def load_uploaded_file(file_obj):
    """Detect the uploaded file's shape and offer record paths / metadata keys."""
    path = upload_path(file_obj)
    if path is None:
        return _empty_upload("No file uploaded.")

    try:
        detected = detect_shape(path)
    except (ValueError, OSError) as e:
        return _empty_upload(f"Error parsing JSON: {str(e)}")

    root_choices = [ROOT]
    metadata_choices: List[str] = []
    if isinstance(detected, ObjectInput):
        found = [format_record_path(p) for p in find_record_paths(detected.document)]
        root_choices = found or [ROOT]
        metadata_choices = find_metadata_keys(detected.document)

    default_root = root_choices[0]
    count_text = compute_document_count_text(path, build_options(default_root, []))
    message = f"Successfully loaded. Detected {detected.shape.value} input."
    return (
        path,
        gr.update(choices=root_choices, value=default_root),
        gr.update(choices=metadata_choices, value=[]),
        message,
        None,
        count_text,
    )


def compute_document_count_text(path: Any, options: LoaderOptions) -> str:
    if path is None:
        return ""
    try:
        table = load_table(path, options)
        count = sum(1 for _ in table.records)
    except (ValueError, OSError) as e:
        logger.info("cannot count records in %s: %s", path, e)
        return ""
    report = table.report
    if report is not None and report.skipped_lines:
        return f"Documents: {count} (skipped lines: {report.skipped_lines})"
    return f"Documents: {count}"


def handle_root_change(path, root_path, metadata_keys, on_malformed_line, metadata_conflict):
    try:
        options = build_options(root_path, metadata_keys, on_malformed_line, metadata_conflict)
    except ValueError:
        return "", None
    return compute_document_count_text(path, options), None


def _present(row: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in row.items() if v is not ABSENT}


def preview_handler(path, root_path, metadata_keys, on_malformed_line, metadata_conflict, limit: int = 3):
    """Return (preview rows, status) for the first few normalized rows."""
    if path is None:
        return None, "No data loaded."
    try:
        options = build_options(root_path, metadata_keys, on_malformed_line, metadata_conflict)
        table = load_table(path, options)
        rows = [_present(r) for r in table.head(limit)]
    except (ValueError, OSError) as e:
        return None, f"Error: {str(e)}"
    return (rows if rows else None), f"Columns: {', '.join(table.columns)}"


def export_filename(file_name: Optional[str], output_format: str) -> str:
    if not file_name or not file_name.strip():
        file_name = "output"
    file_name = file_name.strip()
    ext = f".{output_format.lower()}"
    if not file_name.lower().endswith(ext):
        file_name += ext
    return file_name


def write_table(table: Table, path: str, output_format: str) -> int:
    if output_format == "CSV":
        with open(path, 'w', newline='', encoding='utf-8') as f:
            return table.write_csv(f)
    with open(path, 'w', encoding='utf-8') as f:
        return table.write_json(f)


def export_data_handler(path, root_path, metadata_keys, on_malformed_line, metadata_conflict, output_format, file_name):
    if path is None:
        return None, "No data loaded."

    out_path = os.path.join(tempfile.gettempdir(), export_filename(file_name, output_format))

    try:
        options = build_options(root_path, metadata_keys, on_malformed_line, metadata_conflict)
        table = load_table(path, options)
        count = write_table(table, out_path, output_format)
    except ValueError as e:
        return None, f"Error: {str(e)}"
    except OSError as e:
        return None, f"Error during export: {str(e)}"

    message = f"Export successful! {count} rows saved to {out_path}"
    report = table.report
    if report is not None and report.skipped_lines:
        message += f" (skipped {report.skipped_lines} malformed line(s))"
    return out_path, message
