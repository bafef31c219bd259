"""File formatters: metadata, listings, and download reports."""

from slackcli._utils import format_file_size, format_ts_pretty
from slackcli.formatters._table import _field_block, _table, _trunc


def format_file_info(result):
    f = result.get("file") or {}
    if not f:
        return "File not found."
    return _field_block(
        [
            ("File", f.get("id")),
            ("Name", f.get("name")),
            ("Title", f.get("title")),
            ("Type", f.get("mimetype") or f.get("filetype")),
            ("Size", format_file_size(f.get("size"))),
            ("Created", format_ts_pretty(f.get("created"))),
            ("Uploader", f.get("user")),
            ("Permalink", f.get("permalink")),
        ]
    )


def format_files_table(result):
    files = result.get("files", [])
    if not files:
        return f"No files in {result.get('channel_id')}."
    cols = [("Name", 32), ("Type", 10), ("Size", 10), ("Uploaded", 20), ("ID", 0)]
    rows = [
        (
            _trunc(f.get("name") or "", 32),
            _trunc(f.get("filetype") or "", 10),
            format_file_size(f.get("size")),
            format_ts_pretty(f.get("created")).split(" ")[0],
            f.get("id", ""),
        )
        for f in files
    ]
    footer = (
        f"Showing {len(files)} of {result.get('total', len(files))} files "
        f"(page {result.get('page', 1)}/{result.get('page_count', 1)})"
    )
    return _table(cols, rows, footer)


def format_download_report(result):
    """Successful downloads first, then failures."""
    lines = []
    downloads = result.get("downloads", [])
    if downloads:
        lines.append(f"Downloaded {len(downloads)} files to {result.get('output_dir')}:")
        for d in downloads:
            lines.append(f"  {d.get('path')} ({format_file_size(d.get('size'))})")
    errors = result.get("errors") or []
    if errors:
        lines.append(f"Failed {len(errors)}:")
        for e in errors:
            lines.append(f"  {e.get('file_id')}: {e.get('error')}")
    return "\n".join(lines) or "Nothing downloaded."
